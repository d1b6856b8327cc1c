"""
HTTP boundary of the CEP Race Service: routes, dependencies and error handlers.
"""
