"""
Domain package for the CEP Race Service.

This package contains the postal code grammar and the per-request data
structures exchanged between adaptors, the race coordinator and the API layer.
It is independent of HTTP clients and web frameworks.
"""
