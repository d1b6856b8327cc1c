"""
API routes for the CEP Race Service.
"""
