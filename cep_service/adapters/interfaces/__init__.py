"""
Interfaces package for the CEP Race Service adaptors.

This package contains the abstract base interface every upstream provider
adaptor implements.
"""

from .provider import ProviderAdapter, RECORD_FIELDS

__all__ = [
    'ProviderAdapter',
    'RECORD_FIELDS',
]
