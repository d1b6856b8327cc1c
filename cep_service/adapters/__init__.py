"""
Adapters package for the CEP Race Service.

This package contains components for integrating with upstream CEP providers:
- The abstract interface every provider adaptor implements
- Concrete implementations for ViaCEP and ApiCEP
- The registry the race coordinator builds its adaptors from
"""

from . import interfaces

from .registry import AdaptorRegistry, default_registry

__all__ = [
    'interfaces',
    'AdaptorRegistry',
    'default_registry',
]
