"""
CEP Race Service - Postal code lookup that races independent upstream providers.

This package validates a CEP, dispatches it to every registered provider adaptor
concurrently, and answers with whichever normalized record arrives first within
a fixed deadline.
"""

__version__ = "0.1.0"
