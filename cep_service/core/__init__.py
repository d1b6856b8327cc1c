"""
Core package for the CEP Race Service.

Holds the ambient concerns shared by every layer: settings, logging and the
exception taxonomy.
"""
