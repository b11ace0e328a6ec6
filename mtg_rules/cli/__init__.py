"""
Command-line interface for the MTG rules package.

This module provides CLI commands for:
- Loading the keyword rules (cache, fallback fetch, parse)
- Listing, searching and showing entries
"""

from .main import main

__all__ = [
    "main",
]
