"""
Cache module for the raw rules text.

This module handles:
- sqlite schema for the key/value store
- versioned get/put with validation on read
"""

from .operations import CacheStore
from .models import create_cache_database

__all__ = [
    "CacheStore",
    "create_cache_database",
]
