"""
Handlers for the individual stages of rules loading.

This module contains specialized handlers for:
- Retrieval strategies and their ordered fallback
- Content validation
- Rules text parsing
"""

from .validation import ContentValidator
from .sources import (
    SourceResolver,
    ResolvedSource,
    RetrievalStrategy,
    LocalFileStrategy,
    ProxyStrategy,
    DirectStrategy,
    build_default_strategies,
)
from .parser import RuleParser, ParserState, parse_rules_text

__all__ = [
    "ContentValidator",
    "SourceResolver",
    "ResolvedSource",
    "RetrievalStrategy",
    "LocalFileStrategy",
    "ProxyStrategy",
    "DirectStrategy",
    "build_default_strategies",
    "RuleParser",
    "ParserState",
    "parse_rules_text",
]
