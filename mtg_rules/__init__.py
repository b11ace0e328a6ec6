"""
MTG Rules Package - keyword sections of the Magic: The Gathering Comprehensive Rules.

This package provides:
1. Fetching the rules text through local, proxied and direct sources with a versioned cache
2. Parsing keyword actions (701) and keyword abilities (702) into structured entries
3. Building requests for an external rule explainer
"""

__version__ = "0.1.0"

# Main package imports for convenience
from .rulebooks import RulesOrchestrator, RuleRepository
from .cache import CacheStore
from .models import RuleEntry, LoadResult
from .logging_config import setup_logging
from .explain import ExplanationRequest, Explainer, request_explanation, extract_card_names

__all__ = [
    "RulesOrchestrator",
    "RuleRepository",
    "CacheStore",
    "RuleEntry",
    "LoadResult",
    "setup_logging",
    "ExplanationRequest",
    "Explainer",
    "request_explanation",
    "extract_card_names",
]
