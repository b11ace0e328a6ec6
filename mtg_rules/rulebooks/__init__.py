"""
Rulebooks module for loading the keyword sections of the Comprehensive Rules.

This package handles:
- Fetching the rules text through ordered fallback strategies
- Validating and parsing the text into keyword entries
- Merging manually curated entries
- Orchestrated flow (LangGraph)
"""

from .orchestrator import RulesOrchestrator
from .repository import MANUAL_RULES, RuleRepository, merge
from ..models import RuleEntry, LoadResult

__all__ = [
    "RulesOrchestrator",
    "RuleRepository",
    "MANUAL_RULES",
    "merge",
    "RuleEntry",
    "LoadResult",
]
