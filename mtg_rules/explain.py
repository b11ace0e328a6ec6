"""
Contract with the "explain this rule" text-generation collaborator.

The core only builds the request from an entry and hands back whatever prose
comes out. Prose may reference cards as [[Card Name]]; extract_card_names
pulls those out for link-ification downstream.
"""

import logging
import re
from typing import List, Protocol

from pydantic import BaseModel, Field

from .models import RuleEntry

logger = logging.getLogger(__name__)

CARD_MARKER_RE = re.compile(r"\[\[([^\[\]]+)\]\]")


class ExplanationRequest(BaseModel):
    """Pydantic model for what the explanation collaborator receives."""
    rule_name: str = Field(min_length=1, description="Keyword or ability name")
    rule_text: str = Field(default="", description="Rule paragraphs joined with newlines")

    @classmethod
    def from_entry(cls, entry: RuleEntry) -> "ExplanationRequest":
        return cls(rule_name=entry.name, rule_text=entry.body)


class Explainer(Protocol):
    def explain(self, rule_name: str, rule_text: str) -> str:
        ...


def request_explanation(entry: RuleEntry, explainer: Explainer) -> str:
    """Ask the collaborator about entry; name and text go through unmodified."""
    request = ExplanationRequest.from_entry(entry)
    logger.info(f"Requesting explanation for {entry.id} '{entry.name}'")
    return explainer.explain(request.rule_name, request.rule_text)


def extract_card_names(prose: str) -> List[str]:
    """Unique [[Card Name]] markers in order of first appearance."""
    names: List[str] = []
    for match in CARD_MARKER_RE.finditer(prose or ""):
        name = match.group(1).strip()
        if name and name not in names:
            names.append(name)
    return names
