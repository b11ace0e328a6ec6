"""
Final rule collection: parsed entries plus manually curated supplements.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence

from ..models import RuleEntry

logger = logging.getLogger(__name__)

# Abilities missing from sections 701/702 of the published text, or from sets
# newer than the current revision.
MANUAL_RULES: List[RuleEntry] = [
    RuleEntry(
        id="702.VIVID",
        category="702",
        name="Vivid",
        full_text=(
            "Vivid is an ability word that highlights abilities that care in some way about the number "
            "of colors among permanents you control. This number will be between zero and five.",
        ),
    ),
    RuleEntry(
        id="702.BLIGHT",
        category="702",
        name="Blight",
        full_text=(
            "To blight N, put N -1/-1 counters on a creature you control. That creature is not targeted, "
            "so you choose which creature will get the -1/-1 counters as you are taking the blight action. "
            "Importantly, you can put more -1/-1 counters on a creature than it would take to get rid of it.",
        ),
    ),
    RuleEntry(
        id="702.KINDRED",
        category="702",
        name="Kindred",
        full_text=(
            '"Kindred" is a card type (formerly known as "Tribal"). It allows non-creature cards to have '
            'creature types.',
        ),
    ),
    RuleEntry(
        id="712.DFC",
        category="702",
        name="Double-Faced Cards",
        full_text=(
            "Double-faced cards have a Magic card face on each side. They have no Magic card back. They can "
            "be Transforming Double-Faced Cards (TDFC) or Modal Double-Faced Cards (MDFC).",
        ),
    ),
]


def merge(parsed: Sequence[RuleEntry], manual: Sequence[RuleEntry] = MANUAL_RULES) -> List[RuleEntry]:
    """
    Append manual entries after parsed ones.

    No de-duplication: an id present in both lists appears twice.
    """
    return list(parsed) + list(manual)


class RuleRepository:
    """Read-only view over the merged collection."""

    def __init__(self, entries: Sequence[RuleEntry]):
        self._entries = list(entries)
        # First occurrence wins for lookups when a manual entry repeats a parsed id
        self._by_id: Dict[str, RuleEntry] = {}
        for entry in self._entries:
            self._by_id.setdefault(entry.id, entry)

    @classmethod
    def from_parsed(cls, parsed: Sequence[RuleEntry], manual: Sequence[RuleEntry] = MANUAL_RULES) -> "RuleRepository":
        return cls(merge(parsed, manual))

    @property
    def entries(self) -> List[RuleEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RuleEntry]:
        return iter(self._entries)

    def get(self, rule_id: str) -> Optional[RuleEntry]:
        return self._by_id.get(rule_id)

    def sorted_by_name(self) -> List[RuleEntry]:
        """Entries in alphabetical order, as a keyword picker lists them."""
        return sorted(self._entries, key=lambda e: (e.name.casefold(), e.id))

    def find(self, query: str) -> List[RuleEntry]:
        """Case-insensitive substring search on entry names."""
        needle = query.strip().casefold()
        if not needle:
            return []
        return [e for e in self.sorted_by_name() if needle in e.name.casefold()]
