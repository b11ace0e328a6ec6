"""
Shared data models for the MTG rules package.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any


@dataclass(frozen=True)
class RuleEntry:
    """A single keyword action or keyword ability definition."""
    id: str
    category: str
    name: str
    full_text: Tuple[str, ...] = ()

    @property
    def body(self) -> str:
        """Paragraphs joined the way they are handed to the explanation collaborator."""
        return "\n".join(self.full_text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "fullText": list(self.full_text),
        }


@dataclass(frozen=True)
class SourceAttempt:
    """Diagnostic record of one retrieval strategy attempt."""
    strategy: str
    url: str
    ok: bool
    error: Optional[str] = None
    elapsed: float = 0.0


@dataclass
class LoadResult:
    """Result of one fetch-and-parse cycle."""
    success: bool
    entries: List[RuleEntry] = field(default_factory=list)
    source: Optional[str] = None
    from_cache: bool = False
    error_message: Optional[str] = None
    error_kind: Optional[str] = None
    processing_time: float = 0.0
