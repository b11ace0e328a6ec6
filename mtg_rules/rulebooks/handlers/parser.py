"""
Line-oriented parser turning the Comprehensive Rules text into keyword entries.

The parser is a fold: `step(state, line)` takes an immutable ParserState and
one normalized line and returns the next state. `RuleParser.parse` threads
the state through every line and stops early once the state says so.

Line kinds, checked in this order:
  - section boundary: "703.1 ..." (any section above the recognized ones)
    ends parsing, but only after the first entry has been opened, so the
    table of contents at the top of the document is harmless
  - header:           "702.19. Trample"
  - sub-rule content: "702.19a A creature with trample ..."
  - continuation:     wrapped text and examples with no rule number
Anything else carrying a rule number (other sections, other rules) is noise.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from ...config import RECOGNIZED_SECTIONS
from ...models import RuleEntry

logger = logging.getLogger(__name__)

NUMBERED_LINE_RE = re.compile(r"^(\d{3})\.")
RULE_LINE_RE = re.compile(r"^(\d{3})\.(\d+)([a-z]+)?\.?\s+(.+)$")
SUB_ID_RE = re.compile(r"^\d{3}\.\d+[a-z]")
GENERIC_LABEL_RE = re.compile(r"\bgeneral\b", re.IGNORECASE)


@dataclass(frozen=True)
class DraftEntry:
    """Entry still accumulating paragraphs."""
    id: str
    category: str
    name: str
    paragraphs: Tuple[str, ...] = ()

    def add_paragraph(self, text: str) -> "DraftEntry":
        return replace(self, paragraphs=self.paragraphs + (text,))

    def join_continuation(self, text: str) -> "DraftEntry":
        """Glue a wrapped line onto the last paragraph (or start one)."""
        if not self.paragraphs:
            return self.add_paragraph(text)
        return replace(self, paragraphs=self.paragraphs[:-1] + (f"{self.paragraphs[-1]} {text}",))

    def owns(self, line: str) -> bool:
        """True if line starts with this entry's id and not with a longer rule number."""
        if not line.startswith(self.id):
            return False
        rest = line[len(self.id):]
        return not rest[:1].isdigit()

    def finalize(self) -> RuleEntry:
        return RuleEntry(id=self.id, category=self.category, name=self.name, full_text=self.paragraphs)


@dataclass(frozen=True)
class ParserState:
    current: Optional[DraftEntry] = None
    completed: Tuple[RuleEntry, ...] = ()
    stopped: bool = False

    def commit(self) -> "ParserState":
        if self.current is None:
            return self
        return replace(self, current=None, completed=self.completed + (self.current.finalize(),))


def normalize_lines(text: str) -> Iterator[str]:
    """Yield trimmed, non-empty lines regardless of line-ending convention."""
    text = text.lstrip('\ufeff').replace('\r\n', '\n').replace('\r', '\n')
    for raw in text.split('\n'):
        line = raw.strip()
        if line:
            yield line


def is_section_preface(entry: RuleEntry) -> bool:
    """Section introductions ("702.1. General") are not keyword definitions."""
    return bool(GENERIC_LABEL_RE.search(entry.name))


class RuleParser:
    """
    Parses keyword sections of the Comprehensive Rules.

    Output keeps source encounter order. Entries titled with a generic
    section label are dropped; that is the only filter applied.
    """

    def __init__(self, sections: Sequence[str] = RECOGNIZED_SECTIONS):
        if not sections:
            raise ValueError("At least one section code is required")
        self.sections = tuple(sections)
        self.last_section = max(int(s) for s in self.sections)
        alternatives = "|".join(re.escape(s) for s in self.sections)
        self.header_re = re.compile(rf"^({alternatives})\.(\d+)\.?\s+(.+)$")

    def step(self, state: ParserState, line: str) -> ParserState:
        """Advance the state machine by one normalized line."""
        if state.stopped:
            return state

        numbered = NUMBERED_LINE_RE.match(line)
        if numbered and state.current is not None and int(numbered.group(1)) > self.last_section:
            return replace(state.commit(), stopped=True)

        header = self.header_re.match(line)
        if header and not SUB_ID_RE.match(line):
            section, number, title = header.groups()
            draft = DraftEntry(id=f"{section}.{number}", category=section, name=title.strip())
            return replace(state.commit(), current=draft)

        current = state.current
        if current is None:
            return state

        if current.owns(line):
            content = RULE_LINE_RE.match(line)
            if content and f"{content.group(1)}.{content.group(2)}" == current.id:
                return replace(state, current=current.add_paragraph(content.group(4).strip()))
            # Irregular formatting inside the entry's id-space: keep the raw line
            return replace(state, current=current.join_continuation(line))

        if not numbered:
            return replace(state, current=current.join_continuation(line))

        return state

    def fold(self, lines: Iterable[str], state: Optional[ParserState] = None) -> ParserState:
        """Run step over lines, stopping at the section boundary, and commit the last draft."""
        state = state or ParserState()
        for line in lines:
            state = self.step(state, line)
            if state.stopped:
                break
        return state.commit()

    def parse(self, text: str) -> List[RuleEntry]:
        """
        Parse raw rules text into keyword entries.

        Args:
            text: Raw document text

        Returns:
            Entries in encounter order, section prefaces removed. Empty when
            the document contains no recognizable entry.
        """
        if not text:
            return []

        final = self.fold(normalize_lines(text))

        entries: List[RuleEntry] = []
        seen = set()
        for entry in final.completed:
            if is_section_preface(entry):
                logger.debug(f"Skipping section preface {entry.id} '{entry.name}'")
                continue
            if entry.id in seen:
                logger.warning(f"Duplicate rule id {entry.id} ('{entry.name}'); keeping the first occurrence")
                continue
            seen.add(entry.id)
            entries.append(entry)

        logger.info(f"Parsed {len(entries)} keyword entries from sections {', '.join(self.sections)}")
        return entries


def parse_rules_text(text: str, sections: Sequence[str] = RECOGNIZED_SECTIONS) -> List[RuleEntry]:
    """Convenience wrapper around RuleParser.parse."""
    return RuleParser(sections).parse(text)
