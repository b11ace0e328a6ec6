"""Shared fixtures: a trimmed-down Comprehensive Rules document and test doubles."""

import pytest

from mtg_rules.cache import CacheStore
from mtg_rules.error_handling import HttpStatusError, NetworkFailure, SourceTimeout
from mtg_rules.rulebooks.handlers import ContentValidator
from mtg_rules.rulebooks.handlers.sources import RetrievalStrategy


SAMPLE_RULES = """Magic: The Gathering Comprehensive Rules

These rules are effective as of November 14, 2025.

Contents

7. Additional Rules
700. General
701. Keyword Actions
702. Keyword Abilities
703. Turn-Based Actions

700. General

700.1. Anything that happens in a game is an event.

701. Keyword Actions

701.1. General
701.1a Most actions described in a card's rules text use the standard English definitions of the verbs within.

701.2. Activate
701.2a To activate an activated ability is to put it onto the stack and pay its costs, so that it will eventually resolve and have its effect.

701.3. Attach
701.3a To attach an Aura, Equipment, or Fortification to an object means to take it from where it currently is and put it onto that object.
701.3b If an effect tries to attach an Aura, Equipment, or Fortification to an object it can't be attached to, the Aura, Equipment, or Fortification doesn't move.

702. Keyword Abilities

702.1. General
702.1a Most abilities describe exactly what they do in the card's rules text.

702.2. Deathtouch
702.2a Deathtouch is a static ability.
702.2b A creature with toughness greater than 0 that's been dealt damage by a source with deathtouch since the last time state-based actions were checked is destroyed the next time state-based actions are checked.

702.9. Flying
702.9a Flying is an evasion ability.
702.9b A creature with flying can't be blocked except by creatures with flying and/or reach.
Example: Vulshok Gauntlets grants flying to the creature it's attached to.

702.19. Trample
702.19a Trample is a static ability that modifies the rules for assigning an attacking creature's combat damage.
702.19b The controller of an attacking creature with trample first assigns damage to the creature(s) blocking it. Once all those blocking creatures are assigned lethal damage, any excess damage is assigned as its controller chooses
among those blocking creatures and the player, planeswalker, or battle the creature is attacking.

703. Turn-Based Actions

703.1. Turn-based actions are game actions that happen automatically when certain steps or phases begin.

Glossary

Trample
A keyword ability that lets a creature deal excess combat damage to the player, planeswalker, or battle it's attacking. See rule 702.19, "Trample."

Credits
"""


class StubStrategy(RetrievalStrategy):
    """Strategy returning a fixed payload, or raising a fixed error."""

    def __init__(self, name, text=None, error=None):
        super().__init__(name, timeout=15)
        self.text = text
        self.error = error
        self.calls = 0

    def fetch(self, target):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def sample_rules():
    return SAMPLE_RULES


@pytest.fixture
def html_error_page():
    return (
        "<!DOCTYPE html><html><head><title>502 Bad Gateway</title></head><body>"
        + "proxy error " * 200
        + "</body></html>"
    )


@pytest.fixture
def validator():
    return ContentValidator()


@pytest.fixture
def cache(tmp_path, validator):
    return CacheStore(db_path=tmp_path / "cache.db", key="rules_test", validator=validator)


@pytest.fixture
def timeout_strategy():
    return StubStrategy("slow-proxy", error=SourceTimeout(15))


@pytest.fixture
def failing_strategies():
    return [
        StubStrategy("proxy-a", error=HttpStatusError(503)),
        StubStrategy("proxy-b", error=NetworkFailure("connection refused")),
    ]
