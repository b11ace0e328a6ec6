"""Tests for the line-oriented rules parser."""

import pytest

from mtg_rules.rulebooks.handlers.parser import (
    DraftEntry,
    ParserState,
    RuleParser,
    normalize_lines,
    parse_rules_text,
)


TRAMPLE_SCENARIO = """702.1. General
702.1a Some intro text.
702.19. Trample
702.19a A creature with trample can assign excess combat damage to the player or planeswalker it's attacking.
702.19b If an attacking creature with trample is blocked, ...
703.1. Something else entirely.
"""


class TestEndToEnd:
    """Whole-document parsing."""

    def test_trample_scenario(self):
        entries = parse_rules_text(TRAMPLE_SCENARIO)

        assert len(entries) == 1
        trample = entries[0]
        assert trample.id == "702.19"
        assert trample.category == "702"
        assert trample.name == "Trample"
        assert trample.full_text == (
            "A creature with trample can assign excess combat damage to the player or planeswalker it's attacking.",
            "If an attacking creature with trample is blocked, ...",
        )

    def test_sample_document(self, sample_rules):
        entries = parse_rules_text(sample_rules)

        assert [e.id for e in entries] == ["701.2", "701.3", "702.2", "702.9", "702.19"]
        assert [e.name for e in entries] == ["Activate", "Attach", "Deathtouch", "Flying", "Trample"]
        assert {e.category for e in entries} == {"701", "702"}

    def test_wrapped_lines_join_previous_paragraph(self, sample_rules):
        trample = parse_rules_text(sample_rules)[-1]

        assert len(trample.full_text) == 2
        assert trample.full_text[1].endswith(
            "as its controller chooses among those blocking creatures and the player, "
            "planeswalker, or battle the creature is attacking."
        )

    def test_example_lines_are_continuations(self, sample_rules):
        flying = next(e for e in parse_rules_text(sample_rules) if e.name == "Flying")

        assert flying.full_text == (
            "Flying is an evasion ability.",
            "A creature with flying can't be blocked except by creatures with flying and/or reach. "
            "Example: Vulshok Gauntlets grants flying to the creature it's attached to.",
        )

    def test_nothing_after_boundary_leaks(self, sample_rules):
        entries = parse_rules_text(sample_rules)
        all_text = " ".join(p for e in entries for p in e.full_text)

        assert "Turn-based actions" not in all_text
        assert "Glossary" not in all_text
        assert "keyword ability that lets a creature" not in all_text

    def test_parsing_is_idempotent(self, sample_rules):
        assert parse_rules_text(sample_rules) == parse_rules_text(sample_rules)

    def test_ids_unique_and_non_empty(self, sample_rules):
        ids = [e.id for e in parse_rules_text(sample_rules)]

        assert all(ids)
        assert len(ids) == len(set(ids))

    def test_paragraphs_are_trimmed_and_non_empty(self, sample_rules):
        for entry in parse_rules_text(sample_rules):
            for paragraph in entry.full_text:
                assert paragraph
                assert paragraph == paragraph.strip()

    def test_paragraph_boundaries_follow_sub_rules(self):
        text = (
            "702.2. Deathtouch\n"
            "702.2a Deathtouch is a static ability.\n"
            "702.2b Any nonzero amount of combat damage assigned\n"
            "by a source with deathtouch is lethal.\n"
            "702.2c Multiple instances of deathtouch are redundant.\n"
        )
        deathtouch = parse_rules_text(text)[0]

        # Each sub-rule opens exactly one paragraph; wrapped text never opens one
        assert len(deathtouch.full_text) == text.count("702.2") - 1
        assert " ".join(deathtouch.full_text) == (
            "Deathtouch is a static ability. Any nonzero amount of combat damage assigned "
            "by a source with deathtouch is lethal. Multiple instances of deathtouch are redundant."
        )


class TestEdgeCases:

    def test_empty_document(self):
        assert parse_rules_text("") == []

    def test_document_without_keyword_sections(self):
        assert parse_rules_text("100.1. These rules apply to any Magic game.\n100.1a Two-player game.\n") == []

    def test_crlf_and_cr_line_endings(self):
        crlf = TRAMPLE_SCENARIO.replace("\n", "\r\n")
        cr = TRAMPLE_SCENARIO.replace("\n", "\r")

        assert parse_rules_text(crlf) == parse_rules_text(TRAMPLE_SCENARIO)
        assert parse_rules_text(cr) == parse_rules_text(TRAMPLE_SCENARIO)

    def test_byte_order_mark_is_ignored(self):
        assert parse_rules_text("\ufeff" + TRAMPLE_SCENARIO) == parse_rules_text(TRAMPLE_SCENARIO)

    def test_header_without_trailing_dot(self):
        entries = parse_rules_text("702.12 Indestructible\n702.12a Indestructible is a static ability.\n")

        assert entries[0].id == "702.12"
        assert entries[0].name == "Indestructible"

    def test_header_title_is_trimmed(self):
        entries = parse_rules_text("702.15.    Lifelink   \n")

        assert entries[0].name == "Lifelink"
        assert entries[0].full_text == ()

    def test_table_of_contents_does_not_stop_parsing(self):
        text = "703. Turn-Based Actions\n704. State-Based Actions\n702.9. Flying\n702.9a Flying is an evasion ability.\n"

        assert [e.id for e in parse_rules_text(text)] == ["702.9"]

    def test_prefix_id_does_not_capture_longer_rule_number(self):
        text = (
            "702.1. Banding\n"
            "702.1a Banding is a static ability.\n"
            "702.10a Stray line from another rule.\n"
        )
        banding = parse_rules_text(text)[0]

        assert banding.full_text == ("Banding is a static ability.",)

    def test_irregular_line_in_id_space_is_kept(self):
        text = "702.9. Flying\n702.9a Flying is an evasion ability.\n702.9b\n"
        flying = parse_rules_text(text)[0]

        assert flying.full_text == ("Flying is an evasion ability. 702.9b",)

    def test_continuation_without_paragraph_starts_one(self):
        text = "702.9. Flying\nFlying is an evasion ability.\n"

        assert parse_rules_text(text)[0].full_text == ("Flying is an evasion ability.",)

    def test_generic_label_filter_is_case_insensitive(self):
        text = "701.1. GENERAL\n701.1a Intro.\n701.2. Activate\n701.2a To activate.\n"

        assert [e.id for e in parse_rules_text(text)] == ["701.2"]

    def test_bootstrap_rule_with_specific_name_is_kept(self):
        text = "702.1. Absorb\n702.1a Absorb is a static ability.\n"

        assert [e.id for e in parse_rules_text(text)] == ["702.1"]

    def test_duplicate_ids_keep_first(self):
        text = "702.9. Flying\n702.9a First.\n702.9. Flying\n702.9a Second.\n"
        entries = parse_rules_text(text)

        assert len(entries) == 1
        assert entries[0].full_text == ("First.",)

    def test_custom_sections(self):
        text = "701.2. Activate\n701.2a To activate.\n702.9. Flying\n702.9a Flying.\n"

        assert [e.id for e in RuleParser(sections=("701",)).parse(text)] == ["701.2"]

    def test_no_sections_rejected(self):
        with pytest.raises(ValueError):
            RuleParser(sections=())


class TestStateMachine:
    """The fold works one line at a time."""

    def test_header_opens_draft(self):
        parser = RuleParser()
        state = parser.step(ParserState(), "702.19. Trample")

        assert state.current == DraftEntry(id="702.19", category="702", name="Trample")
        assert state.completed == ()

    def test_header_commits_previous_draft(self):
        parser = RuleParser()
        state = parser.step(ParserState(), "702.9. Flying")
        state = parser.step(state, "702.19. Trample")

        assert [e.id for e in state.completed] == ["702.9"]
        assert state.current.id == "702.19"

    def test_boundary_stops_and_commits(self):
        parser = RuleParser()
        state = parser.step(ParserState(), "702.19. Trample")
        state = parser.step(state, "703.1. Turn-based actions")

        assert state.stopped
        assert state.current is None
        assert [e.id for e in state.completed] == ["702.19"]

    def test_stopped_state_ignores_further_lines(self):
        parser = RuleParser()
        stopped = ParserState(stopped=True)

        assert parser.step(stopped, "702.9. Flying") is stopped

    def test_steps_do_not_mutate_previous_state(self):
        parser = RuleParser()
        first = parser.step(ParserState(), "702.9. Flying")
        parser.step(first, "702.9a Flying is an evasion ability.")

        assert first.current.paragraphs == ()

    def test_lines_before_first_header_are_ignored(self):
        parser = RuleParser()
        state = parser.step(ParserState(), "Some preamble text")

        assert state == ParserState()

    def test_normalize_lines_skips_blanks(self):
        assert list(normalize_lines("  a  \n\n\r\n b\r")) == ["a", "b"]
