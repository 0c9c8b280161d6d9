"""Tests for the script sanitizer."""

import pytest

from adforge.planning.sanitizer import sanitize

SAMPLE_SCRIPT = """\
**[Scene 1: Exterior shot, drone sweeps in]**

Narrator: Welcome to 42 Maple Drive (your new beginning).



[Scene 2: Kitchen]
Voiceover: The kitchen — recently remodeled — features **granite** countertops.

Scene 3: Bedroom close-up
Rest easy in a bedroom built for calm.
"""


class TestSanitize:
    def test_removes_directions_labels_and_asides(self):
        result = sanitize(SAMPLE_SCRIPT)
        assert result == (
            "Welcome to 42 Maple Drive.\n\n"
            "The kitchen features granite countertops.\n\n"
            "Rest easy in a bedroom built for calm."
        )

    def test_nested_brackets_and_parens_removed_entirely(self):
        assert sanitize("Look [at [this] view] now") == "Look now"
        assert sanitize("Big (very (very) big) deal") == "Big deal"

    def test_bold_markers_removed(self):
        assert sanitize("**Act now** and __save__") == "Act now and save"

    def test_speaker_labels_only_at_line_start(self):
        assert sanitize("VO: Call today.\nHost: Ratio: 2 to 1") == "Call today.\nRatio: 2 to 1"

    def test_label_revealed_by_aside_removal_is_removed(self):
        assert sanitize("Narrator (warmly): Hello there") == "Hello there"

    def test_collapses_blank_runs_and_trims_lines(self):
        assert sanitize("  one  \n\n\n\n\n   two   ") == "one\n\ntwo"

    def test_hyphenated_words_untouched(self):
        assert sanitize("An open-concept, move-in ready home.") == "An open-concept, move-in ready home."

    def test_empty_and_direction_only_scripts(self):
        assert sanitize("") == ""
        assert sanitize("[Music swells]\n(pause)") == ""

    @pytest.mark.parametrize(
        "raw",
        [
            SAMPLE_SCRIPT,
            "Narrator (warmly): VO: Hi — hey — there [x] (y)",
            "a [b (c] d) e",
            "((]))[[(",
            "Scene 1\n\n\n\nSCENE 2 - end\nspeaker 2: ok",
            "  **__**  \r\n\r\n\r\n text -- aside -- more",
        ],
    )
    def test_idempotent(self, raw):
        once = sanitize(raw)
        assert sanitize(once) == once

    @pytest.mark.parametrize(
        "raw",
        [
            "Buy [X] now",
            "Buy (Y) now",
            "Mixed [X] and (Y) and [[X]] and ((Y))",
        ],
    )
    def test_no_bracketed_or_parenthetical_spans_survive(self, raw):
        result = sanitize(raw)
        assert "[X]" not in result
        assert "(Y)" not in result
