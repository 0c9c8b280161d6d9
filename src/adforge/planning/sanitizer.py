"""Script sanitizer — strips stage directions before speech synthesis.

Model-drafted ad scripts come back littered with ``[Scene 1: exterior]``
directions, ``**bold**`` emphasis, ``Narrator:`` labels and asides that a
voice actor would never read aloud. ``sanitize`` removes them so only the
spoken copy reaches the TTS capability.
"""

from __future__ import annotations

import re

# Innermost spans only: repeated application removes nested spans too.
_BRACKETS = re.compile(r"\[[^\[\]\n]*\]")
_PARENS = re.compile(r"\([^()\n]*\)")

_BOLD = re.compile(r"\*\*|__")

_SPEAKER_LABEL = re.compile(
    r"^(?:[ \t]*(?:narrator|voice[ \t-]?over|vo|v\.o\.|announcer|host|speaker(?:[ \t]*\d+)?)[ \t]*:[ \t]*)+",
    re.IGNORECASE | re.MULTILINE,
)

_SCENE_MARKER = re.compile(r"^[ \t]*scene[ \t]*\d+\b.*$", re.IGNORECASE | re.MULTILINE)

_DASH_ASIDE = re.compile(r"[ \t]+(?:—|–|--)[ \t]+[^—–\n]*?[ \t]+(?:—|–|--)[ \t]+")

_MULTI_SPACE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT = re.compile(r"[ \t]+(?=[.,!?;:])")
_BLANK_RUN = re.compile(r"\n{3,}")


def _remove_nested(pattern: re.Pattern[str], text: str) -> str:
    while True:
        stripped = pattern.sub("", text)
        if stripped == text:
            return text
        text = stripped


def _single_pass(text: str) -> str:
    text = _remove_nested(_BRACKETS, text)
    text = _BOLD.sub("", text)
    text = _SPEAKER_LABEL.sub("", text)
    text = _SCENE_MARKER.sub("", text)
    text = _remove_nested(_PARENS, text)
    text = _DASH_ASIDE.sub(" ", text)
    text = _MULTI_SPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub("", text)
    text = "\n".join(line.strip() for line in text.splitlines())
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip()


def sanitize(raw: str) -> str:
    """Return the speakable part of *raw*.

    Every step only removes characters, so repeating the pass until nothing
    changes terminates, and the result is idempotent:
    ``sanitize(sanitize(s)) == sanitize(s)``.
    """
    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    while True:
        cleaned = _single_pass(text)
        if cleaned == text:
            return cleaned
        text = cleaned
