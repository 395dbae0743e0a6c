"""Normalization of raw extracted copy strings.

Generated copy arrives wrapped in markdown emphasis, stray quotes and
citation markers left behind by retrieval-augmented answers. ``clean``
strips those artifacts in a fixed order:

    1. Leading/trailing runs of quote characters (straight and smart).
    2. Emphasis markers: ``**``, ``*italic*`` and ``__bold__`` pairs, and
       a lone ``*`` not attached to a preceding word (``24*7`` survives).
    3. Citation markers (``[Source: deck.pdf]``, ``[3]``) and markdown
       link syntax (``[text](url)`` -> ``text``).
    4. Internal whitespace runs collapsed to one space.
    5. Trim.

The pipeline is re-applied until the string stops changing, so the result
is a fixed point: ``clean(clean(s)) == clean(s)`` for every input.
Interior punctuation and letter case are never touched.
"""
from __future__ import annotations

import re

# Straight, smart, and backtick quote characters.
QUOTE_CHARS = "\"'`“”‘’"

_EDGE_QUOTES_RE = re.compile(rf"^[\s{QUOTE_CHARS}]+|[\s{QUOTE_CHARS}]+$")
_BOLD_STARS_RE = re.compile(r"\*\*")
_ITALIC_PAIR_RE = re.compile(r"(?<!\w)\*(\S(?:[^*]*?\S)?)\*(?!\w)")
_UNDERSCORE_PAIR_RE = re.compile(r"(?<!\w)__(\S(?:[^_]*?\S)?)__(?!\w)")
# A lone star opening a word ("*New"), never one inside a token ("24*7").
_LONE_STAR_RE = re.compile(r"(?<!\w)\*(?!\s)")
_CITATION_RE = re.compile(r"\[Source:?[^\]]*\]", re.IGNORECASE)
_NUMERIC_CITATION_RE = re.compile(r"\[\d+\]")
_MD_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_WHITESPACE_RE = re.compile(r"\s+")

# List prefixes: "- ", "• ", "* ", "1. ", "2) "
_BULLET_RE = re.compile(r"^(?:[-•]\s*|\*\s+)")
_NUMBERING_RE = re.compile(r"^\d+[.)]\s*")


def _clean_once(text: str) -> str:
    text = _EDGE_QUOTES_RE.sub("", text)
    text = _BOLD_STARS_RE.sub("", text)
    text = _ITALIC_PAIR_RE.sub(r"\1", text)
    text = _UNDERSCORE_PAIR_RE.sub(r"\1", text)
    text = _LONE_STAR_RE.sub("", text)
    text = _CITATION_RE.sub("", text)
    text = _NUMERIC_CITATION_RE.sub("", text)
    text = _MD_LINK_RE.sub(r"\1", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def clean(value: str | None) -> str:
    """Strip markdown/quote/citation artifacts from a copy value.

    Total and idempotent: any string (including ``""`` and ``None``)
    yields a string, and cleaning a cleaned value is a no-op.
    """
    if not value:
        return ""
    text = value
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def strip_brackets(value: str) -> str:
    """Remove a wrapping ``[ ... ]`` pair, e.g. button text ``[Get Started]``."""
    value = re.sub(r"^\[\s*", "", value.strip())
    return re.sub(r"\s*\]$", "", value)


def strip_list_marker(line: str) -> str:
    """Remove one bullet or numbering prefix from a list line."""
    line = line.strip()
    stripped = _BULLET_RE.sub("", line, count=1)
    return _NUMBERING_RE.sub("", stripped, count=1)


def is_list_line(line: str) -> bool:
    """True for lines starting with a bullet, digit, or opening quote."""
    return bool(re.match(r"^[-*•\d]", line) or re.match(r"^[\"“”]", line))
