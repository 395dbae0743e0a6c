"""Section segmentation for generated marketing copy.

Splits a generated reply into an ordered list of labeled ``Section`` runs.
The input is loosely formatted markdown: headings, bold labels,
``Label: value`` lines, "Section N:" prefixes, with commentary appended
by the model after the actual copy.

Pipeline:
    1. Cut trailing commentary (``strip_commentary``): everything from the
       first "### Explanation"/"Why"/"Notes" style heading, and trailing
       conversational paragraphs ("Feel free to ...").
    2. Scan lines top to bottom against an ordered header-rule table
       (first match wins). A matching line opens, closes, or skips a
       section; everything else is body text of the open section.
    3. Inline header content ("Hero Headline: Stop Losing Customers") is
       split by a second-tier label table so the label stays clean and the
       remainder seeds the section body.
    4. Sections without a label are dropped. A ``skip`` label ("Why this
       works") suppresses lines until the next structural header.

Rule order is fixed and is part of the parser's output contract: two
header patterns can match the same line and the table order decides.

No I/O; deterministic; total. Empty input returns an empty list.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from copydesk.copy_types import Section, Taxonomy
from copydesk.labels import classify_ad_label, classify_page_section

# ---------------------------------------------------------------------------
# Commentary boundaries
# ---------------------------------------------------------------------------

_AD_COMMENTARY_HEADING_RE = re.compile(
    r"^#{1,4}\s*(?:Explanation|Why|Rationale|Breakdown|Notes?)\b",
    re.IGNORECASE | re.MULTILINE,
)
_AD_COMMENTARY_TAIL_RE = re.compile(
    r"\n\n(?:This\s+(?:ad\s+)?copy\s+|If\s+you\s+need\s+|Feel\s+free\s+to\s+).*",
    re.IGNORECASE | re.DOTALL,
)

_PAGE_COMMENTARY_HEADING_RE = re.compile(
    r"^#{1,4}\s*(?:Explanation|Why\s+this|Rationale|Notes?|Breakdown|Key\s+takeaway)",
    re.IGNORECASE | re.MULTILINE,
)
_PAGE_COMMENTARY_TAIL_RE = re.compile(
    r"\n\n(?:This\s+landing\s+page|If\s+you\s+need|Feel\s+free\s+to|Let\s+me\s+know"
    r"|I'?ve\s+structured|This\s+copy\s+effectively|This\s+copy\s+is\s+designed"
    r"|Would\s+you\s+like|I'?ve\s+designed|I'?ve\s+created).*",
    re.IGNORECASE | re.DOTALL,
)
# "Here's a structured landing page copy for Acme:" style preamble
_PAGE_INTRO_RE = re.compile(
    r"^.*?(?:here'?s?\s+(?:a\s+)?(?:structured\s+)?landing\s+page\s+copy"
    r"|based\s+on\s+(?:effective|best)\s+practices)[^:]*:\s*",
    re.IGNORECASE | re.DOTALL,
)


def strip_commentary(text: str, taxonomy: Taxonomy = "ad") -> str:
    """Remove model commentary surrounding the copy itself."""
    if not text:
        return ""
    if taxonomy == "ad":
        heading_re, tail_re = _AD_COMMENTARY_HEADING_RE, _AD_COMMENTARY_TAIL_RE
    else:
        heading_re, tail_re = _PAGE_COMMENTARY_HEADING_RE, _PAGE_COMMENTARY_TAIL_RE
    cut = heading_re.search(text)
    if cut:
        text = text[:cut.start()]
    text = tail_re.sub("", text)
    if taxonomy == "landing_page":
        text = _PAGE_INTRO_RE.sub("", text, count=1)
    return text


# ---------------------------------------------------------------------------
# Header rule table
# ---------------------------------------------------------------------------

type HeaderAction = Literal["open", "inline", "append", "close", "skip", "ignore"]


@dataclass(frozen=True, slots=True)
class HeaderMatch:
    """Outcome of a header rule.

    ``open``   close the current section, start a new one
    ``inline`` emit a complete one-line section; the open one continues
    ``append`` add ``remainder`` to the open section's body
    ``close``  close the current section without opening another
    ``skip``   close and ignore lines until the next structural header
    ``ignore`` drop the line
    """

    action: HeaderAction
    label: str = ""
    category: str = ""
    remainder: str = ""


@dataclass(frozen=True, slots=True)
class HeaderRule:
    """One row of a header table: a named matcher.

    ``structural`` rules are still evaluated while skipping commentary;
    the others only fire in normal scanning.
    """

    name: str
    match: Callable[[str, bool], HeaderMatch | None]
    structural: bool = True


_SECTION_N_RE = re.compile(
    r"^(?:#{1,4}\s*)?(?:\*\*)?Section\s+\d+\s*[:.\-–]\s*(.+?)(?:\*\*)?$",
    re.IGNORECASE,
)
_HEADING_RE = re.compile(r"^#{1,4}\s+(.+?)$")
_BOLD_LINE_RE = re.compile(r"^\*\*([^*]{3,60})\*\*\s*$")
_BOLD_LABEL_RE = re.compile(r"^\*\*(.+?)\*\*\s*:?\s*(.*)$")
_DASH_LABEL_RE = re.compile(r"^-\s+(.+?):\s*(.*)$")
_PLAIN_LABEL_RE = re.compile(r"^([A-Za-z][A-Za-z\s]{1,30}):\s+(.+)$")
_NUMBERED_ASIDE_RE = re.compile(r"^\d+\.\s+[A-Z].*\s+-\s+")

_PLATFORM_BANNER_RE = re.compile(
    r"ad\s*copy|social\s*media|linkedin|facebook|google|meta", re.IGNORECASE,
)
_TITLE_PREFIX_RE = re.compile(
    r"^Landing\s+Page\s+(?:Copy\s+)?(?:for\s+)?", re.IGNORECASE,
)
_LEADING_SEPARATOR_RE = re.compile(r"^[:\-–—]\s*")

# Second-tier section labels: the label part of a header that also carries
# body text on the same line.
SECTION_LABEL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^hero\s*(?:\(.*?\))?", re.IGNORECASE),
    re.compile(r"^social\s+proof(?:\s+bar)?", re.IGNORECASE),
    re.compile(r"^problem\s*(?:[/&]\s*agitation)?", re.IGNORECASE),
    re.compile(r"^solution", re.IGNORECASE),
    re.compile(r"^(?:key\s+)?benefits?", re.IGNORECASE),
    re.compile(r"^how\s+it\s+works", re.IGNORECASE),
    re.compile(r"^(?:cta|call\s+to\s+action)", re.IGNORECASE),
    re.compile(r"^testimonials?", re.IGNORECASE),
    re.compile(r"^(?:minimal\s+)?footer", re.IGNORECASE),
    re.compile(r"^introducing", re.IGNORECASE),
    re.compile(r"^value\s+prop", re.IGNORECASE),
)
_INLINE_FIELD_SPLIT_RE = re.compile(
    r"^(.+?)\s+((?:Headline|Subheadline|CTA|Trust|Micro|Body|Button|Quote|Logo)\s*:)",
    re.IGNORECASE,
)


def extract_section_label(text: str) -> tuple[str, str]:
    """Split header text into ``(label, remainder)``.

    "Hero (Above the Fold) Headline: Stop Losing Customers" yields
    ``("Hero (Above the Fold)", "Headline: Stop Losing Customers")``.
    """
    trimmed = text.strip()
    for pattern in SECTION_LABEL_PATTERNS:
        m = pattern.match(trimmed)
        if m:
            label = m.group(0).strip()
            remainder = _LEADING_SEPARATOR_RE.sub("", trimmed[m.end():].strip())
            return label, remainder
    m = _INLINE_FIELD_SPLIT_RE.match(trimmed)
    if m:
        return m.group(1).strip(), m.group(2) + trimmed[m.end():]
    return trimmed, ""


# ── Landing-page rules ──────────────────────────────────────────────────


def _page_header(header_text: str) -> HeaderMatch:
    if classify_page_section(header_text) == "title":
        value = _TITLE_PREFIX_RE.sub("", header_text).strip()
        return HeaderMatch("inline", header_text, "title", value)
    label, remainder = extract_section_label(header_text)
    category = classify_page_section(label)
    if category == "unknown":
        category = classify_page_section(header_text)
    return HeaderMatch("open", label or header_text, category, remainder)


def _page_section_number(line: str, has_open: bool) -> HeaderMatch | None:
    m = _SECTION_N_RE.match(line)
    return _page_header(m.group(1).strip()) if m else None


def _page_heading(line: str, has_open: bool) -> HeaderMatch | None:
    m = _HEADING_RE.match(line)
    if not m:
        return None
    candidate = m.group(1).replace("**", "").strip()
    if classify_page_section(candidate) == "unknown":
        return None
    return _page_header(candidate)


def _page_bold_line(line: str, has_open: bool) -> HeaderMatch | None:
    m = _BOLD_LINE_RE.match(line)
    if not m:
        return None
    candidate = m.group(1).strip()
    if classify_page_section(candidate) == "unknown":
        return None
    return _page_header(candidate)


PAGE_HEADER_RULES: tuple[HeaderRule, ...] = (
    HeaderRule("section_number", _page_section_number),
    HeaderRule("heading", _page_heading),
    HeaderRule("bold_line", _page_bold_line),
)


# ── Ad rules ────────────────────────────────────────────────────────────


def _ad_open(label: str, remainder: str = "") -> HeaderMatch:
    category = classify_ad_label(label)
    if category == "skip":
        return HeaderMatch("skip", label, category)
    return HeaderMatch("open", label, category, remainder)


def _ad_section_number(line: str, has_open: bool) -> HeaderMatch | None:
    m = _SECTION_N_RE.match(line)
    return _ad_open(m.group(1).strip()) if m else None


def _ad_numbered_aside(line: str, has_open: bool) -> HeaderMatch | None:
    # "1. Urgency - creates FOMO" explanation lists
    return HeaderMatch("ignore") if _NUMBERED_ASIDE_RE.match(line) else None


def _ad_heading(line: str, has_open: bool) -> HeaderMatch | None:
    m = _HEADING_RE.match(line)
    if not m:
        return None
    label = m.group(1).replace("**", "").strip()
    category = classify_ad_label(label)
    if category == "skip":
        return HeaderMatch("skip", label, category)
    if _PLATFORM_BANNER_RE.search(label) and (
        category == "other" or re.search(r"ad\s*copy", label, re.IGNORECASE)
    ):
        return HeaderMatch("close", label, category)
    return HeaderMatch("open", label, category)


def _ad_bold_label(line: str, has_open: bool) -> HeaderMatch | None:
    m = _BOLD_LABEL_RE.match(line)
    if not m:
        return None
    label = m.group(1).strip().rstrip(":").strip()
    return _ad_open(label, m.group(2).strip())


def _ad_dash_label(line: str, has_open: bool) -> HeaderMatch | None:
    if not has_open:
        return None
    m = _DASH_LABEL_RE.match(line)
    if not m:
        return None
    label = m.group(1).strip()
    value = m.group(2).strip()
    category = classify_ad_label(label)
    if category in ("hook", "support", "cta", "headline"):
        return HeaderMatch("inline", label, category, value)
    return HeaderMatch("append", remainder=value) if value else HeaderMatch("ignore")


def _ad_plain_label(line: str, has_open: bool) -> HeaderMatch | None:
    if has_open:
        return None
    m = _PLAIN_LABEL_RE.match(line)
    if not m:
        return None
    label = m.group(1).strip()
    category = classify_ad_label(label)
    if category in ("other", "skip"):
        return HeaderMatch("ignore")
    return HeaderMatch("open", label, category, m.group(2).strip())


AD_HEADER_RULES: tuple[HeaderRule, ...] = (
    HeaderRule("section_number", _ad_section_number),
    HeaderRule("numbered_aside", _ad_numbered_aside, structural=False),
    HeaderRule("heading", _ad_heading),
    HeaderRule("bold_label", _ad_bold_label),
    HeaderRule("dash_label", _ad_dash_label, structural=False),
    HeaderRule("plain_label", _ad_plain_label, structural=False),
)

HEADER_RULES: dict[str, tuple[HeaderRule, ...]] = {
    "ad": AD_HEADER_RULES,
    "landing_page": PAGE_HEADER_RULES,
}


def match_header(
    line: str,
    taxonomy: Taxonomy = "ad",
    *,
    has_open: bool = False,
    structural_only: bool = False,
) -> tuple[str, HeaderMatch] | None:
    """Evaluate the header table for one stripped line.

    Returns ``(rule_name, match)`` for the first rule that fires.
    """
    for rule in HEADER_RULES[taxonomy]:
        if structural_only and not rule.structural:
            continue
        result = rule.match(line, has_open)
        if result is not None:
            return rule.name, result
    return None


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------

_CONVERSATIONAL_OPENER_RE = re.compile(r"^(?:Here'?s?|Below|I'?ve|Let me|Sure)", re.IGNORECASE)
_PAGE_TITLE_HINT_RE = re.compile(r"landing\s+page", re.IGNORECASE)

# Pre-section ad lines shorter than this are never promoted to a description.
_MIN_UNLABELED_DESCRIPTION = 21


@dataclass(slots=True)
class _OpenSection:
    label: str
    category: str
    body_lines: list[str] = field(default_factory=list)

    def freeze(self) -> Section:
        return Section(self.label, self.category, tuple(self.body_lines))


class _Scanner:
    """Line-at-a-time segmentation state."""

    def __init__(self, taxonomy: Taxonomy) -> None:
        self.taxonomy = taxonomy
        # Sections are appended when they open, so the list stays in source
        # order even when an inline section is emitted inside an open one.
        self.sections: list[_OpenSection] = []
        self.current: _OpenSection | None = None
        self.skipping = False
        self.seen_copy = False

    def feed(self, raw_line: str) -> None:
        line = raw_line.strip()
        if not line:
            if self.current is not None:
                self.current.body_lines.append("")
            return

        found = match_header(
            line,
            self.taxonomy,
            has_open=self.current is not None,
            structural_only=self.skipping,
        )
        if found is not None:
            self._apply(found[1])
            return
        if self.skipping:
            return

        if self.current is not None:
            self.current.body_lines.append(line)
        elif self.taxonomy == "ad":
            self._maybe_unlabeled_description(line)
        else:
            self._maybe_page_title(line)

    def finish(self) -> list[Section]:
        return [s.freeze() for s in self.sections if s.label.strip()]

    def _apply(self, m: HeaderMatch) -> None:
        if m.action == "ignore":
            return
        if m.action == "append":
            if self.current is not None:
                self.current.body_lines.append(m.remainder)
            return
        if m.action == "inline":
            self._emit(m.label, m.category, m.remainder)
            return
        self.current = None
        self.skipping = m.action == "skip"
        if m.action == "open":
            self.current = self._emit(m.label, m.category, m.remainder)

    def _emit(self, label: str, category: str, remainder: str) -> _OpenSection:
        section = _OpenSection(label, category, [remainder] if remainder else [])
        self.sections.append(section)
        if category in ("headline", "description"):
            self.seen_copy = True
        return section

    def _maybe_unlabeled_description(self, line: str) -> None:
        if self.seen_copy or line.startswith(("#", "---")):
            return
        if len(line) < _MIN_UNLABELED_DESCRIPTION or _CONVERSATIONAL_OPENER_RE.match(line):
            return
        self._emit("Description", "description", line)

    def _maybe_page_title(self, line: str) -> None:
        cleaned = re.sub(r"^#+\s*", "", line).replace("**", "").strip()
        if not _PAGE_TITLE_HINT_RE.search(cleaned):
            return
        value = _TITLE_PREFIX_RE.sub("", cleaned).strip()
        if value and value != cleaned:
            self._emit(cleaned, "title", value)


def segment(
    text: str,
    taxonomy: Taxonomy = "ad",
    *,
    commentary_stripped: bool = False,
) -> list[Section]:
    """Split generated copy into ordered, classified sections.

    Pass ``commentary_stripped=True`` when the caller already ran
    ``strip_commentary`` on ``text``.
    """
    body = text or ""
    if not commentary_stripped:
        body = strip_commentary(body, taxonomy)
    scanner = _Scanner(taxonomy)
    for raw_line in body.split("\n"):
        scanner.feed(raw_line)
    return scanner.finish()


def segment_ad_copy(text: str) -> list[Section]:
    return segment(text, "ad")


def segment_landing_page(text: str) -> list[Section]:
    return segment(text, "landing_page")
