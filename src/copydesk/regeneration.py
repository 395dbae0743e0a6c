"""Single-field regeneration: directive construction and reply parsing.

A regeneration request sends the generation service a compact summary of
the current view record plus an instruction to rewrite exactly one field.
The reply is free text; ``extract_single_value`` recovers the new value:

    1. Drop trailing commentary ("Here's why ...", "### Explanation").
    2. ``**Label:** value`` on any line.
    3. ``Label: value`` on any line.
    4. Otherwise the last non-empty, non-heading line after cleaning.
"""
from __future__ import annotations

import re

from copydesk.copy_types import AdRecord, CopyRecord, LandingPageRecord
from copydesk.text_clean import clean

# ---------------------------------------------------------------------------
# Context serialization
# ---------------------------------------------------------------------------


def build_ad_context(ad: AdRecord) -> str:
    parts: list[str] = []
    parts.extend(f"Headline {i + 1}: {h}" for i, h in enumerate(ad.headlines))
    parts.extend(f"Description {i + 1}: {d}" for i, d in enumerate(ad.descriptions))
    if ad.hook_line:
        parts.append(f"Hook Line: {ad.hook_line}")
    if ad.support_line:
        parts.append(f"Support Line: {ad.support_line}")
    if ad.cta:
        parts.append(f"CTA: {ad.cta}")
    return "\n".join(parts)


def build_page_context(page: LandingPageRecord) -> str:
    parts: list[str] = []
    hero = page.hero
    if hero.headline:
        parts.append(f"Hero Headline: {hero.headline}")
    if hero.subheadline:
        parts.append(f"Hero Subheadline: {hero.subheadline}")
    if hero.cta:
        parts.append(f"Hero CTA: {hero.cta}")
    if page.problem.headline:
        parts.append(f"Problem Headline: {page.problem.headline}")
    if page.problem.body:
        parts.append(f"Problem: {page.problem.body}")
    if page.solution.headline:
        parts.append(f"Solution Headline: {page.solution.headline}")
    if page.solution.body:
        parts.append(f"Solution: {page.solution.body}")
    for i, benefit in enumerate(page.benefits):
        detail = f" — {benefit.description}" if benefit.description else ""
        parts.append(f"Benefit {i + 1}: {benefit.title}{detail}")
    if page.cta_section.headline:
        parts.append(f"CTA Headline: {page.cta_section.headline}")
    if page.cta_section.cta:
        parts.append(f"CTA Button: {page.cta_section.cta}")
    return "\n".join(parts)


def build_context(view: CopyRecord) -> str:
    """Compact ``Label: value`` summary of a view record."""
    if isinstance(view, LandingPageRecord):
        return build_page_context(view)
    return build_ad_context(view)


def copy_kind(view: CopyRecord) -> str:
    return "landing page copy" if isinstance(view, LandingPageRecord) else "ad copy"


# ---------------------------------------------------------------------------
# Directive
# ---------------------------------------------------------------------------


def build_regeneration_directive(
    view: CopyRecord,
    field_label: str,
    current_value: str,
    direction: str | None = None,
) -> str:
    """Prompt asking the generation service to rewrite one field."""
    prompt = (
        f"I have this {copy_kind(view)}:\n\n{build_context(view)}\n\n"
        f'Rewrite ONLY the "{field_label}" field. The current value is: "{current_value}"'
    )
    if direction and direction.strip():
        prompt += f"\n\nDirection: {direction.strip()}"
    prompt += (
        "\n\nGive me a single new alternative. Reply with ONLY the new text for this "
        "field, nothing else. No labels, no quotes, no explanation."
    )
    return prompt


# ---------------------------------------------------------------------------
# Reply parsing
# ---------------------------------------------------------------------------

_TRAILING_COMMENTARY_RE = re.compile(
    r"\n\n?(?:This\s+|If\s+you\s+|Feel\s+free|I'?ve\s+|Here'?s?\s+|The\s+new\s+).*",
    re.IGNORECASE | re.DOTALL,
)
_EXPLANATION_HEADING_RE = re.compile(
    r"^#{1,4}\s*(?:Explanation|Why|Rationale).*",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
_BOLD_VALUE_RE = re.compile(r"\*\*[^*]+\*\*\s*:?\s*[\"']?(.+?)[\"']?\s*$", re.MULTILINE)
_PLAIN_VALUE_RE = re.compile(r"^[A-Za-z][A-Za-z ]*:\s*[\"']?(.+?)[\"']?\s*$", re.MULTILINE)


def extract_single_value(reply: str | None) -> str:
    """Recover the single regenerated value from a free-text reply.

    Returns ``""`` when nothing usable is left.
    """
    if not reply:
        return ""
    text = _TRAILING_COMMENTARY_RE.sub("", reply)
    text = _EXPLANATION_HEADING_RE.sub("", text)

    for pattern in (_BOLD_VALUE_RE, _PLAIN_VALUE_RE):
        m = pattern.search(text)
        if m:
            value = clean(m.group(1))
            if value:
                return value

    lines = [line.strip() for line in text.split("\n")]
    meaningful = [c for c in (clean(line) for line in lines if line and not line.startswith("#")) if c]
    if meaningful:
        return meaningful[-1]
    return clean(text)
