"""Label classification — free-text labels to canonical categories.

Two taxonomies share one mechanism: an ordered table of ``LabelRule``
entries evaluated top to bottom, first match wins. Precedence is data,
so it can be asserted directly in tests:

**Ad fields** (``AD_LABEL_RULES``):
    headline, description, hook, support, cta, url, sitelink,
    image_copy, skip -> fallback ``other``

**Landing-page sections** (``PAGE_SECTION_RULES``):
    hero, social_proof, problem, solution, benefits, how_it_works, cta,
    testimonials, footer, title -> fallback ``unknown``

Notable guards:
    - ``headline`` excludes labels containing "sub", so "Subheadline"
      never lands in the headline list.
    - ``url`` excludes "sitelink", otherwise the bare ``link`` alternative
      would shadow the sitelink rule below it.
    - "Introducing ..." counts as a solution label only when it is short
      (<= 4 words); longer lines are body text that happens to start
      with the word.

Pure functions, case-insensitive, total: unmatched labels return the
taxonomy's fallback category, never an error.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from copydesk.copy_types import AdCategory, PageCategory


@dataclass(frozen=True, slots=True)
class LabelRule:
    """One row of a classification table."""

    category: str
    pattern: re.Pattern[str]
    exclude: re.Pattern[str] | None = None
    max_words: int | None = None

    def matches(self, label: str) -> bool:
        if not self.pattern.search(label):
            return False
        if self.exclude is not None and self.exclude.search(label):
            return False
        if self.max_words is not None and len(label.split()) > self.max_words:
            return False
        return True


def _rule(
    category: str,
    pattern: str,
    *,
    exclude: str | None = None,
    max_words: int | None = None,
) -> LabelRule:
    return LabelRule(
        category=category,
        pattern=re.compile(pattern, re.IGNORECASE),
        exclude=re.compile(exclude, re.IGNORECASE) if exclude else None,
        max_words=max_words,
    )


# ── Ad taxonomy ─────────────────────────────────────────────────────────

AD_LABEL_RULES: tuple[LabelRule, ...] = (
    _rule("headline", r"headline|title", exclude=r"sub"),
    _rule("description", r"description|body|primary\s*text|intro\s*copy|ad\s*copy"),
    _rule("hook", r"hook"),
    _rule("support", r"support\s*line"),
    _rule("cta", r"cta|call\s*to\s*action|button\s*text"),
    _rule("url", r"display\s*url|url|link", exclude=r"sitelink"),
    _rule("sitelink", r"sitelink"),
    _rule("image_copy", r"image\s*copy|image\s*text|visual"),
    _rule("skip", r"explanation|why|rationale|note|breakdown"),
)

AD_FALLBACK: AdCategory = "other"

# ── Landing-page taxonomy ───────────────────────────────────────────────

PAGE_SECTION_RULES: tuple[LabelRule, ...] = (
    _rule("hero", r"hero|above\s+the\s+fold"),
    _rule("social_proof", r"social\s+proof"),
    _rule("problem", r"problem|agitation|pain\s+point"),
    _rule("solution", r"\bsolution\b"),
    _rule("solution", r"^introducing\b", max_words=4),
    _rule("benefits", r"benefit|value\s+prop"),
    _rule("how_it_works", r"how\s+it\s+works|process|steps"),
    _rule("cta", r"\bcta\b|call\s+to\s+action"),
    _rule("testimonials", r"testimonial|quote|review|customer"),
    _rule("footer", r"footer"),
    _rule("title", r"landing\s+page|ad\s+copy"),
)

PAGE_FALLBACK: PageCategory = "unknown"


def classify(label: str, rules: tuple[LabelRule, ...], fallback: str) -> str:
    """Return the category of the first rule matching ``label``."""
    text = (label or "").strip()
    for rule in rules:
        if rule.matches(text):
            return rule.category
    return fallback


def classify_ad_label(label: str) -> AdCategory:
    """Map an ad field label ("Headline 2", "CTA Button") to its category."""
    return classify(label, AD_LABEL_RULES, AD_FALLBACK)  # type: ignore[return-value]


def classify_page_section(label: str) -> PageCategory:
    """Map a landing-page section header to its category."""
    return classify(label, PAGE_SECTION_RULES, PAGE_FALLBACK)  # type: ignore[return-value]
