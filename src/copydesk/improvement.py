"""Batch improvement: one directive for all weak checks, one labeled reply.

The reply is expected as ``Label: value`` lines in the format the
directive asks for. Each line is matched against ``FIX_LABEL_RULES``
(first match wins) and mapped to one or more field paths. Lines with an
unknown label or an empty value are ignored.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from copydesk.copy_types import FieldPath, LandingPageRecord
from copydesk.overrides import list_path
from copydesk.regeneration import build_page_context
from copydesk.scoring import CheckResult
from copydesk.text_clean import clean

REPLY_FORMAT = (
    "Headline: ...",
    "Subheadline: ...",
    "Hero CTA: ...",
    "Trust Bar: item1 | item2 | item3",
    "Micro Proof: ...",
    "Problem Headline: ...",
    "Problem Body: ...",
    "Solution Headline: ...",
    "Solution Body: ...",
    "Benefit 1: title: description",
    "Benefit 2: title: description",
    "Benefit 3: title: description",
    "Step 1: title: description",
    "Step 2: title: description",
    "Step 3: title: description",
    "CTA Headline: ...",
    "CTA Body: ...",
    "CTA Button: ...",
)


def build_improvement_directive(page: LandingPageRecord, checks: Iterable[CheckResult]) -> str:
    issues = "\n".join(f"- {c.label}: {c.tip}" for c in checks)
    fmt = "\n".join(REPLY_FORMAT)
    return (
        f"I have this landing page copy:\n\n{build_page_context(page)}\n\n"
        f"SEO analysis found these issues:\n{issues}\n\n"
        "Rewrite the landing page copy fixing ALL of these issues. Keep the same structure "
        f"but improve the weak areas. Format as:\n{fmt}\n\n"
        "Only include fields that need improvement. No explanation, just the improved copy."
    )


# ---------------------------------------------------------------------------
# Reply parsing
# ---------------------------------------------------------------------------

type FixExtractor = Callable[[re.Match[str], str], dict[FieldPath, str]]


@dataclass(frozen=True, slots=True)
class FixLabelRule:
    pattern: re.Pattern[str]
    extract: FixExtractor


def _scalar(path: FieldPath) -> FixExtractor:
    return lambda _m, value: {path: value}


def _trust_bar(_m: re.Match[str], value: str) -> dict[FieldPath, str]:
    items = [c for c in (clean(part) for part in value.split("|")) if c]
    return {list_path("trust_bar", i): item for i, item in enumerate(items)}


def _titled_item(prefix: str) -> FixExtractor:
    def extract(m: re.Match[str], value: str) -> dict[FieldPath, str]:
        index = int(m.group(1)) - 1
        if index < 0:
            return {}
        title, sep, _ = value.partition(":")
        return {list_path(prefix, index): clean(title) if sep else value}

    return extract


def _fix_rule(pattern: str, extract: FixExtractor) -> FixLabelRule:
    return FixLabelRule(re.compile(pattern, re.IGNORECASE), extract)


FIX_LABEL_RULES: tuple[FixLabelRule, ...] = (
    _fix_rule(r"^headline$", _scalar("hero.headline")),
    _fix_rule(r"^sub\s*-?\s*headline$", _scalar("hero.subheadline")),
    _fix_rule(r"^hero\s*cta$", _scalar("hero.cta")),
    _fix_rule(r"^trust\s*bar$", _trust_bar),
    _fix_rule(r"^micro", _scalar("hero.micro_proof")),
    _fix_rule(r"^problem\s*headline$", _scalar("problem.headline")),
    _fix_rule(r"^problem\s*(?:body)?$", _scalar("problem.body")),
    _fix_rule(r"^solution\s*headline$", _scalar("solution.headline")),
    _fix_rule(r"^solution\s*(?:body)?$", _scalar("solution.body")),
    _fix_rule(r"^benefit\s*(\d+)$", _titled_item("benefit")),
    _fix_rule(r"^step\s*(\d+)$", _titled_item("how_it_works")),
    _fix_rule(r"^cta\s*headline$", _scalar("cta_section.headline")),
    _fix_rule(r"^cta\s*body$", _scalar("cta_section.body")),
    _fix_rule(r"^cta\s*button$", _scalar("cta_section.cta")),
)

_LINE_RE = re.compile(r"^([^:]+):\s*(.+)$")


def parse_fix_reply(reply: str | None) -> dict[FieldPath, str]:
    """Map a labeled multi-field reply to proposed overrides."""
    proposed: dict[FieldPath, str] = {}
    for line in (reply or "").split("\n"):
        m = _LINE_RE.match(line)
        if not m:
            continue
        label = clean(m.group(1)).lower()
        value = clean(m.group(2))
        if not value:
            continue
        for rule in FIX_LABEL_RULES:
            hit = rule.pattern.search(label)
            if hit:
                proposed.update(rule.extract(hit, value))
                break
    return proposed
