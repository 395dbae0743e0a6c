"""Section bodies to typed copy records.

Each classified ``Section`` is routed by category to a field extractor:

- scalar fields take the cleaned joined body (``cta``, ``hook_line``,
  landing-page headline/body pairs);
- ordered lists split body lines on bullet/numbering prefixes
  (``headlines``, ``sitelinks``, ``benefits``, ``how_it_works``), with a
  short leading ``Title: description`` label split into a ``ListItem``;
- testimonials look for ``"quote" — Attribution`` across the whole body
  before falling back to one entry per line;
- unclassified sections are kept verbatim in ``raw_sections``.

Parsing never raises: input that matches no expected shape degrades to
empty fields. Records are built fresh on every call, so the result for a
given text is deterministic and independent of any overrides.
"""
from __future__ import annotations

import re
from dataclasses import replace
from typing import Any

from copydesk.copy_types import (
    AdRecord,
    CtaBlock,
    HeroBlock,
    LandingPageRecord,
    ListItem,
    RawSection,
    Section,
    Testimonial,
    TwoPartBlock,
)
from copydesk.segmenter import segment, strip_commentary
from copydesk.text_clean import (
    QUOTE_CHARS,
    clean,
    is_list_line,
    strip_brackets,
    strip_list_marker,
)

# Call to action used when the copy has content but no explicit CTA.
DEFAULT_AD_CTA = "Learn More"

# ---------------------------------------------------------------------------
# Ad records
# ---------------------------------------------------------------------------


def _list_values(section: Section) -> list[str]:
    values: list[str] = []
    for line in section.body_lines:
        cleaned = clean(strip_list_marker(line))
        if cleaned:
            values.append(cleaned)
    return values


def structure_ad(sections: list[Section]) -> AdRecord:
    """Assemble an ``AdRecord`` from ad-taxonomy sections."""
    headlines: list[str] = []
    descriptions: list[str] = []
    sitelinks: list[str] = []
    image_copy: list[str] = []
    raw_sections: list[RawSection] = []
    scalars: dict[str, str] = {}

    for section in sections:
        text = clean(section.body)
        if not text:
            continue
        match section.category:
            case "headline":
                headlines.extend(_list_values(section))
            case "description":
                descriptions.append(text)
            case "hook":
                scalars["hook_line"] = text
            case "support":
                scalars["support_line"] = text
            case "cta":
                scalars["cta"] = clean(strip_brackets(text))
            case "url":
                scalars["display_url"] = text
            case "sitelink":
                sitelinks.extend(_list_values(section))
            case "image_copy":
                image_copy.append(text)
            case "skip":
                pass
            case _:
                raw_sections.append(RawSection(clean(section.label), text))

    if not scalars.get("cta") and (headlines or descriptions):
        scalars["cta"] = DEFAULT_AD_CTA

    return AdRecord(
        headlines=tuple(headlines),
        descriptions=tuple(descriptions),
        sitelinks=tuple(sitelinks),
        image_copy=tuple(image_copy),
        raw_sections=tuple(raw_sections),
        **scalars,
    )


def parse_ad_copy(content: str | None) -> AdRecord:
    """Parse one generated reply into an ``AdRecord``."""
    if not content:
        return AdRecord()
    return structure_ad(segment(content, "ad"))


# ---------------------------------------------------------------------------
# Landing-page field extractors
# ---------------------------------------------------------------------------

_HERO_LABEL_RE = re.compile(
    r"(?:^|(?<=\s))(?:\*\*)?"
    r"(Headline|Sub-?headline|Subtitle|CTA(?:\s*Button)?|Trust\s*Bar|Micro\s*(?:Social\s*)?Proof)"
    r"\s*(?:\*\*)?\s*:(?:\*\*)?",
    re.IGNORECASE,
)
_BRACKET_ITEM_RE = re.compile(r"\[([^\]]+)\]")


def _non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def parse_hero(text: str) -> dict[str, Any]:
    """Extract hero fields from labeled or free-form hero text.

    Returns only the fields found, so a repeated hero section updates
    rather than erases earlier values.
    """
    found: dict[str, Any] = {}
    if not text:
        return found

    matches = list(_HERO_LABEL_RE.finditer(text))
    if not matches:
        lines = _non_empty_lines(text)
        if lines:
            found["headline"] = clean(lines[0])
        if len(lines) > 1:
            found["subheadline"] = clean(" ".join(lines[1:]))
        return found

    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        value = text[m.end():end].strip()
        label = m.group(1).lower()
        if ("headline" in label or "title" in label) and "sub" not in label:
            found["headline"] = clean(value)
        elif "sub" in label:
            found["subheadline"] = clean(value)
        elif "cta" in label or "button" in label:
            found["cta"] = clean(strip_brackets(value))
        elif "trust" in label:
            items = _BRACKET_ITEM_RE.findall(value)
            if not items:
                items = re.split(r"[|,]", value)
            found["trust_bar"] = tuple(c for c in (clean(s) for s in items) if c)
        else:
            found["micro_proof"] = clean(value)
    return found


_TWO_PART_HEADLINE_RE = re.compile(
    r"(?:^|\n)\s*(?:\*\*)?(?:Headline|Title)\s*(?:\*\*)?\s*:\s*(.+?)(?:\n|$)",
    re.IGNORECASE,
)
_TWO_PART_BODY_RE = re.compile(
    r"(?:^|\n)\s*(?:\*\*)?(?:Body|Copy|Description|Text)\s*(?:\*\*)?\s*:\s*(.+)",
    re.IGNORECASE | re.DOTALL,
)
_SENTENCE_SPLIT_RE = re.compile(r"^(.{15,80}?[.!?])\s+")

# Unlabeled first lines shorter than this are treated as a headline.
_MAX_HEADLINE_LEN = 100


def parse_two_part(text: str) -> dict[str, str]:
    """Split a section body into ``headline`` and ``body``."""
    found: dict[str, str] = {}
    if not text:
        return found

    m = _TWO_PART_HEADLINE_RE.search(text)
    if m:
        found["headline"] = clean(m.group(1))
        body_m = _TWO_PART_BODY_RE.search(text)
        if body_m:
            found["body"] = clean(body_m.group(1))
        else:
            after = text[m.end():].strip()
            if after:
                found["body"] = clean(after)
        return found

    lines = _non_empty_lines(text)
    if not lines:
        return found
    first = clean(lines[0])
    rest = " ".join(c for c in (clean(line) for line in lines[1:]) if c)

    if len(lines) > 1 and len(first) < _MAX_HEADLINE_LEN and not lines[0].startswith(("*", "-", "•")):
        found["headline"] = first
        found["body"] = rest
    elif len(lines) == 1 and len(first) > 80:
        sent = _SENTENCE_SPLIT_RE.match(first)
        if sent:
            found["headline"] = sent.group(1)
            found["body"] = clean(first[sent.end():])
        else:
            found["headline"] = first
    else:
        found["headline"] = first
        if rest:
            found["body"] = rest
    return found


_CTA_BUTTON_RE = re.compile(
    r"(?:^|\n)\s*(?:\*\*)?CTA\s*(?:Button)?\s*(?:\*\*)?\s*:\s*\[?\s*(.+?)\s*\]?\s*(?:\n|$)",
    re.IGNORECASE,
)
_CTA_BUTTON_LINE_RE = re.compile(
    r"(?:^|\n)\s*(?:\*\*)?CTA\s*(?:Button)?\s*(?:\*\*)?\s*:.*(?:\n|$)",
    re.IGNORECASE,
)
_LABELED_HEADLINE_RE = re.compile(r"^(?:Headline|Title)\s*:\s*(.+)$", re.IGNORECASE)
_LABELED_BODY_RE = re.compile(r"^(?:Body|Copy|Text|Description)\s*:\s*(.+)$", re.IGNORECASE)


def parse_cta_section(text: str) -> dict[str, str]:
    """Extract button text, headline and body of a closing CTA section."""
    found: dict[str, str] = {}
    if not text:
        return found

    button = _CTA_BUTTON_RE.search(text)
    if button:
        found["cta"] = clean(strip_brackets(button.group(1)))
    remaining = _CTA_BUTTON_LINE_RE.sub("\n", text, count=1).strip()

    for line in _non_empty_lines(remaining):
        cleaned = clean(line)
        if not cleaned:
            continue
        headline_m = _LABELED_HEADLINE_RE.match(cleaned)
        if headline_m:
            found["headline"] = clean(headline_m.group(1))
            continue
        body_m = _LABELED_BODY_RE.match(cleaned)
        if body_m:
            found["body"] = clean(body_m.group(1))
            continue
        if len(cleaned) < 80 and not found.get("headline"):
            found["headline"] = cleaned
        else:
            found["body"] = f"{found['body']} {cleaned}" if found.get("body") else cleaned
    return found


def _split_title(text: str, max_colon: int) -> ListItem:
    colon = text.find(":")
    if 0 < colon < max_colon:
        return ListItem(clean(text[:colon]), clean(text[colon + 1:]))
    return ListItem(clean(text))


def extract_bullets(text: str) -> list[ListItem]:
    """Bulleted, numbered or quoted lines as ``ListItem`` entries."""
    items: list[ListItem] = []
    for line in _non_empty_lines(text):
        if not is_list_line(line):
            continue
        value = strip_list_marker(line).strip(QUOTE_CHARS + " \t")
        colon = value.find(":")
        if 0 < colon < 40 and not value[:1].isdigit() and not re.search(r"https?:", value):
            item = ListItem(clean(value[:colon]), clean(value[colon + 1:]))
        else:
            item = ListItem(clean(value))
        if item.title:
            items.append(item)
    return items


_NUMBERED_LINE_RE = re.compile(r"^\d+[.)]\s*")
_BULLET_LINE_RE = re.compile(r"^[-*•]\s*")


def extract_numbered_items(text: str) -> list[ListItem]:
    """Numbered (or bulleted) step lines; colon splits title from detail."""
    items: list[ListItem] = []
    for line in _non_empty_lines(text):
        if not (_NUMBERED_LINE_RE.match(line) or _BULLET_LINE_RE.match(line)):
            continue
        value = _BULLET_LINE_RE.sub("", _NUMBERED_LINE_RE.sub("", line, count=1), count=1)
        item = _split_title(value, 50)
        if item.title:
            items.append(item)
    return items


_OPEN_QUOTE = "\"“”"
_TESTIMONIAL_RE = re.compile(
    rf"[{_OPEN_QUOTE}]([^{_OPEN_QUOTE}]+)[{_OPEN_QUOTE}]?\s*(?:—|--|–|-)\s*([^\n]+)"
)
_TESTIMONIAL_LINE_RE = re.compile(
    rf"^[{_OPEN_QUOTE}]([^{_OPEN_QUOTE}]+)[{_OPEN_QUOTE}]?\s*(?:—|--|–|-)\s*(.+)$"
)


def extract_testimonials(text: str) -> list[Testimonial]:
    """Quote/attribution pairs, falling back to one quote per line."""
    results = [
        Testimonial(clean(m.group(1)), clean(m.group(2)))
        for m in _TESTIMONIAL_RE.finditer(text)
    ]
    if results:
        return results

    for line in _non_empty_lines(text):
        value = _BULLET_LINE_RE.sub("", line, count=1)
        single = _TESTIMONIAL_LINE_RE.match(value)
        if single:
            results.append(Testimonial(clean(single.group(1)), clean(single.group(2))))
        elif value[:1] in _OPEN_QUOTE:
            results.append(Testimonial(clean(value)))
        elif len(value) > 20:
            results.append(Testimonial(clean(value)))
    return [t for t in results if t.quote]


_QUOTED_PROOF_RE = re.compile(rf"[{_OPEN_QUOTE}]([^{_OPEN_QUOTE}]{{10,}})[{_OPEN_QUOTE}]")


def extract_social_proof(text: str) -> list[ListItem]:
    """Bullets, else quoted snippets, else every line longer than 10 chars."""
    bullets = extract_bullets(text)
    if bullets:
        return bullets
    quoted = [ListItem(clean(q)) for q in _QUOTED_PROOF_RE.findall(text)]
    if quoted:
        return [q for q in quoted if q.title]
    lines = [ListItem(clean(line)) for line in _non_empty_lines(text) if len(line) > 10]
    return [item for item in lines if item.title]


# ---------------------------------------------------------------------------
# Landing-page records
# ---------------------------------------------------------------------------


def structure_landing_page(sections: list[Section]) -> LandingPageRecord:
    """Assemble a ``LandingPageRecord`` from landing-page sections."""
    page = LandingPageRecord()
    raw_sections: list[RawSection] = []

    for section in sections:
        body = section.body
        match section.category:
            case "title":
                if not page.title and clean(body):
                    page = replace(page, title=clean(body))
            case "hero":
                page = replace(page, hero=replace(page.hero, **parse_hero(body)))
            case "social_proof":
                page = replace(page, social_proof=tuple(extract_social_proof(body)))
            case "problem":
                page = replace(page, problem=replace(page.problem, **parse_two_part(body)))
            case "solution":
                page = replace(page, solution=replace(page.solution, **parse_two_part(body)))
            case "benefits":
                page = replace(page, benefits=tuple(extract_bullets(body)))
            case "how_it_works":
                steps = extract_numbered_items(body) or extract_bullets(body)
                page = replace(page, how_it_works=tuple(steps))
            case "cta":
                page = replace(
                    page, cta_section=replace(page.cta_section, **parse_cta_section(body)),
                )
            case "testimonials":
                page = replace(page, testimonials=tuple(extract_testimonials(body)))
            case "footer":
                joined = " | ".join(_non_empty_lines(body))
                page = replace(page, footer=clean(joined.replace("[", "").replace("]", "")))
            case _:
                if body:
                    raw_sections.append(RawSection(clean(section.label), clean(body)))

    return replace(page, raw_sections=tuple(raw_sections))


_FLAT_LABEL_RE = re.compile(r"^(?:\*\*)?([^:*]+?)(?:\*\*)?\s*:\s*(.+)$")


def apply_flat_labels(text: str, page: LandingPageRecord) -> LandingPageRecord:
    """Fallback for copy without section headers.

    Only runs when no hero headline, social proof or benefits were found;
    picks ``Headline:``, ``Subheadline:`` and ``CTA:`` lines into the hero.
    """
    if page.hero.headline or page.social_proof or page.benefits:
        return page

    hero: dict[str, Any] = {}
    for raw_line in text.split("\n"):
        m = _FLAT_LABEL_RE.match(raw_line.strip())
        if not m:
            continue
        label = m.group(1).strip().lower()
        value = clean(m.group(2))
        if not value:
            continue
        if label == "headline" and not hero.get("headline"):
            hero["headline"] = value
        elif re.search(r"sub\s*headline", label):
            hero["subheadline"] = value
        elif "cta" in label and not (hero.get("cta") or page.hero.cta):
            hero["cta"] = clean(strip_brackets(value))
    if not hero:
        return page
    return replace(page, hero=replace(page.hero, **hero))


def parse_landing_page(content: str | None) -> LandingPageRecord:
    """Parse one generated reply into a ``LandingPageRecord``."""
    if not content:
        return LandingPageRecord()
    body = strip_commentary(content, "landing_page")
    page = structure_landing_page(segment(body, "landing_page", commentary_stripped=True))
    return apply_flat_labels(body, page)
