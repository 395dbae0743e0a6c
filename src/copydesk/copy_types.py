"""Core types shared by every layer of the copy pipeline.

All records are frozen, slotted dataclasses. A parsed record is never
mutated: override views are built with ``dataclasses.replace`` so the
parsed snapshot for a message stays byte-for-byte stable for as long as
the message text does.

Type hierarchy:
  Ok[T] / Err[E]      — Result ADT used at the generation boundary
  Section             — Labeled run of source text produced by segmentation
  RawSection          — Catch-all ``{label, text}`` pair for unclassified text
  ListItem            — ``{title, description}`` list entry
  Testimonial         — ``{quote, attribution}`` pair
  AdRecord            — Structured advertisement fields
  HeroBlock / TwoPartBlock / CtaBlock — Landing-page sub-records
  LandingPageRecord   — Structured landing-page sections
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success case of Result[T, E].

    Usage::

        match session.regenerate("cta", "Call to Action", "Shop Now"):
            case Ok(value=v): print(v)
            case Err(error=e): print(e.reason)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failure case of Result[T, E]."""
    error: E


type Result[T, E] = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Taxonomies
# ---------------------------------------------------------------------------

type AdCategory = Literal[
    "headline", "description", "hook", "support", "cta", "url",
    "sitelink", "image_copy", "skip", "other",
]

type PageCategory = Literal[
    "hero", "social_proof", "problem", "solution", "benefits",
    "how_it_works", "cta", "testimonials", "footer", "title", "unknown",
]

type Taxonomy = Literal["ad", "landing_page"]

# A FieldPath is a plain string key: "hero.headline", "benefit-2", "cta".
type FieldPath = str


# ---------------------------------------------------------------------------
# Segmentation output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Section:
    """A contiguous, labeled run of source text.

    ``body_lines`` keeps blank lines as empty strings so paragraph breaks
    survive into structuring.
    """

    label: str
    category: str
    body_lines: tuple[str, ...] = ()

    @property
    def body(self) -> str:
        return "\n".join(self.body_lines).strip()


# ---------------------------------------------------------------------------
# Record building blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawSection:
    label: str
    text: str


@dataclass(frozen=True, slots=True)
class ListItem:
    title: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class Testimonial:
    quote: str
    attribution: str = ""


# ---------------------------------------------------------------------------
# Ad record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AdRecord:
    """Structured advertisement copy."""

    headlines: tuple[str, ...] = ()
    descriptions: tuple[str, ...] = ()
    hook_line: str = ""
    support_line: str = ""
    cta: str = ""
    display_url: str = ""
    sitelinks: tuple[str, ...] = ()
    image_copy: tuple[str, ...] = ()
    raw_sections: tuple[RawSection, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Landing-page record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HeroBlock:
    headline: str = ""
    subheadline: str = ""
    cta: str = ""
    trust_bar: tuple[str, ...] = ()
    micro_proof: str = ""


@dataclass(frozen=True, slots=True)
class TwoPartBlock:
    """Headline + body section (problem, solution)."""

    headline: str = ""
    body: str = ""


@dataclass(frozen=True, slots=True)
class CtaBlock:
    headline: str = ""
    body: str = ""
    cta: str = ""


@dataclass(frozen=True, slots=True)
class LandingPageRecord:
    """Structured landing-page copy, one attribute per canonical section."""

    title: str = ""
    hero: HeroBlock = field(default_factory=HeroBlock)
    social_proof: tuple[ListItem, ...] = ()
    problem: TwoPartBlock = field(default_factory=TwoPartBlock)
    solution: TwoPartBlock = field(default_factory=TwoPartBlock)
    benefits: tuple[ListItem, ...] = ()
    how_it_works: tuple[ListItem, ...] = ()
    cta_section: CtaBlock = field(default_factory=CtaBlock)
    testimonials: tuple[Testimonial, ...] = ()
    footer: str = ""
    raw_sections: tuple[RawSection, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


type CopyRecord = AdRecord | LandingPageRecord
