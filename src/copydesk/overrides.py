"""Override merge: parsed record + sparse field edits -> view record.

A FieldPath addresses one leaf of a record:

- a scalar path (``"cta"``, ``"hero.headline"``, ``"cta_section.body"``);
- an indexed list path ``"<prefix>-<n>"`` (``"headline-0"``,
  ``"benefit-2"``). Indices are fixed at parse time; for list-of-record
  fields the override replaces one attribute of the item (a benefit's
  ``title``, a testimonial's ``quote``).

``apply_overrides`` never mutates its input. Entries are applied in
mapping order, later entries win, and paths that are unknown, malformed,
or out of range for the current list are skipped silently (a stale edit
from an earlier parse is not an error).
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any

from copydesk.copy_types import AdRecord, CopyRecord, FieldPath, LandingPageRecord

# ---------------------------------------------------------------------------
# Path tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ListTarget:
    """Where an indexed path points: the list, and the item attribute."""

    attrs: tuple[str, ...]
    item_attr: str | None
    label: str


AD_SCALAR_PATHS: dict[str, tuple[tuple[str, ...], str]] = {
    "hook_line": (("hook_line",), "Hook Line"),
    "support_line": (("support_line",), "Support Line"),
    "cta": (("cta",), "Call to Action"),
    "display_url": (("display_url",), "Display URL"),
}

AD_LIST_PATHS: dict[str, ListTarget] = {
    "headline": ListTarget(("headlines",), None, "Headline"),
    "description": ListTarget(("descriptions",), None, "Description"),
    "sitelink": ListTarget(("sitelinks",), None, "Sitelink"),
    "image_copy": ListTarget(("image_copy",), None, "Image Copy"),
    "raw": ListTarget(("raw_sections",), "text", "Section"),
}

PAGE_SCALAR_PATHS: dict[str, tuple[tuple[str, ...], str]] = {
    "title": (("title",), "Title"),
    "hero.headline": (("hero", "headline"), "Hero Headline"),
    "hero.subheadline": (("hero", "subheadline"), "Hero Subheadline"),
    "hero.cta": (("hero", "cta"), "Hero CTA"),
    "hero.micro_proof": (("hero", "micro_proof"), "Hero Micro Proof"),
    "problem.headline": (("problem", "headline"), "Problem Headline"),
    "problem.body": (("problem", "body"), "Problem Body"),
    "solution.headline": (("solution", "headline"), "Solution Headline"),
    "solution.body": (("solution", "body"), "Solution Body"),
    "cta_section.headline": (("cta_section", "headline"), "CTA Headline"),
    "cta_section.body": (("cta_section", "body"), "CTA Body"),
    "cta_section.cta": (("cta_section", "cta"), "CTA Button"),
    "footer": (("footer",), "Footer"),
}

PAGE_LIST_PATHS: dict[str, ListTarget] = {
    "trust_bar": ListTarget(("hero", "trust_bar"), None, "Trust Bar"),
    "social_proof": ListTarget(("social_proof",), "title", "Social Proof"),
    "benefit": ListTarget(("benefits",), "title", "Benefit"),
    "how_it_works": ListTarget(("how_it_works",), "title", "Step"),
    "testimonial": ListTarget(("testimonials",), "quote", "Testimonial"),
}


def _tables(
    record: CopyRecord,
) -> tuple[dict[str, tuple[tuple[str, ...], str]], dict[str, ListTarget]]:
    if isinstance(record, LandingPageRecord):
        return PAGE_SCALAR_PATHS, PAGE_LIST_PATHS
    return AD_SCALAR_PATHS, AD_LIST_PATHS


def split_indexed_path(path: FieldPath) -> tuple[str, int] | None:
    """``"benefit-2"`` -> ``("benefit", 2)``; None when not indexed."""
    prefix, sep, index = path.rpartition("-")
    if not sep or not prefix or not index.isdigit():
        return None
    return prefix, int(index)


def list_path(prefix: str, index: int) -> FieldPath:
    return f"{prefix}-{index}"


# ---------------------------------------------------------------------------
# Attribute access on nested frozen dataclasses
# ---------------------------------------------------------------------------


def _get(obj: Any, attrs: tuple[str, ...]) -> Any:
    for attr in attrs:
        obj = getattr(obj, attr)
    return obj


def _set(obj: Any, attrs: tuple[str, ...], value: Any) -> Any:
    head, rest = attrs[0], attrs[1:]
    if not rest:
        return replace(obj, **{head: value})
    return replace(obj, **{head: _set(getattr(obj, head), rest, value)})


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def set_field[R: (AdRecord, LandingPageRecord)](record: R, path: FieldPath, value: str) -> R:
    """Return ``record`` with one field replaced, or unchanged if ``path``
    does not resolve against it."""
    scalars, lists = _tables(record)
    if path in scalars:
        return _set(record, scalars[path][0], value)

    indexed = split_indexed_path(path)
    if indexed is None or indexed[0] not in lists:
        return record
    prefix, index = indexed
    target = lists[prefix]
    items = _get(record, target.attrs)
    if index >= len(items):
        return record
    item = value if target.item_attr is None else replace(items[index], **{target.item_attr: value})
    updated = items[:index] + (item,) + items[index + 1:]
    return _set(record, target.attrs, updated)


def apply_overrides[R: (AdRecord, LandingPageRecord)](
    record: R, overrides: Mapping[FieldPath, str],
) -> R:
    """Merge ``overrides`` onto ``record`` and return the view record."""
    view = record
    for path, value in overrides.items():
        view = set_field(view, path, value)
    return view


def read_field(record: CopyRecord, path: FieldPath) -> str | None:
    """Current value at ``path``, or None when the path does not resolve."""
    scalars, lists = _tables(record)
    if path in scalars:
        return _get(record, scalars[path][0])
    indexed = split_indexed_path(path)
    if indexed is None or indexed[0] not in lists:
        return None
    prefix, index = indexed
    target = lists[prefix]
    items = _get(record, target.attrs)
    if index >= len(items):
        return None
    item = items[index]
    return item if target.item_attr is None else getattr(item, target.item_attr)


def is_valid_path(record: CopyRecord, path: FieldPath) -> bool:
    return read_field(record, path) is not None


def iter_fields(record: CopyRecord) -> Iterator[tuple[FieldPath, str, str]]:
    """Yield ``(path, label, value)`` for every non-empty addressable field."""
    scalars, lists = _tables(record)
    for path, (attrs, label) in scalars.items():
        value = _get(record, attrs)
        if value:
            yield path, label, value
    for prefix, target in lists.items():
        for index in range(len(_get(record, target.attrs))):
            path = list_path(prefix, index)
            value = read_field(record, path)
            if value:
                yield path, f"{target.label} {index + 1}", value


def describe_field_path(path: FieldPath) -> str:
    """Human label for a field path ("benefit-2" -> "Benefit 3")."""
    for scalars in (PAGE_SCALAR_PATHS, AD_SCALAR_PATHS):
        if path in scalars:
            return scalars[path][1]
    indexed = split_indexed_path(path)
    if indexed is not None:
        prefix, index = indexed
        target = PAGE_LIST_PATHS.get(prefix) or AD_LIST_PATHS.get(prefix)
        if target is not None:
            return f"{target.label} {index + 1}"
    return path
