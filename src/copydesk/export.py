"""Plain-text "copy all" rendering of view records."""
from __future__ import annotations

from copydesk.copy_types import AdRecord, CopyRecord, LandingPageRecord, ListItem


def _item(item: ListItem) -> str:
    return f"{item.title} — {item.description}" if item.description else item.title


def export_ad_text(ad: AdRecord) -> str:
    parts: list[str] = []
    parts.extend(f"Headline {i + 1}: {h}" for i, h in enumerate(ad.headlines))
    parts.extend(f"Description {i + 1}: {d}" for i, d in enumerate(ad.descriptions))
    if ad.hook_line:
        parts.append(f"Hook Line: {ad.hook_line}")
    if ad.support_line:
        parts.append(f"Support Line: {ad.support_line}")
    if ad.cta:
        parts.append(f"CTA: {ad.cta}")
    if ad.display_url:
        parts.append(f"Display URL: {ad.display_url}")
    parts.extend(f"Image Copy {i + 1}: {c}" for i, c in enumerate(ad.image_copy))
    parts.extend(f"Sitelink {i + 1}: {s}" for i, s in enumerate(ad.sitelinks))
    parts.extend(f"{s.label}: {s.text}" for s in ad.raw_sections)
    return "\n".join(parts)


def export_landing_page_text(page: LandingPageRecord) -> str:
    hero = page.hero
    parts: list[str] = []
    if hero.headline:
        parts.append(f"Headline: {hero.headline}")
    if hero.subheadline:
        parts.append(f"Subheadline: {hero.subheadline}")
    if hero.cta:
        parts.append(f"Hero CTA: {hero.cta}")
    if hero.trust_bar:
        parts.append(f"Trust Bar: {' | '.join(hero.trust_bar)}")
    if hero.micro_proof:
        parts.append(f"Micro Proof: {hero.micro_proof}")
    parts.extend(f"Social Proof {i + 1}: {_item(sp)}" for i, sp in enumerate(page.social_proof))
    if page.problem.headline:
        parts.append(f"Problem Headline: {page.problem.headline}")
    if page.problem.body:
        parts.append(f"Problem: {page.problem.body}")
    if page.solution.headline:
        parts.append(f"Solution Headline: {page.solution.headline}")
    if page.solution.body:
        parts.append(f"Solution: {page.solution.body}")
    parts.extend(f"Benefit {i + 1}: {_item(b)}" for i, b in enumerate(page.benefits))
    parts.extend(f"Step {i + 1}: {_item(s)}" for i, s in enumerate(page.how_it_works))
    if page.cta_section.headline:
        parts.append(f"CTA Headline: {page.cta_section.headline}")
    if page.cta_section.body:
        parts.append(f"CTA Body: {page.cta_section.body}")
    if page.cta_section.cta:
        parts.append(f"CTA Button: {page.cta_section.cta}")
    for i, t in enumerate(page.testimonials):
        attribution = f" — {t.attribution}" if t.attribution else ""
        parts.append(f'Testimonial {i + 1}: "{t.quote}"{attribution}')
    if page.footer:
        parts.append(f"Footer: {page.footer}")
    parts.extend(f"{s.label}: {s.text}" for s in page.raw_sections)
    return "\n".join(parts)


def export_text(view: CopyRecord) -> str:
    if isinstance(view, LandingPageRecord):
        return export_landing_page_text(view)
    return export_ad_text(view)
