"""Tests for the ordered label classification tables."""
from __future__ import annotations

import pytest

from copydesk.labels import (
    AD_LABEL_RULES,
    PAGE_SECTION_RULES,
    classify,
    classify_ad_label,
    classify_page_section,
)


class TestAdLabels:
    def test_subheadline_is_not_a_headline(self) -> None:
        assert classify_ad_label("Headline") == "headline"
        assert classify_ad_label("Subheadline") != classify_ad_label("Headline")

    @pytest.mark.parametrize(
        ("label", "category"),
        [
            ("Headline 2", "headline"),
            ("Primary Text", "description"),
            ("Ad Copy", "description"),
            ("Hook", "hook"),
            ("Support Line", "support"),
            ("CTA Button", "cta"),
            ("Call to Action", "cta"),
            ("Display URL", "url"),
            ("Sitelinks", "sitelink"),
            ("Image Text", "image_copy"),
            ("Why this works", "skip"),
            ("Tone", "other"),
            ("", "other"),
        ],
    )
    def test_classification(self, label: str, category: str) -> None:
        assert classify_ad_label(label) == category

    def test_case_insensitive(self) -> None:
        assert classify_ad_label("HEADLINE") == classify_ad_label("headline") == "headline"

    def test_table_order_decides_overlaps(self) -> None:
        # "Headline CTA" matches both rows; the earlier row wins.
        categories = [rule.category for rule in AD_LABEL_RULES]
        assert categories.index("headline") < categories.index("cta")
        assert classify_ad_label("Headline CTA") == "headline"


class TestPageSections:
    @pytest.mark.parametrize(
        ("label", "category"),
        [
            ("Hero Section", "hero"),
            ("Above the Fold", "hero"),
            ("Social Proof Bar", "social_proof"),
            ("Problem/Agitation", "problem"),
            ("The Solution", "solution"),
            ("Introducing Acme", "solution"),
            ("Key Benefits", "benefits"),
            ("How It Works", "how_it_works"),
            ("Final CTA", "cta"),
            ("Customer Testimonials", "testimonials"),
            ("Footer", "footer"),
            ("Landing Page Copy for Acme", "title"),
            ("Pricing", "unknown"),
        ],
    )
    def test_classification(self, label: str, category: str) -> None:
        assert classify_page_section(label) == category

    def test_introducing_only_for_short_labels(self) -> None:
        assert classify_page_section("Introducing the all new platform today") == "unknown"

    def test_generic_classify_uses_fallback(self) -> None:
        assert classify("nothing matches", PAGE_SECTION_RULES, "fallback") == "fallback"
