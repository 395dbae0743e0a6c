"""Tests for section segmentation and the header rule tables."""
from __future__ import annotations

from copydesk.segmenter import (
    AD_HEADER_RULES,
    extract_section_label,
    match_header,
    segment,
    segment_ad_copy,
    segment_landing_page,
    strip_commentary,
)

AD_TEXT = (
    "**Headline 1:** Save 20% Today\n"
    "**Headline 2:** Limited Time Offer\n"
    "**Description:** Get premium software at half price.\n"
    "**CTA:** Shop Now"
)


def _shape(text: str, taxonomy: str = "ad") -> list[tuple[str, str, str]]:
    return [(s.label, s.category, s.body) for s in segment(text, taxonomy)]  # type: ignore[arg-type]


class TestCommentary:
    def test_cuts_at_explanation_heading(self) -> None:
        text = AD_TEXT + "\n### Explanation\nThis works because urgency sells."
        assert "urgency" not in strip_commentary(text, "ad")

    def test_cuts_trailing_conversational_paragraph(self) -> None:
        text = AD_TEXT + "\n\nFeel free to tweak the tone."
        assert strip_commentary(text, "ad") == AD_TEXT

    def test_landing_page_intro_and_outro(self) -> None:
        text = (
            "Here's a structured landing page copy for Acme:\n\n"
            "## Hero\nHeadline: Grow\n\nLet me know if you want changes."
        )
        stripped = strip_commentary(text, "landing_page")
        assert stripped.startswith("## Hero")
        assert "Let me know" not in stripped

    def test_empty(self) -> None:
        assert strip_commentary("", "ad") == ""


class TestHeaderRules:
    def test_section_number_beats_bold_label(self) -> None:
        found = match_header("**Section 1: Headlines**", "ad")
        assert found is not None
        name, match = found
        assert name == "section_number"
        assert (match.action, match.label, match.category) == ("open", "Headlines", "headline")

    def test_rule_order_is_data(self) -> None:
        names = [rule.name for rule in AD_HEADER_RULES]
        assert names == [
            "section_number",
            "numbered_aside",
            "heading",
            "bold_label",
            "dash_label",
            "plain_label",
        ]

    def test_platform_banner_closes(self) -> None:
        found = match_header("## Facebook Ad Copy", "ad")
        assert found is not None
        assert found[1].action == "close"

    def test_skip_heading(self) -> None:
        found = match_header("## Why This Works", "ad")
        assert found is not None
        assert found[1].action == "skip"

    def test_dash_label_requires_open_section(self) -> None:
        assert match_header("- Hook: Stop scrolling", "ad", has_open=False) is None
        found = match_header("- Hook: Stop scrolling", "ad", has_open=True)
        assert found is not None
        assert (found[1].action, found[1].category, found[1].remainder) == (
            "inline", "hook", "Stop scrolling",
        )

    def test_structural_only_skips_label_rules(self) -> None:
        assert match_header("- Hook: x", "ad", has_open=True, structural_only=True) is None
        assert match_header("**CTA:** Buy", "ad", structural_only=True) is not None

    def test_page_heading_must_classify(self) -> None:
        assert match_header("## Pricing", "landing_page") is None
        found = match_header("## Key Benefits", "landing_page")
        assert found is not None
        assert found[1].category == "benefits"


class TestExtractSectionLabel:
    def test_splits_inline_value(self) -> None:
        assert extract_section_label("Hero (Above the Fold) Headline: Stop Losing Customers") == (
            "Hero (Above the Fold)",
            "Headline: Stop Losing Customers",
        )

    def test_strips_separator(self) -> None:
        assert extract_section_label("Problem - Churn is invisible") == ("Problem", "Churn is invisible")

    def test_plain_label(self) -> None:
        assert extract_section_label("Pricing") == ("Pricing", "")


class TestSegmentAd:
    def test_bold_labels(self) -> None:
        assert _shape(AD_TEXT) == [
            ("Headline 1", "headline", "Save 20% Today"),
            ("Headline 2", "headline", "Limited Time Offer"),
            ("Description", "description", "Get premium software at half price."),
            ("CTA", "cta", "Shop Now"),
        ]

    def test_empty_input(self) -> None:
        assert segment("") == []
        assert segment_ad_copy("\n\n   \n") == []

    def test_skip_section_until_next_header(self) -> None:
        text = (
            "**Headline:** Grow faster\n"
            "**Why this works:** urgency\n"
            "It leans on scarcity.\n"
            "**CTA:** Buy now"
        )
        assert [s.category for s in segment(text)] == ["headline", "cta"]
        assert all("scarcity" not in s.body for s in segment(text))

    def test_dash_sub_labels(self) -> None:
        text = (
            "**Primary Text**\n"
            "Main body copy here\n"
            "- Hook: Stop scrolling\n"
            "- Tone: friendly"
        )
        sections = segment(text)
        assert [(s.category, s.body) for s in sections] == [
            ("description", "Main body copy here\nfriendly"),
            ("hook", "Stop scrolling"),
        ]

    def test_unlabeled_leading_description(self) -> None:
        text = "Transform your workflow with smarter automation tools.\n**CTA:** Try Free"
        assert _shape(text) == [
            ("Description", "description", "Transform your workflow with smarter automation tools."),
            ("CTA", "cta", "Try Free"),
        ]

    def test_conversational_opener_is_not_a_description(self) -> None:
        text = "Here's your ad copy for the spring launch!\n**CTA:** Try Free"
        assert [s.category for s in segment(text)] == ["cta"]

    def test_blank_lines_kept_in_body(self) -> None:
        sections = segment("## Description\nFirst paragraph.\n\nSecond paragraph.")
        assert sections[0].body_lines == ("First paragraph.", "", "Second paragraph.")


class TestSegmentLandingPage:
    def test_inline_header_value_seeds_body(self) -> None:
        sections = segment_landing_page("## Hero (Above the Fold) Headline: Stop Losing Customers")
        assert len(sections) == 1
        assert sections[0].label == "Hero (Above the Fold)"
        assert sections[0].category == "hero"
        assert sections[0].body_lines[0] == "Headline: Stop Losing Customers"

    def test_section_number_headers(self) -> None:
        text = "Section 1: Hero\nStop churn\nSection 2: Problem\nCustomers leave quietly"
        assert [(s.label, s.category) for s in segment(text, "landing_page")] == [
            ("Hero", "hero"),
            ("Problem", "problem"),
        ]

    def test_title_heading_is_inline(self) -> None:
        sections = segment_landing_page("# Landing Page Copy for Acme CRM\n## Hero\nGrow")
        assert (sections[0].category, sections[0].body) == ("title", "Acme CRM")
        assert sections[1].category == "hero"

    def test_unknown_heading_stays_in_body(self) -> None:
        sections = segment_landing_page("## Benefits\n- Fast\n## Pricing\n- Cheap")
        assert len(sections) == 1
        assert "## Pricing" in sections[0].body
