"""Tests for the landing-page rubric."""
from __future__ import annotations

from dataclasses import replace

from copydesk.copy_types import (
    CtaBlock,
    HeroBlock,
    LandingPageRecord,
    ListItem,
    Testimonial,
    TwoPartBlock,
)
from copydesk.scoring import SCORE_CHECKS, page_word_count, score_landing_page

_FILLER = " ".join(["retention"] * 45)

FULL_PAGE = LandingPageRecord(
    hero=HeroBlock(
        headline="Stop Losing Customers to Silent Churn",
        subheadline="Acme predicts which accounts will leave and how to keep them.",
        cta="Start Free Trial",
        trust_bar=("SOC 2", "GDPR"),
        micro_proof="Loved by 2,000 teams",
    ),
    social_proof=(ListItem("2,000+ teams"), ListItem("38% less churn")),
    problem=TwoPartBlock("Customers leave quietly", _FILLER),
    solution=TwoPartBlock("Meet Acme", _FILLER),
    benefits=(ListItem("Early warnings"), ListItem("Playbooks"), ListItem("Focus")),
    how_it_works=(ListItem("Connect"), ListItem("Predict"), ListItem("Act")),
    cta_section=CtaBlock("Ready?", "Join thousands of teams.", "Start Free Trial"),
    testimonials=(Testimonial("Churn cut in half", "Jane"),),
)


class TestScoreLandingPage:
    def test_empty_page_scores_zero(self) -> None:
        report = score_landing_page(LandingPageRecord())
        assert report.score == 0
        assert all(c.status == "fail" for c in report.checks)
        assert report.passes == 0
        assert report.total == 10

    def test_full_page_scores_hundred(self) -> None:
        report = score_landing_page(FULL_PAGE)
        assert [c.status for c in report.checks] == ["pass"] * 10
        assert report.score == 100
        assert report.failing() == ()

    def test_check_order_and_weights(self) -> None:
        report = score_landing_page(FULL_PAGE)
        assert [c.label for c in report.checks] == [
            "Headline Length",
            "Subheadline",
            "Hero CTA",
            "Trust Signals",
            "Social Proof",
            "Problem → Solution",
            "Benefits",
            "How It Works",
            "Secondary CTA",
            "Content Density",
        ]
        assert sum(check.max_points for check in SCORE_CHECKS) == 80

    def test_short_headline_warns(self) -> None:
        page = replace(FULL_PAGE, hero=replace(FULL_PAGE.hero, headline="Grow"))
        report = score_landing_page(page)
        headline = report.checks[0]
        assert (headline.status, headline.points) == ("warn", 5)
        assert report.score == 94
        assert report.failing() == (headline,)

    def test_long_cta_warns(self) -> None:
        page = replace(
            FULL_PAGE,
            hero=replace(FULL_PAGE.hero, cta="Start your completely free trial today now"),
        )
        assert score_landing_page(page).checks[2].status == "warn"

    def test_problem_without_solution_warns(self) -> None:
        page = replace(FULL_PAGE, solution=TwoPartBlock())
        check = score_landing_page(page).checks[5]
        assert (check.status, check.points) == ("warn", 4)

    def test_density_bands(self) -> None:
        long_page = replace(FULL_PAGE, problem=TwoPartBlock("x", " ".join(["word"] * 600)))
        assert score_landing_page(long_page).checks[-1].status == "warn"
        thin = LandingPageRecord(problem=TwoPartBlock("x", " ".join(["word"] * 40)))
        assert score_landing_page(thin).checks[-1].points == 4

    def test_exact_half_rounds_up(self) -> None:
        page = LandingPageRecord(hero=HeroBlock(headline="Stop Losing Customers to Silent Churn"))
        report = score_landing_page(page)
        assert [c.points for c in report.checks] == [10] + [0] * 9
        assert report.score == 13

    def test_score_stays_in_range(self) -> None:
        for page in (LandingPageRecord(), FULL_PAGE):
            assert 0 <= score_landing_page(page).score <= 100

    def test_word_count(self) -> None:
        page = LandingPageRecord(
            hero=HeroBlock(headline="Two words"),
            benefits=(ListItem("Fast", "really fast"),),
        )
        assert page_word_count(page) == 5

    def test_to_dict(self) -> None:
        payload = score_landing_page(LandingPageRecord()).to_dict()
        assert payload["score"] == 0
        assert payload["checks"][0]["max_points"] == 10
