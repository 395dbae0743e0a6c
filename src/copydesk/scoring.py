"""Landing-page rubric scoring.

Ten weighted checks run in a fixed order over a view record. Each check
returns a ``CheckResult`` with a status, a remediation tip and the points
awarded; the report's score is ``100 * awarded / possible`` rounded half up.

    Check                 max   pass                    warn
    Headline              10    30-65 chars             other lengths
    Subheadline            8    > 20 chars              1-20 chars
    Hero CTA              10    2-5 words               other word counts
    Trust Signals          8    3+ items                1-2
    Social Proof           8    3+ proof points         1-2
    Problem -> Solution    8    both present            problem only
    Benefits               8    3+                      1-2
    How It Works           6    3+ steps                1-2
    Secondary CTA          6    present                 -
    Content Density        8    100-500 words           >500 or 31-99
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from copydesk.copy_types import LandingPageRecord

type CheckStatus = Literal["pass", "warn", "fail"]


@dataclass(frozen=True, slots=True)
class CheckResult:
    label: str
    status: CheckStatus
    tip: str
    points: int
    max_points: int

    def to_dict(self) -> dict[str, object]:
        return {
            "label": self.label,
            "status": self.status,
            "tip": self.tip,
            "points": self.points,
            "max_points": self.max_points,
        }


@dataclass(frozen=True, slots=True)
class ScoreReport:
    checks: tuple[CheckResult, ...]
    score: int

    @property
    def passes(self) -> int:
        return sum(1 for c in self.checks if c.status == "pass")

    @property
    def total(self) -> int:
        return len(self.checks)

    def failing(self) -> tuple[CheckResult, ...]:
        """Checks with status ``warn`` or ``fail``, in rubric order."""
        return tuple(c for c in self.checks if c.status != "pass")

    def to_dict(self) -> dict[str, object]:
        return {
            "score": self.score,
            "passes": self.passes,
            "total": self.total,
            "checks": [c.to_dict() for c in self.checks],
        }


@dataclass(frozen=True, slots=True)
class ScoreCheck:
    """One rubric row: a name, its weight, and the evaluator."""

    name: str
    max_points: int
    evaluate: Callable[[LandingPageRecord, int], CheckResult]


def _result(label: str, status: CheckStatus, tip: str, points: int, max_points: int) -> CheckResult:
    return CheckResult(label=label, status=status, tip=tip, points=points, max_points=max_points)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _check_headline(page: LandingPageRecord, mx: int) -> CheckResult:
    n = len(page.hero.headline)
    if n == 0:
        return _result(
            "Headline", "fail",
            "Add a headline. It is the most important element for SEO and conversions.", 0, mx,
        )
    if 30 <= n <= 65:
        return _result(
            "Headline Length", "pass", f"{n} chars, ideal length for search and readability.", mx, mx,
        )
    if n < 30:
        return _result(
            "Headline Length", "warn", f"{n} chars, try 30-65 chars for better search visibility.", 5, mx,
        )
    return _result(
        "Headline Length", "warn", f"{n} chars, shorten to under 65 for search display.", 5, mx,
    )


def _check_subheadline(page: LandingPageRecord, mx: int) -> CheckResult:
    n = len(page.hero.subheadline)
    if n > 20:
        return _result("Subheadline", "pass", "Supporting copy reinforces the value proposition.", mx, mx)
    if n > 0:
        return _result(
            "Subheadline", "warn", "Expand subheadline, aim for 50-150 chars for better context.", 4, mx,
        )
    return _result("Subheadline", "fail", "Add a subheadline to reinforce your value proposition.", 0, mx)


def _check_hero_cta(page: LandingPageRecord, mx: int) -> CheckResult:
    cta = page.hero.cta
    if not cta:
        return _result(
            "Hero CTA", "fail",
            "Add a CTA button. Every landing page needs a clear call to action.", 0, mx,
        )
    if 2 <= len(cta.split()) <= 5:
        return _result("Hero CTA", "pass", f'"{cta}" is action-oriented and concise.', mx, mx)
    return _result("Hero CTA", "warn", "CTA should be 2-5 words, starting with an action verb.", 6, mx)


def _check_trust(page: LandingPageRecord, mx: int) -> CheckResult:
    n = len(page.hero.trust_bar) + (1 if page.hero.micro_proof else 0)
    if n >= 3:
        return _result("Trust Signals", "pass", f"{n} trust elements build credibility effectively.", mx, mx)
    if n > 0:
        return _result(
            "Trust Signals", "warn", f"{n} trust element(s), aim for 3+ (logos, badges, stats).", 4, mx,
        )
    return _result(
        "Trust Signals", "fail",
        "Add trust signals (partner logos, certifications, stats) to build credibility.", 0, mx,
    )


def _check_social_proof(page: LandingPageRecord, mx: int) -> CheckResult:
    n = len(page.social_proof) + len(page.testimonials)
    if n >= 3:
        return _result("Social Proof", "pass", f"{n} proof points give strong social validation.", mx, mx)
    if n > 0:
        return _result(
            "Social Proof", "warn", f"{n} proof point(s), add more stats, quotes, or testimonials.", 4, mx,
        )
    return _result("Social Proof", "fail", "Add social proof: testimonials, stats, or customer logos.", 0, mx)


def _check_problem_solution(page: LandingPageRecord, mx: int) -> CheckResult:
    label = "Problem → Solution"
    if not (page.problem.headline or page.problem.body):
        return _result(
            label, "fail",
            "Add problem/agitation copy to create urgency before presenting the solution.", 0, mx,
        )
    if page.solution.headline or page.solution.body:
        return _result(label, "pass", "Clear problem/solution narrative drives conversions.", mx, mx)
    return _result(label, "warn", "Add a solution section to complete the narrative arc.", 4, mx)


def _check_benefits(page: LandingPageRecord, mx: int) -> CheckResult:
    n = len(page.benefits)
    if n >= 3:
        return _result("Benefits", "pass", f"{n} benefits give clear value communication.", mx, mx)
    if n > 0:
        return _result("Benefits", "warn", f"{n} benefit(s), aim for 3-5 for stronger persuasion.", 4, mx)
    return _result("Benefits", "fail", "Add a benefits section with 3-5 specific value propositions.", 0, mx)


def _check_steps(page: LandingPageRecord, mx: int) -> CheckResult:
    n = len(page.how_it_works)
    if n >= 3:
        return _result("How It Works", "pass", f"{n} steps reduce friction and uncertainty.", mx, mx)
    if n > 0:
        return _result("How It Works", "warn", "Add more steps. A clear process builds confidence.", 3, mx)
    return _result(
        "How It Works", "fail", 'Add a "How It Works" section to reduce purchase anxiety.', 0, mx,
    )


def _check_secondary_cta(page: LandingPageRecord, mx: int) -> CheckResult:
    if page.cta_section.cta:
        return _result("Secondary CTA", "pass", "Reinforcement CTA captures visitors who scroll.", mx, mx)
    return _result(
        "Secondary CTA", "fail", "Add a secondary CTA section lower on the page for scrollers.", 0, mx,
    )


def page_word_count(page: LandingPageRecord) -> int:
    """Words across the body copy that counts toward content density."""
    parts = [page.hero.headline, page.hero.subheadline, page.problem.body, page.solution.body]
    parts.extend(f"{b.title} {b.description}" for b in page.benefits)
    parts.extend(f"{s.title} {s.description}" for s in page.how_it_works)
    parts.append(page.cta_section.body)
    return len(" ".join(p for p in parts if p).split())


def _check_density(page: LandingPageRecord, mx: int) -> CheckResult:
    n = page_word_count(page)
    if 100 <= n <= 500:
        return _result("Content Density", "pass", f"{n} words, a good balance for landing pages.", mx, mx)
    if n > 500:
        return _result("Content Density", "warn", f"{n} words, consider trimming for scannability.", 5, mx)
    if n > 30:
        return _result(
            "Content Density", "warn", f"{n} words, aim for 100-500 for SEO and persuasion.", 4, mx,
        )
    return _result(
        "Content Density", "fail",
        "Not enough copy. Add more content for search engines and visitors.", 0, mx,
    )


SCORE_CHECKS: tuple[ScoreCheck, ...] = (
    ScoreCheck("headline", 10, _check_headline),
    ScoreCheck("subheadline", 8, _check_subheadline),
    ScoreCheck("hero_cta", 10, _check_hero_cta),
    ScoreCheck("trust_signals", 8, _check_trust),
    ScoreCheck("social_proof", 8, _check_social_proof),
    ScoreCheck("problem_solution", 8, _check_problem_solution),
    ScoreCheck("benefits", 8, _check_benefits),
    ScoreCheck("how_it_works", 6, _check_steps),
    ScoreCheck("secondary_cta", 6, _check_secondary_cta),
    ScoreCheck("content_density", 8, _check_density),
)


def score_landing_page(
    page: LandingPageRecord,
    checks: tuple[ScoreCheck, ...] = SCORE_CHECKS,
) -> ScoreReport:
    results = tuple(check.evaluate(page, check.max_points) for check in checks)
    possible = sum(r.max_points for r in results)
    awarded = sum(r.points for r in results)
    # Halves round up: 10 of 80 points is 13, not 12.
    score = (200 * awarded + possible) // (2 * possible) if possible else 0
    return ScoreReport(checks=results, score=min(100, max(0, score)))
