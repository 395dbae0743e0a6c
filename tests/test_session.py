"""Tests for editing sessions: regeneration slot, failures, and review cycle."""
from __future__ import annotations

import asyncio

import pytest

from copydesk.copy_types import Err, Ok
from copydesk.generation import GenerationError, MockGenerator
from copydesk.session import AdSession, Clean, LandingPageSession, PendingReview

AD_TEXT = (
    "**Headline 1:** Save 20% Today\n"
    "**Headline 2:** Limited Time Offer\n"
    "**Description:** Get premium software at half price.\n"
    "**CTA:** Shop Now"
)

PAGE_TEXT = (
    "## Hero\n"
    "Headline: Stop Losing Customers\n"
    "Subheadline: Our platform retains 40% more users\n"
    "CTA Button: [Get Started]"
)

FIX_REPLY = "Headline: Stop Losing Customers to Silent Churn\nCTA Button: Start Free Trial"


class TestAdSessionState:
    def test_load_parses_once_per_text(self) -> None:
        session = AdSession(MockGenerator(), AD_TEXT)
        record = session.record
        assert record.headlines == ("Save 20% Today", "Limited Time Offer")
        assert session.load(AD_TEXT) is False
        assert session.record is record

    def test_load_new_text_resets_overrides(self) -> None:
        session = AdSession(MockGenerator(), AD_TEXT)
        session.restore_overrides({"cta": "Buy"})
        assert session.view().cta == "Buy"
        assert session.load("**Headline:** Something else") is True
        assert dict(session.overrides) == {}
        assert session.view().headlines == ("Something else",)

    def test_overrides_are_read_only(self) -> None:
        session = AdSession(MockGenerator(), AD_TEXT)
        with pytest.raises(TypeError):
            session.overrides["cta"] = "x"  # type: ignore[index]


class TestRegenerate:
    @pytest.mark.asyncio
    async def test_success_writes_override(self) -> None:
        generator = MockGenerator(["**Headline:** Ends Friday"])
        session = AdSession(generator, AD_TEXT, conversation_id="conv-1")
        result = await session.regenerate("headline-1", "Headline 2", "Limited Time Offer", "urgent")
        assert result == Ok("Ends Friday")
        assert dict(session.overrides) == {"headline-1": "Ends Friday"}
        assert session.view().headlines == ("Save 20% Today", "Ends Friday")
        assert session.record.headlines[1] == "Limited Time Offer"
        prompt, conversation_id = generator.prompts[0]
        assert 'Rewrite ONLY the "Headline 2" field' in prompt
        assert "Direction: urgent" in prompt
        assert conversation_id == "conv-1"
        assert session.regenerating is None

    @pytest.mark.asyncio
    async def test_second_request_rejected_while_in_flight(self) -> None:
        hold = asyncio.Event()
        generator = MockGenerator(["Ends Friday", "Buy Today"], hold=hold)
        session = AdSession(generator, AD_TEXT)

        first = asyncio.create_task(session.regenerate("headline-1", "Headline 2", "Limited Time Offer"))
        await asyncio.sleep(0)
        assert session.regenerating == "headline-1"

        second = await session.regenerate("cta", "CTA", "Shop Now")
        match second:
            case Err(error=failure):
                assert failure.reason == "busy"
            case _:
                pytest.fail("second regeneration was not rejected")

        hold.set()
        assert await first == Ok("Ends Friday")
        assert len(generator.prompts) == 1
        assert dict(session.overrides) == {"headline-1": "Ends Friday"}
        assert session.regenerating is None

    @pytest.mark.asyncio
    async def test_generation_failure_leaves_state_unchanged(self) -> None:
        session = AdSession(MockGenerator([GenerationError("service down")]), AD_TEXT)
        result = await session.regenerate("cta", "CTA", "Shop Now")
        assert isinstance(result, Err)
        assert result.error.reason == "generation_error"
        assert dict(session.overrides) == {}
        assert session.error is not None
        assert session.regenerating is None
        session.dismiss_error()
        assert session.error is None

    @pytest.mark.asyncio
    async def test_empty_reply_is_a_failure(self) -> None:
        session = AdSession(MockGenerator(["\n\n"]), AD_TEXT)
        result = await session.regenerate("cta", "CTA", "Shop Now")
        assert isinstance(result, Err)
        assert result.error.reason == "empty_reply"
        assert dict(session.overrides) == {}

    @pytest.mark.asyncio
    async def test_stale_path_after_text_change_is_ignored_by_view(self) -> None:
        hold = asyncio.Event()
        session = AdSession(MockGenerator(["Ends Friday"], hold=hold), AD_TEXT)
        task = asyncio.create_task(session.regenerate("headline-1", "Headline 2", "Limited Time Offer"))
        await asyncio.sleep(0)

        session.load("**Headline:** Only one headline")
        hold.set()
        assert await task == Ok("Ends Friday")
        assert dict(session.overrides) == {"headline-1": "Ends Friday"}
        assert session.view().headlines == ("Only one headline",)


class TestLandingPageReview:
    @pytest.mark.asyncio
    async def test_improve_then_accept(self) -> None:
        session = LandingPageSession(MockGenerator([FIX_REPLY]), PAGE_TEXT)
        before = session.score().score
        result = await session.improve()
        assert isinstance(result, Ok)
        assert isinstance(session.review, PendingReview)
        assert dict(session.overrides) == {}

        applied = session.accept()
        assert set(session.overrides) == set(applied) == {"hero.headline", "cta_section.cta"}
        assert session.review == Clean()
        assert dict(session.pending_fixes) == {}
        assert session.view().hero.headline == "Stop Losing Customers to Silent Churn"
        assert session.score().score > before

    @pytest.mark.asyncio
    async def test_regenerate_runs_while_improving(self) -> None:
        hold = asyncio.Event()
        session = LandingPageSession(MockGenerator([FIX_REPLY, "Start Now"], hold=hold), PAGE_TEXT)

        improving = asyncio.create_task(session.improve())
        await asyncio.sleep(0)
        assert session.improving

        regenerating = asyncio.create_task(session.regenerate("hero.cta", "Hero CTA", "Get Started"))
        await asyncio.sleep(0)
        assert session.regenerating == "hero.cta"
        assert session.error is None

        hold.set()
        assert isinstance(await improving, Ok)
        assert await regenerating == Ok("Start Now")
        assert dict(session.overrides) == {"hero.cta": "Start Now"}
        assert dict(session.pending_fixes) == {
            "hero.headline": "Stop Losing Customers to Silent Churn",
            "cta_section.cta": "Start Free Trial",
        }
        assert not session.improving

    @pytest.mark.asyncio
    async def test_reject_discards_fixes(self) -> None:
        session = LandingPageSession(MockGenerator([FIX_REPLY]), PAGE_TEXT)
        await session.improve()
        session.reject()
        assert session.review == Clean()
        assert dict(session.overrides) == {}

    @pytest.mark.asyncio
    async def test_second_improve_replaces_pending(self) -> None:
        session = LandingPageSession(
            MockGenerator([FIX_REPLY, "Subheadline: Keep every account you win"]), PAGE_TEXT,
        )
        await session.improve()
        await session.improve()
        assert dict(session.pending_fixes) == {"hero.subheadline": "Keep every account you win"}

    @pytest.mark.asyncio
    async def test_unparseable_reply_leaves_session_clean(self) -> None:
        session = LandingPageSession(MockGenerator([FIX_REPLY, "Sorry, I can't help."]), PAGE_TEXT)
        await session.improve()
        result = await session.improve()
        assert isinstance(result, Err)
        assert result.error.reason == "empty_reply"
        assert session.review == Clean()

    @pytest.mark.asyncio
    async def test_improve_prompt_lists_failing_checks(self) -> None:
        generator = MockGenerator([FIX_REPLY])
        session = LandingPageSession(generator, PAGE_TEXT)
        await session.improve()
        prompt = generator.prompts[0][0]
        assert "- Social Proof:" in prompt
        assert "- Subheadline:" not in prompt

    @pytest.mark.asyncio
    async def test_nothing_to_improve(self) -> None:
        session = LandingPageSession(MockGenerator(), PAGE_TEXT)
        result = await session.improve([])
        assert isinstance(result, Err)
        assert result.error.reason == "nothing_to_improve"

    @pytest.mark.asyncio
    async def test_improve_failure(self) -> None:
        session = LandingPageSession(MockGenerator([GenerationError("timeout")]), PAGE_TEXT)
        result = await session.improve()
        assert isinstance(result, Err)
        assert result.error.reason == "generation_error"
        assert session.improving is False

    def test_accept_while_clean_is_noop(self) -> None:
        session = LandingPageSession(MockGenerator(), PAGE_TEXT)
        assert session.accept() == {}
        assert dict(session.overrides) == {}

    @pytest.mark.asyncio
    async def test_new_text_clears_pending(self) -> None:
        session = LandingPageSession(MockGenerator([FIX_REPLY]), PAGE_TEXT)
        await session.improve()
        session.load(PAGE_TEXT + "\n\n## Footer\nPrivacy")
        assert session.review == Clean()
