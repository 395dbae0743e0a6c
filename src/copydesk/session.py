"""Editing sessions: parsed record, overrides, regeneration and review.

A session owns one piece of raw text at a time. Loading different text
re-parses it and resets every piece of edit state; loading the same text
again is a no-op.

State kept per session:

- ``record``         the parsed base record (never mutated)
- ``overrides``      sparse ``FieldPath -> str`` edits
- ``regenerating``   the field path holding the single regeneration slot
- ``error``          the last transient generation failure, until dismissed

Landing-page sessions add a review state (``Clean`` or
``PendingReview``) for the two-phase improvement cycle and an
``improving`` flag.

Generation failures never raise out of a session: they are logged, the
state is left as it was, and the caller gets an ``Err`` result.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from copydesk.copy_types import (
    AdRecord,
    Err,
    FieldPath,
    LandingPageRecord,
    Ok,
    Result,
    Taxonomy,
)
from copydesk.generation import TextGenerator
from copydesk.improvement import build_improvement_directive, parse_fix_reply
from copydesk.overrides import apply_overrides
from copydesk.regeneration import build_regeneration_directive, extract_single_value
from copydesk.scoring import CheckResult, ScoreReport, score_landing_page
from copydesk.structurer import parse_ad_copy, parse_landing_page

logger = logging.getLogger(__name__)

type FailureReason = Literal["busy", "generation_error", "empty_reply", "nothing_to_improve"]


@dataclass(frozen=True, slots=True)
class GenerationFailure:
    reason: FailureReason
    detail: str = ""

    def message(self) -> str:
        return f"{self.reason}: {self.detail}" if self.detail else self.reason


@dataclass(frozen=True, slots=True)
class Clean:
    """No improvement batch awaiting review."""


@dataclass(frozen=True, slots=True)
class PendingReview:
    """An improvement batch awaiting accept or reject."""

    fixes: Mapping[FieldPath, str] = field(default_factory=dict)


type ReviewState = Clean | PendingReview


class CopySession[R: (AdRecord, LandingPageRecord)](ABC):
    taxonomy: Taxonomy

    def __init__(
        self,
        generator: TextGenerator,
        content: str = "",
        *,
        conversation_id: str | None = None,
    ) -> None:
        self._generator = generator
        self.conversation_id = conversation_id
        self._content: str | None = None
        self._record: R = self._parse("")
        self._overrides: dict[FieldPath, str] = {}
        self._regenerating: FieldPath | None = None
        self._error: GenerationFailure | None = None
        self.load(content)

    @abstractmethod
    def _parse(self, content: str) -> R:
        ...

    # -- text ----------------------------------------------------------------

    def load(self, content: str) -> bool:
        """Switch to ``content``. Returns True when the text changed."""
        if content == self._content:
            return False
        self._content = content
        self._record = self._parse(content)
        self._reset()
        logger.debug("%s session loaded %d chars", self.taxonomy, len(content))
        return True

    def _reset(self) -> None:
        # A new dict: an in-flight regeneration writes into whatever map is
        # current when it resolves.
        self._overrides = {}
        self._error = None

    @property
    def content(self) -> str:
        return self._content or ""

    @property
    def record(self) -> R:
        return self._record

    @property
    def overrides(self) -> Mapping[FieldPath, str]:
        return MappingProxyType(self._overrides)

    def restore_overrides(self, overrides: Mapping[FieldPath, str]) -> None:
        """Seed the override map from persisted edits for the current text."""
        self._overrides = dict(overrides)

    def view(self) -> R:
        return apply_overrides(self._record, self._overrides)

    # -- transient error ------------------------------------------------------

    @property
    def error(self) -> GenerationFailure | None:
        return self._error

    def dismiss_error(self) -> None:
        self._error = None

    def _fail(self, reason: FailureReason, detail: str = "") -> Err[GenerationFailure]:
        failure = GenerationFailure(reason, detail)
        self._error = failure
        return Err(failure)

    # -- regeneration ---------------------------------------------------------

    @property
    def regenerating(self) -> FieldPath | None:
        return self._regenerating

    async def regenerate(
        self,
        field_path: FieldPath,
        label: str,
        current_value: str,
        direction: str | None = None,
    ) -> Result[str, GenerationFailure]:
        """Ask the generator for a new value of one field and store it as an
        override. Rejected with ``busy`` while another regeneration is in
        flight."""
        if self._regenerating is not None:
            logger.info(
                "regeneration of %s rejected: %s in flight", field_path, self._regenerating,
            )
            return Err(GenerationFailure("busy", self._regenerating))

        self._regenerating = field_path
        self._error = None
        try:
            prompt = build_regeneration_directive(self.view(), label, current_value, direction)
            reply = await self._generator.generate(prompt, self.conversation_id)
        except Exception as exc:
            logger.warning("regeneration of %s failed: %s", field_path, exc, exc_info=True)
            return self._fail("generation_error", str(exc))
        finally:
            self._regenerating = None

        value = extract_single_value(reply)
        if not value:
            logger.warning("regeneration of %s returned no usable text", field_path)
            return self._fail("empty_reply")
        self._overrides[field_path] = value
        logger.debug("regenerated %s -> %r", field_path, value)
        return Ok(value)


class AdSession(CopySession[AdRecord]):
    taxonomy: Taxonomy = "ad"

    def _parse(self, content: str) -> AdRecord:
        return parse_ad_copy(content)


class LandingPageSession(CopySession[LandingPageRecord]):
    taxonomy: Taxonomy = "landing_page"

    def __init__(
        self,
        generator: TextGenerator,
        content: str = "",
        *,
        conversation_id: str | None = None,
    ) -> None:
        self._review: ReviewState = Clean()
        self._improving = False
        super().__init__(generator, content, conversation_id=conversation_id)

    def _parse(self, content: str) -> LandingPageRecord:
        return parse_landing_page(content)

    def _reset(self) -> None:
        super()._reset()
        self._review = Clean()

    @property
    def review(self) -> ReviewState:
        return self._review

    @property
    def pending_fixes(self) -> Mapping[FieldPath, str]:
        match self._review:
            case PendingReview(fixes=fixes):
                return MappingProxyType(dict(fixes))
            case _:
                return MappingProxyType({})

    @property
    def improving(self) -> bool:
        return self._improving

    def score(self) -> ScoreReport:
        return score_landing_page(self.view())

    async def improve(
        self, checks: Sequence[CheckResult] | None = None,
    ) -> Result[Mapping[FieldPath, str], GenerationFailure]:
        """Request one batch of fixes for ``checks`` (default: every check
        that is not passing) and hold it for review.

        Any batch already pending is discarded when the request starts.
        """
        if self._improving:
            return Err(GenerationFailure("busy", "improvement"))
        targets = list(self.score().failing() if checks is None else checks)
        if not targets:
            return Err(GenerationFailure("nothing_to_improve"))

        self._improving = True
        self._review = Clean()
        self._error = None
        try:
            prompt = build_improvement_directive(self.view(), targets)
            reply = await self._generator.generate(prompt, self.conversation_id)
        except Exception as exc:
            logger.warning("improvement request failed: %s", exc, exc_info=True)
            return self._fail("generation_error", str(exc))
        finally:
            self._improving = False

        fixes = parse_fix_reply(reply)
        if not fixes:
            logger.warning("improvement reply contained no recognised fields")
            return self._fail("empty_reply")
        self._review = PendingReview(MappingProxyType(fixes))
        logger.info("improvement proposed %d field(s)", len(fixes))
        return Ok(MappingProxyType(dict(fixes)))

    def accept(self) -> dict[FieldPath, str]:
        """Merge the pending batch into the overrides. Returns what was applied."""
        match self._review:
            case PendingReview(fixes=fixes):
                applied = dict(fixes)
                self._overrides.update(applied)
                self._review = Clean()
                return applied
            case _:
                return {}

    def reject(self) -> None:
        self._review = Clean()
