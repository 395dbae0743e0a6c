"""Text-generation backends used for field regeneration and improvement.

Design:
- ``TextGenerator`` is the abstract interface: one directive in, free
  text out. Replies have no schema; callers parse them defensively.
- ``AnthropicGenerator`` calls the Anthropic Messages API.
- ``MockGenerator`` replays scripted replies and records every prompt;
  it can also hold a call open on an ``asyncio.Event`` so callers can
  observe the in-flight state.

The conversation id is part of the interface so a backend that keeps
history server-side can thread it through. The Anthropic backend sends
single-turn requests and only logs it.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

import anthropic

from copydesk.config import GeneratorSettings

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """The generation backend failed or returned no usable text."""


class TextGenerator(ABC):
    """Abstract generation backend."""

    @abstractmethod
    async def generate(self, prompt: str, conversation_id: str | None = None) -> str:
        """Return the backend's free-text reply to ``prompt``."""

    @abstractmethod
    def backend_name(self) -> str:
        """Short identifier for logs and CLI output."""


# ---------------------------------------------------------------------------
# Anthropic backend
# ---------------------------------------------------------------------------


class AnthropicGenerator(TextGenerator):
    """Generation backed by the Anthropic Messages API.

    Parameters
    ----------
    settings:
        Model, token limit, temperature and API key. The key falls back to
        the SDK's own ``ANTHROPIC_API_KEY`` lookup when empty.
    client:
        Pre-built ``anthropic.AsyncAnthropic`` (tests, shared pools).
    """

    def __init__(
        self,
        settings: GeneratorSettings | None = None,
        *,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self._settings = settings or GeneratorSettings.from_env()
        if client is None:
            if not self._settings.api_key:
                raise ValueError(
                    "Anthropic API key required: pass settings.api_key or set ANTHROPIC_API_KEY"
                )
            client = anthropic.AsyncAnthropic(api_key=self._settings.api_key)
        self._client = client

    async def generate(self, prompt: str, conversation_id: str | None = None) -> str:
        logger.debug(
            "anthropic request model=%s conversation=%s chars=%d",
            self._settings.model, conversation_id, len(prompt),
        )
        try:
            response = await self._client.messages.create(
                model=self._settings.model,
                max_tokens=self._settings.max_tokens,
                temperature=self._settings.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise GenerationError(f"anthropic request failed: {exc}") from exc

        text_parts: list[str] = []
        for block in getattr(response, "content", []):
            txt = getattr(block, "text", "")
            if isinstance(txt, str):
                text_parts.append(txt)
        return "\n".join(text_parts).strip()

    def backend_name(self) -> str:
        return f"anthropic:{self._settings.model}"


# ---------------------------------------------------------------------------
# Mock backend
# ---------------------------------------------------------------------------


class MockGenerator(TextGenerator):
    """Deterministic backend replaying scripted replies.

    Each call consumes the next entry of ``replies``; an ``Exception``
    entry is raised instead of returned. Once the script is exhausted,
    ``default`` is returned.
    """

    def __init__(
        self,
        replies: Iterable[str | Exception] = (),
        *,
        default: str = "",
        hold: asyncio.Event | None = None,
    ) -> None:
        self._replies = list(replies)
        self._default = default
        self._hold = hold
        self.prompts: list[tuple[str, str | None]] = []

    async def generate(self, prompt: str, conversation_id: str | None = None) -> str:
        self.prompts.append((prompt, conversation_id))
        if self._hold is not None:
            await self._hold.wait()
        reply: str | Exception = self._replies.pop(0) if self._replies else self._default
        if isinstance(reply, Exception):
            raise reply
        return reply

    def backend_name(self) -> str:
        return "mock"
