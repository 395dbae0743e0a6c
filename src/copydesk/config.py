"""Generation-service configuration.

Settings come from the environment, optionally seeded from a project
``.env`` file. Variables already present in the environment win over the
file.

    ANTHROPIC_API_KEY     API key for the Anthropic backend
    COPYDESK_MODEL        model identifier
    COPYDESK_MAX_TOKENS   reply token limit
    COPYDESK_TEMPERATURE  sampling temperature
"""
from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.7


def load_dotenv(
    path: Path,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """Load ``KEY=value`` lines from ``path`` into ``environ`` (default
    ``os.environ``) without overwriting existing keys."""
    target = os.environ if environ is None else environ
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip().strip("'\"")
        if key and key not in target:
            target[key] = value


def _parse_number[N: (int, float)](raw: str | None, default: N, kind: type[N], name: str) -> N:
    if raw is None or not raw.strip():
        return default
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a {kind.__name__}, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class GeneratorSettings:
    """Connection settings for the text-generation backend."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    def __post_init__(self) -> None:
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be in [0, 1], got {self.temperature}")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv_path: Path | None = None,
    ) -> GeneratorSettings:
        env: MutableMapping[str, str] = dict(os.environ if environ is None else environ)
        if dotenv_path is not None:
            load_dotenv(dotenv_path, env)
        return cls(
            api_key=env.get("ANTHROPIC_API_KEY", ""),
            model=env.get("COPYDESK_MODEL", "").strip() or DEFAULT_MODEL,
            max_tokens=_parse_number(
                env.get("COPYDESK_MAX_TOKENS"), DEFAULT_MAX_TOKENS, int, "COPYDESK_MAX_TOKENS",
            ),
            temperature=_parse_number(
                env.get("COPYDESK_TEMPERATURE"), DEFAULT_TEMPERATURE, float,
                "COPYDESK_TEMPERATURE",
            ),
        )
