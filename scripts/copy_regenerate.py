#!/usr/bin/env python3
"""Regenerate one field, or run an improvement pass, over a copy record.

The message text is parsed, existing overrides are loaded, and the
generation backend is asked for a new value. On success the overrides
file is rewritten; on failure it is left untouched and the exit code is 1.

Backends:
- mock (default): replays ``--reply`` values (or blocks of ``--replies-file``)
- anthropic: Anthropic Messages API, configured from the environment

Usage:
    # Regenerate the second ad headline with a direction
    python3 scripts/copy_regenerate.py --input message.txt --kind ad \
      --field headline-1 --direction "more urgent" --backend anthropic \
      --overrides message.overrides.json

    # Propose fixes for every failing landing-page check and accept them
    python3 scripts/copy_regenerate.py --input page.md --kind landing_page \
      --improve --accept --overrides page.overrides.json
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from copydesk.config import GeneratorSettings
from copydesk.copy_types import Err, Ok
from copydesk.generation import AnthropicGenerator, MockGenerator, TextGenerator
from copydesk.overrides import describe_field_path, read_field
from copydesk.session import AdSession, CopySession, LandingPageSession

logger = logging.getLogger("copy_regenerate")


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def write_json(path: Path, obj: Any) -> None:
    path.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2))


def load_overrides(path: Path | None) -> dict[str, str]:
    if path is None or not path.exists():
        return {}
    data = orjson.loads(path.read_bytes())
    if not isinstance(data, dict):
        raise ValueError(f"overrides file must hold a JSON object: {path}")
    return {str(k): str(v) for k, v in data.items()}


def build_generator(args: argparse.Namespace) -> TextGenerator:
    if args.backend == "anthropic":
        return AnthropicGenerator(GeneratorSettings.from_env(dotenv_path=args.env_file))
    replies: list[str] = list(args.reply or [])
    if args.replies_file is not None:
        text = args.replies_file.read_text(encoding="utf-8")
        replies.extend(block.strip() for block in text.split("\n\n\n") if block.strip())
    return MockGenerator(replies)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Regenerate a copy field or propose rubric fixes via a generation backend."
    )
    parser.add_argument("--input", required=True, type=Path, help="Message text file")
    parser.add_argument("--kind", choices=("ad", "landing_page"), default="ad")
    parser.add_argument("--overrides", type=Path, default=None, help="Overrides JSON (read and updated)")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--field", default=None, help="Field path to regenerate, e.g. headline-0")
    mode.add_argument("--improve", action="store_true", help="Propose fixes for failing checks")
    parser.add_argument("--direction", default=None, help="Optional steering text for --field")
    parser.add_argument("--accept", action="store_true", help="Accept proposed fixes (--improve)")
    parser.add_argument("--conversation-id", default=None)
    parser.add_argument("--backend", choices=("mock", "anthropic"), default="mock")
    parser.add_argument("--reply", action="append", help="Mock reply (repeatable)")
    parser.add_argument(
        "--replies-file",
        type=Path,
        default=None,
        help="Mock replies separated by two blank lines.",
    )
    parser.add_argument("--env-file", type=Path, default=Path(".env"), help="Optional .env file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")
    return parser


async def run(args: argparse.Namespace, session: CopySession[Any]) -> tuple[int, dict[str, Any]]:
    if args.field is not None:
        current = read_field(session.view(), args.field)
        if current is None:
            return 2, {"error": f"unknown field path for {args.kind}: {args.field}"}
        result = await session.regenerate(
            args.field, describe_field_path(args.field), current, args.direction,
        )
        match result:
            case Ok(value=value):
                return 0, {"field": args.field, "previous": current, "value": value}
            case Err(error=failure):
                return 1, {"field": args.field, "error": failure.message()}

    if not isinstance(session, LandingPageSession):
        return 2, {"error": "--improve applies to --kind landing_page only"}
    before = session.score()
    outcome = await session.improve()
    match outcome:
        case Err(error=failure):
            return 1, {"score": before.score, "error": failure.message()}
        case Ok(value=fixes):
            proposed = dict(fixes)
    accepted = session.accept() if args.accept else {}
    return 0, {
        "score_before": before.score,
        "proposed": proposed,
        "accepted": bool(accepted),
        "score_after": session.score().score,
    }


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.input.exists():
        print(f"Error: input not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    try:
        generator = build_generator(args)
        overrides = load_overrides(args.overrides)
    except (ValueError, OSError, orjson.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    content = args.input.read_text(encoding="utf-8")
    session_cls = LandingPageSession if args.kind == "landing_page" else AdSession
    session = session_cls(generator, content, conversation_id=args.conversation_id)
    session.restore_overrides(overrides)
    logger.debug("backend=%s overrides=%d", generator.backend_name(), len(overrides))

    code, payload = asyncio.run(run(args, session))
    if code == 0 and args.overrides is not None:
        write_json(args.overrides, dict(session.overrides))
        print(f"Wrote {len(session.overrides)} override(s) to {args.overrides}", file=sys.stderr)
    payload["overrides"] = dict(session.overrides)
    dump_json(payload)
    sys.exit(code)


if __name__ == "__main__":
    main()
