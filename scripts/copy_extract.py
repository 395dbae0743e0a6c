#!/usr/bin/env python3
"""Extract a structured ad or landing-page record from a generated message.

Reads raw message text, segments and structures it, applies an optional
overrides file, and prints the view record as JSON. Landing pages can be
scored against the rubric.

Usage:
    # Ad copy record
    python3 scripts/copy_extract.py --input message.txt --kind ad

    # Landing page with saved edits and rubric score
    python3 scripts/copy_extract.py --input page.md --kind landing_page \
      --overrides page.overrides.json --score

    # Plain "copy all" text instead of JSON
    python3 scripts/copy_extract.py --input message.txt --kind ad --format text
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from copydesk.copy_types import CopyRecord, LandingPageRecord
from copydesk.export import export_text
from copydesk.overrides import apply_overrides, iter_fields
from copydesk.scoring import score_landing_page
from copydesk.structurer import parse_ad_copy, parse_landing_page

logger = logging.getLogger("copy_extract")


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def load_overrides(path: Path | None) -> dict[str, str]:
    if path is None or not path.exists():
        return {}
    data = orjson.loads(path.read_bytes())
    if not isinstance(data, dict):
        raise ValueError(f"overrides file must hold a JSON object: {path}")
    return {str(k): str(v) for k, v in data.items()}


def read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract a structured copy record from generated message text."
    )
    parser.add_argument("--input", required=True, help="Message text file, or - for stdin")
    parser.add_argument(
        "--kind",
        choices=("ad", "landing_page"),
        default="ad",
        help="Record taxonomy to extract (default ad).",
    )
    parser.add_argument("--overrides", type=Path, default=None, help="Overrides JSON file")
    parser.add_argument("--score", action="store_true", help="Include rubric score (landing_page)")
    parser.add_argument(
        "--format",
        choices=("json", "text"),
        default="json",
        help="json: record plus field list; text: plain copy-all block.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        content = read_input(args.input)
    except OSError as exc:
        print(f"Error: cannot read input: {exc}", file=sys.stderr)
        sys.exit(1)
    try:
        overrides = load_overrides(args.overrides)
    except (ValueError, orjson.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    record: CopyRecord = parse_landing_page(content) if args.kind == "landing_page" else parse_ad_copy(content)
    view = apply_overrides(record, overrides)
    logger.debug("parsed %s record with %d override(s)", args.kind, len(overrides))

    if args.format == "text":
        sys.stdout.write(export_text(view) + "\n")
        return

    result: dict[str, Any] = {
        "kind": args.kind,
        "record": view.to_dict(),
        "fields": [
            {"path": path, "label": label, "value": value}
            for path, label, value in iter_fields(view)
        ],
        "overrides": overrides,
    }
    if args.score:
        if not isinstance(view, LandingPageRecord):
            print("Error: --score applies to --kind landing_page only", file=sys.stderr)
            sys.exit(2)
        result["score"] = score_landing_page(view).to_dict()

    print(f"Extracted {len(result['fields'])} fields", file=sys.stderr)
    dump_json(result)


if __name__ == "__main__":
    main()
