# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""FillSense CLI: classify field/form descriptors and extract passcodes.

Usage:
    python -m fillsense.cli field [PATH]      # JSON field object or list (stdin when omitted or "-")
    python -m fillsense.cli form [PATH]       # JSON form object
    python -m fillsense.cli otp [TEXT] [--source email|sms|manual]

Results go to stdout as JSON; diagnostics go to stderr.  ``otp`` exits
with status 1 when no passcode is found.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import DEFAULT_CONFIG
from .engine import HeuristicEngine
from .errors import FillSenseError
from .logging_config import configure
from .types import FieldDescriptor, FormDescriptor, TextSource

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 1
EXIT_USAGE = 2


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _load_json(path: str | None) -> Any:
    raw = _read_input(path)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise FillSenseError(f"invalid JSON input: {e}") from e


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _engine(args: argparse.Namespace) -> HeuristicEngine:
    return HeuristicEngine(DEFAULT_CONFIG).with_thresholds(
        field=args.field_threshold,
        form=args.form_threshold,
        otp=args.otp_threshold,
    )


def cmd_field(args: argparse.Namespace) -> int:
    """Classify one field descriptor or a list of them."""
    engine = _engine(args)
    data = _load_json(args.path)
    items = data if isinstance(data, list) else [data]
    results = []
    for item in items:
        if not isinstance(item, dict):
            raise FillSenseError(f"field descriptor must be a JSON object, got {type(item).__name__}")
        field = FieldDescriptor.from_dict(item)
        results.append({"selector": field.selector, **engine.classify_field(field).to_dict()})
    _emit(results if isinstance(data, list) else results[0])
    return 0


def cmd_form(args: argparse.Namespace) -> int:
    """Classify a form and all of its fields."""
    engine = _engine(args)
    data = _load_json(args.path)
    if not isinstance(data, dict):
        raise FillSenseError(f"form descriptor must be a JSON object, got {type(data).__name__}")
    analysis = engine.analyze_form(FormDescriptor.from_dict(data), page_text=args.page_text)
    _emit({"selector": data.get("selector"), **analysis.to_dict()})
    return 0


def cmd_otp(args: argparse.Namespace) -> int:
    """Extract the best passcode from text."""
    engine = _engine(args)
    text = args.text if args.text is not None else _read_input(None)
    match = engine.extract_otp(text, args.source)
    _emit(match.to_dict() if match else None)
    return 0 if match else EXIT_NOT_FOUND


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="FillSense heuristic field/form classifier and OTP extractor",
        prog="python -m fillsense.cli",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    parser.add_argument("--field-threshold", type=float, metavar="X", help="Field acceptance threshold [0-1]")
    parser.add_argument("--form-threshold", type=float, metavar="X", help="Form acceptance threshold [0-1]")
    parser.add_argument("--otp-threshold", type=float, metavar="X", help="OTP acceptance threshold [0-1]")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_field = subparsers.add_parser(
        "field",
        help="Classify field descriptor(s)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s field.json
  echo '{"selector": "#e", "name": "user_email", "autocomplete": "email"}' | %(prog)s""",
    )
    p_field.add_argument("path", nargs="?", help="JSON file (default: stdin)")

    p_form = subparsers.add_parser("form", help="Classify a form descriptor and its fields")
    p_form.add_argument("path", nargs="?", help="JSON file (default: stdin)")
    p_form.add_argument("--page-text", default="", metavar="TEXT", help="Visible page text used for OTP context")

    p_otp = subparsers.add_parser("otp", help="Extract a one-time passcode from text")
    p_otp.add_argument("text", nargs="?", help="Message text (default: stdin)")
    p_otp.add_argument(
        "--source",
        choices=[s.value for s in TextSource],
        default=None,
        help="Where the text came from (passed through to the result)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure(json_output=args.json_logs, level="DEBUG" if args.verbose else "WARNING")

    commands = {"field": cmd_field, "form": cmd_form, "otp": cmd_otp}
    try:
        code = commands[args.command](args)
    except (FillSenseError, OSError, ValueError) as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    sys.exit(code)


if __name__ == "__main__":
    main()
