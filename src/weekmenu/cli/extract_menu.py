"""CLI for extracting a weekly schedule from a menu document."""

from __future__ import annotations

import argparse
from datetime import date
import sys

from dotenv import load_dotenv

from weekmenu.errors import MenuError
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.pipeline import extract_schedule_from_path
from weekmenu.rendering import render_error_json, render_json, render_text


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Extract the weekly schedule from a menu PDF, TXT or JSON file")
    parser.add_argument("--path", required=True, help="Menu document to read")
    parser.add_argument(
        "--week-start",
        type=date.fromisoformat,
        default=None,
        help="Reference week start (YYYY-MM-DD) for day names without a date",
    )
    parser.add_argument("--format", choices=("json", "text"), default="json", help="Output format")
    args = parser.parse_args(argv)

    try:
        settings = ExtractionSettings.from_env()
    except ValueError as error:
        print(f"Configuration error: {error}", file=sys.stderr)
        return 2

    try:
        schedule = extract_schedule_from_path(args.path, settings, week_start=args.week_start)
    except MenuError as error:
        print(render_error_json(error))
        return 1

    print(render_json(schedule) if args.format == "json" else render_text(schedule))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
