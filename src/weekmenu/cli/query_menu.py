"""CLI for today/next/find queries against a menu document."""

from __future__ import annotations

import argparse
from datetime import date, datetime
import sys

from dotenv import load_dotenv

from weekmenu.errors import MenuError
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.pipeline import extract_schedule_from_path, week_start_for
from weekmenu.rendering import render_error_json, render_html, render_json, render_text
from weekmenu.schedule import query


def _parse_week(raw_value: str) -> tuple[int, int]:
    year_text, _, week_text = raw_value.upper().partition("-")
    try:
        return int(year_text), int(week_text.lstrip("W"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid week {raw_value!r}, expected YYYY-WW") from exc


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Query the weekly schedule of a menu document")
    parser.add_argument("--path", required=True, help="Menu document to read")
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Reference instant (ISO 8601); defaults to the current local time",
    )
    parser.add_argument(
        "--week-start",
        type=date.fromisoformat,
        default=None,
        help="Reference week start for day names without a date (default: Monday of --now)",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--today", action="store_true", help="Menu served on --now's date")
    action.add_argument("--next", action="store_true", help="First menu strictly after --now's date")
    action.add_argument("--find", metavar="DISH", help="Upcoming days serving a dish")
    action.add_argument("--week", type=_parse_week, metavar="YYYY-WW", help="Menu of one ISO week")
    action.add_argument("--weeks", action="store_true", help="List weeks covered by the menu")
    parser.add_argument("--format", choices=("json", "text", "html"), default="json", help="Output format")
    parser.add_argument("--human", action="store_true", help="Sentence-style text output")
    args = parser.parse_args(argv)

    now = args.now or datetime.now()
    week_start = args.week_start or week_start_for(now.date())

    try:
        settings = ExtractionSettings.from_env()
    except ValueError as error:
        print(f"Configuration error: {error}", file=sys.stderr)
        return 2

    try:
        schedule = extract_schedule_from_path(args.path, settings, week_start=week_start)
    except MenuError as error:
        print(render_error_json(error))
        return 1

    if args.today:
        result = query.today(schedule, now)
    elif args.next:
        result = query.next_day(schedule, now)
    elif args.find is not None:
        result = query.find(schedule, now, args.find)
    elif args.week is not None:
        result = query.week(schedule, *args.week)
    else:
        result = query.weeks(schedule)

    if args.format == "json":
        print(render_json(result))
    elif args.format == "html":
        print(render_html(result, today=now.date()))
    else:
        print(render_text(result, human=args.human))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
