"""CLI exporting a menu document as an iCalendar feed."""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
import sys

from dotenv import load_dotenv

from weekmenu.calendar.export import export_events
from weekmenu.calendar.ics import encode_calendar
from weekmenu.errors import MenuError
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.pipeline import extract_schedule_from_path
from weekmenu.rendering import render_error_json


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Export a menu document as an .ics calendar")
    parser.add_argument("--path", required=True, help="Menu document to read")
    parser.add_argument("--output", default=None, help="Destination .ics file (default: stdout)")
    parser.add_argument(
        "--week-start",
        type=date.fromisoformat,
        default=None,
        help="Reference week start (YYYY-MM-DD) for day names without a date",
    )
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

    payload = encode_calendar(export_events(schedule, settings.calendar_namespace))
    if args.output:
        Path(args.output).write_bytes(payload)
    else:
        sys.stdout.buffer.write(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
