"""Day marker detection and grouping of lines into per-day blocks.

Markers are recognised by an ordered list of matchers: numeric dates first,
then dates with a spelled-out month, then bare day names. Only whole lines
are considered, so a dish such as "Mardi gras pancakes" never opens a block.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
import logging
import re
from typing import Callable, Sequence

from weekmenu.errors import ExtractionError, ExtractionErrorKind
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import DayBlock, NormalizedLine

logger = logging.getLogger(__name__)


class MarkerKind(Enum):
    EXPLICIT_DATE = "explicit_date"
    DAY_NAME = "day_name"


@dataclass(frozen=True, slots=True)
class MarkerMatch:
    kind: MarkerKind
    weekday: int
    date: date | None = None


MarkerMatcher = Callable[[str, ExtractionSettings, date], "MarkerMatch | None"]

_MARKER_TRIM = " :.,;-–—|"

# "05/06/2023", "Lundi 05.06.2023", "2023-06-05"
_NUMERIC_DATE_RE = re.compile(r"^(?:(?P<day>[^\W\d_]+)[\s,]+)?(?P<date>\d[\d/.\-]*\d)$")

# "5 juin", "Lundi 1er juin 2023", "Monday 5 June"
_NAMED_MONTH_RE = re.compile(
    r"^(?:(?P<day>[^\W\d_]+)[\s,]+)?(?P<num>\d{1,2})(?:er|st|nd|rd|th)?\s+(?P<month>[^\W\d_]+)(?:\s+(?P<year>\d{4}))?$"
)


def _clean_marker_text(text: str) -> str:
    return text.strip(_MARKER_TRIM).casefold()


def _lookup_weekday(name: str | None, settings: ExtractionSettings) -> int | None:
    if name is None:
        return None
    return settings.day_names.get(name.casefold())


def _infer_date(month: int, day_of_month: int, weekday: int | None, reference: date) -> date | None:
    """Pick the year around ``reference`` for a date printed without one.

    Candidates are the previous, current and next year; a stated weekday
    must agree, and the candidate closest to ``reference`` wins.
    """

    candidates: list[date] = []
    for year in (reference.year - 1, reference.year, reference.year + 1):
        try:
            candidate = date(year, month, day_of_month)
        except ValueError:
            continue
        if weekday is None or candidate.weekday() == weekday:
            candidates.append(candidate)
    if not candidates:
        return None
    return min(candidates, key=lambda candidate: abs((candidate - reference).days))


def _has_year(date_format: str) -> bool:
    return "%Y" in date_format or "%y" in date_format


def _parse_numeric(raw: str, date_format: str, weekday: int | None, reference: date) -> date | None:
    if _has_year(date_format):
        try:
            return datetime.strptime(raw, date_format).date()
        except ValueError:
            return None
    # Anchor on a leap year so "29/02" parses before the real year is chosen.
    try:
        parsed = datetime.strptime(f"{raw} 2000", f"{date_format} %Y").date()
    except ValueError:
        return None
    return _infer_date(parsed.month, parsed.day, weekday, reference)


def _match_numeric_date(text: str, settings: ExtractionSettings, reference: date) -> MarkerMatch | None:
    match = _NUMERIC_DATE_RE.match(text)
    if match is None:
        return None

    weekday: int | None = None
    if match.group("day") is not None:
        weekday = _lookup_weekday(match.group("day"), settings)
        if weekday is None:
            return None

    for date_format in settings.date_formats:
        parsed = _parse_numeric(match.group("date"), date_format, weekday, reference)
        if parsed is not None:
            return MarkerMatch(kind=MarkerKind.EXPLICIT_DATE, weekday=parsed.weekday(), date=parsed)

    if weekday is not None:
        logger.debug("Unparseable date in marker %r, keeping the day name", text)
        return MarkerMatch(kind=MarkerKind.DAY_NAME, weekday=weekday)
    return None


def _match_named_month(text: str, settings: ExtractionSettings, reference: date) -> MarkerMatch | None:
    match = _NAMED_MONTH_RE.match(text)
    if match is None:
        return None

    month = settings.month_names.get(match.group("month"))
    if month is None:
        return None

    weekday: int | None = None
    if match.group("day") is not None:
        weekday = _lookup_weekday(match.group("day"), settings)
        if weekday is None:
            return None

    day_of_month = int(match.group("num"))
    if match.group("year") is not None:
        try:
            resolved = date(int(match.group("year")), month, day_of_month)
        except ValueError:
            return None
    else:
        resolved = _infer_date(month, day_of_month, weekday, reference)
        if resolved is None:
            return None if weekday is None else MarkerMatch(kind=MarkerKind.DAY_NAME, weekday=weekday)
    return MarkerMatch(kind=MarkerKind.EXPLICIT_DATE, weekday=resolved.weekday(), date=resolved)


def _match_day_name(text: str, settings: ExtractionSettings, reference: date) -> MarkerMatch | None:
    del reference
    weekday = settings.day_names.get(text)
    if weekday is None:
        return None
    return MarkerMatch(kind=MarkerKind.DAY_NAME, weekday=weekday)


DEFAULT_MATCHERS: tuple[MarkerMatcher, ...] = (
    _match_numeric_date,
    _match_named_month,
    _match_day_name,
)


def match_marker(
    text: str,
    settings: ExtractionSettings,
    reference: date,
    matchers: Sequence[MarkerMatcher] = DEFAULT_MATCHERS,
) -> MarkerMatch | None:
    """Return the first matcher hit for a whole line, or None."""

    cleaned = _clean_marker_text(text)
    if not cleaned:
        return None
    for matcher in matchers:
        result = matcher(cleaned, settings, reference)
        if result is not None:
            return result
    return None


def is_day_marker(text: str, settings: ExtractionSettings | None = None) -> bool:
    """Whether a whole line reads as a day or date marker."""

    return match_marker(text, settings or ExtractionSettings(), date.today()) is not None


def _resolve_day_name(weekday: int, *, week_start: date, previous: date | None) -> date:
    base = week_start if previous is None else previous + timedelta(days=1)
    return base + timedelta(days=(weekday - base.weekday()) % 7)


def segment_days(
    lines: Sequence[NormalizedLine],
    settings: ExtractionSettings | None = None,
    *,
    week_start: date,
) -> list[DayBlock]:
    """Group lines into day blocks opened by marker lines.

    A day name without a date resolves to the first matching weekday on or
    after ``week_start``; each further day name must land strictly after the
    previous block, so a repeated or backwards name starts the next week.
    """

    active = settings or ExtractionSettings()
    blocks: list[DayBlock] = []
    current_date: date | None = None
    current_lines: list[NormalizedLine] = []
    preamble = 0

    for line in lines:
        marker = match_marker(line.text, active, week_start)
        if marker is None:
            if current_date is None:
                preamble += 1
            else:
                current_lines.append(line)
            continue

        if current_date is not None:
            blocks.append(DayBlock(date=current_date, lines=tuple(current_lines)))

        if marker.kind is MarkerKind.EXPLICIT_DATE and marker.date is not None:
            current_date = marker.date
        else:
            current_date = _resolve_day_name(marker.weekday, week_start=week_start, previous=current_date)
        current_lines = []

    if current_date is None:
        raise ExtractionError(
            ExtractionErrorKind.NO_DAY_MARKERS_FOUND,
            "No day or date markers found in document",
        )

    blocks.append(DayBlock(date=current_date, lines=tuple(current_lines)))
    if preamble:
        logger.debug("Discarded %d preamble lines before the first day marker", preamble)
    return blocks
