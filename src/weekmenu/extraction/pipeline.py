"""End-to-end extraction: raw tokens to a validated Schedule."""

from __future__ import annotations

from datetime import date, timedelta
import logging
from pathlib import Path

from weekmenu.errors import ExtractionError
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.dishes import drop_everyday_dishes, extract_dishes
from weekmenu.extraction.loader import DocumentLoader
from weekmenu.extraction.models import RawDocument
from weekmenu.extraction.normalization import normalize_document
from weekmenu.extraction.segmenter import segment_days
from weekmenu.schedule.builder import build_schedule
from weekmenu.schedule.models import DishEntry, Schedule

logger = logging.getLogger(__name__)


def week_start_for(day: date) -> date:
    """Monday of the ISO week containing ``day``."""

    return day - timedelta(days=day.weekday())


def extract_days(
    document: RawDocument,
    settings: ExtractionSettings | None = None,
    *,
    week_start: date,
) -> list[tuple[date, list[DishEntry]]]:
    active = settings or ExtractionSettings()
    lines = normalize_document(document, active)
    try:
        blocks = segment_days(lines, active, week_start=week_start)
    except ExtractionError as exc:
        exc.source_path = exc.source_path or document.source_path
        raise

    days = [(block.date, extract_dishes(block, active)) for block in blocks]
    if active.drop_everyday_dishes:
        days = drop_everyday_dishes(days, active)
    return days


def extract_schedule(
    document: RawDocument,
    settings: ExtractionSettings | None = None,
    *,
    week_start: date | None = None,
) -> Schedule:
    """Run normalizer, segmenter, dish extractor and builder on one document."""

    reference = week_start or week_start_for(date.today())
    days = extract_days(document, settings, week_start=reference)
    schedule = build_schedule(days)
    logger.info(
        "Extracted %d days from %s",
        len(schedule),
        document.source_path or "<memory>",
    )
    return schedule


def extract_schedule_from_path(
    path: str | Path,
    settings: ExtractionSettings | None = None,
    *,
    week_start: date | None = None,
    loader: DocumentLoader | None = None,
) -> Schedule:
    active = settings or ExtractionSettings()
    document = (loader or DocumentLoader.with_default_adapters(active)).load(path)
    return extract_schedule(document, active, week_start=week_start)
