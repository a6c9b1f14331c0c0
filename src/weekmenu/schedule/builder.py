"""Validation and assembly of extracted days into a Schedule."""

from __future__ import annotations

from datetime import date
import logging
from typing import Iterable, Sequence

from weekmenu.errors import BuildError, BuildErrorKind
from weekmenu.schedule.models import DishEntry, Schedule, ScheduleDay

logger = logging.getLogger(__name__)


def build_schedule(days: Iterable[tuple[date, Sequence[DishEntry]]]) -> Schedule:
    """Return a validated schedule or raise ``BuildError``; never a partial one."""

    resolved: list[ScheduleDay] = []
    for day, dishes in days:
        if not dishes:
            logger.info("Skipping %s: no dishes extracted", day.isoformat())
            continue
        resolved.append(ScheduleDay(date=day, dishes=tuple(dishes)))

    if not resolved:
        raise BuildError(BuildErrorKind.EMPTY_SCHEDULE, "No day with dishes found in document")

    resolved.sort(key=lambda item: item.date)
    for previous, current in zip(resolved, resolved[1:]):
        if previous.date == current.date:
            raise BuildError(
                BuildErrorKind.DUPLICATE_DATE,
                "The same date appears twice in the document",
                date=current.date,
            )

    return Schedule(days=tuple(resolved))
