"""Process-wide handle on the currently published schedule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
import logging
import threading

from weekmenu.schedule.models import Schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScheduleUpdate:
    """Dates affected by replacing one schedule with another."""

    inserted: tuple[date, ...] = ()
    replaced: tuple[date, ...] = ()
    removed: tuple[date, ...] = ()

    @classmethod
    def between(cls, previous: Schedule, current: Schedule) -> "ScheduleUpdate":
        old_days = {entry.date: entry for entry in previous}
        new_days = {entry.date: entry for entry in current}
        inserted = tuple(sorted(day for day in new_days if day not in old_days))
        replaced = tuple(
            sorted(day for day in new_days if day in old_days and old_days[day] != new_days[day])
        )
        removed = tuple(sorted(day for day in old_days if day not in new_days))
        return cls(inserted=inserted, replaced=replaced, removed=removed)


class ScheduleStore:
    """Single-writer, many-reader holder of an immutable Schedule.

    Readers take ``current`` without locking; ``publish`` swaps the reference
    in one assignment, so a reader sees either the old or the new schedule.
    """

    def __init__(self, initial: Schedule | None = None) -> None:
        self._current = initial if initial is not None else Schedule.empty()
        self._published_at: datetime | None = None
        self._write_lock = threading.Lock()

    @property
    def current(self) -> Schedule:
        return self._current

    @property
    def published_at(self) -> datetime | None:
        return self._published_at

    def publish(self, schedule: Schedule) -> ScheduleUpdate:
        with self._write_lock:
            update = ScheduleUpdate.between(self._current, schedule)
            self._current = schedule
            self._published_at = datetime.now(timezone.utc)

        logger.info(
            "Published schedule with %d days (inserted=%d replaced=%d removed=%d)",
            len(schedule),
            len(update.inserted),
            len(update.replaced),
            len(update.removed),
        )
        return update

