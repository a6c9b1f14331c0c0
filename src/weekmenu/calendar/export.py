"""Mapping of schedule days to calendar event records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
import uuid

from weekmenu.extraction.config import DEFAULT_CALENDAR_NAMESPACE
from weekmenu.schedule.models import Schedule, ScheduleDay


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """All-day event describing one day's menu."""

    uid: str
    start: date
    summary: str

    @property
    def end(self) -> date:
        return self.start + timedelta(days=1)


def event_uid(day: date, namespace: uuid.UUID = DEFAULT_CALENDAR_NAMESPACE) -> str:
    return str(uuid.uuid5(namespace, day.isoformat()))


def _summary(day: ScheduleDay) -> str:
    return "\n".join(dish.label for dish in day.dishes)


def export_events(
    schedule: Schedule,
    namespace: uuid.UUID = DEFAULT_CALENDAR_NAMESPACE,
) -> list[CalendarEvent]:
    return [
        CalendarEvent(uid=event_uid(day.date, namespace), start=day.date, summary=_summary(day))
        for day in schedule
    ]
