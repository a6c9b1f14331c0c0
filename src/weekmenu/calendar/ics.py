"""iCalendar encoding of exported menu events."""

from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Iterable

from icalendar import Calendar, Event

from weekmenu.calendar.export import CalendarEvent

DEFAULT_PRODUCT_ID = "-//weekmenu//Weekly canteen menu//EN"
DEFAULT_CALENDAR_NAME = "Canteen menu"


def encode_calendar(
    events: Iterable[CalendarEvent],
    *,
    product_id: str = DEFAULT_PRODUCT_ID,
    calendar_name: str = DEFAULT_CALENDAR_NAME,
) -> bytes:
    """Encode events as a VCALENDAR document.

    DTSTAMP is derived from the event date so that an unchanged schedule
    always encodes to the same bytes.
    """
    calendar = Calendar()
    calendar.add("prodid", product_id)
    calendar.add("version", "2.0")
    calendar.add("x-wr-calname", calendar_name)

    for item in events:
        event = Event()
        event.add("uid", item.uid)
        event.add("dtstamp", datetime.combine(item.start, time(0, 0), tzinfo=timezone.utc))
        event.add("dtstart", item.start)
        event.add("dtend", item.end)
        event.add("summary", item.summary)
        event.add("description", item.summary)
        event.add("status", "CONFIRMED")
        calendar.add_component(event)

    return calendar.to_ical()
