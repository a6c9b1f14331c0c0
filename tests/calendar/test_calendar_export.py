from __future__ import annotations

from datetime import date
import uuid

from icalendar import Calendar

from weekmenu.calendar.export import event_uid, export_events
from weekmenu.calendar.ics import encode_calendar
from weekmenu.extraction.config import DEFAULT_CALENDAR_NAMESPACE
from weekmenu.schedule.builder import build_schedule
from weekmenu.schedule.models import DishEntry, Schedule


def _schedule() -> Schedule:
    monday, tuesday = date(2023, 6, 5), date(2023, 6, 6)
    return build_schedule(
        [
            (
                monday,
                [
                    DishEntry(name="Soup", day=monday, category="starter"),
                    DishEntry(name="Steak frites", day=monday),
                ],
            ),
            (tuesday, [DishEntry(name="Salad", day=tuesday)]),
        ]
    )


def test_export_events_maps_one_all_day_event_per_day() -> None:
    events = export_events(_schedule())

    assert [event.start for event in events] == [date(2023, 6, 5), date(2023, 6, 6)]
    assert events[0].end == date(2023, 6, 6)
    assert events[0].summary == "Starter: Soup\nSteak frites"
    assert events[1].summary == "Salad"


def test_event_uid_is_stable_per_date_and_namespace() -> None:
    monday = date(2023, 6, 5)

    assert event_uid(monday) == event_uid(monday)
    assert event_uid(monday) == str(uuid.uuid5(DEFAULT_CALENDAR_NAMESPACE, "2023-06-05"))
    assert event_uid(monday) != event_uid(date(2023, 6, 6))
    assert event_uid(monday, uuid.uuid4()) != event_uid(monday)


def test_export_uses_the_given_namespace() -> None:
    namespace = uuid.UUID("12345678-1234-5678-1234-567812345678")

    events = export_events(_schedule(), namespace)

    assert events[0].uid == str(uuid.uuid5(namespace, "2023-06-05"))


def test_encode_calendar_is_byte_identical_for_identical_schedules() -> None:
    first = encode_calendar(export_events(_schedule()))
    second = encode_calendar(export_events(_schedule()))

    assert first == second


def test_encode_calendar_produces_parseable_vcalendar() -> None:
    payload = encode_calendar(export_events(_schedule()), calendar_name="School menu")

    calendar = Calendar.from_ical(payload)
    events = calendar.walk("VEVENT")

    assert str(calendar["x-wr-calname"]) == "School menu"
    assert len(events) == 2
    assert events[0].decoded("dtstart") == date(2023, 6, 5)
    assert events[0].decoded("dtend") == date(2023, 6, 6)
    assert str(events[0]["summary"]) == "Starter: Soup\nSteak frites"
    assert str(events[0]["uid"]) == event_uid(date(2023, 6, 5))


def test_encode_empty_schedule_has_no_events() -> None:
    payload = encode_calendar(export_events(Schedule.empty()))

    assert Calendar.from_ical(payload).walk("VEVENT") == []
