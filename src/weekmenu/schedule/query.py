"""Date- and dish-relative lookups against an immutable Schedule."""

from __future__ import annotations

from datetime import date, datetime

from weekmenu.extraction.normalization import normalize_text
from weekmenu.schedule.models import (
    EMPTY,
    NOT_FOUND,
    DayMenu,
    QueryResult,
    Schedule,
    ScheduleDay,
    WeekRef,
)


def _as_menu(day: ScheduleDay) -> DayMenu:
    return DayMenu(date=day.date, dishes=day.dishes)


def day(schedule: Schedule, target: date) -> QueryResult:
    """Menu for an exact calendar date."""
    if schedule.is_empty:
        return EMPTY
    found = schedule.get(target)
    if found is None:
        return NOT_FOUND
    return _as_menu(found)


def today(schedule: Schedule, now: datetime) -> QueryResult:
    return day(schedule, now.date())


def next_day(schedule: Schedule, now: datetime) -> QueryResult:
    """Earliest menu strictly after ``now``'s date, even when today has one."""
    if schedule.is_empty:
        return EMPTY
    current = now.date()
    for entry in schedule:
        if entry.date > current:
            return _as_menu(entry)
    return NOT_FOUND


def find(schedule: Schedule, now: datetime, dish_query: str) -> list[DayMenu]:
    """Upcoming days (today included) serving a dish containing ``dish_query``.

    Each result only lists the matching dishes, in extraction order.
    """
    needle = normalize_text(dish_query)
    if not needle:
        return []

    current = now.date()
    results: list[DayMenu] = []
    for entry in schedule:
        if entry.date < current:
            continue
        matching = tuple(dish for dish in entry.dishes if needle in normalize_text(dish.name))
        if matching:
            results.append(DayMenu(date=entry.date, dishes=matching))
    return results


def weeks(schedule: Schedule) -> list[WeekRef]:
    refs: list[WeekRef] = []
    for entry in schedule:
        iso = entry.date.isocalendar()
        ref = WeekRef(year=iso[0], week=iso[1])
        if not refs or refs[-1] != ref:
            refs.append(ref)
    return refs


def week(schedule: Schedule, year: int, week_number: int) -> Schedule | QueryResult:
    """Sub-schedule for one ISO week."""
    if schedule.is_empty:
        return EMPTY
    days = tuple(
        entry
        for entry in schedule
        if entry.date.isocalendar()[0] == year and entry.date.isocalendar()[1] == week_number
    )
    if not days:
        return NOT_FOUND
    return Schedule(days=days)
