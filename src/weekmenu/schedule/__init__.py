"""Schedule model, builder, queries and the published-schedule handle."""

from weekmenu.schedule.builder import build_schedule
from weekmenu.schedule.models import (
    EMPTY,
    NOT_FOUND,
    DayMenu,
    DishEntry,
    Empty,
    NotFound,
    QueryResult,
    Schedule,
    ScheduleDay,
    WeekRef,
)
from weekmenu.schedule.store import ScheduleStore, ScheduleUpdate

__all__ = [
    "EMPTY",
    "NOT_FOUND",
    "DayMenu",
    "DishEntry",
    "Empty",
    "NotFound",
    "QueryResult",
    "Schedule",
    "ScheduleDay",
    "ScheduleStore",
    "ScheduleUpdate",
    "WeekRef",
    "build_schedule",
]
