"""Immutable schedule snapshot and query result types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Union


@dataclass(frozen=True, slots=True)
class DishEntry:
    """One menu item served on one day."""

    name: str
    day: date
    category: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Dish name cannot be empty")

    @property
    def label(self) -> str:
        if self.category:
            return f"{self.category.capitalize()}: {self.name}"
        return self.name


@dataclass(frozen=True, slots=True)
class ScheduleDay:
    date: date
    dishes: tuple[DishEntry, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(dish.name for dish in self.dishes)


@dataclass(frozen=True, slots=True)
class Schedule:
    """Validated days in strictly ascending date order.

    Instances are only created through ``build_schedule`` or ``Schedule.empty``
    and are never mutated after publication.
    """

    days: tuple[ScheduleDay, ...] = ()

    def __post_init__(self) -> None:
        previous: date | None = None
        for day in self.days:
            if not day.dishes:
                raise ValueError(f"Schedule day {day.date.isoformat()} has no dishes")
            if previous is not None and day.date <= previous:
                raise ValueError("Schedule days must be strictly ascending by date")
            previous = day.date

    @classmethod
    def empty(cls) -> "Schedule":
        return cls(days=())

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[ScheduleDay]:
        return iter(self.days)

    @property
    def is_empty(self) -> bool:
        return not self.days

    def dates(self) -> tuple[date, ...]:
        return tuple(day.date for day in self.days)

    def get(self, target: date) -> ScheduleDay | None:
        for day in self.days:
            if day.date == target:
                return day
        return None


@dataclass(frozen=True, slots=True)
class DayMenu:
    date: date
    dishes: tuple[DishEntry, ...]


@dataclass(frozen=True, slots=True)
class NotFound:
    pass


@dataclass(frozen=True, slots=True)
class Empty:
    pass


QueryResult = Union[DayMenu, NotFound, Empty]

NOT_FOUND = NotFound()
EMPTY = Empty()


@dataclass(frozen=True, slots=True, order=True)
class WeekRef:
    """ISO week that has at least one scheduled day."""

    year: int
    week: int

    @property
    def monday(self) -> date:
        return date.fromisocalendar(self.year, self.week, 1)

    @property
    def friday(self) -> date:
        return self.monday + timedelta(days=4)

    @property
    def key(self) -> str:
        return f"{self.year}-{self.week:02d}"
