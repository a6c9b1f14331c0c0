"""JSON, plain-text and HTML renderings of schedules and query results.

Renderers only format the structures they are given; they never look at
the clock or re-run queries. Pass ``today`` explicitly to highlight it.
"""

from __future__ import annotations

from datetime import date
import html
import json
from typing import Sequence, Union

from weekmenu.errors import BuildError, ExtractionError, MenuError
from weekmenu.schedule.models import (
    DayMenu,
    DishEntry,
    Empty,
    NotFound,
    Schedule,
    ScheduleDay,
    WeekRef,
)
from weekmenu.schedule.store import ScheduleUpdate

Renderable = Union[Schedule, ScheduleDay, DayMenu, NotFound, Empty, ScheduleUpdate, Sequence[DayMenu], Sequence[WeekRef]]

NOT_FOUND_TEXT = "No menu found."
EMPTY_TEXT = "No menu has been uploaded yet."


def _dish_payload(dish: DishEntry) -> dict[str, object]:
    return {"name": dish.name, "category": dish.category}


def _day_payload(day_value: date, dishes: Sequence[DishEntry]) -> dict[str, object]:
    return {"date": day_value.isoformat(), "dishes": [_dish_payload(dish) for dish in dishes]}


def _week_payload(ref: WeekRef) -> dict[str, object]:
    return {"week": ref.key, "from": ref.monday.isoformat(), "to": ref.friday.isoformat()}


def to_payload(data: Renderable) -> dict[str, object]:
    """Convert a renderable value into JSON-compatible primitives."""

    if isinstance(data, Schedule):
        return {"days": [_day_payload(day.date, day.dishes) for day in data]}
    if isinstance(data, (ScheduleDay, DayMenu)):
        return _day_payload(data.date, data.dishes)
    if isinstance(data, NotFound):
        return {"result": "not_found"}
    if isinstance(data, Empty):
        return {"result": "empty"}
    if isinstance(data, ScheduleUpdate):
        return {
            "inserted": [day.isoformat() for day in data.inserted],
            "replaced": [day.isoformat() for day in data.replaced],
            "removed": [day.isoformat() for day in data.removed],
        }
    items = list(data)
    if all(isinstance(item, WeekRef) for item in items) and items:
        return {"weeks": [_week_payload(item) for item in items]}
    return {"days": [_day_payload(item.date, item.dishes) for item in items]}


def error_payload(error: MenuError) -> dict[str, object]:
    kind = getattr(error, "kind", None)
    return {"error": str(error), "kind": kind.value if kind is not None else None}


def render_json(data: Renderable) -> str:
    payload: dict[str, object] = {"success": True}
    payload.update(to_payload(data))
    return json.dumps(payload, ensure_ascii=False, indent=2)


def render_error_json(error: MenuError) -> str:
    payload: dict[str, object] = {"success": False}
    payload.update(error_payload(error))
    return json.dumps(payload, ensure_ascii=False, indent=2)


def render_dishes(dishes: Sequence[DishEntry], *, human: bool = False) -> str:
    """Dish list without a date heading, for callers that print their own."""

    if not human:
        return "\n".join(f"- {dish.label}" for dish in dishes)
    names = [dish.name for dish in dishes]
    if len(names) >= 2:
        return f"On the menu: {', '.join(names[:-1])} and {names[-1]}."
    return f"On the menu: {', '.join(names)}."


def _day_text(day_value: date, dishes: Sequence[DishEntry], *, human: bool) -> str:
    return f"{day_value.isoformat()} :\n{render_dishes(dishes, human=human)}"


def render_text(data: Renderable, *, human: bool = False) -> str:
    if isinstance(data, Schedule):
        if data.is_empty:
            return EMPTY_TEXT
        return "\n\n".join(_day_text(day.date, day.dishes, human=human) for day in data)
    if isinstance(data, (ScheduleDay, DayMenu)):
        return _day_text(data.date, data.dishes, human=human)
    if isinstance(data, NotFound):
        return NOT_FOUND_TEXT
    if isinstance(data, Empty):
        return EMPTY_TEXT
    if isinstance(data, ScheduleUpdate):
        lines = []
        for label, dates in (("Added", data.inserted), ("Updated", data.replaced), ("Removed", data.removed)):
            if dates:
                lines.append(f"{label}: {', '.join(day.isoformat() for day in dates)}")
        return "\n".join(lines) or "No changes."
    items = list(data)
    if not items:
        return NOT_FOUND_TEXT
    if all(isinstance(item, WeekRef) for item in items):
        return "\n".join(item.key for item in items)
    return "\n\n".join(_day_text(item.date, item.dishes, human=human) for item in items)


def _dishes_html(dishes: Sequence[DishEntry]) -> str:
    items = "".join(f"<li>{html.escape(dish.label)}</li>" for dish in dishes)
    return f"<ul>{items}</ul>"


def _day_html(day_value: date, dishes: Sequence[DishEntry], today: date | None) -> str:
    css_class = "day today" if day_value == today else "day"
    label = day_value.isoformat()
    return (
        f'<section class="{css_class}"><h2><a href="/days/{label}">{label}</a></h2>'
        f"{_dishes_html(dishes)}</section>"
    )


def render_html(data: Renderable, *, today: date | None = None) -> str:
    if isinstance(data, Schedule):
        if data.is_empty:
            return f'<div class="empty">{html.escape(EMPTY_TEXT)}</div>'
        return "".join(_day_html(day.date, day.dishes, today) for day in data)
    if isinstance(data, (ScheduleDay, DayMenu)):
        return _day_html(data.date, data.dishes, today)
    if isinstance(data, (NotFound, Empty, ScheduleUpdate)):
        return f'<div class="message">{html.escape(render_text(data))}</div>'
    items = list(data)
    if not items:
        return f'<div class="message">{html.escape(NOT_FOUND_TEXT)}</div>'
    if all(isinstance(item, WeekRef) for item in items):
        links = "".join(f'<li><a href="/weeks/{item.key}">{item.key}</a></li>' for item in items)
        return f"<ul>{links}</ul>"
    return "".join(_day_html(item.date, item.dishes, today) for item in items)


def describe_error(error: MenuError) -> str:
    """User-facing message for a failed upload."""

    if isinstance(error, ExtractionError):
        return f"Could not read the menu: {error.message}."
    if isinstance(error, BuildError):
        if error.date is not None:
            return f"The menu lists {error.date.isoformat()} twice."
        return f"The menu is unusable: {error.message}."
    return str(error)
