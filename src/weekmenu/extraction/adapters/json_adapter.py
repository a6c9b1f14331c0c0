"""JSON adapter for menus already split into days.

Two shapes are accepted, both a list with one entry per day::

    [["2023-06-05", "Soup", "Steak frites"], ...]
    [{"date": "2023-06-05", "starters": ["Soup"], "mains": ["Steak frites"]}, ...]

Each day is replayed as the lines a printed menu would carry: the date, then
a category heading per course, then one bulleted line per dish.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import ExtractionToken, RawDocument

# Course field -> canonical category label.
COURSE_FIELDS: tuple[tuple[str, str], ...] = (
    ("starters", "starter"),
    ("starters_without_usual", "starter"),
    ("mains", "main"),
    ("sides", "side"),
    ("cheeses", "cheese"),
    ("cheeses_without_usual", "cheese"),
    ("desserts", "dessert"),
    ("desserts_without_usual", "dessert"),
)


def _heading_for(category: str, settings: ExtractionSettings) -> str | None:
    for keyword, label in settings.category_keywords.items():
        if label == category:
            return keyword
    return None


def _dish_names(value: Any, *, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{where} must be a list of strings")
    return [item for item in value if item.strip()]


class JSONWeekAdapter:
    """Read a JSON week export into one token per synthetic line."""

    def __init__(self, settings: ExtractionSettings | None = None) -> None:
        self._settings = settings or ExtractionSettings()

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".json":
            return True
        if sniffed_bytes is None:
            return False
        return sniffed_bytes.lstrip(b"\xef\xbb\xbf \t\r\n").startswith(b"[")

    def extract(self, path: Path) -> RawDocument:
        payload = json.loads(path.read_bytes().decode("utf-8-sig"))
        if not isinstance(payload, list):
            raise ValueError("JSON menu must be a list of days")

        tokens = [
            ExtractionToken(text=text, line=line_no)
            for line_no, text in enumerate(self._iter_lines(payload), start=1)
        ]
        return RawDocument(tokens=tokens, source_path=str(path))

    def _iter_lines(self, payload: list[Any]) -> Iterator[str]:
        for index, day in enumerate(payload):
            if isinstance(day, list):
                yield from self._list_day(day, index)
            elif isinstance(day, dict):
                yield from self._object_day(day, index)
            else:
                raise ValueError(f"day {index} must be a list or an object")

    def _list_day(self, day: list[Any], index: int) -> Iterator[str]:
        if not day or not isinstance(day[0], str):
            raise ValueError(f"day {index} must start with its date")
        yield day[0]
        for name in _dish_names(day[1:], where=f"day {index} dishes"):
            yield f"- {name}"

    def _object_day(self, day: dict[str, Any], index: int) -> Iterator[str]:
        day_date = day.get("date")
        if not isinstance(day_date, str):
            raise ValueError(f"day {index} is missing its 'date'")
        yield day_date

        for field_name, category in COURSE_FIELDS:
            if field_name not in day:
                continue
            names = _dish_names(day[field_name], where=f"day {index} '{field_name}'")
            if not names:
                continue
            heading = _heading_for(category, self._settings)
            if heading is not None:
                yield heading
            for name in names:
                yield f"- {name}"
