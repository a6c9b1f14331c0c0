"""Runtime configuration for menu extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Mapping
import uuid


DEFAULT_DAY_NAMES: Mapping[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
    "lundi": 0,
    "mardi": 1,
    "mercredi": 2,
    "jeudi": 3,
    "vendredi": 4,
    "samedi": 5,
    "dimanche": 6,
}

DEFAULT_MONTH_NAMES: Mapping[str, int] = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
    "janvier": 1,
    "février": 2,
    "fevrier": 2,
    "mars": 3,
    "avril": 4,
    "mai": 5,
    "juin": 6,
    "juillet": 7,
    "août": 8,
    "aout": 8,
    "septembre": 9,
    "octobre": 10,
    "novembre": 11,
    "décembre": 12,
    "decembre": 12,
}

# Formats without a year are resolved against the reference week.
DEFAULT_DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d", "%d/%m/%Y", "%d.%m.%Y", "%d/%m/%y", "%d/%m")

# Keyword (casefolded) -> canonical category label.
DEFAULT_CATEGORY_KEYWORDS: Mapping[str, str] = {
    "starter": "starter",
    "starters": "starter",
    "entrée": "starter",
    "entrées": "starter",
    "entree": "starter",
    "entrees": "starter",
    "main": "main",
    "mains": "main",
    "main course": "main",
    "main courses": "main",
    "plat": "main",
    "plats": "main",
    "plat principal": "main",
    "side": "side",
    "sides": "side",
    "accompagnement": "side",
    "accompagnements": "side",
    "cheese": "cheese",
    "cheeses": "cheese",
    "fromage": "cheese",
    "fromages": "cheese",
    "dessert": "dessert",
    "desserts": "dessert",
}

DEFAULT_BOILERPLATE_PATTERNS: tuple[str, ...] = (
    r"^page \d+( (of|sur) \d+)?$",
    r"^\d+ ?/ ?\d+$",
    r"^\d+$",
    r"^(weekly menu|menu of the week|menu de la semaine)$",
    r"^bon app[ée]tit ?!?$",
)

DEFAULT_BULLET_CHARS = "-–—•*·"
DEFAULT_EVERYDAY_MIN_DAYS = 4
DEFAULT_CALENDAR_NAMESPACE = uuid.UUID("6f1c52a4-8b7e-5d0a-9a43-4f0d1c6e2b91")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of: {', '.join(sorted(_TRUE_VALUES | _FALSE_VALUES))}")


def _parse_column_layout(*, name: str, raw_value: str) -> bool | None:
    if raw_value.strip().lower() == "auto":
        return None
    try:
        return _parse_bool(name=name, raw_value=raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be 'auto' or a boolean") from exc


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _split_list(raw_value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw_value.split(";") if item.strip())


def _parse_category_keywords(*, name: str, raw_value: str) -> dict[str, str]:
    keywords: dict[str, str] = {}
    for item in _split_list(raw_value):
        if "=" not in item:
            raise ValueError(f"{name} entries must look like 'keyword=category', got {item!r}")
        keyword, category = item.split("=", 1)
        if not keyword.strip() or not category.strip():
            raise ValueError(f"{name} entries must look like 'keyword=category', got {item!r}")
        keywords[keyword.strip().casefold()] = category.strip()
    return keywords


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Marker, category and noise vocabularies used by the extraction pipeline."""

    day_names: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_DAY_NAMES))
    month_names: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_MONTH_NAMES))
    date_formats: tuple[str, ...] = DEFAULT_DATE_FORMATS
    category_keywords: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_KEYWORDS))
    boilerplate_patterns: tuple[str, ...] = DEFAULT_BOILERPLATE_PATTERNS
    bullet_chars: str = DEFAULT_BULLET_CHARS
    drop_everyday_dishes: bool = True
    everyday_min_days: int = DEFAULT_EVERYDAY_MIN_DAYS
    # None detects side-by-side day columns per page.
    pdf_column_layout: bool | None = None
    calendar_namespace: uuid.UUID = DEFAULT_CALENDAR_NAMESPACE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExtractionSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        date_formats = DEFAULT_DATE_FORMATS
        date_formats_raw = source.get("WEEKMENU_DATE_FORMATS", "").strip()
        if date_formats_raw:
            date_formats = _split_list(date_formats_raw)

        category_keywords = dict(DEFAULT_CATEGORY_KEYWORDS)
        category_keywords_raw = source.get("WEEKMENU_CATEGORY_KEYWORDS", "").strip()
        if category_keywords_raw:
            category_keywords.update(
                _parse_category_keywords(name="WEEKMENU_CATEGORY_KEYWORDS", raw_value=category_keywords_raw)
            )

        boilerplate_patterns = DEFAULT_BOILERPLATE_PATTERNS
        boilerplate_raw = source.get("WEEKMENU_EXTRA_BOILERPLATE", "").strip()
        if boilerplate_raw:
            boilerplate_patterns = DEFAULT_BOILERPLATE_PATTERNS + _split_list(boilerplate_raw)

        drop_everyday = _parse_bool(
            name="WEEKMENU_DROP_EVERYDAY_DISHES",
            raw_value=source.get("WEEKMENU_DROP_EVERYDAY_DISHES", "true"),
        )
        everyday_min_days = _parse_positive_int(
            name="WEEKMENU_EVERYDAY_MIN_DAYS",
            raw_value=source.get("WEEKMENU_EVERYDAY_MIN_DAYS", str(DEFAULT_EVERYDAY_MIN_DAYS)).strip(),
            minimum=2,
        )
        pdf_column_layout = _parse_column_layout(
            name="WEEKMENU_PDF_COLUMNS",
            raw_value=source.get("WEEKMENU_PDF_COLUMNS", "auto"),
        )

        namespace_raw = source.get("WEEKMENU_CALENDAR_NAMESPACE", "").strip()
        calendar_namespace = DEFAULT_CALENDAR_NAMESPACE
        if namespace_raw:
            try:
                calendar_namespace = uuid.UUID(namespace_raw)
            except ValueError as exc:
                raise ValueError("WEEKMENU_CALENDAR_NAMESPACE must be a UUID") from exc

        return cls(
            date_formats=date_formats,
            category_keywords=category_keywords,
            boilerplate_patterns=boilerplate_patterns,
            drop_everyday_dishes=drop_everyday,
            everyday_min_days=everyday_min_days,
            pdf_column_layout=pdf_column_layout,
            calendar_namespace=calendar_namespace,
        )
