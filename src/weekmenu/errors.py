"""Domain errors raised while turning a menu document into a schedule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class MenuError(Exception):
    """Base class for recoverable menu upload failures."""


class ExtractionErrorKind(Enum):
    EMPTY_DOCUMENT = "empty_document"
    NO_DAY_MARKERS_FOUND = "no_day_markers_found"
    UNSUPPORTED_DOCUMENT = "unsupported_document"
    UNREADABLE_DOCUMENT = "unreadable_document"


class BuildErrorKind(Enum):
    DUPLICATE_DATE = "duplicate_date"
    EMPTY_SCHEDULE = "empty_schedule"


@dataclass(slots=True)
class ExtractionError(MenuError):
    """Raised when a document cannot be segmented into day blocks."""

    kind: ExtractionErrorKind
    message: str
    source_path: str | None = None

    def __str__(self) -> str:
        if self.source_path:
            return f"{self.message} (path={self.source_path})"
        return self.message


@dataclass(slots=True)
class BuildError(MenuError):
    """Raised when extracted days do not form a consistent schedule."""

    kind: BuildErrorKind
    message: str
    date: date | None = None

    def __str__(self) -> str:
        if self.date is not None:
            return f"{self.message} (date={self.date.isoformat()})"
        return self.message
