"""Data structures passed between the extraction stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable


@dataclass(frozen=True, slots=True)
class ExtractionToken:
    """A text fragment handed over by a document adapter.

    ``page`` and ``line`` identify the visual line the fragment belongs to;
    consecutive tokens sharing both are joined into one line. ``top`` and
    ``left`` are kept for diagnostics only.
    """

    text: str
    page: int | None = None
    line: int | None = None
    top: float | None = None
    left: float | None = None


@dataclass(slots=True)
class RawDocument:
    """Ordered token stream for one uploaded document."""

    tokens: list[ExtractionToken] = field(default_factory=list)
    source_path: str | None = None

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, source_path: str | None = None) -> "RawDocument":
        return cls(tokens=[ExtractionToken(text=line) for line in lines], source_path=source_path)


@dataclass(frozen=True, slots=True)
class NormalizedLine:
    text: str
    index: int


@dataclass(frozen=True, slots=True)
class DayBlock:
    """Lines that follow one day marker, before dish splitting."""

    date: date
    lines: tuple[NormalizedLine, ...] = ()
