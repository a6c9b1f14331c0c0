"""PDF adapter producing positioned word tokens in reading order."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable

import pymupdf

from weekmenu.extraction.models import ExtractionToken, RawDocument
from weekmenu.extraction.segmenter import is_day_marker

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF-"
DEFAULT_COLUMN_TOLERANCE = 30.0


@dataclass(slots=True)
class _TextLine:
    top: float
    left: float
    right: float
    words: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.words)

    @property
    def center(self) -> float:
        return self.left + (self.right - self.left) / 2


def _page_lines(page: pymupdf.Page) -> list[_TextLine]:
    grouped: dict[tuple[int, int], _TextLine] = {}
    for x0, y0, x1, _y1, text, block_no, line_no, _word_no in page.get_text("words"):
        key = (block_no, line_no)
        line = grouped.get(key)
        if line is None:
            grouped[key] = _TextLine(top=y0, left=x0, right=x1, words=[text])
            continue
        line.words.append(text)
        line.top = min(line.top, y0)
        line.left = min(line.left, x0)
        line.right = max(line.right, x1)
    return sorted(grouped.values(), key=lambda line: (round(line.top), line.left))


def _order_by_columns(lines: list[_TextLine], tolerance: float) -> list[_TextLine]:
    """Cluster lines whose centres align and read the page column by column."""

    columns: list[list[_TextLine]] = []
    for line in lines:
        for column in columns:
            if any(abs(member.center - line.center) < tolerance for member in column):
                column.append(line)
                break
        else:
            columns.append([line])

    columns.sort(key=lambda column: min(member.left for member in column))
    ordered: list[_TextLine] = []
    for column in columns:
        ordered.extend(sorted(column, key=lambda member: member.top))
    return ordered


def _has_marker_row(lines: list[_TextLine], is_marker: Callable[[str], bool]) -> bool:
    """Whether two or more day markers share a row, as in a week-per-page grid."""

    markers_per_row: dict[int, int] = {}
    for line in lines:
        if is_marker(line.text):
            row = round(line.top)
            markers_per_row[row] = markers_per_row.get(row, 0) + 1
            if markers_per_row[row] >= 2:
                return True
    return False


class PDFAdapter:
    """Extract word tokens from PDF pages with page/line locators.

    Pages laid out as one column per day are read column by column instead
    of row by row. ``column_layout`` forces that on or off; when it is None a
    page is read by columns as soon as one of its rows holds several day
    markers side by side.
    """

    def __init__(
        self,
        *,
        column_layout: bool | None = None,
        column_tolerance: float = DEFAULT_COLUMN_TOLERANCE,
        is_marker: Callable[[str], bool] = is_day_marker,
    ) -> None:
        self._column_layout = column_layout
        self._column_tolerance = column_tolerance
        self._is_marker = is_marker

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".pdf":
            return True
        if sniffed_bytes is None:
            return False
        return sniffed_bytes.startswith(_PDF_MAGIC)

    def _reads_by_columns(self, lines: list[_TextLine]) -> bool:
        if self._column_layout is not None:
            return self._column_layout
        return _has_marker_row(lines, self._is_marker)

    def extract(self, path: Path) -> RawDocument:
        tokens: list[ExtractionToken] = []
        line_no = 0

        with pymupdf.open(path) as doc:
            for page_index, page in enumerate(doc, start=1):
                lines = _page_lines(page)
                if not lines:
                    logger.warning("No embedded text on page %d of %s", page_index, path.name)
                    continue
                if self._reads_by_columns(lines):
                    logger.debug("Reading page %d of %s column by column", page_index, path.name)
                    lines = _order_by_columns(lines, self._column_tolerance)

                for line in lines:
                    for word in line.words:
                        tokens.append(
                            ExtractionToken(
                                text=word,
                                page=page_index,
                                line=line_no,
                                top=line.top,
                                left=line.left,
                            )
                        )
                    line_no += 1

        return RawDocument(tokens=tokens, source_path=str(path))
