from __future__ import annotations

from datetime import date
from functools import partial
import logging
from pathlib import Path

import pymupdf

from weekmenu.extraction.adapters.pdf_adapter import PDFAdapter, _has_marker_row, _order_by_columns, _TextLine
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.pipeline import extract_schedule, extract_schedule_from_path
from weekmenu.extraction.segmenter import is_day_marker


def _build_pdf(path: Path, pages: list[list[str]]) -> None:
    doc = pymupdf.open()
    for lines in pages:
        page = doc.new_page()
        for offset, text in enumerate(lines):
            page.insert_text((72, 72 + offset * 28), text)
    doc.save(str(path))
    doc.close()


def _build_grid_pdf(path: Path, columns: list[list[str]]) -> None:
    doc = pymupdf.open()
    page = doc.new_page()
    for column_index, lines in enumerate(columns):
        for offset, text in enumerate(lines):
            page.insert_text((40 + column_index * 200, 72 + offset * 28), text)
    doc.save(str(path))
    doc.close()


GRID = [
    ["Lundi 5 juin", "- Soupe", "- Poulet"],
    ["Mardi 6 juin", "- Salade", "- Poisson"],
    ["Mercredi 7 juin", "- Potage", "- Gratin"],
]


def test_pdf_adapter_extracts_positioned_tokens_in_reading_order(tmp_path: Path) -> None:
    pdf_path = tmp_path / "menu.pdf"
    _build_pdf(pdf_path, [["Monday", "- Soup", "- Steak frites"], ["Tuesday", "- Salad"]])

    adapter = PDFAdapter()
    document = adapter.extract(pdf_path)

    assert adapter.supports(pdf_path, b"%PDF-1.7")
    assert document.source_path == str(pdf_path)
    assert [token.text for token in document.tokens] == [
        "Monday",
        "-",
        "Soup",
        "-",
        "Steak",
        "frites",
        "Tuesday",
        "-",
        "Salad",
    ]
    pages = [token.page for token in document.tokens]
    assert pages == sorted(pages)
    assert pages[0] == 1 and pages[-1] == 2
    assert all(token.top is not None and token.left is not None for token in document.tokens)


def test_pdf_tokens_feed_the_pipeline(tmp_path: Path) -> None:
    pdf_path = tmp_path / "menu.pdf"
    _build_pdf(pdf_path, [["Monday", "- Soup", "- Steak frites", "Tuesday", "- Salad"]])

    schedule = extract_schedule(PDFAdapter().extract(pdf_path), week_start=date(2023, 6, 5))

    assert schedule.days[0].names == ("Soup", "Steak frites")
    assert schedule.days[1].names == ("Salad",)


def test_pdf_adapter_warns_about_pages_without_text(tmp_path: Path, caplog) -> None:
    pdf_path = tmp_path / "scanned.pdf"
    _build_pdf(pdf_path, [[], ["Monday", "- Soup"]])

    with caplog.at_level(logging.WARNING):
        document = PDFAdapter().extract(pdf_path)

    assert "No embedded text on page 1" in caplog.text
    assert {token.page for token in document.tokens} == {2}


def test_pdf_adapter_supports_by_suffix_or_magic() -> None:
    adapter = PDFAdapter()

    assert adapter.supports(Path("MENU.PDF"))
    assert adapter.supports(Path("upload.bin"), b"%PDF-1.4\n")
    assert not adapter.supports(Path("upload.bin"), b"Monday\n- Soup")
    assert not adapter.supports(Path("menu.txt"))


def test_order_by_columns_reads_each_column_top_to_bottom() -> None:
    rows = [
        _TextLine(top=72, left=40, right=100, words=["Monday"]),
        _TextLine(top=72, left=240, right=310, words=["Tuesday"]),
        _TextLine(top=100, left=30, right=110, words=["Soup"]),
        _TextLine(top=100, left=235, right=315, words=["Salad"]),
        _TextLine(top=128, left=45, right=95, words=["Steak"]),
    ]

    ordered = _order_by_columns(rows, tolerance=30.0)

    assert [line.words[0] for line in ordered] == ["Monday", "Soup", "Steak", "Tuesday", "Salad"]


def test_order_by_columns_keeps_single_column_order() -> None:
    rows = [
        _TextLine(top=72, left=72, right=120, words=["Monday"]),
        _TextLine(top=100, left=72, right=140, words=["Soup"]),
    ]

    assert _order_by_columns(rows, tolerance=30.0) == rows


def test_multi_column_pdf_is_read_day_by_day(tmp_path: Path) -> None:
    pdf_path = tmp_path / "grid.pdf"
    _build_grid_pdf(pdf_path, GRID)

    schedule = extract_schedule_from_path(pdf_path, week_start=date(2023, 6, 5))

    assert [day.date for day in schedule.days] == [date(2023, 6, 5), date(2023, 6, 6), date(2023, 6, 7)]
    assert [day.names for day in schedule.days] == [
        ("Soupe", "Poulet"),
        ("Salade", "Poisson"),
        ("Potage", "Gratin"),
    ]


def test_forced_row_order_interleaves_columns(tmp_path: Path) -> None:
    pdf_path = tmp_path / "grid.pdf"
    _build_grid_pdf(pdf_path, GRID)

    document = PDFAdapter(column_layout=False).extract(pdf_path)

    lines: dict[int, list[str]] = {}
    for token in document.tokens:
        lines.setdefault(token.line, []).append(token.text)
    texts = [" ".join(words) for _, words in sorted(lines.items())]
    assert texts[:3] == ["Lundi 5 juin", "Mardi 6 juin", "Mercredi 7 juin"]


def test_single_column_pdf_keeps_row_order(tmp_path: Path) -> None:
    pdf_path = tmp_path / "menu.pdf"
    _build_pdf(pdf_path, [["Lundi", "- Soupe", "Mardi", "- Salade"]])

    schedule = extract_schedule_from_path(pdf_path, week_start=date(2023, 6, 5))

    assert [day.names for day in schedule.days] == [("Soupe",), ("Salade",)]


def test_marker_row_detection() -> None:
    header_row = [
        _TextLine(top=72.2, left=40, right=100, words=["Lundi"]),
        _TextLine(top=71.9, left=240, right=300, words=["Mardi"]),
    ]
    stacked = [
        _TextLine(top=72, left=40, right=100, words=["Lundi"]),
        _TextLine(top=100, left=40, right=100, words=["Mardi"]),
    ]
    marker = partial(is_day_marker, settings=ExtractionSettings())

    assert _has_marker_row(header_row, marker)
    assert not _has_marker_row(stacked, marker)
