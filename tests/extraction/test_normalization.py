from __future__ import annotations

import pytest

from weekmenu.errors import ExtractionError, ExtractionErrorKind
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import ExtractionToken, RawDocument
from weekmenu.extraction.normalization import normalize_document, normalize_text, normalize_whitespace


def test_normalize_whitespace_collapses_and_trims() -> None:
    assert normalize_whitespace("  Steak \t  frites  ") == "Steak frites"


def test_normalize_text_casefolds() -> None:
    assert normalize_text("  CRÈME  Brûlée ") == "crème brûlée"


def test_normalize_document_drops_empty_and_boilerplate_lines_in_order() -> None:
    document = RawDocument.from_lines(
        ["Menu de la semaine", "", "Monday", "  - Soup  ", "Page 1 of 2", "3/4", "Tuesday", "- Salad", "   "]
    )

    lines = normalize_document(document)

    assert [line.text for line in lines] == ["Monday", "- Soup", "Tuesday", "- Salad"]
    indexes = [line.index for line in lines]
    assert indexes == sorted(indexes)
    assert indexes[0] == 2


def test_normalize_document_joins_tokens_sharing_a_line() -> None:
    document = RawDocument(
        tokens=[
            ExtractionToken(text="Monday", page=1, line=0),
            ExtractionToken(text="-", page=1, line=1),
            ExtractionToken(text="Steak", page=1, line=1),
            ExtractionToken(text="frites", page=1, line=1),
            ExtractionToken(text="- Soup", page=1, line=2),
        ]
    )

    lines = normalize_document(document)

    assert [line.text for line in lines] == ["Monday", "- Steak frites", "- Soup"]


def test_normalize_document_splits_multiline_tokens() -> None:
    document = RawDocument(tokens=[ExtractionToken(text="Monday\n- Soup\n\n- Bread")])

    lines = normalize_document(document)

    assert [line.text for line in lines] == ["Monday", "- Soup", "- Bread"]


def test_normalize_document_honours_custom_boilerplate() -> None:
    settings = ExtractionSettings(boilerplate_patterns=(r"^cantine municipale$",))
    document = RawDocument.from_lines(["Cantine municipale", "Lundi", "- Soupe"])

    lines = normalize_document(document, settings)

    assert [line.text for line in lines] == ["Lundi", "- Soupe"]


def test_normalize_document_raises_for_blank_document() -> None:
    document = RawDocument.from_lines(["", "   ", "Page 2"], source_path="blank.txt")

    with pytest.raises(ExtractionError) as excinfo:
        normalize_document(document)

    assert excinfo.value.kind is ExtractionErrorKind.EMPTY_DOCUMENT
    assert "blank.txt" in str(excinfo.value)
