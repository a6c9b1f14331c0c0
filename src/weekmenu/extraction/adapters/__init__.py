"""Document adapter implementations and contracts."""

from __future__ import annotations

from functools import partial
import logging

from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.segmenter import is_day_marker

from .base import DocumentAdapter
from .json_adapter import JSONWeekAdapter

logger = logging.getLogger(__name__)

try:
    from .pdf_adapter import PDFAdapter
except ImportError:
    PDFAdapter = None
    logger.warning("PDF support unavailable: install 'pymupdf'")

try:
    from .txt_adapter import TXTAdapter
except ImportError:
    TXTAdapter = None
    logger.warning("TXT support unavailable: install 'charset-normalizer'")


def build_default_adapters(settings: ExtractionSettings | None = None) -> dict[str, DocumentAdapter]:
    """Return the default format adapter map."""
    active = settings or ExtractionSettings()
    adapters: dict[str, DocumentAdapter] = {}
    if PDFAdapter is not None:
        adapters["pdf"] = PDFAdapter(
            column_layout=active.pdf_column_layout,
            is_marker=partial(is_day_marker, settings=active),
        )
    adapters["json"] = JSONWeekAdapter(active)
    if TXTAdapter is not None:
        adapters["txt"] = TXTAdapter()
    return adapters


__all__ = [
    "DocumentAdapter",
    "JSONWeekAdapter",
    "PDFAdapter",
    "TXTAdapter",
    "build_default_adapters",
]
