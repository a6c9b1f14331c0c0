"""Extraction pipeline interfaces."""

from .config import ExtractionSettings
from .loader import DocumentLoader
from .models import DayBlock, ExtractionToken, NormalizedLine, RawDocument
from .pipeline import extract_schedule, extract_schedule_from_path

__all__ = [
    "DayBlock",
    "DocumentLoader",
    "ExtractionSettings",
    "ExtractionToken",
    "NormalizedLine",
    "RawDocument",
    "extract_schedule",
    "extract_schedule_from_path",
]
