"""Shared adapter contract for per-format menu readers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from weekmenu.extraction.models import RawDocument


@runtime_checkable
class DocumentAdapter(Protocol):
    """Protocol that every format adapter must implement."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        """Return True when this adapter can read the given file."""

    def extract(self, path: Path) -> RawDocument:
        """Read a document into an ordered token stream."""
