"""TXT adapter with encoding detection."""

from __future__ import annotations

from pathlib import Path

from charset_normalizer import from_bytes

from weekmenu.extraction.models import ExtractionToken, RawDocument


class TXTAdapter:
    """Read plain-text menus one token per source line."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".txt":
            return True
        if sniffed_bytes is None:
            return False

        if path.suffix.lower() in {".pdf", ".zip", ".docx", ".json"}:
            return False

        prefix = sniffed_bytes.lstrip()
        if prefix.startswith((b"%PDF-", b"PK\x03\x04")):
            return False

        return b"\x00" not in sniffed_bytes

    def extract(self, path: Path) -> RawDocument:
        raw = path.read_bytes()
        text = raw.decode(self._detect_encoding(raw))
        tokens = [
            ExtractionToken(text=line, line=line_no)
            for line_no, line in enumerate(text.splitlines(), start=1)
        ]
        return RawDocument(tokens=tokens, source_path=str(path))

    def _detect_encoding(self, raw: bytes) -> str:
        best = from_bytes(raw).best()
        if best and best.encoding:
            return best.encoding

        for fallback in ("utf-8", "cp1252"):
            try:
                raw.decode(fallback)
                return fallback
            except UnicodeDecodeError:
                continue
        raise ValueError("Could not detect TXT encoding")
