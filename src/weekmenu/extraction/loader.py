"""Routing entrypoint from uploaded files to document adapters."""

from __future__ import annotations

from pathlib import Path

from weekmenu.errors import ExtractionError, ExtractionErrorKind
from weekmenu.extraction.adapters.base import DocumentAdapter
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import RawDocument


class DocumentLoader:
    """Resolve the right adapter for a file and return its token stream."""

    def __init__(self, sniff_bytes: int = 4096) -> None:
        self._sniff_bytes = sniff_bytes
        self._adapter_map: dict[str, DocumentAdapter] = {}

    @classmethod
    def with_default_adapters(cls, settings: ExtractionSettings | None = None) -> "DocumentLoader":
        from weekmenu.extraction.adapters import build_default_adapters

        loader = cls()
        for name, adapter in build_default_adapters(settings).items():
            loader.register_adapter(name, adapter)
        return loader

    @property
    def adapter_map(self) -> dict[str, DocumentAdapter]:
        """Registered adapters keyed by adapter name."""

        return dict(self._adapter_map)

    def register_adapter(self, name: str, adapter: DocumentAdapter) -> None:
        if not name:
            raise ValueError("Adapter name cannot be empty")
        self._adapter_map[name] = adapter

    def accepts(self, path: str | Path) -> bool:
        """Whether some adapter claims the file from its name alone."""

        source = Path(path)
        return any(adapter.supports(source, None) for adapter in self._adapter_map.values())

    def load(self, path: str | Path) -> RawDocument:
        source = Path(path)
        sniffed = self._read_head(source)

        for adapter in self._adapter_map.values():
            if adapter.supports(source, sniffed):
                try:
                    document = adapter.extract(source)
                except Exception as exc:
                    raise ExtractionError(
                        ExtractionErrorKind.UNREADABLE_DOCUMENT,
                        f"Could not read document: {exc}",
                        source_path=str(source),
                    ) from exc

                if not isinstance(document, RawDocument):
                    raise ExtractionError(
                        ExtractionErrorKind.UNREADABLE_DOCUMENT,
                        "Adapter returned non-canonical output",
                        source_path=str(source),
                    )
                return document

        raise ExtractionError(
            ExtractionErrorKind.UNSUPPORTED_DOCUMENT,
            "No adapter registered for file content",
            source_path=str(source),
        )

    def _read_head(self, path: Path) -> bytes:
        try:
            with path.open("rb") as handle:
                return handle.read(self._sniff_bytes)
        except OSError as exc:
            raise ExtractionError(
                ExtractionErrorKind.UNREADABLE_DOCUMENT,
                f"Failed to read source file: {exc}",
                source_path=str(path),
            ) from exc
