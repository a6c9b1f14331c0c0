"""Line-level cleanup of raw extraction tokens."""

from __future__ import annotations

from functools import lru_cache
import logging
import re
import unicodedata
from typing import Iterator

from weekmenu.errors import ExtractionError, ExtractionErrorKind
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import NormalizedLine, RawDocument

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    normalized = unicodedata.normalize("NFKC", text)
    return _WHITESPACE_RE.sub(" ", normalized).strip()


def normalize_text(text: str) -> str:
    """Produce stable text for keyword and dish comparisons."""

    return normalize_whitespace(text).casefold()


@lru_cache(maxsize=32)
def _compile_patterns(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


def is_boilerplate(text: str, patterns: tuple[str, ...]) -> bool:
    return any(regex.search(text) for regex in _compile_patterns(patterns))


def _split_lines(text: str) -> list[str]:
    return text.splitlines() or [text]


def _iter_raw_lines(document: RawDocument) -> Iterator[str]:
    pending_key: tuple[int | None, int] | None = None
    pending_parts: list[str] = []

    for token in document.tokens:
        key = (token.page, token.line) if token.line is not None else None
        if key is not None and key == pending_key:
            pending_parts.append(token.text)
            continue

        if pending_parts:
            yield from _split_lines(" ".join(pending_parts))
        pending_parts = []
        pending_key = key

        if key is None:
            yield from _split_lines(token.text)
        else:
            pending_parts.append(token.text)

    if pending_parts:
        yield from _split_lines(" ".join(pending_parts))


def normalize_document(
    document: RawDocument,
    settings: ExtractionSettings | None = None,
) -> list[NormalizedLine]:
    """Turn a token stream into trimmed, noise-free lines in source order."""

    active = settings or ExtractionSettings()
    lines: list[NormalizedLine] = []
    dropped = 0

    for index, raw_line in enumerate(_iter_raw_lines(document)):
        text = normalize_whitespace(raw_line)
        if not text:
            continue
        if is_boilerplate(text, active.boilerplate_patterns):
            dropped += 1
            continue
        lines.append(NormalizedLine(text=text, index=index))

    if dropped:
        logger.debug("Dropped %d boilerplate lines from %s", dropped, document.source_path or "<memory>")

    if not lines:
        raise ExtractionError(
            ExtractionErrorKind.EMPTY_DOCUMENT,
            "Document contains no menu text",
            source_path=document.source_path,
        )
    return lines
