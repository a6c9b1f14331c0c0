"""Async reload of the published schedule from a menu file."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
import hashlib
import logging
from pathlib import Path

from weekmenu.errors import MenuError
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.pipeline import extract_schedule_from_path, week_start_for
from weekmenu.schedule.store import ScheduleStore, ScheduleUpdate


logger = logging.getLogger(__name__)

DEFAULT_RELOAD_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class MenuReloadResult:
    success: bool
    day_count: int
    update: ScheduleUpdate | None = None
    error: MenuError | None = None
    timed_out: bool = False
    unchanged: bool = False


async def reload_schedule(
    file_path: Path,
    *,
    store: ScheduleStore,
    settings: ExtractionSettings,
    week_start: date | None = None,
    timeout_seconds: float = DEFAULT_RELOAD_TIMEOUT_SECONDS,
) -> MenuReloadResult:
    """Extract ``file_path`` on a worker thread and publish it on success.

    Failures leave the currently published schedule in place.
    """

    def _build():
        return extract_schedule_from_path(file_path, settings, week_start=week_start)

    try:
        schedule = await asyncio.wait_for(asyncio.to_thread(_build), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.error("Menu extraction timed out after %ss: %s", timeout_seconds, file_path)
        return MenuReloadResult(success=False, day_count=len(store.current), timed_out=True)
    except MenuError as error:
        logger.warning("Rejected menu %s: %s", file_path.name, error)
        return MenuReloadResult(success=False, day_count=len(store.current), error=error)

    update = store.publish(schedule)
    return MenuReloadResult(success=True, day_count=len(schedule), update=update)


def file_digest(path: Path) -> str:
    """SHA-256 of the file's bytes."""

    return hashlib.sha256(path.read_bytes()).hexdigest()


class MenuReloader:
    """Single entry point for every source that replaces the published menu.

    Reloads run one at a time. A document byte-identical to the last one
    published for the same week is not extracted again, so an upload that
    lands in a watched folder is only processed once.
    """

    def __init__(
        self,
        *,
        store: ScheduleStore,
        settings: ExtractionSettings,
        timezone: tzinfo | None = None,
        timeout_seconds: float = DEFAULT_RELOAD_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._settings = settings
        self._timezone = timezone
        self._timeout_seconds = timeout_seconds
        self._lock = asyncio.Lock()
        self._published_key: tuple[str, date] | None = None

    @property
    def store(self) -> ScheduleStore:
        return self._store

    async def reload(self, file_path: Path, *, week_start: date | None = None) -> MenuReloadResult:
        reference = week_start or week_start_for(datetime.now(self._timezone).date())

        async with self._lock:
            try:
                digest = await asyncio.to_thread(file_digest, file_path)
            except OSError as error:
                # The loader reports the unreadable file with its own error kind.
                logger.debug("Could not fingerprint %s: %s", file_path, error)
                digest = None

            key = (digest, reference) if digest is not None else None
            if key is not None and key == self._published_key:
                logger.debug("Menu %s is unchanged, skipping reload", file_path.name)
                return MenuReloadResult(success=True, day_count=len(self._store.current), unchanged=True)

            result = await reload_schedule(
                file_path,
                store=self._store,
                settings=self._settings,
                week_start=reference,
                timeout_seconds=self._timeout_seconds,
            )
            if result.success:
                self._published_key = key
            return result


def log_reload_result(file_path: Path, result: MenuReloadResult) -> None:
    if result.unchanged:
        logger.info("Menu %s already published", file_path.name)
    elif result.success:
        logger.info("Loaded menu %s (%d days)", file_path.name, result.day_count)
    elif result.timed_out:
        logger.error("Menu reload timed out for %s", file_path.name)
    else:
        logger.error("Menu reload failed for %s: %s", file_path.name, result.error)
