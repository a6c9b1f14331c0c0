"""Watch a folder and reload the menu when a document lands in it.

Filesystem events arrive on the watchdog observer thread and are handed to
the event loop, where changes to the same path are debounced before the
path is queued for the reloader.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from weekmenu.automation.menu_service import MenuReloadResult, log_reload_result
from weekmenu.extraction.loader import DocumentLoader


logger = logging.getLogger(__name__)

# Partial downloads and editor swap files.
IGNORED_SUFFIXES = (".tmp", ".part", ".crdownload", ".swp", "~")

ReloadCallback = Callable[[Path], Awaitable[MenuReloadResult]]


class MenuEventHandler(FileSystemEventHandler):
    """Pass created, modified or moved-in menu documents to ``notify``."""

    def __init__(self, *, accepts: Callable[[Path], bool], notify: Callable[[Path], None]) -> None:
        super().__init__()
        self._accepts = accepts
        self._notify = notify

    def _forward(self, raw_path: str | bytes) -> None:
        path = Path(os.fsdecode(raw_path))
        if path.name.startswith(".") or path.name.endswith(IGNORED_SUFFIXES):
            return
        if not self._accepts(path):
            logger.debug("Ignoring %s: no adapter reads this file type", path.name)
            return
        self._notify(path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward(event.dest_path)


class MenuFolderWatcher:
    """Reload the menu for every document that settles in ``watch_dir``."""

    def __init__(
        self,
        watch_dir: str | Path,
        reload: ReloadCallback,
        *,
        loader: DocumentLoader | None = None,
        debounce_seconds: float = 2.0,
    ) -> None:
        self._watch_dir = Path(watch_dir)
        self._reload = reload
        self._loader = loader or DocumentLoader.with_default_adapters()
        self._debounce_seconds = debounce_seconds
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[Path] | None = None
        self._pending: dict[Path, asyncio.TimerHandle] = {}
        self._observer: Observer | None = None
        self._consumer_task: asyncio.Task[None] | None = None

    def notify(self, path: Path) -> None:
        """Record a change to ``path``; safe to call from any thread."""

        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._debounce, path)

    def _debounce(self, path: Path) -> None:
        if self._loop is None:
            return
        handle = self._pending.pop(path, None)
        if handle is not None:
            handle.cancel()
        self._pending[path] = self._loop.call_later(self._debounce_seconds, self._emit, path)

    def _emit(self, path: Path) -> None:
        self._pending.pop(path, None)
        if self._queue is not None:
            self._queue.put_nowait(path)

    async def _consume(self) -> None:
        assert self._queue is not None
        while True:
            path = await self._queue.get()
            try:
                result = await self._reload(path)
            except Exception:
                logger.exception("Menu reload crashed for %s", path)
            else:
                log_reload_result(path, result)
            finally:
                self._queue.task_done()

    async def start(self) -> None:
        if self._observer is not None:
            return
        if not self._watch_dir.is_dir():
            raise ValueError(f"Watch directory does not exist or is not a directory: {self._watch_dir}")

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        handler = MenuEventHandler(accepts=self._loader.accepts, notify=self.notify)

        observer = Observer()
        observer.schedule(handler, str(self._watch_dir), recursive=False)
        observer.start()
        self._observer = observer
        self._consumer_task = asyncio.create_task(self._consume())

    def stop(self) -> None:
        observer = self._observer
        if observer is not None:
            observer.stop()
            observer.join(timeout=5.0)
            self._observer = None

        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

        if self._consumer_task is not None:
            self._consumer_task.cancel()
            self._consumer_task = None
        self._loop = None
