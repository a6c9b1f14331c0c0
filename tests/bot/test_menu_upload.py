"""Tests for Telegram menu upload validation and reload flow."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

import pytest
from telegram.error import NetworkError

from weekmenu.automation.menu_service import MenuReloader, MenuReloadResult
from weekmenu.bot.handlers.upload import handle_menu_upload
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.models import RawDocument
from weekmenu.extraction.pipeline import extract_schedule
from weekmenu.schedule.store import ScheduleStore

MONDAY = date(2023, 6, 5)
MENU_TEXT = "Monday\n- Soup\n- Steak frites\nTuesday\n- Salad\n"


def _build_update_context(
    document: Any,
    upload_dir: Path,
    store: ScheduleStore | None = None,
) -> tuple[SimpleNamespace, SimpleNamespace, SimpleNamespace, Any]:
    status_message = SimpleNamespace(edit_text=AsyncMock())
    message = SimpleNamespace(document=document, reply_text=AsyncMock(return_value=status_message))
    update = SimpleNamespace(message=message)
    active_store = store if store is not None else ScheduleStore()
    context = SimpleNamespace(
        bot_data={
            "store": active_store,
            "extraction_settings": ExtractionSettings(),
            "reloader": MenuReloader(store=active_store, settings=ExtractionSettings(), timeout_seconds=5.0),
            "upload_dir": str(upload_dir),
            "max_upload_bytes": 1024 * 1024,
            "clock": lambda: datetime(2023, 6, 6, 9, 0, tzinfo=ZoneInfo("Europe/Paris")),
        }
    )
    return update, context, message, status_message


def _telegram_file(text: str) -> SimpleNamespace:
    def _download(path: Path) -> None:
        Path(path).write_text(text, encoding="utf-8")

    return SimpleNamespace(download_to_drive=AsyncMock(side_effect=_download))


@pytest.mark.asyncio
async def test_upload_rejects_large_file_without_download(tmp_path: Path) -> None:
    document = SimpleNamespace(file_size=2 * 1024 * 1024, file_name="menu.pdf", get_file=AsyncMock())
    update, context, message, _ = _build_update_context(document, tmp_path)

    await handle_menu_upload(update, context)

    message.reply_text.assert_awaited_once_with("File too large. Maximum size: 1 MB")
    document.get_file.assert_not_called()


@pytest.mark.asyncio
async def test_upload_rejects_unsupported_extension(tmp_path: Path) -> None:
    document = SimpleNamespace(file_size=1024, file_name="menu.docx", get_file=AsyncMock())
    update, context, message, _ = _build_update_context(document, tmp_path)

    await handle_menu_upload(update, context)

    message.reply_text.assert_awaited_once_with("Unsupported format. Send the menu as PDF, TXT or JSON.")
    document.get_file.assert_not_called()


@pytest.mark.asyncio
async def test_upload_publishes_new_menu(tmp_path: Path) -> None:
    telegram_file = _telegram_file(MENU_TEXT)
    document = SimpleNamespace(file_size=100, file_name="../week.txt", get_file=AsyncMock(return_value=telegram_file))
    store = ScheduleStore()
    update, context, message, status_message = _build_update_context(document, tmp_path, store)

    await handle_menu_upload(update, context)

    message.reply_text.assert_awaited_once_with("Reading the menu...")
    telegram_file.download_to_drive.assert_awaited_once_with(tmp_path / "week.txt")
    status_message.edit_text.assert_awaited_once_with(
        "Menu updated!\n\nDays: 2\nAdded: 2023-06-05, 2023-06-06"
    )
    assert store.current.dates() == (date(2023, 6, 5), date(2023, 6, 6))


@pytest.mark.asyncio
async def test_upload_failure_keeps_previous_menu(tmp_path: Path) -> None:
    previous = extract_schedule(RawDocument.from_lines(["Monday", "- Soup"]), week_start=MONDAY)
    store = ScheduleStore(previous)
    telegram_file = _telegram_file("Just a list of dishes\nwithout any day\n")
    document = SimpleNamespace(file_size=100, file_name="menu.txt", get_file=AsyncMock(return_value=telegram_file))
    update, context, _, status_message = _build_update_context(document, tmp_path, store)

    await handle_menu_upload(update, context)

    status_message.edit_text.assert_awaited_once_with(
        "Could not read the menu: No day or date markers found in document.\nThe previous menu is kept."
    )
    assert store.current is previous


@pytest.mark.asyncio
async def test_upload_reports_timeout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    telegram_file = _telegram_file(MENU_TEXT)
    document = SimpleNamespace(file_size=100, file_name="menu.txt", get_file=AsyncMock(return_value=telegram_file))
    update, context, _, status_message = _build_update_context(document, tmp_path)

    async def fake_reload(file_path: Path, **kwargs: Any) -> MenuReloadResult:
        assert kwargs["week_start"] == MONDAY
        return MenuReloadResult(success=False, day_count=0, timed_out=True)

    monkeypatch.setattr(context.bot_data["reloader"], "reload", fake_reload)

    await handle_menu_upload(update, context)

    status_message.edit_text.assert_awaited_once_with("Reading the menu took too long. The previous menu is kept.")


@pytest.mark.asyncio
async def test_upload_retries_once_on_network_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    telegram_file = _telegram_file(MENU_TEXT)
    document = SimpleNamespace(
        file_size=100,
        file_name="menu.txt",
        get_file=AsyncMock(side_effect=[NetworkError("flaky"), telegram_file]),
    )
    update, context, _, status_message = _build_update_context(document, tmp_path)
    monkeypatch.setattr("weekmenu.bot.handlers.upload.asyncio.sleep", AsyncMock())

    await handle_menu_upload(update, context)

    assert document.get_file.await_count == 2
    assert status_message.edit_text.await_args.args[0].startswith("Menu updated!")


@pytest.mark.asyncio
async def test_upload_without_reloader_is_unavailable(tmp_path: Path) -> None:
    document = SimpleNamespace(file_size=100, file_name="menu.txt", get_file=AsyncMock())
    update, context, message, _ = _build_update_context(document, tmp_path)
    del context.bot_data["reloader"]

    await handle_menu_upload(update, context)

    message.reply_text.assert_awaited_once_with("Menu uploads are temporarily unavailable.")
    document.get_file.assert_not_called()


@pytest.mark.asyncio
async def test_upload_accepts_json_week(tmp_path: Path) -> None:
    telegram_file = _telegram_file('[{"date": "2023-06-05", "mains": ["Fish"]}, ["2023-06-06", "Salad"]]')
    document = SimpleNamespace(file_size=100, file_name="week.json", get_file=AsyncMock(return_value=telegram_file))
    store = ScheduleStore()
    update, context, _, status_message = _build_update_context(document, tmp_path, store)

    await handle_menu_upload(update, context)

    status_message.edit_text.assert_awaited_once_with(
        "Menu updated!\n\nDays: 2\nAdded: 2023-06-05, 2023-06-06"
    )
    assert store.current.get(date(2023, 6, 5)).dishes[0].category == "main"


@pytest.mark.asyncio
async def test_repeated_upload_of_same_menu_is_not_reprocessed(tmp_path: Path) -> None:
    store = ScheduleStore()
    first = SimpleNamespace(
        file_size=100, file_name="menu.txt", get_file=AsyncMock(return_value=_telegram_file(MENU_TEXT))
    )
    update, context, _, _ = _build_update_context(first, tmp_path, store)
    await handle_menu_upload(update, context)
    published = store.current

    again = SimpleNamespace(
        file_size=100, file_name="menu.txt", get_file=AsyncMock(return_value=_telegram_file(MENU_TEXT))
    )
    status_message = SimpleNamespace(edit_text=AsyncMock())
    update_again = SimpleNamespace(
        message=SimpleNamespace(document=again, reply_text=AsyncMock(return_value=status_message))
    )
    await handle_menu_upload(update_again, context)

    status_message.edit_text.assert_awaited_once_with("This menu is already published.\n\nDays: 2")
    assert store.current is published
