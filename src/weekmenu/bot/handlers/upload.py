"""Telegram document upload handler replacing the published menu."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from telegram import Update
from telegram.error import NetworkError, TimedOut
from telegram.ext import ContextTypes, MessageHandler, filters

from weekmenu.bot.handlers.common import (
    ConfigError,
    resolve_now,
    resolve_reloader,
    resolve_required,
)
from weekmenu.extraction.pipeline import week_start_for
from weekmenu.rendering import describe_error, render_text


logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 20 * 1024 * 1024
SUPPORTED_EXTENSIONS = {".pdf", ".txt", ".json"}


def _is_supported_extension(file_name: str) -> bool:
    return Path(file_name).suffix.lower() in SUPPORTED_EXTENSIONS


async def handle_menu_upload(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Validate, download and extract an uploaded menu, then publish it."""
    message = update.message
    if message is None or message.document is None:
        return

    document = message.document
    max_size = int(context.bot_data.get("max_upload_bytes", DEFAULT_MAX_FILE_SIZE))

    if document.file_size is not None and document.file_size > max_size:
        await message.reply_text(f"File too large. Maximum size: {max_size // (1024 * 1024)} MB")
        return

    original_name = document.file_name or ""
    safe_name = Path(original_name).name
    if not _is_supported_extension(safe_name):
        await message.reply_text("Unsupported format. Send the menu as PDF, TXT or JSON.")
        return

    try:
        reloader = resolve_reloader(context)
        upload_dir = Path(str(resolve_required(context, "upload_dir")))
    except ConfigError as error:
        logger.error("Upload failed due to configuration error: %s", error)
        await message.reply_text("Menu uploads are temporarily unavailable.")
        return

    status_msg = await message.reply_text("Reading the menu...")
    target_path = upload_dir / safe_name
    target_path.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(2):
        try:
            if attempt == 1:
                logger.warning("Retrying upload download after transient network failure: %s", safe_name)

            telegram_file = await document.get_file()
            await telegram_file.download_to_drive(target_path)

            result = await reloader.reload(target_path, week_start=week_start_for(resolve_now(context).date()))

            if result.unchanged:
                await status_msg.edit_text(f"This menu is already published.\n\nDays: {result.day_count}")
                return

            if result.timed_out:
                await status_msg.edit_text("Reading the menu took too long. The previous menu is kept.")
                return

            if not result.success:
                reason = describe_error(result.error) if result.error is not None else "unknown error"
                await status_msg.edit_text(f"{reason}\nThe previous menu is kept.")
                return

            lines = ["Menu updated!", "", f"Days: {result.day_count}"]
            if result.update is not None:
                lines.append(render_text(result.update))
            await status_msg.edit_text("\n".join(lines))
            return
        except (NetworkError, TimedOut) as error:
            logger.warning("Network error during upload handling (attempt %s/2): %s", attempt + 1, error)
            if attempt == 0:
                await asyncio.sleep(2)
                continue
            await status_msg.edit_text("Network error while downloading the file. Please try again later.")
            return
        except Exception:
            logger.exception("Unexpected error while handling upload: %s", safe_name)
            await status_msg.edit_text("Could not process the file. Please try again later.")
            return


def build_upload_handler() -> MessageHandler:
    """Build document upload message handler."""
    upload_filter = filters.Document.PDF | filters.Document.TXT | filters.Document.FileExtension("json")
    return MessageHandler(upload_filter, handle_menu_upload)
