"""Production Telegram bot entrypoint with handler registration and polling."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv
from telegram.ext import Application

load_dotenv()

from weekmenu.automation.menu_service import MenuReloader, log_reload_result
from weekmenu.automation.watcher import MenuFolderWatcher
from weekmenu.bot.config import BotSettings
from weekmenu.bot.handlers.commands import build_command_handlers
from weekmenu.bot.handlers.upload import build_upload_handler
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.extraction.loader import DocumentLoader
from weekmenu.schedule.store import ScheduleStore


logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def build_application(
    settings: BotSettings,
    extraction_settings: ExtractionSettings,
    store: ScheduleStore | None = None,
) -> Application:
    """Build PTB Application with all handlers registered."""
    application = Application.builder().token(settings.token).build()

    active_store = store or ScheduleStore()
    application.bot_data["store"] = active_store
    application.bot_data["extraction_settings"] = extraction_settings
    application.bot_data["timezone"] = settings.timezone
    application.bot_data["upload_dir"] = str(settings.upload_dir)
    application.bot_data["max_upload_bytes"] = settings.max_upload_bytes
    application.bot_data["reloader"] = MenuReloader(
        store=active_store,
        settings=extraction_settings,
        timezone=settings.timezone,
        timeout_seconds=settings.reload_timeout_seconds,
    )

    for handler in build_command_handlers():
        application.add_handler(handler)
    application.add_handler(build_upload_handler())

    logger.info("Registered all handlers: commands, upload")
    return application


async def run_bot(settings: BotSettings, extraction_settings: ExtractionSettings) -> None:
    """Run bot with polling and graceful shutdown."""
    application = build_application(settings, extraction_settings)
    reloader: MenuReloader = application.bot_data["reloader"]
    watcher: MenuFolderWatcher | None = None

    if settings.initial_menu is not None:
        log_reload_result(settings.initial_menu, await reloader.reload(settings.initial_menu))

    await application.initialize()
    logger.info("Bot initialized. Starting polling...")

    await application.start()
    updater = application.updater
    if updater is None:
        raise RuntimeError("Bot updater is not initialized")

    await updater.start_polling(allowed_updates=["message"])

    watch_dir = settings.watch_dir
    if watch_dir is not None and watch_dir.is_dir():
        watcher = MenuFolderWatcher(
            watch_dir,
            reloader.reload,
            loader=DocumentLoader.with_default_adapters(extraction_settings),
        )
        await watcher.start()
        logger.info("Folder watcher started for %s", watch_dir)
    elif watch_dir is not None:
        logger.warning("Watch directory does not exist, watcher disabled: %s", watch_dir)

    logger.info("Bot polling started. Press Ctrl+C to stop.")

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Received stop signal. Shutting down...")

    await updater.stop()

    if watcher is not None:
        try:
            watcher.stop()
            logger.info("Folder watcher stopped cleanly.")
        except Exception:
            logger.exception("Failed to stop folder watcher cleanly")

    await application.stop()
    await application.shutdown()
    logger.info("Bot stopped cleanly.")


def main() -> None:
    """Main entrypoint for Telegram bot."""
    try:
        settings = BotSettings.from_env()
        extraction_settings = ExtractionSettings.from_env()
        logger.info(
            "Loaded bot config: upload_dir=%s, watch_dir=%s, timezone=%s",
            settings.upload_dir,
            settings.watch_dir,
            settings.timezone,
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    try:
        asyncio.run(run_bot(settings, extraction_settings))
    except KeyboardInterrupt:
        logger.info("Bot interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
