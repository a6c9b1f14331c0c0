"""Command handlers for menu queries and calendar export."""

from __future__ import annotations

import logging
import re

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from weekmenu.bot.handlers.common import (
    ConfigError,
    resolve_extraction_settings,
    resolve_now,
    resolve_store,
)
from weekmenu.calendar.export import export_events
from weekmenu.calendar.ics import encode_calendar
from weekmenu.rendering import EMPTY_TEXT, render_dishes, render_text
from weekmenu.schedule import query
from weekmenu.schedule.models import DayMenu, Empty, Schedule

logger = logging.getLogger(__name__)

_WEEK_ARG_RE = re.compile(r"^(\d{4})-W?(\d{1,2})$", re.IGNORECASE)

UNAVAILABLE_TEXT = "The menu is temporarily unavailable. Please try again later."


def _format_day_menu(menu: DayMenu) -> str:
    return f"{menu.date.strftime('%A %d %B %Y')}\n{render_dishes(menu.dishes)}"


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command with usage instructions."""
    del context
    if update.message is None:
        return

    text = (
        "Welcome to the canteen menu bot!\n\n"
        "Use:\n"
        "• /today — what is served today\n"
        "• /next — the next menu after today\n"
        "• /find <dish> — when a dish is served next\n"
        "• /week [YYYY-WW] — the whole week\n"
        "• /weeks — weeks with a menu\n"
        "• /calendar — download the menu as an .ics calendar\n"
        "• /help — command reference\n\n"
        "Send a PDF, TXT or JSON menu to replace the current one."
    )
    await update.message.reply_text(text)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command with detailed usage guidance."""
    del context
    if update.message is None:
        return

    text = (
        "Command reference:\n\n"
        "/today — today's dishes\n"
        "/next — first menu strictly after today\n"
        "/find <dish> — upcoming days serving a dish\n"
        "  Example: /find steak\n\n"
        "/week [YYYY-WW] — menu of an ISO week (current week by default)\n"
        "  Example: /week 2023-23\n\n"
        "/weeks — list the weeks covered by the menu\n"
        "/calendar — export the menu as an iCalendar file\n\n"
        "Uploading a new menu document replaces the current schedule. "
        "If the document cannot be read, the previous menu is kept."
    )
    await update.message.reply_text(text)


async def today_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if update.message is None:
        return

    try:
        store = resolve_store(context)
    except ConfigError as error:
        logger.error("/today failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    result = query.today(store.current, resolve_now(context))
    if isinstance(result, DayMenu):
        await update.message.reply_text(_format_day_menu(result))
        return
    if isinstance(result, Empty):
        await update.message.reply_text(EMPTY_TEXT)
        return
    await update.message.reply_text("No meal is planned for today.")


async def next_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if update.message is None:
        return

    try:
        store = resolve_store(context)
    except ConfigError as error:
        logger.error("/next failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    result = query.next_day(store.current, resolve_now(context))
    if isinstance(result, DayMenu):
        await update.message.reply_text(_format_day_menu(result))
        return
    if isinstance(result, Empty):
        await update.message.reply_text(EMPTY_TEXT)
        return
    await update.message.reply_text("No upcoming meal is planned.")


async def find_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /find <dish> with every upcoming day serving it."""
    if update.message is None:
        return

    dish_query = " ".join(context.args or []).strip()
    if not dish_query:
        await update.message.reply_text("Usage: /find <dish>\n\nExample: /find steak")
        return

    try:
        store = resolve_store(context)
    except ConfigError as error:
        logger.error("/find failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    schedule = store.current
    if schedule.is_empty:
        await update.message.reply_text(EMPTY_TEXT)
        return

    results = query.find(schedule, resolve_now(context), dish_query)
    if not results:
        await update.message.reply_text(f"No upcoming day serves: {dish_query}")
        return

    text = f"Upcoming days serving {dish_query}:\n\n" + "\n\n".join(_format_day_menu(menu) for menu in results)
    await update.message.reply_text(text)


async def week_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /week [YYYY-WW]; defaults to the current ISO week."""
    if update.message is None:
        return

    try:
        store = resolve_store(context)
    except ConfigError as error:
        logger.error("/week failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    arg = " ".join(context.args or []).strip()
    if arg:
        match = _WEEK_ARG_RE.match(arg)
        if match is None:
            await update.message.reply_text("Invalid week. Use YYYY-WW, for example /week 2023-23")
            return
        year, week_number = int(match.group(1)), int(match.group(2))
    else:
        iso = resolve_now(context).date().isocalendar()
        year, week_number = iso[0], iso[1]

    result = query.week(store.current, year, week_number)
    if isinstance(result, Schedule):
        await update.message.reply_text(render_text(result))
        return
    if isinstance(result, Empty):
        await update.message.reply_text(EMPTY_TEXT)
        return
    await update.message.reply_text(f"No menu found for week {year}-{week_number:02d}.")


async def weeks_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if update.message is None:
        return

    try:
        store = resolve_store(context)
    except ConfigError as error:
        logger.error("/weeks failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    refs = query.weeks(store.current)
    if not refs:
        await update.message.reply_text(EMPTY_TEXT)
        return

    lines = [f"• {ref.key}: {ref.monday.isoformat()} → {ref.friday.isoformat()}" for ref in refs]
    await update.message.reply_text("Weeks with a menu:\n\n" + "\n".join(lines))


async def calendar_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Send the published schedule as an .ics attachment."""
    if update.message is None:
        return

    try:
        store = resolve_store(context)
        settings = resolve_extraction_settings(context)
    except ConfigError as error:
        logger.error("/calendar failed due to configuration error: %s", error)
        await update.message.reply_text(UNAVAILABLE_TEXT)
        return

    schedule = store.current
    if schedule.is_empty:
        await update.message.reply_text(EMPTY_TEXT)
        return

    payload = encode_calendar(export_events(schedule, settings.calendar_namespace))
    await update.message.reply_document(document=payload, filename="menu.ics")


def build_command_handlers() -> list[CommandHandler]:
    """Build all command handlers for registration."""
    return [
        CommandHandler("start", start_command),
        CommandHandler("help", help_command),
        CommandHandler("today", today_command),
        CommandHandler("next", next_command),
        CommandHandler("find", find_command),
        CommandHandler("week", week_command),
        CommandHandler("weeks", weeks_command),
        CommandHandler("calendar", calendar_command),
    ]
