"""Shared bot handler context resolvers."""

from __future__ import annotations

from datetime import datetime, tzinfo

from telegram.ext import ContextTypes

from weekmenu.automation.menu_service import MenuReloader
from weekmenu.extraction.config import ExtractionSettings
from weekmenu.schedule.store import ScheduleStore


class ConfigError(RuntimeError):
    """Raised when required handler configuration is missing or invalid."""


def resolve_required(context: ContextTypes.DEFAULT_TYPE, key: str) -> object:
    value = context.bot_data.get(key)
    if value is None:
        raise ConfigError(f"{key} missing from context.bot_data['{key}']")
    return value


def resolve_store(context: ContextTypes.DEFAULT_TYPE) -> ScheduleStore:
    store = resolve_required(context, "store")
    if not isinstance(store, ScheduleStore):
        raise ConfigError("context.bot_data['store'] must be a ScheduleStore")
    return store


def resolve_extraction_settings(context: ContextTypes.DEFAULT_TYPE) -> ExtractionSettings:
    settings = resolve_required(context, "extraction_settings")
    if not isinstance(settings, ExtractionSettings):
        raise ConfigError("context.bot_data['extraction_settings'] must be ExtractionSettings")
    return settings


def resolve_reloader(context: ContextTypes.DEFAULT_TYPE) -> MenuReloader:
    reloader = resolve_required(context, "reloader")
    if not isinstance(reloader, MenuReloader):
        raise ConfigError("context.bot_data['reloader'] must be a MenuReloader")
    return reloader


def resolve_now(context: ContextTypes.DEFAULT_TYPE) -> datetime:
    """Current time in the canteen's zone; ``clock`` may be injected for tests."""
    clock = context.bot_data.get("clock")
    if clock is not None:
        return clock()
    zone = context.bot_data.get("timezone")
    if zone is not None and not isinstance(zone, tzinfo):
        raise ConfigError("context.bot_data['timezone'] must be a tzinfo")
    return datetime.now(zone)
