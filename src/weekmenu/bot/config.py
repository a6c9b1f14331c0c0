"""Runtime configuration for Telegram bot modules."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_UPLOAD_DIR = "menus/uploads"
DEFAULT_TIMEZONE = "Europe/Paris"
DEFAULT_MAX_UPLOAD_MB = 20
DEFAULT_RELOAD_TIMEOUT_SECONDS = 60.0


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    value = float(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Validated Telegram bot runtime settings."""

    token: str
    upload_dir: Path
    timezone: ZoneInfo
    watch_dir: Path | None = None
    initial_menu: Path | None = None
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB
    reload_timeout_seconds: float = DEFAULT_RELOAD_TIMEOUT_SECONDS

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BotSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        token = source.get("TELEGRAM_BOT_TOKEN", "").strip()
        if not token:
            raise ValueError("Missing required bot environment variable: TELEGRAM_BOT_TOKEN")

        upload_dir_raw = source.get("WEEKMENU_UPLOAD_DIR", DEFAULT_UPLOAD_DIR).strip()
        if not upload_dir_raw:
            raise ValueError("WEEKMENU_UPLOAD_DIR cannot be empty")

        timezone_raw = source.get("WEEKMENU_TIMEZONE", DEFAULT_TIMEZONE).strip()
        try:
            timezone = ZoneInfo(timezone_raw)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"WEEKMENU_TIMEZONE is not a known time zone: {timezone_raw!r}") from exc

        watch_dir_raw = source.get("WEEKMENU_WATCH_DIR", "").strip()
        initial_menu_raw = source.get("WEEKMENU_INITIAL_MENU", "").strip()

        max_upload_mb = _parse_positive_int(
            name="WEEKMENU_MAX_UPLOAD_MB",
            raw_value=source.get("WEEKMENU_MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB)).strip(),
            minimum=1,
        )
        reload_timeout_seconds = _parse_positive_float(
            name="WEEKMENU_RELOAD_TIMEOUT_SECONDS",
            raw_value=source.get("WEEKMENU_RELOAD_TIMEOUT_SECONDS", str(DEFAULT_RELOAD_TIMEOUT_SECONDS)).strip(),
            minimum=1.0,
        )

        return cls(
            token=token,
            upload_dir=Path(upload_dir_raw),
            timezone=timezone,
            watch_dir=Path(watch_dir_raw) if watch_dir_raw else None,
            initial_menu=Path(initial_menu_raw) if initial_menu_raw else None,
            max_upload_mb=max_upload_mb,
            reload_timeout_seconds=reload_timeout_seconds,
        )
