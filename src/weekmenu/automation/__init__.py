"""Automation services for folder-based menu reloads."""

from weekmenu.automation.menu_service import MenuReloader, MenuReloadResult, reload_schedule
from weekmenu.automation.watcher import MenuEventHandler, MenuFolderWatcher

__all__ = [
    "MenuEventHandler",
    "MenuFolderWatcher",
    "MenuReloadResult",
    "MenuReloader",
    "reload_schedule",
]
