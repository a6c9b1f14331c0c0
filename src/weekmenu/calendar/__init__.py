"""Calendar export of published schedules."""

from weekmenu.calendar.export import CalendarEvent, event_uid, export_events
from weekmenu.calendar.ics import encode_calendar

__all__ = ["CalendarEvent", "encode_calendar", "event_uid", "export_events"]
