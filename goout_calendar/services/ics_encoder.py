# goout_calendar/services/ics_encoder.py
"""iCalendar serialization of calendar entries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from icalendar import Calendar, Event, vText

from goout_calendar.schemas.calendar import CalendarEntry


def encode_calendar(entries: Iterable[CalendarEntry], prodid: str) -> bytes:
    """Serialize entries into one VCALENDAR document (RFC 5545, CRLF line endings)."""
    cal = Calendar()
    cal.add("PRODID", prodid)
    cal.add("VERSION", "2.0")
    cal.add("CALSCALE", "GREGORIAN")

    for entry in entries:
        cal.add_component(_create_ics_event(entry))

    return cal.to_ical()


def _create_ics_event(entry: CalendarEntry) -> Event:
    ve = Event()
    ve.add("UID", entry.uid)
    ve.add("DTSTAMP", _as_utc(entry.created))

    if entry.is_all_day:
        ve.add("DTSTART", entry.start)
        ve.add("DTEND", entry.end)
    else:
        ve.add("DTSTART", _as_utc(entry.start))
        ve.add("DTEND", _as_utc(entry.end))

    if entry.url:
        ve.add("URL", entry.url)
    ve.add("STATUS", "CANCELLED" if entry.cancelled else "CONFIRMED")

    if entry.location:
        ve.add("LOCATION", vText(entry.location))
    if entry.geo is not None:
        ve.add("GEO", entry.geo)

    ve.add("SUMMARY", vText(entry.summary))
    if entry.description:
        ve.add("DESCRIPTION", vText(entry.description))

    return ve


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
