# goout_calendar/services/entry_renderer.py
from __future__ import annotations

from datetime import date, timedelta

from goout_calendar.schemas.calendar import CalendarEntry
from goout_calendar.schemas.occurrence import Occurrence
from goout_calendar.services.localization import label

UID_DOMAIN = "goout.net"


def schedule_uid(occurrence_id: int) -> str:
    return f"Schedule#{occurrence_id}@{UID_DOMAIN}"


def format_date_range(first_day: date, last_day: date) -> str:
    """
    Human-readable inclusive date range, e.g. "2024-01-01 - 2024-01-15".
    """
    if first_day == last_day:
        return first_day.isoformat()
    return f"{first_day.isoformat()} - {last_day.isoformat()}"


def occurrence_date_range(occurrence: Occurrence) -> str:
    return format_date_range(occurrence.start.date(), occurrence.end.date())


def render_entry(
    occurrence: Occurrence,
    language: str,
    *,
    include_text: bool = True,
) -> CalendarEntry:
    """
    Compose the calendar entry for a single occurrence.

    Parameters
    ----------
    occurrence:
        Original or derived occurrence.
    language:
        Language code used for the localized summary prefix.
    include_text:
        Whether the free-text event body goes into the description. Aggregated
        summaries leave it out to keep the description bounded.
    """
    if occurrence.hour_ignored:
        # GoOut end is inclusive, iCalendar DTEND is exclusive
        start = occurrence.start.date()
        end = occurrence.end.date() + timedelta(days=1)
    else:
        start = occurrence.start
        end = occurrence.end + timedelta(seconds=1)

    venue = occurrence.venue
    return CalendarEntry(
        uid=schedule_uid(occurrence.id),
        created=occurrence.uploaded_on.replace(microsecond=0),
        start=start,
        end=end,
        url=occurrence.url,
        cancelled=occurrence.cancelled,
        location=", ".join(
            (venue.name, venue.address, venue.city, venue.locality.country.name)
        ),
        geo=(venue.latitude, venue.longitude),
        summary=build_summary(occurrence, language),
        description=build_description(occurrence, include_text=include_text),
    )


def build_summary(occurrence: Occurrence, language: str) -> str:
    prefix = label(language, "cancelled") if occurrence.cancelled else ""
    summary = f"{prefix}{occurrence.event.name}"

    category_names = [category.name for category in occurrence.event.categories.values()]
    if category_names:
        summary += f" ({', '.join(category_names)})"
    return summary


def build_description(occurrence: Occurrence, *, include_text: bool = True) -> str:
    """
    Description lines, in order; empty ones are left out entirely:

    1. performers, each followed by its tags in parentheses
    2. "<currency> <pricing>" when both are known
    3. the event text, surrounded by blank lines
    4. the occurrence URL (some clients, e.g. Google Calendar, ignore the URL
       property)
    """
    lines: list[str] = []

    performer_names = []
    for performer in occurrence.performers:
        if performer.tags:
            performer_names.append(f"{performer.name} ({', '.join(performer.tags)})")
        else:
            performer_names.append(performer.name)
    if performer_names:
        lines.append(", ".join(performer_names))

    if occurrence.currency and occurrence.pricing:
        lines.append(f"{occurrence.currency} {occurrence.pricing}")

    text = occurrence.event.text.strip() if include_text else ""
    if text:
        lines.extend(["", text, ""])

    lines.append(occurrence.url)
    return "\n".join(lines).strip()
