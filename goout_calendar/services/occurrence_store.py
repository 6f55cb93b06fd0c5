# goout_calendar/services/occurrence_store.py
from __future__ import annotations

import logging
from typing import List, Mapping, TypeVar

from pydantic import ValidationError

from goout_calendar.core.errors import CalendarFeedError
from goout_calendar.schemas.goout import EventsResponse, ScheduleOnWire
from goout_calendar.schemas.occurrence import Occurrence

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DanglingReferenceError(CalendarFeedError):
    """
    Raised when a schedule references a venue, event or performer that is not
    part of the page it came from.
    """


class InvalidOccurrenceError(CalendarFeedError):
    """
    Raised when a schedule cannot form a valid occurrence (e.g. it ends before
    it starts).
    """


class OccurrenceStore:
    """
    Accumulates the schedules of every fetched page into one ordered list of
    self-contained occurrences.

    Responsibilities
    ----------------
    - Resolve each schedule's venue/event/performer ids against the lookup
      tables of its own page.
    - Attach the decoded records by reference, so records repeated across
      schedules are shared rather than copied.
    - Preserve the API order of schedules across pages.
    """

    def __init__(self) -> None:
        self._occurrences: List[Occurrence] = []
        self.pages_added = 0

    @property
    def occurrences(self) -> List[Occurrence]:
        return list(self._occurrences)

    def add_page(self, response: EventsResponse) -> List[Occurrence]:
        """
        Resolve all schedules of one page and append them to the store.

        Nothing from the page is added if any of its schedules fails to
        resolve.
        """
        resolved = [resolve_schedule(schedule, response) for schedule in response.schedule]
        self._occurrences.extend(resolved)
        self.pages_added += 1
        logger.debug(
            "Page %d resolved into %d occurrences (%d total)",
            self.pages_added,
            len(resolved),
            len(self._occurrences),
        )
        return resolved

    def __len__(self) -> int:
        return len(self._occurrences)


def resolve_schedule(schedule: ScheduleOnWire, response: EventsResponse) -> Occurrence:
    venue = _lookup(response.venues, schedule.venue_id, "Venue", schedule.id)
    event = _lookup(response.events, schedule.event_id, "Event", schedule.id)
    performers = tuple(
        _lookup(response.performers, performer_id, "Performer", schedule.id)
        for performer_id in schedule.performer_ids
    )

    try:
        return Occurrence(
            id=schedule.id,
            event=event,
            venue=venue,
            performers=performers,
            url=schedule.url,
            cancelled=schedule.cancelled,
            start=schedule.start,
            end=schedule.end,
            uploaded_on=schedule.uploaded_on,
            hour_ignored=schedule.hour_ignored,
            is_long_term=schedule.is_long_term,
            pricing=schedule.pricing,
            currency=schedule.currency,
        )
    except ValidationError as exc:
        raise InvalidOccurrenceError(f"Schedule#{schedule.id} is invalid: {exc}") from exc


def _lookup(table: Mapping[int, T], key: int, kind: str, schedule_id: int) -> T:
    try:
        return table[key]
    except KeyError:
        raise DanglingReferenceError(
            f"{kind}#{key} referenced by Schedule#{schedule_id} not in API response."
        ) from None
