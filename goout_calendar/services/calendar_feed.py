# goout_calendar/services/calendar_feed.py
from __future__ import annotations

import logging

from goout_calendar.core.config import get_settings
from goout_calendar.schemas.calendar import CalendarRequest
from goout_calendar.services.goout_client import GoOutClient, UpstreamError
from goout_calendar.services.ics_encoder import encode_calendar
from goout_calendar.services.materializer import materialize
from goout_calendar.services.occurrence_store import OccurrenceStore

logger = logging.getLogger(__name__)


async def collect_occurrences(
    client: GoOutClient,
    request: CalendarRequest,
    max_pages: int,
) -> OccurrenceStore:
    """
    Fetch pages one after another until the API reports there is no next page.

    Pages are not fetched concurrently: whether page N+1 exists is only known
    once page N has arrived.
    """
    store = OccurrenceStore()
    page = 1
    while True:
        if page > max_pages:
            raise UpstreamError(
                f"User#{request.id} has more than {max_pages} pages of events."
            )
        response = await client.fetch_page(request, page)
        store.add_page(response)
        if not response.has_next:
            break
        page += 1
    return store


async def build_calendar(client: GoOutClient, request: CalendarRequest) -> bytes:
    """
    Build the complete iCalendar document for one request.

    Behavior
    --------
    All pages are loaded before anything is returned. The calendar endpoint is
    called infrequently and non-interactively, so latency of the first byte
    matters less than being able to report any failure as a proper HTTP error.

    Raises
    ------
    CalendarFeedError
        On any upstream, decoding or materialization failure. No partial
        calendar is ever produced.
    """
    settings = get_settings()

    store = await collect_occurrences(client, request, settings.GOOUT_MAX_PAGES)
    logger.info(
        "Collected %d occurrences from %d pages for User#%d",
        len(store),
        store.pages_added,
        request.id,
    )

    entries = materialize(store.occurrences, request.language, request.longterm)
    return encode_calendar(entries, prodid=settings.ICS_PRODID)
