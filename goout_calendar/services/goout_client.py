# goout_calendar/services/goout_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from goout_calendar.core.config import get_settings
from goout_calendar.core.errors import CalendarFeedError
from goout_calendar.schemas.calendar import CalendarRequest
from goout_calendar.schemas.goout import EventsResponse

logger = logging.getLogger(__name__)

EVENTS_PATH = "/services/feeder/v1/events.json"


class UpstreamError(CalendarFeedError):
    """
    Raised when a page of the GoOut events API cannot be fetched or does not
    report success.
    """


class GoOutClient:
    """
    Minimal client for the GoOut events listing API.

    Responsibilities
    ----------------
    - Build the query string for one page of a user's liked events.
    - Turn transport failures, HTTP errors and error envelopes into
      UpstreamError.
    - Decode successful pages into EventsResponse.

    Notes
    -----
    - No retries: a failed page fails the whole calendar.
    """

    def __init__(
        self,
        base_url: str = "https://goout.net",
        source: str = "goout.strohel.eu",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._source = source
        self._timeout_seconds = timeout_seconds

    @property
    def events_url(self) -> str:
        return f"{self._base_url}{EVENTS_PATH}"

    def page_params(self, request: CalendarRequest, page: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "tag": "liked",
            "user": str(request.id),
            "page": str(page),
            "language": request.language,
            "source": self._source,
        }
        if request.after is not None:
            params["after"] = request.after
        return params

    async def fetch_page(self, request: CalendarRequest, page: int) -> EventsResponse:
        """
        Fetch and decode page `page` (1-based) of the user's liked events.

        Raises UpstreamError on any failure.
        """
        params = self.page_params(request, page)
        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.get(self.events_url, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to fetch {self.events_url}: {exc}") from exc

        if resp.status_code // 100 != 2:
            raise UpstreamError(
                f"HTTP {resp.status_code} when fetching {resp.url}: {resp.text}"
            )
        logger.info("Retrieved %s", resp.url)

        try:
            response = EventsResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamError(f"Malformed response from {resp.url}: {exc}") from exc

        envelope_error = response.envelope_error()
        if envelope_error is not None:
            raise UpstreamError(f"{envelope_error} (from {resp.url})")
        return response


def get_goout_client() -> GoOutClient:
    """
    Construct a GoOutClient wired to application settings.

    Used as a FastAPI dependency, so tests can override it.
    """
    settings = get_settings()
    return GoOutClient(
        base_url=str(settings.GOOUT_BASE_URL),
        source=settings.GOOUT_SOURCE,
        timeout_seconds=settings.GOOUT_TIMEOUT_SECONDS,
    )
