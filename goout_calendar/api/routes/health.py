# goout_calendar/api/routes/health.py
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from goout_calendar.core.config import get_settings
from goout_calendar.schemas.calendar import LongtermHandling
from goout_calendar.services.goout_client import get_goout_client


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Liveness report plus the upstream settings calendar requests will use.
    """

    status: str = Field(..., examples=["ok"])
    app_name: str = Field(..., examples=["GoOut Calendar Exporter"])
    environment: str = Field(..., examples=["local"])
    upstream_events_url: str = Field(
        ...,
        description="GoOut endpoint every calendar page is fetched from.",
        examples=["https://goout.net/services/feeder/v1/events.json"],
    )
    max_pages: int = Field(
        ...,
        description="Pages fetched at most for one calendar before giving up.",
        examples=[255],
    )
    longterm_policies: List[LongtermHandling] = Field(
        ...,
        description="Accepted values of the `longterm` calendar parameter.",
    )
    timestamp_utc: datetime


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check for the calendar exporter",
    description=(
        "Answers without contacting GoOut, so it stays green while the upstream "
        "API is degraded; calendar requests answer 500 in that case."
    ),
)
async def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        upstream_events_url=get_goout_client().events_url,
        max_pages=settings.GOOUT_MAX_PAGES,
        longterm_policies=list(LongtermHandling),
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
