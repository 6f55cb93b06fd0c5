# goout_calendar/api/routes/calendar.py
import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from goout_calendar.core.errors import CalendarFeedError
from goout_calendar.schemas.calendar import (
    AmbiguousLongtermSelection,
    CalendarRequest,
    LongtermHandling,
    resolve_longterm,
)
from goout_calendar.services.calendar_feed import build_calendar
from goout_calendar.services.goout_client import GoOutClient, get_goout_client

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/services/feeder",
    tags=["Calendar"],
)

ICS_MEDIA_TYPE = "text/calendar; charset=utf-8"


async def calendar_request(
    id: int = Query(
        ...,
        ge=0,
        description="Numeric GoOut user id.",
        examples=[43224],
    ),
    language: str = Query(
        ...,
        min_length=1,
        description="Language of event texts; `cs` also localizes generated labels.",
        examples=["cs"],
    ),
    after: str | None = Query(
        default=None,
        description="Only events after this point; forwarded to GoOut verbatim.",
    ),
    split: bool | None = Query(
        default=None,
        description="Legacy switch: `true` behaves as `longterm=split`, `false` as `preserve`.",
    ),
    longterm: LongtermHandling | None = Query(
        default=None,
        description="Handling of long-term events: preserve, split or aggregate.",
    ),
) -> CalendarRequest:
    """
    Dependency turning query parameters into a CalendarRequest.

    Supplying both `split` and `longterm` is rejected with 400 Bad Request.
    """
    try:
        handling = resolve_longterm(split, longterm)
    except AmbiguousLongtermSelection as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc)) from exc

    return CalendarRequest(id=id, language=language, after=after, longterm=handling)


@router.get(
    "/usercalendar.ics",
    status_code=HTTPStatus.OK,
    response_class=Response,
    summary="iCalendar feed of a user's liked GoOut events",
    description=(
        "Fetches every page of the user's liked events from GoOut and renders "
        "them as an iCalendar document suitable for calendar subscriptions.\n\n"
        "Long-term events (exhibitions etc.) can be:\n"
        "- `preserve`d as one entry spanning all days (default)\n"
        "- `split` into a begin and an end entry\n"
        "- `aggregate`d, overlapping ones merged into shared blocks\n"
    ),
    responses={
        200: {
            "description": "The calendar.",
            "content": {"text/calendar": {}},
        },
        400: {
            "description": "Both `split` and `longterm` given.",
        },
        500: {
            "description": "GoOut could not be queried or returned unusable data.",
        },
    },
)
async def user_calendar(
    request: CalendarRequest = Depends(calendar_request),
    client: GoOutClient = Depends(get_goout_client),
) -> Response:
    """
    Serve the calendar for the requested user.
    """
    try:
        body = await build_calendar(client, request)
    except CalendarFeedError as exc:
        logger.error("Calendar for User#%d failed: %s", request.id, exc, exc_info=True)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail="Something went wrong.",
        ) from exc

    return Response(content=body, media_type=ICS_MEDIA_TYPE)
