# goout_calendar/services/subscription.py
import re
from typing import Optional
from urllib.parse import urlencode

from pydantic import BaseModel

from goout_calendar.schemas.calendar import LongtermHandling

CALENDAR_PATH = "/services/feeder/usercalendar.ics"

# GoOut profile links carry the user id as lowercase letters: little-endian
# base-25 digits with "a" as zero.
_TEXT_ID_BASE = 25
_TEXT_ID_ZERO = ord("a")


class InvalidTextualId(ValueError):
    """
    Raised when a textual GoOut user id contains a character outside `a`-`y`.
    """


class SubscriptionUrls(BaseModel):
    user_id: int
    http: str
    webcal: str


def text_to_user_id(value: str) -> int:
    """
    Convert the textual id from a GoOut profile URL to the numeric user id
    expected by the calendar endpoint.
    """
    user_id = 0
    for position, char in enumerate(value):
        digit = ord(char) - _TEXT_ID_ZERO
        if not 0 <= digit < _TEXT_ID_BASE:
            raise InvalidTextualId(f"Invalid textual ID {value!r}: invalid character {char!r}")
        user_id += digit * _TEXT_ID_BASE**position
    return user_id


def subscription_urls(
    base_url: str,
    user_id: int,
    language: str,
    after: Optional[str] = None,
    longterm: Optional[LongtermHandling] = None,
) -> SubscriptionUrls:
    """
    Build the http and webcal URLs a calendar client subscribes to.

    `after` and `longterm` are only included when given.
    """
    params = {"id": user_id, "language": language}
    if after:
        params["after"] = after
    if longterm is not None:
        params["longterm"] = longterm.value

    http_url = f"{base_url.rstrip('/')}{CALENDAR_PATH}?{urlencode(params)}"
    return SubscriptionUrls(
        user_id=user_id,
        http=http_url,
        webcal=re.sub(r"^https?", "webcal", http_url),
    )
