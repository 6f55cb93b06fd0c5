# goout_calendar/schemas/calendar.py
from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LongtermHandling(str, Enum):
    """
    How occurrences flagged as long-term are turned into calendar entries.
    """

    PRESERVE = "preserve"
    SPLIT = "split"
    AGGREGATE = "aggregate"


class AmbiguousLongtermSelection(ValueError):
    """
    Raised when a request carries both the legacy `split` flag and `longterm`.
    """


def resolve_longterm(split: bool | None, longterm: LongtermHandling | None) -> LongtermHandling:
    """
    Map the legacy `split` flag and the `longterm` selector to one policy.

    Rules
    -----
    - both given      => AmbiguousLongtermSelection
    - only `longterm` => that value
    - only `split`    => SPLIT if true, PRESERVE if false
    - neither         => PRESERVE
    """
    if split is not None and longterm is not None:
        raise AmbiguousLongtermSelection(
            "Parameters `split` and `longterm` are mutually exclusive; use `longterm`."
        )
    if longterm is not None:
        return longterm
    if split:
        return LongtermHandling.SPLIT
    return LongtermHandling.PRESERVE


class CalendarRequest(BaseModel):
    """
    Validated parameters of one calendar feed request.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="GoOut user id whose liked events are exported.")
    language: str = Field(..., min_length=1, description="Language code, e.g. `cs` or `en`.")
    after: str | None = Field(
        None,
        description="Opaque cursor forwarded verbatim to the GoOut API.",
    )
    longterm: LongtermHandling = Field(
        LongtermHandling.PRESERVE,
        description="Handling of long-term (multi-day) events.",
    )


class CalendarEntry(BaseModel):
    """
    Encoder-agnostic representation of one calendar item (one VEVENT).

    `start` and `end` are either both dates (all-day entry, `end` exclusive)
    or both timestamps (`end` exclusive).
    """

    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., examples=["Schedule#123456@goout.net"])
    created: datetime = Field(..., description="Creation timestamp, whole seconds.")
    start: datetime | date
    end: datetime | date
    url: str | None = None
    cancelled: bool = False
    location: str | None = None
    geo: tuple[float, float] | None = None
    summary: str
    description: str = ""

    @property
    def is_all_day(self) -> bool:
        return not isinstance(self.start, datetime)

    @model_validator(mode="after")
    def _check_bounds(self) -> "CalendarEntry":
        if isinstance(self.start, datetime) != isinstance(self.end, datetime):
            raise ValueError("start and end must both be dates or both be timestamps.")
        if self.end < self.start:
            raise ValueError("end must not precede start.")
        return self
