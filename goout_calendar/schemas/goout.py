# goout_calendar/schemas/goout.py
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    """
    Base for records decoded from the GoOut events API.

    Records are frozen: once a page is decoded, venues, events and performers
    are shared by every occurrence that references them and must never change.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class NamedEntity(_WireModel):
    name: str = Field(..., description="Display name.", examples=["Koncerty"])


class Locality(_WireModel):
    country: NamedEntity = Field(..., description="Country the venue is located in.")


class Venue(_WireModel):
    """
    A place where an event takes place.
    """

    name: str = Field(..., examples=["MeetFactory"])
    address: str = Field(..., examples=["Ke Sklárně 15"])
    city: str = Field(..., examples=["Praha 5"])
    latitude: float = Field(..., examples=[50.0533])
    longitude: float = Field(..., examples=[14.4082])
    locality: Locality


class Performer(_WireModel):
    name: str = Field(..., examples=["Tata Bojs"])
    tags: list[str] = Field(default_factory=list, examples=[["rock", "pop"]])


class Event(_WireModel):
    """
    An event listed on GoOut, shared by all of its schedules.

    `categories` is kept ordered by category id so that summaries built from it
    are stable between requests.
    """

    name: str = Field(..., examples=["Hudební ceny Apollo 2018"])
    text: str = Field("", description="Free-text description of the event.")
    categories: dict[int, NamedEntity] = Field(default_factory=dict)

    @field_validator("categories")
    @classmethod
    def _order_by_category_id(cls, value: dict[int, NamedEntity]) -> dict[int, NamedEntity]:
        return dict(sorted(value.items()))


class ScheduleOnWire(_WireModel):
    """
    One schedule exactly as the API returns it, with foreign keys unresolved.
    """

    id: int = Field(..., ge=0)
    event_id: int = Field(..., alias="eventId")
    venue_id: int = Field(..., alias="venueId")
    performer_ids: list[int] = Field(default_factory=list, alias="performerIds")
    url: str
    cancelled: bool = False
    start: datetime = Field(..., alias="startISO8601")
    end: datetime = Field(..., alias="endISO8601")
    uploaded_on: datetime = Field(..., alias="uploadedOnISO8601")
    hour_ignored: bool = Field(False, alias="hourIgnored")
    is_long_term: bool = Field(False, alias="isLongTerm")
    pricing: str = ""
    # rarely, some schedules come without a currency key
    currency: str = ""


class EventsResponse(_WireModel):
    """
    One page of the `/services/feeder/v1/events.json` endpoint.

    Every field has a default because error responses only carry `status` and
    `message`; decoding them must still succeed so that `envelope_error()` can
    report what the API actually said.
    """

    status: int = 0
    message: Any = None
    has_next: bool = Field(False, alias="hasNext")
    schedule: list[ScheduleOnWire] = Field(default_factory=list)
    venues: dict[int, Venue] = Field(default_factory=dict)
    performers: dict[int, Performer] = Field(default_factory=dict)
    events: dict[int, Event] = Field(default_factory=dict)

    def envelope_error(self) -> str | None:
        """
        Return a description of what is wrong with the response envelope, or
        None when the page reports success.
        """
        if self.message != "OK":
            return f"Expected message OK, got {self.message!r}."
        if self.status != 200:
            return f"Expected status 200, got {self.status}."
        return None
