# goout_calendar/schemas/occurrence.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from goout_calendar.schemas.goout import Event, Performer, Venue


class Occurrence(BaseModel):
    """
    One scheduled instance of an Event at a Venue, with every foreign key
    resolved.

    The event, venue and performers are the very objects decoded from the
    page (not copies), so a venue hosting fifty schedules exists once in
    memory. Occurrences are frozen; strategies that need a variant call
    `derive()`.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="Schedule id (or a derived id, see `derive`).")
    event: Event
    venue: Venue
    performers: tuple[Performer, ...] = ()
    url: str
    cancelled: bool = False
    start: datetime
    end: datetime = Field(..., description="Inclusive end, as reported by GoOut.")
    uploaded_on: datetime
    hour_ignored: bool = Field(
        False, description="True when only the date part of start/end is meaningful."
    )
    is_long_term: bool = Field(
        False, description="True for occurrences that may span many days (exhibitions etc.)."
    )
    pricing: str = ""
    currency: str = ""

    @model_validator(mode="after")
    def _check_chronology(self) -> "Occurrence":
        if self.end < self.start:
            raise ValueError(
                f"Schedule#{self.id} ends ({self.end.isoformat()}) before it starts "
                f"({self.start.isoformat()})."
            )
        return self

    def derive(
        self,
        *,
        id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        name_prefix: str = "",
    ) -> Occurrence:
        """
        Return a new, validated occurrence with the given fields replaced.

        `name_prefix` is prepended to the event name on a renamed copy of the
        event; the shared event itself is left untouched.
        """
        overrides: dict[str, Any] = {}
        if id is not None:
            overrides["id"] = id
        if start is not None:
            overrides["start"] = start
        if end is not None:
            overrides["end"] = end
        if name_prefix:
            overrides["event"] = self.event.model_copy(
                update={"name": f"{name_prefix}{self.event.name}"}
            )

        return Occurrence.model_validate({**dict(self), **overrides})
