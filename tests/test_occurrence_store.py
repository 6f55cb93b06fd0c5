# tests/test_occurrence_store.py
from datetime import datetime, timedelta, timezone

import pytest

from factories import page_payload, schedule_payload
from goout_calendar.schemas.goout import EventsResponse
from goout_calendar.services.occurrence_store import (
    DanglingReferenceError,
    InvalidOccurrenceError,
    OccurrenceStore,
)


def _page(schedules, has_next: bool = False) -> EventsResponse:
    return EventsResponse.model_validate(page_payload(schedules, has_next=has_next))


def test_decoding_orders_categories_by_id():
    response = _page([schedule_payload(1)])

    event = response.events[100]
    assert list(event.categories) == [3, 20]
    assert [c.name for c in event.categories.values()] == ["Concerts", "Ceremony"]


def test_decoding_defaults_missing_currency_to_empty():
    response = _page([schedule_payload(1, with_currency=False)])

    assert response.schedule[0].currency == ""


def test_decoding_keeps_utc_offset():
    response = _page([schedule_payload(1)])

    start = response.schedule[0].start
    assert start == datetime(2024, 1, 10, 20, 0, tzinfo=timezone(timedelta(hours=1)))
    assert start.utcoffset() == timedelta(hours=1)


def test_envelope_error_reports_message_and_status():
    assert _page([]).envelope_error() is None

    not_ok = EventsResponse.model_validate({"status": 404, "message": "Not found"})
    assert "Expected message OK" in not_ok.envelope_error()

    bad_status = EventsResponse.model_validate({"status": 500, "message": "OK"})
    assert bad_status.envelope_error() == "Expected status 200, got 500."


def test_store_resolves_references():
    store = OccurrenceStore()
    store.add_page(_page([schedule_payload(1, performer_ids=[300, 301])]))

    (occurrence,) = store.occurrences
    assert occurrence.id == 1
    assert occurrence.venue.name == "MeetFactory"
    assert occurrence.event.name == "Hudební ceny Apollo 2018"
    assert [p.name for p in occurrence.performers] == ["Tata Bojs", "Vypsaná fixa"]
    assert occurrence.currency == "CZK"


def test_store_shares_records_between_occurrences():
    response = _page([schedule_payload(1), schedule_payload(2)])
    store = OccurrenceStore()
    first, second = store.add_page(response)

    assert first.venue is second.venue
    assert first.event is second.event
    assert first.performers[0] is second.performers[0]
    assert first.venue is response.venues[200]


def test_store_keeps_order_across_pages():
    store = OccurrenceStore()
    store.add_page(_page([schedule_payload(3), schedule_payload(1)], has_next=True))
    store.add_page(_page([schedule_payload(2)]))

    assert [o.id for o in store.occurrences] == [3, 1, 2]
    assert len(store) == 3
    assert store.pages_added == 2


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"venue_id": 999}, "Venue#999 referenced by Schedule#1 not in API response."),
        ({"event_id": 998}, "Event#998 referenced by Schedule#1 not in API response."),
        ({"performer_ids": [300, 997]}, "Performer#997 referenced by Schedule#1 not in API response."),
    ],
)
def test_store_rejects_dangling_references(overrides, message):
    store = OccurrenceStore()
    response = _page([schedule_payload(2), schedule_payload(1, **overrides)])

    with pytest.raises(DanglingReferenceError) as exc_info:
        store.add_page(response)

    assert str(exc_info.value) == message
    # nothing from the failing page is kept
    assert len(store) == 0


def test_store_rejects_schedule_ending_before_start():
    store = OccurrenceStore()
    response = _page(
        [
            schedule_payload(
                1,
                start="2024-01-10T20:00:00+01:00",
                end="2024-01-09T20:00:00+01:00",
            )
        ]
    )

    with pytest.raises(InvalidOccurrenceError):
        store.add_page(response)
