# tests/test_ics_encoder.py
from datetime import date, datetime, timezone

from icalendar import Calendar

from factories import at, make_long_term, make_occurrence
from goout_calendar.services.entry_renderer import render_entry
from goout_calendar.services.ics_encoder import encode_calendar
from goout_calendar.services.materializer import aggregate

PRODID = "-//test//goout-calendar//EN"


def _events(payload: bytes):
    calendar = Calendar.from_ical(payload)
    return calendar, [c for c in calendar.walk() if c.name == "VEVENT"]


def test_calendar_headers():
    calendar, events = _events(encode_calendar([], prodid=PRODID))

    assert str(calendar["PRODID"]) == PRODID
    assert str(calendar["VERSION"]) == "2.0"
    assert events == []


def test_timed_entry_is_encoded_in_utc():
    entry = render_entry(make_occurrence(id=42, start=at(10, 20), end=at(10, 22, 59, 59)), "en")

    payload = encode_calendar([entry], prodid=PRODID)
    _, (event,) = _events(payload)

    assert str(event["UID"]) == "Schedule#42@goout.net"
    assert event.decoded("DTSTART") == datetime(2024, 1, 10, 19, 0, tzinfo=timezone.utc)
    assert event.decoded("DTEND") == datetime(2024, 1, 10, 22, 0, tzinfo=timezone.utc)
    assert event.decoded("DTSTAMP") == datetime(2023, 12, 1, 7, 30, 15, tzinfo=timezone.utc)
    assert b"TZID" not in payload


def test_all_day_entry_uses_date_values():
    entry = render_entry(make_long_term(7, 1, 10), "en")

    payload = encode_calendar([entry], prodid=PRODID)
    _, (event,) = _events(payload)

    assert event.decoded("DTSTART") == date(2024, 1, 1)
    assert event.decoded("DTEND") == date(2024, 1, 11)
    assert b"DTSTART;VALUE=DATE:20240101" in payload


def test_status_location_geo_and_text_fields():
    entry = render_entry(make_occurrence(id=3, cancelled=True), "cs")

    _, (event,) = _events(encode_calendar([entry], prodid=PRODID))

    assert str(event["STATUS"]) == "CANCELLED"
    assert str(event["LOCATION"]) == "MeetFactory, Ke Sklárně 15, Praha 5, Czech Republic"
    geo = event["GEO"]
    assert (geo.latitude, geo.longitude) == (50.0533, 14.4082)
    assert str(event["SUMMARY"]).startswith("Zrušeno: ")
    assert str(event["DESCRIPTION"]) == entry.description
    assert str(event["URL"]) == "https://goout.net/en/events/e3/"


def test_confirmed_status_for_active_events():
    entry = render_entry(make_occurrence(id=3), "en")

    _, (event,) = _events(encode_calendar([entry], prodid=PRODID))

    assert str(event["STATUS"]) == "CONFIRMED"


def test_aggregated_summary_entry_has_no_location_or_url():
    entries = aggregate([make_long_term(1, 1, 10), make_long_term(2, 5, 15)], "en")

    _, (event,) = _events(encode_calendar(entries, prodid=PRODID))

    assert str(event["UID"]) == "LongTerm#20240101@goout.net"
    assert "LOCATION" not in event
    assert "GEO" not in event
    assert "URL" not in event
    assert str(event["SUMMARY"]) == "2 long-term events"


def test_entries_keep_their_order():
    entries = [render_entry(make_occurrence(id=i), "en") for i in (3, 1, 2)]

    _, events = _events(encode_calendar(entries, prodid=PRODID))

    assert [str(e["UID"]) for e in events] == [
        "Schedule#3@goout.net",
        "Schedule#1@goout.net",
        "Schedule#2@goout.net",
    ]
