# goout_calendar/core/errors.py


class CalendarFeedError(RuntimeError):
    """
    Base class for every failure that aborts building a calendar feed.

    Subclasses live next to the component that detects them (upstream client,
    occurrence store, materializer). The calendar route catches this base
    class only.
    """
