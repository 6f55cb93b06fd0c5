# goout_calendar/services/localization.py
"""
Literal lookup table for the few user-visible strings the feed produces.

Only Czech has its own table; every other language code falls back to English.
"""

_CZECH = "cs"

_LABELS: dict[str, dict[str, str]] = {
    _CZECH: {
        "begin": "Začátek: ",
        "end": "Konec: ",
        "cancelled": "Zrušeno: ",
    },
    "en": {
        "begin": "Begin: ",
        "end": "End: ",
        "cancelled": "Cancelled: ",
    },
}


def label(language: str, key: str) -> str:
    """
    Return the label `key` ("begin", "end" or "cancelled") for `language`.
    """
    table = _LABELS[_CZECH] if language == _CZECH else _LABELS["en"]
    return table[key]


def long_term_count(language: str, count: int) -> str:
    """
    Summary of an aggregated block, e.g. "3 long-term events".
    """
    if language == _CZECH:
        if 2 <= count <= 4:
            return f"{count} dlouhodobé akce"
        return f"{count} dlouhodobých akcí"
    return f"{count} long-term events"
