# goout_calendar/services/materializer.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from goout_calendar.core.errors import CalendarFeedError
from goout_calendar.schemas.calendar import CalendarEntry, LongtermHandling
from goout_calendar.schemas.occurrence import Occurrence
from goout_calendar.services.entry_renderer import (
    UID_DOMAIN,
    build_summary,
    format_date_range,
    occurrence_date_range,
    render_entry,
)
from goout_calendar.services.localization import label, long_term_count

logger = logging.getLogger(__name__)

# Derived ids must never collide with real schedule ids or with each other.
BEGIN_ID_OFFSET = 1_000_000_000_000
END_ID_OFFSET = 2_000_000_000_000


class SweepIntegrityError(CalendarFeedError):
    """
    Raised when long-term occurrences are still active after the aggregate
    sweep has visited every break day. Indicates a construction defect, never
    bad user input.
    """


def materialize(
    occurrences: Sequence[Occurrence],
    language: str,
    longterm: LongtermHandling,
) -> List[CalendarEntry]:
    """
    Turn resolved occurrences into the ordered list of calendar entries.

    Pure function: no I/O, and the same input always yields the same output.
    """
    handler = _STRATEGIES[longterm]
    entries = handler(occurrences, language)
    logger.info(
        "Materialized %d occurrences into %d entries (longterm=%s)",
        len(occurrences),
        len(entries),
        longterm.value,
    )
    return entries


# --------------------------------------------------------------------------
# Preserve
# --------------------------------------------------------------------------

def preserve(occurrences: Sequence[Occurrence], language: str) -> List[CalendarEntry]:
    return [render_entry(occurrence, language) for occurrence in occurrences]


# --------------------------------------------------------------------------
# Split
# --------------------------------------------------------------------------

def split(occurrences: Sequence[Occurrence], language: str) -> List[CalendarEntry]:
    """
    Long-term occurrences are replaced by a "Begin:" entry on their first day
    and an "End:" entry on their last day; the rest pass through.

    A long-term occurrence that does not outlast its first day has no distinct
    last day and passes through as a single entry.
    """
    entries: List[CalendarEntry] = []
    for occurrence in occurrences:
        parts = split_occurrence(occurrence, language) if occurrence.is_long_term else None
        if parts is None:
            entries.append(render_entry(occurrence, language))
            continue

        begin, end = parts
        entries.append(render_entry(begin, language))
        entries.append(render_entry(end, language))
    return entries


def split_occurrence(
    occurrence: Occurrence, language: str
) -> Optional[tuple[Occurrence, Occurrence]]:
    """
    Derive the Begin and End parts of `occurrence`, or None when its first and
    last day coincide. The parts never overlap and never leave the original
    `[start, end]` span.
    """
    first_day_end = datetime.combine(
        occurrence.start.date(), time(23, 59, 59), tzinfo=occurrence.start.tzinfo
    )
    last_day_start = datetime.combine(
        occurrence.end.date(), time(0, 0, 0), tzinfo=occurrence.end.tzinfo
    )
    if last_day_start <= first_day_end:
        return None

    begin = occurrence.derive(
        id=occurrence.id + BEGIN_ID_OFFSET,
        end=min(first_day_end, occurrence.end),
        name_prefix=label(language, "begin"),
    )
    end = occurrence.derive(
        id=occurrence.id + END_ID_OFFSET,
        start=max(last_day_start, occurrence.start),
        name_prefix=label(language, "end"),
    )
    return begin, end


# --------------------------------------------------------------------------
# Aggregate
# --------------------------------------------------------------------------

@dataclass
class BreakDay:
    """
    A date on which the set of active long-term occurrences changes.

    Occurrences are keyed by their position in the sweep input, so two
    occurrences sharing a schedule id are tracked independently.
    """

    day: date
    starts: Dict[int, Occurrence] = field(default_factory=dict)
    end_positions: set[int] = field(default_factory=set)


@dataclass
class LongTermBlock:
    """
    Maximal run of days `[first_day, end_day)` covered by at least one
    long-term occurrence, with its members in activation order.
    """

    first_day: date
    end_day: date
    members: List[Occurrence]

    @property
    def last_day(self) -> date:
        return self.end_day - timedelta(days=1)


def aggregate(occurrences: Sequence[Occurrence], language: str) -> List[CalendarEntry]:
    """
    Short occurrences are rendered as-is, in input order. Overlapping long-term
    occurrences are coalesced into blocks which follow, in date order.
    """
    entries: List[CalendarEntry] = []
    long_term: List[Occurrence] = []
    for occurrence in occurrences:
        if occurrence.is_long_term:
            long_term.append(occurrence)
        else:
            entries.append(render_entry(occurrence, language))

    for block in sweep_long_term(build_break_days(long_term)):
        entries.append(render_block(block, language))
    return entries


def build_break_days(occurrences: Sequence[Occurrence]) -> Dict[date, BreakDay]:
    """
    Register every occurrence on its start date and on the day after its
    (inclusive) end date. Returned mapping is ordered by date.
    """
    break_days: Dict[date, BreakDay] = {}

    def _at(day: date) -> BreakDay:
        if day not in break_days:
            break_days[day] = BreakDay(day=day)
        return break_days[day]

    for position, occurrence in enumerate(occurrences):
        _at(occurrence.start.date()).starts[position] = occurrence
        _at(occurrence.end.date() + timedelta(days=1)).end_positions.add(position)

    return dict(sorted(break_days.items()))


def sweep_long_term(break_days: Dict[date, BreakDay]) -> List[LongTermBlock]:
    """
    Sweep break days in ascending order and emit a block each time the active
    set drains.

    Ends are applied before starts, so an occurrence starting on the day after
    another one ended opens a new block rather than extending the old one.
    """
    blocks: List[LongTermBlock] = []
    active: Dict[int, Occurrence] = {}
    members: List[Occurrence] = []
    block_start: date | None = None

    for day in sorted(break_days):
        break_day = break_days[day]

        for position in break_day.end_positions:
            active.pop(position, None)

        if not active and members:
            blocks.append(LongTermBlock(first_day=block_start, end_day=day, members=members))
            members = []
            block_start = None

        for position, occurrence in break_day.starts.items():
            if block_start is None:
                block_start = day
            active[position] = occurrence
            members.append(occurrence)

    if active or members:
        raise SweepIntegrityError(
            "Long-term occurrences still active after the sweep: "
            + ", ".join(f"Schedule#{occurrence.id}" for occurrence in active.values())
        )
    return blocks


def render_block(block: LongTermBlock, language: str) -> CalendarEntry:
    if len(block.members) == 1:
        return _render_single(block, language)
    return _render_summary(block, language)


def _render_single(block: LongTermBlock, language: str) -> CalendarEntry:
    (occurrence,) = block.members
    entry = render_entry(occurrence, language)
    covered = format_date_range(block.first_day, block.last_day)
    return entry.model_copy(
        update={
            "start": block.first_day,
            "end": block.end_day,
            "description": f"{entry.description}\n\n{covered}",
        }
    )


def _render_summary(block: LongTermBlock, language: str) -> CalendarEntry:
    sections = []
    for occurrence in block.members:
        entry = render_entry(occurrence, language, include_text=False)
        sections.append(
            "\n".join(
                (
                    build_summary(occurrence, language),
                    occurrence_date_range(occurrence),
                    entry.description,
                )
            )
        )

    return CalendarEntry(
        uid=f"LongTerm#{block.first_day:%Y%m%d}@{UID_DOMAIN}",
        created=block.members[0].uploaded_on.replace(microsecond=0),
        start=block.first_day,
        end=block.end_day,
        summary=long_term_count(language, len(block.members)),
        description="\n\n".join(sections),
    )


_STRATEGIES: Dict[LongtermHandling, Callable[[Sequence[Occurrence], str], List[CalendarEntry]]] = {
    LongtermHandling.PRESERVE: preserve,
    LongtermHandling.SPLIT: split,
    LongtermHandling.AGGREGATE: aggregate,
}
