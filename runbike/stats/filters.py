"""Date windows and categorical filters applied before aggregation."""

from __future__ import annotations

import calendar
import datetime
from dataclasses import dataclass
from typing import Iterable, TypeVar

from runbike.core.constants import QUICK_RANGES
from runbike.core.models import Person, RaceEvent, TrainingAttempt
from runbike.errors import ValidationError

T = TypeVar("T")

TIMING_ALL = "all"
TIMING_FUTURE = "future"
TIMING_PAST = "past"


def subtract_months(day: datetime.date, months: int) -> datetime.date:
    """Step back whole calendar months, clamping to the end of short months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar dates."""

    start: datetime.date
    end: datetime.date

    @classmethod
    def custom(cls, start: datetime.date, end: datetime.date) -> DateRange:
        if start > end:
            raise ValidationError("The start date must not be after the end date.")
        return cls(start, end)

    def __contains__(self, day: datetime.date) -> bool:
        return self.start <= day <= self.end


def quick_range(code: str, today: datetime.date) -> DateRange:
    """Resolve a preset window ('1W', '1M', '3M') ending today."""
    if code == "1W":
        start = today - datetime.timedelta(weeks=1)
    elif code == "1M":
        start = subtract_months(today, 1)
    elif code == "3M":
        start = subtract_months(today, 3)
    else:
        raise ValidationError(
            f"Unknown range '{code}'. Expected one of {', '.join(QUICK_RANGES)}."
        )
    return DateRange(start, today)


def filter_by_range(items: Iterable[T], date_range: DateRange) -> list[T]:
    """Keep items whose ``date`` falls inside the range."""
    return [
        item for item in items if item.date in date_range  # type: ignore[attr-defined]
    ]


def filter_by_type(
    attempts: Iterable[TrainingAttempt], type_name: str | None
) -> list[TrainingAttempt]:
    """Keep attempts of one training type; no type keeps everything."""
    if not type_name:
        return list(attempts)
    return [a for a in attempts if a.type_name == type_name]


def active_people(people: Iterable[Person]) -> list[Person]:
    return [p for p in people if not p.hidden]


def exclude_hidden(
    attempts: Iterable[TrainingAttempt], people: Iterable[Person]
) -> list[TrainingAttempt]:
    """Drop attempts owned by hidden (retired) people."""
    hidden_ids = {p.id for p in people if p.hidden}
    return [a for a in attempts if a.person_id not in hidden_ids]


def search_events(events: Iterable[RaceEvent], term: str | None) -> list[RaceEvent]:
    """Case-insensitive match on event name or series name."""
    if not term:
        return list(events)
    needle = term.strip().lower()
    return [
        e
        for e in events
        if needle in e.name.lower() or needle in e.series_name.lower()
    ]


def filter_by_series(
    events: Iterable[RaceEvent], series_name: str | None
) -> list[RaceEvent]:
    if not series_name:
        return list(events)
    return [e for e in events if e.series_name == series_name]


def filter_by_timing(
    events: Iterable[RaceEvent], when: str, today: datetime.date
) -> list[RaceEvent]:
    """Keep all, future (today included) or past events."""
    if when == TIMING_ALL:
        return list(events)
    if when == TIMING_FUTURE:
        return [e for e in events if e.date >= today]
    if when == TIMING_PAST:
        return [e for e in events if e.date < today]
    raise ValidationError(f"Unknown event filter '{when}'.")


def sort_events_desc(events: Iterable[RaceEvent]) -> list[RaceEvent]:
    """Most recent event first."""
    return sorted(events, key=lambda e: e.date, reverse=True)
