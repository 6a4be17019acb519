"""Aggregation of training attempts into daily summaries and trends.

Every function here is pure: it takes the full record lists fetched from the
store and returns fresh derived values. Hidden (retired) people are always
left out of the output.
"""

from __future__ import annotations

import datetime
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional

from runbike.core.models import Person, TrainingAttempt
from runbike.errors import DataIntegrityError

from .filters import exclude_hidden, filter_by_type
from .stability import simple_stability, summarize_values, weighted_stability


@dataclass(frozen=True)
class PlayerDailyStats:
    """One person's numbers for one drill on one day."""

    person_id: str
    name: str
    avg: float
    best: float
    stability: float
    count: int


@dataclass(frozen=True)
class DailySummary:
    """All active people who trained a drill on a given day."""

    date: datetime.date
    type_name: str
    players: tuple[PlayerDailyStats, ...]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        data["players"] = [asdict(p) for p in self.players]
        return data


@dataclass(frozen=True)
class PersonDailyTrend:
    """One day of a single person's history for a drill."""

    date: datetime.date
    avg: float
    best: float
    stability: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def people_index(people: Iterable[Person]) -> dict[str, Person]:
    return {p.id: p for p in people}


def resolve_person(index: dict[str, Person], attempt: TrainingAttempt) -> Person:
    """Look up the owner of an attempt.

    Raises:
        DataIntegrityError: If the attempt points at an unknown person.
    """
    person = index.get(attempt.person_id)
    if person is None:
        raise DataIntegrityError(
            f"Training attempt {attempt.id} references unknown person "
            f"{attempt.person_id}."
        )
    return person


def active_attempts(
    attempts: Iterable[TrainingAttempt], index: dict[str, Person]
) -> list[TrainingAttempt]:
    """Attempts of active people. Every owner must be known."""
    selected = list(attempts)
    for attempt in selected:
        resolve_person(index, attempt)
    return exclude_hidden(selected, index.values())


def _player_stats(person: Person, values: list[float]) -> PlayerDailyStats:
    summary = summarize_values(values)
    return PlayerDailyStats(
        person_id=person.id,
        name=person.name,
        avg=summary.avg,
        best=summary.best,
        stability=simple_stability(values),
        count=summary.count,
    )


def build_daily_summaries(
    attempts: Iterable[TrainingAttempt],
    people: Iterable[Person],
    type_name: Optional[str] = None,
) -> list[DailySummary]:
    """Group attempts by (date, drill) and then by person.

    Players are ordered fastest best first; summaries newest day first.

    Raises:
        DataIntegrityError: If any attempt value is not numeric, or an attempt
            references an unknown person.
    """
    index = people_index(people)
    active = active_attempts(filter_by_type(attempts, type_name), index)

    grouped: dict[tuple[datetime.date, str], dict[str, list[float]]] = defaultdict(
        lambda: defaultdict(list)
    )
    for attempt in active:
        grouped[(attempt.date, attempt.type_name)][attempt.person_id].append(
            attempt.numeric_value
        )

    summaries = []
    for (day, drill), by_person in grouped.items():
        players = [
            _player_stats(index[pid], values) for pid, values in by_person.items()
        ]
        players.sort(key=lambda p: (p.best, p.name, p.person_id))
        summaries.append(DailySummary(day, drill, tuple(players)))

    summaries.sort(key=lambda s: s.type_name)
    summaries.sort(key=lambda s: s.date, reverse=True)
    return summaries


def build_person_trend(
    attempts: Iterable[TrainingAttempt],
    person: Person,
    type_name: Optional[str] = None,
) -> list[PersonDailyTrend]:
    """Per-day history of one person, newest day first."""
    if person.hidden:
        return []

    by_day: dict[datetime.date, list[float]] = defaultdict(list)
    for attempt in filter_by_type(attempts, type_name):
        if attempt.person_id == person.id:
            by_day[attempt.date].append(attempt.numeric_value)

    trend = []
    for day, values in by_day.items():
        summary = summarize_values(values)
        trend.append(
            PersonDailyTrend(
                date=day,
                avg=summary.avg,
                best=summary.best,
                stability=weighted_stability(values),
                count=summary.count,
            )
        )
    trend.sort(key=lambda t: t.date, reverse=True)
    return trend


def personal_best(
    attempts: Iterable[TrainingAttempt], person: Person, type_name: str
) -> Optional[float]:
    """All-time best (lowest) value for one person and drill."""
    if person.hidden:
        return None
    values = [
        a.numeric_value
        for a in filter_by_type(attempts, type_name)
        if a.person_id == person.id
    ]
    return min(values) if values else None


def attempts_for_day(
    attempts: Iterable[TrainingAttempt],
    person_id: str,
    day: datetime.date,
    type_name: Optional[str] = None,
) -> list[TrainingAttempt]:
    """One person's attempts on one day, best first."""
    selected = [
        a
        for a in filter_by_type(attempts, type_name)
        if a.person_id == person_id and a.date == day
    ]
    return sorted(selected, key=lambda a: a.numeric_value)
