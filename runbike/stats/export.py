"""CSV export of one day's results for one drill."""

from __future__ import annotations

import csv
import datetime
import io
from collections import defaultdict
from typing import Iterable

from runbike.core.constants import CSV_SCORE_COLUMNS
from runbike.core.models import Person, TrainingAttempt

from .aggregation import active_attempts, people_index

CSV_BOM = "\ufeff"


def _attempt_sort_key(attempt: TrainingAttempt) -> tuple[int, int, str]:
    """Numeric ids sort numerically, anything else after them as text."""
    try:
        return (0, int(attempt.id), "")
    except (TypeError, ValueError):
        return (1, 0, str(attempt.id))


def daily_csv_filename(type_name: str, day: datetime.date) -> str:
    return f"LR_{type_name}_{day.isoformat()}.csv"


def daily_csv(
    attempts: Iterable[TrainingAttempt],
    people: Iterable[Person],
    day: datetime.date,
    type_name: str,
) -> str:
    """Build the spreadsheet export: one row per active person, raw values.

    Returns an empty string when nobody trained that drill on that day.
    """
    index = people_index(people)
    selected = active_attempts(
        (a for a in attempts if a.date == day and a.type_name == type_name), index
    )

    values_by_name: dict[str, list[str]] = defaultdict(list)
    for attempt in sorted(selected, key=_attempt_sort_key):
        person = index[attempt.person_id]
        values_by_name[person.name].append(str(attempt.value))

    if not values_by_name:
        return ""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    score_headers = [f"Score{i}" for i in range(1, CSV_SCORE_COLUMNS + 1)]
    writer.writerow(["Date", "Name", "null", "null", *score_headers])
    for name in sorted(values_by_name):
        writer.writerow([day.isoformat(), name, "", "", *values_by_name[name]])
    return CSV_BOM + buffer.getvalue()
