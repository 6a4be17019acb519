"""All-time bests per age bracket for the dashboard ticker."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from runbike.core.constants import AGE_BRACKETS
from runbike.core.models import Person, TrainingAttempt

from .aggregation import active_attempts, people_index
from .filters import filter_by_type


@dataclass(frozen=True)
class AgeBracketBest:
    """The fastest recorded value for an age bracket and who set it."""

    age: int
    value: float
    person: Person

    def to_dict(self) -> dict[str, Any]:
        return {
            "age": self.age,
            "value": self.value,
            "person_id": self.person.id,
            "name": self.person.name,
            "small_image": self.person.small_image,
        }


def age_on(birthday: datetime.date, day: datetime.date) -> int:
    """Full years between a birthday and a given day."""
    before_birthday = (day.month, day.day) < (birthday.month, birthday.day)
    return day.year - birthday.year - int(before_birthday)


def find_age_bracket_bests(
    attempts: Iterable[TrainingAttempt],
    people: Iterable[Person],
    type_name: Optional[str],
) -> dict[int, Optional[AgeBracketBest]]:
    """Find the best value per age bracket for one drill.

    The age is taken on the day of each attempt, not today. People without a
    birthday on file and hidden people are skipped; ages outside the tracked
    brackets are ignored.

    Raises:
        DataIntegrityError: If an attempt value is not numeric, or an attempt
            references an unknown person.
    """
    bests: dict[int, Optional[AgeBracketBest]] = {age: None for age in AGE_BRACKETS}
    if not type_name:
        return bests

    index = people_index(people)
    for attempt in active_attempts(filter_by_type(attempts, type_name), index):
        person = index[attempt.person_id]
        if person.birthday is None:
            continue
        age = age_on(person.birthday, attempt.date)
        if age not in bests:
            continue
        value = attempt.numeric_value
        current = bests[age]
        if current is None or value < current.value:
            bests[age] = AgeBracketBest(age=age, value=value, person=person)
    return bests
