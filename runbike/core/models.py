"""Domain models shared by the statistics engine and the web layer."""

from __future__ import annotations

import datetime
import math
from dataclasses import dataclass
from typing import Any, Optional

from runbike.core.constants import PREVIEW_MARKER
from runbike.errors import DataIntegrityError


def parse_value(raw: Any, attempt_id: Any = None) -> float:
    """Parse a stored training value into a float.

    Raises:
        DataIntegrityError: If the value is missing, not numeric, or not finite.
    """
    if isinstance(raw, bool) or raw is None:
        raise DataIntegrityError(
            f"Training attempt {attempt_id} has no numeric value ({raw!r})."
        )
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError) as e:
        raise DataIntegrityError(
            f"Training attempt {attempt_id} has a non-numeric value ({raw!r})."
        ) from e
    if not math.isfinite(value):
        raise DataIntegrityError(
            f"Training attempt {attempt_id} has a non-finite value ({raw!r})."
        )
    return value


@dataclass(frozen=True)
class Person:
    """A team member. Hidden people are retired from every active view."""

    id: str
    name: str
    birthday: Optional[datetime.date] = None
    hidden: bool = False
    small_image: str = ""
    large_image: str = ""
    motto: str = ""


@dataclass(frozen=True)
class TrainingType:
    """A kind of timed training drill, e.g. a 50m sprint."""

    id: str
    name: str
    is_default: bool = False


@dataclass(frozen=True)
class RaceSeries:
    """A named series that race events belong to."""

    id: str
    name: str


@dataclass(frozen=True)
class TrainingAttempt:
    """One timed training performance. Lower values are better."""

    id: str
    date: datetime.date
    person_id: str
    type_name: str
    value: Any

    @property
    def numeric_value(self) -> float:
        """The parsed value, raising DataIntegrityError when unparseable."""
        return parse_value(self.value, self.id)


@dataclass(frozen=True)
class RaceEvent:
    """A race occurrence, independent of who attends it."""

    id: str
    date: datetime.date
    name: str
    series_id: str = ""
    series_name: str = ""
    address: str = ""
    public_image: str = ""


@dataclass(frozen=True)
class RaceAttempt:
    """One person's participation record for one race event."""

    id: str
    event_id: str
    person_id: str
    result: str = ""
    note: str = ""
    personal_image: str = ""


@dataclass(frozen=True)
class LegacyRaceRow:
    """A race row from the old single-table export.

    Rows whose value is the PREVIEW marker describe the event itself rather
    than a participant.
    """

    event_id: str
    date: datetime.date
    name: str
    series_id: str = ""
    series_name: str = ""
    address: str = ""
    value: str = ""
    url: str = ""
    person_id: Optional[str] = None
    id: Optional[str] = None
    note: str = ""

    @property
    def is_preview(self) -> bool:
        return self.value == PREVIEW_MARKER

