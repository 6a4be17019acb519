"""Per-person race roster: which events are registered, available or ended."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from runbike.core.constants import UPCOMING_RACES_LIMIT
from runbike.core.models import Person, RaceAttempt, RaceEvent
from runbike.errors import DataIntegrityError

REGISTERED = "registered"
AVAILABLE = "available"
ENDED = "ended"


def display_image(event: RaceEvent, attempt: Optional[RaceAttempt]) -> str:
    """A personal picture overrides the event picture when it differs."""
    personal = attempt.personal_image if attempt else ""
    if personal and personal != event.public_image:
        return personal
    return event.public_image


@dataclass(frozen=True)
class RosterEntry:
    """One event as seen by one person."""

    event: RaceEvent
    status: str
    attempt: Optional[RaceAttempt] = None

    @property
    def display_image(self) -> str:
        return display_image(self.event, self.attempt)

    def to_dict(self) -> dict[str, Any]:
        event = self.event
        return {
            "event_id": event.id,
            "date": event.date.isoformat(),
            "name": event.name,
            "series_id": event.series_id,
            "series_name": event.series_name,
            "address": event.address,
            "status": self.status,
            "attempt_id": self.attempt.id if self.attempt else None,
            "result": self.attempt.result if self.attempt else "",
            "note": self.attempt.note if self.attempt else "",
            "display_image": self.display_image,
        }


@dataclass
class Roster:
    registered: list[RosterEntry] = field(default_factory=list)
    available: list[RosterEntry] = field(default_factory=list)
    ended: list[RosterEntry] = field(default_factory=list)

    def entry_for(self, event_id: str) -> Optional[RosterEntry]:
        for entry in (*self.registered, *self.available, *self.ended):
            if entry.event.id == event_id:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            REGISTERED: [e.to_dict() for e in self.registered],
            AVAILABLE: [e.to_dict() for e in self.available],
            ENDED: [e.to_dict() for e in self.ended],
        }


def classification_for(roster: Roster, event_id: str) -> Optional[str]:
    """Status of an event for the roster's person, None when not shown."""
    entry = roster.entry_for(event_id)
    return entry.status if entry else None


def _attempts_by_event(
    person_id: str, attempts: Iterable[RaceAttempt], events: dict[str, RaceEvent]
) -> dict[str, RaceAttempt]:
    mine: dict[str, RaceAttempt] = {}
    for attempt in attempts:
        if attempt.person_id != person_id:
            continue
        if attempt.event_id not in events:
            raise DataIntegrityError(
                f"Race attempt {attempt.id} references unknown event "
                f"{attempt.event_id}."
            )
        if attempt.event_id in mine:
            raise DataIntegrityError(
                f"Person {person_id} has more than one attempt for event "
                f"{attempt.event_id}."
            )
        mine[attempt.event_id] = attempt
    return mine


def classify_roster(
    person_id: str,
    events: Iterable[RaceEvent],
    attempts: Iterable[RaceAttempt],
    today: datetime.date,
) -> Roster:
    """Partition every event for one person.

    Events today or later are future events. Past events the person never
    entered are left out entirely.

    Raises:
        DataIntegrityError: If one of the person's attempts references an
            unknown event, or the person has two attempts for one event.
    """
    events_by_id = {e.id: e for e in events}
    mine = _attempts_by_event(person_id, attempts, events_by_id)

    roster = Roster()
    for event in events_by_id.values():
        attempt = mine.get(event.id)
        is_future = event.date >= today
        if attempt is not None:
            status = REGISTERED if is_future else ENDED
        elif is_future:
            status = AVAILABLE
        else:
            continue
        getattr(roster, status).append(RosterEntry(event, status, attempt))

    roster.registered.sort(key=lambda e: e.event.date)
    roster.available.sort(key=lambda e: e.event.date)
    roster.ended.sort(key=lambda e: e.event.date, reverse=True)
    return roster


def upcoming_events(
    events: Iterable[RaceEvent],
    today: datetime.date,
    limit: int = UPCOMING_RACES_LIMIT,
) -> tuple[list[RaceEvent], bool]:
    """The next few events and whether more are scheduled after them."""
    future = sorted((e for e in events if e.date >= today), key=lambda e: e.date)
    return future[:limit], len(future) > limit


def event_participants(
    event: RaceEvent, attempts: Iterable[RaceAttempt], people: Iterable[Person]
) -> list[dict[str, Any]]:
    """Who entered an event. Retired people stay listed but are flagged."""
    index = {p.id: p for p in people}
    participants = []
    for attempt in attempts:
        if attempt.event_id != event.id:
            continue
        person = index.get(attempt.person_id)
        if person is None:
            raise DataIntegrityError(
                f"Race attempt {attempt.id} references unknown person "
                f"{attempt.person_id}."
            )
        participants.append(
            {
                "attempt_id": attempt.id,
                "person_id": person.id,
                "name": person.name,
                "retired": person.hidden,
                "result": attempt.result,
                "small_image": person.small_image,
            }
        )
    participants.sort(key=lambda p: p["name"])
    return participants
