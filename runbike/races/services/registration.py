"""Join, edit and withdraw actions on a person's race roster.

The roster classification is the single source of truth for which action is
legal, so it is re-derived from the store before every action.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Optional

from runbike.core.models import RaceAttempt
from runbike.core.session import Session
from runbike.errors import InvalidTransitionError, NotFoundError, ValidationError
from runbike.store import RecordStore

from .roster import (
    AVAILABLE,
    ENDED,
    REGISTERED,
    Roster,
    RosterEntry,
    classification_for,
    classify_roster,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

JOIN = "join"
EDIT = "edit"
WITHDRAW = "withdraw"

ALLOWED_STATUSES = {
    JOIN: (AVAILABLE,),
    EDIT: (REGISTERED, ENDED),
    WITHDRAW: (REGISTERED, ENDED),
}


def check_transition(action: str, status: Optional[str]) -> None:
    """Raise InvalidTransitionError unless ``action`` is legal in ``status``."""
    if action not in ALLOWED_STATUSES:
        raise ValueError(f"Unknown race action: {action}")
    if status not in ALLOWED_STATUSES[action]:
        raise InvalidTransitionError(action, status)


def _existing_attempt(entry: Optional[RosterEntry], action: str) -> RaceAttempt:
    if entry is None or entry.attempt is None:
        raise InvalidTransitionError(action, entry.status if entry else None)
    return entry.attempt


class RegistrationService:
    """Applies roster actions for one person and one event."""

    @staticmethod
    def _current_roster(
        db: Client, team_id: str, person_id: str, event_id: str, today: datetime.date
    ) -> Roster:
        people = {p.id: p for p in RecordStore.list_people(db, team_id)}
        person = people.get(person_id)
        if person is None or person.hidden:
            raise NotFoundError(f"No active team member {person_id}.")
        events = RecordStore.list_race_events(db, team_id)
        if not any(e.id == event_id for e in events):
            raise NotFoundError(f"No race event {event_id}.")
        attempts = RecordStore.list_race_attempts(db, team_id)
        return classify_roster(person_id, events, attempts, today)

    @staticmethod
    def _entry_for_action(
        db: Client,
        team_id: str,
        session: Session,
        action: str,
        person_id: str,
        event_id: str,
        today: datetime.date,
    ) -> Optional[RosterEntry]:
        session.require_person(person_id)
        roster = RegistrationService._current_roster(
            db, team_id, person_id, event_id, today
        )
        check_transition(action, classification_for(roster, event_id))
        return roster.entry_for(event_id)

    @staticmethod
    def join(
        db: Client,
        team_id: str,
        session: Session,
        person_id: str,
        event_id: str,
        today: datetime.date,
        note: str = "",
        personal_image: str = "",
    ) -> str:
        """Register a person for an upcoming event; returns the attempt id."""
        RegistrationService._entry_for_action(
            db, team_id, session, JOIN, person_id, event_id, today
        )
        return RecordStore.add_race_attempt(
            db, team_id, event_id, person_id, note=note, personal_image=personal_image
        )

    @staticmethod
    def edit(
        db: Client,
        team_id: str,
        session: Session,
        person_id: str,
        event_id: str,
        today: datetime.date,
        result: str = "",
        note: str = "",
        personal_image: Optional[str] = None,
    ) -> str:
        """Update result, note and picture in place; returns the attempt id.

        Once the event is over the result is required. Leaving
        ``personal_image`` as None keeps the current picture.
        """
        entry = RegistrationService._entry_for_action(
            db, team_id, session, EDIT, person_id, event_id, today
        )
        attempt = _existing_attempt(entry, EDIT)
        result = (result or "").strip()
        if entry.status == ENDED and not result:
            raise ValidationError("Enter the race result for a finished race.")
        if personal_image is None:
            personal_image = attempt.personal_image
        RecordStore.update_race_attempt(
            db, team_id, attempt.id, result, note, personal_image
        )
        return attempt.id

    @staticmethod
    def withdraw(
        db: Client,
        team_id: str,
        session: Session,
        person_id: str,
        event_id: str,
        today: datetime.date,
    ) -> str:
        """Remove a person's attempt; returns the removed attempt id."""
        entry = RegistrationService._entry_for_action(
            db, team_id, session, WITHDRAW, person_id, event_id, today
        )
        attempt = _existing_attempt(entry, WITHDRAW)
        RecordStore.delete_race_attempt(db, team_id, attempt.id)
        return attempt.id
