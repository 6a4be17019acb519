"""Race roster services."""

from .event_map import attempts_from_rows, build_event_map
from .registration import EDIT, JOIN, WITHDRAW, RegistrationService, check_transition
from .roster import (
    AVAILABLE,
    ENDED,
    REGISTERED,
    Roster,
    RosterEntry,
    classification_for,
    classify_roster,
    display_image,
    event_participants,
    upcoming_events,
)

__all__ = [
    "AVAILABLE",
    "EDIT",
    "ENDED",
    "JOIN",
    "REGISTERED",
    "WITHDRAW",
    "RegistrationService",
    "Roster",
    "RosterEntry",
    "attempts_from_rows",
    "build_event_map",
    "check_transition",
    "classification_for",
    "classify_roster",
    "display_image",
    "event_participants",
    "upcoming_events",
]
