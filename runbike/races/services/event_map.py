"""Rebuild race events and attempts from legacy flat race rows.

The old single-table export mixed two kinds of rows: PREVIEW rows that only
describe an event (and carry its public picture), and participant rows. Rows
arrive unsorted, so every row of an event is collected before the event is
finalized.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from runbike.core.models import LegacyRaceRow, RaceAttempt, RaceEvent
from runbike.errors import DataIntegrityError


def _smallest_url(rows: Iterable[LegacyRaceRow]) -> str:
    urls = [row.url for row in rows if row.url]
    return min(urls) if urls else ""


def _finalize_event(rows: list[LegacyRaceRow]) -> RaceEvent:
    previews = [row for row in rows if row.is_preview]
    others = [row for row in rows if not row.is_preview]
    meta = previews[0] if previews else rows[0]
    public_image = _smallest_url(previews) or _smallest_url(others)
    return RaceEvent(
        id=meta.event_id,
        date=meta.date,
        name=meta.name,
        series_id=meta.series_id,
        series_name=meta.series_name,
        address=meta.address,
        public_image=public_image,
    )


def build_event_map(rows: Iterable[LegacyRaceRow]) -> dict[str, RaceEvent]:
    """Collect rows by event id and build one RaceEvent per id."""
    by_event: dict[str, list[LegacyRaceRow]] = defaultdict(list)
    for row in rows:
        by_event[row.event_id].append(row)
    return {event_id: _finalize_event(group) for event_id, group in by_event.items()}


def _attempt_id(row: LegacyRaceRow) -> str:
    return row.id or f"{row.event_id}:{row.person_id}"


def attempts_from_rows(
    rows: Iterable[LegacyRaceRow], events: Optional[dict[str, RaceEvent]] = None
) -> list[RaceAttempt]:
    """Turn participant rows into RaceAttempts.

    A row url only becomes a personal picture when it differs from the
    event's public picture.

    Raises:
        DataIntegrityError: If a participant row has no person, or points at an
            event missing from ``events``.
    """
    rows = list(rows)
    if events is None:
        events = build_event_map(rows)

    attempts = []
    for row in rows:
        if row.is_preview:
            continue
        if not row.person_id:
            raise DataIntegrityError(
                f"Race row for event {row.event_id} has no participant."
            )
        event = events.get(row.event_id)
        if event is None:
            raise DataIntegrityError(
                f"Race row {_attempt_id(row)} references unknown event {row.event_id}."
            )
        personal = row.url if row.url and row.url != event.public_image else ""
        attempts.append(
            RaceAttempt(
                id=_attempt_id(row),
                event_id=row.event_id,
                person_id=row.person_id,
                result=row.value,
                note=row.note,
                personal_image=personal,
            )
        )
    return attempts
