"""Firestore-backed record store for people, attempts and race events."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, TypeVar, cast

from firebase_admin import firestore
from werkzeug.security import generate_password_hash

from runbike.core.constants import (
    PEOPLE_COLLECTION,
    RACE_ATTEMPTS_COLLECTION,
    RACE_EVENTS_COLLECTION,
    RACE_SERIES_COLLECTION,
    TRAINING_ATTEMPTS_COLLECTION,
    TRAINING_TYPES_COLLECTION,
)
from runbike.core.models import (
    Person,
    RaceAttempt,
    RaceEvent,
    RaceSeries,
    TrainingAttempt,
    TrainingType,
)
from runbike.errors import (
    DuplicateResourceError,
    NotFoundError,
    ResourceInUseError,
)

from .codec import (
    person_from_doc,
    race_attempt_from_doc,
    race_event_from_doc,
    race_series_from_doc,
    training_attempt_from_doc,
    training_type_from_doc,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

T = TypeVar("T")


def _team_query(db: Client, collection: str, team_id: str) -> Any:
    return db.collection(collection).where(
        filter=firestore.FieldFilter("teamId", "==", team_id)
    )


def _decode_all(query: Any, decode: Callable[[Any], T]) -> list[T]:
    return [decode(doc) for doc in query.stream() if doc.exists]


def _delete_matching(query: Any) -> int:
    docs = [doc for doc in query.stream() if doc.exists]
    for doc in docs:
        doc.reference.delete()
    return len(docs)


def _update_matching(query: Any, data: dict[str, Any]) -> int:
    docs = [doc for doc in query.stream() if doc.exists]
    for doc in docs:
        doc.reference.update(data)
    return len(docs)


def _get_doc(db: Client, collection: str, doc_id: str) -> dict[str, Any]:
    """Fetch a shared (not team-scoped) document."""
    doc = cast("DocumentSnapshot", db.collection(collection).document(doc_id).get())
    data = doc.to_dict() if doc.exists else None
    if not data:
        raise NotFoundError(f"No record {doc_id} in {collection}.")
    return data


def _event_payload(
    day: datetime.date,
    name: str,
    series: RaceSeries,
    address: str,
    public_image: str,
) -> dict[str, Any]:
    return {
        "date": day.isoformat(),
        "name": name,
        "seriesId": series.id,
        "seriesName": series.name,
        "address": address,
        "publicImage": public_image,
    }


def _clear_default_type(
    db: Client, existing: Iterable[TrainingType], keep: Optional[str] = None
) -> None:
    for t in existing:
        if t.is_default and t.id != keep:
            db.collection(TRAINING_TYPES_COLLECTION).document(t.id).update(
                {"isDefault": False}
            )


class RecordStore:
    """Reads and writes team records. Last write wins; there is no locking."""

    # Reads

    @staticmethod
    def list_people(db: Client, team_id: str) -> list[Person]:
        """All people of a team, retired ones included, active first."""
        people = _decode_all(
            _team_query(db, PEOPLE_COLLECTION, team_id), person_from_doc
        )
        people.sort(key=lambda p: (p.hidden, p.name))
        return people

    @staticmethod
    def list_training_attempts(db: Client, team_id: str) -> list[TrainingAttempt]:
        return _decode_all(
            _team_query(db, TRAINING_ATTEMPTS_COLLECTION, team_id),
            training_attempt_from_doc,
        )

    @staticmethod
    def list_race_events(db: Client, team_id: str) -> list[RaceEvent]:
        return _decode_all(
            _team_query(db, RACE_EVENTS_COLLECTION, team_id), race_event_from_doc
        )

    @staticmethod
    def list_race_attempts(db: Client, team_id: str) -> list[RaceAttempt]:
        return _decode_all(
            _team_query(db, RACE_ATTEMPTS_COLLECTION, team_id), race_attempt_from_doc
        )

    @staticmethod
    def list_training_types(db: Client) -> list[TrainingType]:
        """Training types, default first, then by name."""
        types = _decode_all(
            db.collection(TRAINING_TYPES_COLLECTION), training_type_from_doc
        )
        types.sort(key=lambda t: (not t.is_default, t.name))
        return types

    @staticmethod
    def list_race_series(db: Client) -> list[RaceSeries]:
        series = _decode_all(
            db.collection(RACE_SERIES_COLLECTION), race_series_from_doc
        )
        series.sort(key=lambda s: s.name)
        return series

    @staticmethod
    def get_training_attempt(
        db: Client, team_id: str, attempt_id: str
    ) -> TrainingAttempt:
        RecordStore._get_team_doc(
            db, TRAINING_ATTEMPTS_COLLECTION, team_id, attempt_id
        )
        doc = db.collection(TRAINING_ATTEMPTS_COLLECTION).document(attempt_id).get()
        return training_attempt_from_doc(doc)

    @staticmethod
    def get_person(db: Client, team_id: str, person_id: str) -> Person:
        RecordStore._get_team_doc(db, PEOPLE_COLLECTION, team_id, person_id)
        doc = db.collection(PEOPLE_COLLECTION).document(person_id).get()
        return person_from_doc(doc)

    @staticmethod
    def get_person_data(db: Client, team_id: str, person_id: str) -> dict[str, Any]:
        """Raw person document, including the password hash."""
        return RecordStore._get_team_doc(db, PEOPLE_COLLECTION, team_id, person_id)

    # Writes

    @staticmethod
    def _get_team_doc(
        db: Client, collection: str, team_id: str, doc_id: str
    ) -> dict[str, Any]:
        doc = cast("DocumentSnapshot", db.collection(collection).document(doc_id).get())
        data = doc.to_dict() if doc.exists else None
        if not data or data.get("teamId") != team_id:
            raise NotFoundError(f"No record {doc_id} in {collection}.")
        return data

    @staticmethod
    def _add(db: Client, collection: str, data: dict[str, Any]) -> str:
        new_ref = db.collection(collection).document()
        data["createdAt"] = firestore.SERVER_TIMESTAMP
        new_ref.set(data)
        return new_ref.id

    @staticmethod
    def _update(
        db: Client, collection: str, team_id: str, doc_id: str, data: dict[str, Any]
    ) -> None:
        RecordStore._get_team_doc(db, collection, team_id, doc_id)
        data["updatedAt"] = firestore.SERVER_TIMESTAMP
        db.collection(collection).document(doc_id).update(data)

    @staticmethod
    def _delete(db: Client, collection: str, team_id: str, doc_id: str) -> None:
        RecordStore._get_team_doc(db, collection, team_id, doc_id)
        db.collection(collection).document(doc_id).delete()

    @staticmethod
    def add_training_attempt(
        db: Client,
        team_id: str,
        person_id: str,
        type_name: str,
        day: datetime.date,
        value: float,
    ) -> str:
        return RecordStore._add(
            db,
            TRAINING_ATTEMPTS_COLLECTION,
            {
                "teamId": team_id,
                "personId": person_id,
                "typeName": type_name,
                "date": day.isoformat(),
                "value": value,
            },
        )

    @staticmethod
    def update_training_value(
        db: Client,
        team_id: str,
        attempt_id: str,
        value: float,
        day: Optional[datetime.date] = None,
    ) -> None:
        data: dict[str, Any] = {"value": value}
        if day is not None:
            data["date"] = day.isoformat()
        RecordStore._update(db, TRAINING_ATTEMPTS_COLLECTION, team_id, attempt_id, data)

    @staticmethod
    def delete_training_attempt(db: Client, team_id: str, attempt_id: str) -> None:
        RecordStore._delete(db, TRAINING_ATTEMPTS_COLLECTION, team_id, attempt_id)

    @staticmethod
    def add_race_event(
        db: Client,
        team_id: str,
        day: datetime.date,
        name: str,
        series: RaceSeries,
        address: str = "",
        public_image: str = "",
    ) -> str:
        data = _event_payload(day, name, series, address, public_image)
        data["teamId"] = team_id
        return RecordStore._add(db, RACE_EVENTS_COLLECTION, data)

    @staticmethod
    def update_race_event(
        db: Client,
        team_id: str,
        event_id: str,
        day: datetime.date,
        name: str,
        series: RaceSeries,
        address: str = "",
        public_image: str = "",
    ) -> None:
        RecordStore._update(
            db,
            RACE_EVENTS_COLLECTION,
            team_id,
            event_id,
            _event_payload(day, name, series, address, public_image),
        )

    @staticmethod
    def delete_race_event(db: Client, team_id: str, event_id: str) -> int:
        """Delete an event and every race attempt on it.

        Returns:
            The number of race attempts removed with the event.
        """
        RecordStore._get_team_doc(db, RACE_EVENTS_COLLECTION, team_id, event_id)
        removed = _delete_matching(
            _team_query(db, RACE_ATTEMPTS_COLLECTION, team_id).where(
                filter=firestore.FieldFilter("eventId", "==", event_id)
            )
        )
        db.collection(RACE_EVENTS_COLLECTION).document(event_id).delete()
        return removed

    @staticmethod
    def add_race_attempt(
        db: Client,
        team_id: str,
        event_id: str,
        person_id: str,
        result: str = "",
        note: str = "",
        personal_image: str = "",
    ) -> str:
        return RecordStore._add(
            db,
            RACE_ATTEMPTS_COLLECTION,
            {
                "teamId": team_id,
                "eventId": event_id,
                "personId": person_id,
                "result": result,
                "note": note,
                "personalImage": personal_image,
            },
        )

    @staticmethod
    def update_race_attempt(
        db: Client,
        team_id: str,
        attempt_id: str,
        result: str,
        note: str,
        personal_image: str,
    ) -> None:
        RecordStore._update(
            db,
            RACE_ATTEMPTS_COLLECTION,
            team_id,
            attempt_id,
            {"result": result, "note": note, "personalImage": personal_image},
        )

    @staticmethod
    def delete_race_attempt(db: Client, team_id: str, attempt_id: str) -> None:
        RecordStore._delete(db, RACE_ATTEMPTS_COLLECTION, team_id, attempt_id)

    @staticmethod
    def save_person(
        db: Client,
        team_id: str,
        name: str,
        birthday: Optional[datetime.date] = None,
        small_image: str = "",
        large_image: str = "",
        motto: str = "",
        password: Optional[str] = None,
        person_id: Optional[str] = None,
    ) -> str:
        """Create a person, or update one when ``person_id`` is given."""
        data: dict[str, Any] = {
            "name": name,
            "birthday": birthday.isoformat() if birthday else "",
            "smallImage": small_image,
            "largeImage": large_image,
            "motto": motto,
        }
        if password:
            data["passwordHash"] = generate_password_hash(password)
        if person_id:
            RecordStore._update(db, PEOPLE_COLLECTION, team_id, person_id, data)
            return person_id
        data["teamId"] = team_id
        data["isHidden"] = False
        return RecordStore._add(db, PEOPLE_COLLECTION, data)

    @staticmethod
    def set_person_hidden(
        db: Client, team_id: str, person_id: str, hidden: bool
    ) -> None:
        RecordStore._update(
            db, PEOPLE_COLLECTION, team_id, person_id, {"isHidden": hidden}
        )

    @staticmethod
    def delete_person(db: Client, team_id: str, person_id: str) -> int:
        """Delete a person together with their training and race attempts.

        Returns:
            The number of attempts removed with the person.
        """
        RecordStore._get_team_doc(db, PEOPLE_COLLECTION, team_id, person_id)
        removed = 0
        for collection in (TRAINING_ATTEMPTS_COLLECTION, RACE_ATTEMPTS_COLLECTION):
            removed += _delete_matching(
                _team_query(db, collection, team_id).where(
                    filter=firestore.FieldFilter("personId", "==", person_id)
                )
            )
        db.collection(PEOPLE_COLLECTION).document(person_id).delete()
        return removed

    @staticmethod
    def add_training_type(db: Client, name: str, is_default: bool = False) -> str:
        existing = RecordStore.list_training_types(db)
        if any(t.name == name for t in existing):
            raise DuplicateResourceError(f"Training type '{name}' already exists.")
        if is_default:
            _clear_default_type(db, existing)
        new_ref = db.collection(TRAINING_TYPES_COLLECTION).document()
        new_ref.set({"name": name, "isDefault": is_default})
        return new_ref.id

    @staticmethod
    def update_training_type(
        db: Client, type_id: str, name: str, is_default: bool = False
    ) -> int:
        """Rename a training type or make it the default.

        Attempts store the type by name, so a rename is carried over to them.

        Returns:
            The number of training attempts renamed.
        """
        current = _get_doc(db, TRAINING_TYPES_COLLECTION, type_id)
        old_name = current.get("name")
        existing = RecordStore.list_training_types(db)
        if any(t.name == name and t.id != type_id for t in existing):
            raise DuplicateResourceError(f"Training type '{name}' already exists.")
        if is_default:
            _clear_default_type(db, existing, keep=type_id)
        db.collection(TRAINING_TYPES_COLLECTION).document(type_id).update(
            {"name": name, "isDefault": is_default}
        )
        if old_name == name:
            return 0
        return _update_matching(
            db.collection(TRAINING_ATTEMPTS_COLLECTION).where(
                filter=firestore.FieldFilter("typeName", "==", old_name)
            ),
            {"typeName": name},
        )

    @staticmethod
    def delete_training_type(db: Client, type_id: str) -> None:
        """Delete a training type no attempt uses."""
        current = _get_doc(db, TRAINING_TYPES_COLLECTION, type_id)
        in_use = db.collection(TRAINING_ATTEMPTS_COLLECTION).where(
            filter=firestore.FieldFilter("typeName", "==", current.get("name"))
        )
        if any(doc.exists for doc in in_use.stream()):
            raise ResourceInUseError(
                f"Training type '{current.get('name')}' still has attempts."
            )
        db.collection(TRAINING_TYPES_COLLECTION).document(type_id).delete()

    @staticmethod
    def add_race_series(db: Client, name: str) -> str:
        if any(s.name == name for s in RecordStore.list_race_series(db)):
            raise DuplicateResourceError(f"Race series '{name}' already exists.")
        new_ref = db.collection(RACE_SERIES_COLLECTION).document()
        new_ref.set({"name": name})
        return new_ref.id

    @staticmethod
    def update_race_series(db: Client, series_id: str, name: str) -> int:
        """Rename a race series and the series name copied onto its events.

        Returns:
            The number of race events renamed.
        """
        _get_doc(db, RACE_SERIES_COLLECTION, series_id)
        if any(
            s.name == name and s.id != series_id
            for s in RecordStore.list_race_series(db)
        ):
            raise DuplicateResourceError(f"Race series '{name}' already exists.")
        db.collection(RACE_SERIES_COLLECTION).document(series_id).update(
            {"name": name}
        )
        return _update_matching(
            db.collection(RACE_EVENTS_COLLECTION).where(
                filter=firestore.FieldFilter("seriesId", "==", series_id)
            ),
            {"seriesName": name},
        )

    @staticmethod
    def delete_race_series(db: Client, series_id: str) -> None:
        """Delete a race series no event belongs to."""
        current = _get_doc(db, RACE_SERIES_COLLECTION, series_id)
        events = db.collection(RACE_EVENTS_COLLECTION).where(
            filter=firestore.FieldFilter("seriesId", "==", series_id)
        )
        if any(doc.exists for doc in events.stream()):
            raise ResourceInUseError(
                f"Race series '{current.get('name')}' still has events."
            )
        db.collection(RACE_SERIES_COLLECTION).document(series_id).delete()

    @staticmethod
    def import_race_records(
        db: Client,
        team_id: str,
        events: Iterable[RaceEvent],
        attempts: Iterable[RaceAttempt],
    ) -> tuple[int, int]:
        """Write rebuilt events and attempts under their original ids.

        Re-running an import overwrites the same documents.
        """
        event_count = 0
        for event in events:
            db.collection(RACE_EVENTS_COLLECTION).document(event.id).set(
                {
                    "teamId": team_id,
                    "date": event.date.isoformat(),
                    "name": event.name,
                    "seriesId": event.series_id,
                    "seriesName": event.series_name,
                    "address": event.address,
                    "publicImage": event.public_image,
                }
            )
            event_count += 1
        attempt_count = 0
        for attempt in attempts:
            db.collection(RACE_ATTEMPTS_COLLECTION).document(attempt.id).set(
                {
                    "teamId": team_id,
                    "eventId": attempt.event_id,
                    "personId": attempt.person_id,
                    "result": attempt.result,
                    "note": attempt.note,
                    "personalImage": attempt.personal_image,
                }
            )
            attempt_count += 1
        return event_count, attempt_count
