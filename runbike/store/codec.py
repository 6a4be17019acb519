"""Conversion between Firestore documents and domain models."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from runbike.core.models import (
    LegacyRaceRow,
    Person,
    RaceAttempt,
    RaceEvent,
    RaceSeries,
    TrainingAttempt,
    TrainingType,
)
from runbike.errors import DataIntegrityError


def parse_date(raw: Any, context: str = "record") -> datetime.date:
    """Accept date objects, Firestore timestamps and 'YYYY-MM-DD' strings.

    Slashes are tolerated and any time part is dropped, as older rows were
    written in both forms.
    """
    if isinstance(raw, datetime.datetime):
        return raw.date()
    if isinstance(raw, datetime.date):
        return raw
    if isinstance(raw, str) and raw.strip():
        text = raw.strip().replace("/", "-").split("T")[0].split(" ")[0]
        try:
            return datetime.date.fromisoformat(text)
        except ValueError as e:
            raise DataIntegrityError(f"Invalid date {raw!r} on {context}.") from e
    raise DataIntegrityError(f"Missing date on {context}.")


def parse_optional_date(raw: Any, context: str = "record") -> Optional[datetime.date]:
    if raw in (None, ""):
        return None
    return parse_date(raw, context)


def _require(data: dict[str, Any], key: str, context: str) -> Any:
    value = data.get(key)
    if value in (None, ""):
        raise DataIntegrityError(f"Missing '{key}' on {context}.")
    return value


def _snapshot_data(doc: Any) -> dict[str, Any]:
    data = doc.to_dict()
    if data is None:
        raise DataIntegrityError(f"Document {doc.id} has no data.")
    return data


def person_from_doc(doc: Any) -> Person:
    data = _snapshot_data(doc)
    context = f"person {doc.id}"
    return Person(
        id=doc.id,
        name=str(_require(data, "name", context)),
        birthday=parse_optional_date(data.get("birthday"), context),
        hidden=bool(data.get("isHidden", False)),
        small_image=data.get("smallImage") or "",
        large_image=data.get("largeImage") or "",
        motto=data.get("motto") or "",
    )


def training_attempt_from_doc(doc: Any) -> TrainingAttempt:
    data = _snapshot_data(doc)
    context = f"training attempt {doc.id}"
    # The value stays raw here; aggregation parses it and fails loudly.
    return TrainingAttempt(
        id=doc.id,
        date=parse_date(data.get("date"), context),
        person_id=str(_require(data, "personId", context)),
        type_name=str(_require(data, "typeName", context)),
        value=data.get("value"),
    )


def race_event_from_doc(doc: Any) -> RaceEvent:
    data = _snapshot_data(doc)
    context = f"race event {doc.id}"
    return RaceEvent(
        id=doc.id,
        date=parse_date(data.get("date"), context),
        name=str(_require(data, "name", context)),
        series_id=data.get("seriesId") or "",
        series_name=data.get("seriesName") or "",
        address=data.get("address") or "",
        public_image=data.get("publicImage") or "",
    )


def race_attempt_from_doc(doc: Any) -> RaceAttempt:
    data = _snapshot_data(doc)
    context = f"race attempt {doc.id}"
    return RaceAttempt(
        id=doc.id,
        event_id=str(_require(data, "eventId", context)),
        person_id=str(_require(data, "personId", context)),
        result=data.get("result") or "",
        note=data.get("note") or "",
        personal_image=data.get("personalImage") or "",
    )


def training_type_from_doc(doc: Any) -> TrainingType:
    data = _snapshot_data(doc)
    return TrainingType(
        id=doc.id,
        name=str(_require(data, "name", f"training type {doc.id}")),
        is_default=bool(data.get("isDefault", False)),
    )


def race_series_from_doc(doc: Any) -> RaceSeries:
    data = _snapshot_data(doc)
    return RaceSeries(id=doc.id, name=str(_require(data, "name", f"series {doc.id}")))


def legacy_row_from_dict(data: dict[str, Any]) -> LegacyRaceRow:
    """Decode one row of the old flat race export.

    Column names follow the export: ``location`` for the address, ``score``
    for the result and ``people_id`` for the participant.
    """
    context = f"legacy race row {data.get('id') or data.get('event_id')}"
    person_id = data.get("people_id")
    row_id = data.get("id")
    return LegacyRaceRow(
        event_id=str(_require(data, "event_id", context)),
        date=parse_date(data.get("date"), context),
        name=str(data.get("name") or data.get("race_name") or ""),
        series_id=str(data.get("series_id") or ""),
        series_name=data.get("series_name") or "",
        address=data.get("location") or "",
        value=str(data.get("score") or ""),
        url=data.get("url") or "",
        person_id=str(person_id) if person_id not in (None, "") else None,
        id=str(row_id) if row_id not in (None, "") else None,
        note=data.get("note") or "",
    )
