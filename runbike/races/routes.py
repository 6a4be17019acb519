"""Routes for the races blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, request

from runbike.auth.decorators import login_required
from runbike.errors import NotFoundError
from runbike.stats.filters import (
    TIMING_ALL,
    filter_by_series,
    filter_by_timing,
    search_events,
    sort_events_desc,
)
from runbike.store import RecordStore
from runbike.utils import current_session, team_id, team_today, validate_form

from . import bp
from .forms import RaceEntryForm, RaceEventForm, WithdrawForm
from .services import RegistrationService, classify_roster, event_participants


def _event_dict(event, participants):
    return {
        "id": event.id,
        "date": event.date.isoformat(),
        "name": event.name,
        "series_id": event.series_id,
        "series_name": event.series_name,
        "address": event.address,
        "public_image": event.public_image,
        "participants": participants,
    }


def _series_for(db, series_id):
    series = next(
        (s for s in RecordStore.list_race_series(db) if s.id == series_id), None
    )
    if series is None:
        raise NotFoundError(f"No race series {series_id}.")
    return series


@bp.route("/events", methods=["GET"])
@login_required
def list_events():
    """List race events, newest first, with their participants."""
    db = firestore.client()
    tid = team_id()
    events = RecordStore.list_race_events(db, tid)
    events = search_events(events, request.args.get("q"))
    events = filter_by_series(events, request.args.get("series"))
    events = filter_by_timing(
        events, request.args.get("when") or TIMING_ALL, team_today()
    )

    attempts = RecordStore.list_race_attempts(db, tid)
    people = RecordStore.list_people(db, tid)
    return jsonify(
        {
            "events": [
                _event_dict(e, event_participants(e, attempts, people))
                for e in sort_events_desc(events)
            ]
        }
    )


@bp.route("/events", methods=["POST"])
@login_required(admin_required=True)
def create_event():
    """Create a race event."""
    form = RaceEventForm()
    validate_form(form)
    db = firestore.client()
    event_id = RecordStore.add_race_event(
        db,
        team_id(),
        form.date.data,
        form.name.data.strip(),
        _series_for(db, form.series_id.data),
        address=form.address.data or "",
        public_image=form.framed_image(),
    )
    current_app.logger.info(f"Created race event {event_id} ({form.name.data}).")
    return jsonify({"status": "success", "id": event_id}), 201


@bp.route("/events/<string:event_id>", methods=["POST"])
@login_required(admin_required=True)
def update_event(event_id):
    """Correct a race event."""
    form = RaceEventForm()
    validate_form(form)
    db = firestore.client()
    RecordStore.update_race_event(
        db,
        team_id(),
        event_id,
        form.date.data,
        form.name.data.strip(),
        _series_for(db, form.series_id.data),
        address=form.address.data or "",
        public_image=form.framed_image(),
    )
    return jsonify({"status": "success", "id": event_id})


@bp.route("/events/<string:event_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_event(event_id):
    """Delete a race event along with every entry on it."""
    removed = RecordStore.delete_race_event(firestore.client(), team_id(), event_id)
    current_app.logger.info(
        f"Deleted race event {event_id} and {removed} race attempts."
    )
    return jsonify({"status": "success", "id": event_id, "removed_attempts": removed})



@bp.route("/people/<string:person_id>/roster", methods=["GET"])
@login_required
def roster(person_id):
    """A person's races: registered, available and ended."""
    db = firestore.client()
    tid = team_id()
    person = RecordStore.get_person(db, tid, person_id)
    if person.hidden:
        raise NotFoundError(f"No active team member {person_id}.")
    result = classify_roster(
        person_id,
        RecordStore.list_race_events(db, tid),
        RecordStore.list_race_attempts(db, tid),
        team_today(),
    )
    return jsonify({"person_id": person_id, "roster": result.to_dict()})


@bp.route("/events/<string:event_id>/join", methods=["POST"])
@login_required
def join(event_id):
    """Register a person for an upcoming race."""
    form = RaceEntryForm()
    validate_form(form)
    attempt_id = RegistrationService.join(
        firestore.client(),
        team_id(),
        current_session(),
        form.person_id.data,
        event_id,
        team_today(),
        note=form.note.data or "",
        personal_image=form.framed_image(),
    )
    current_app.logger.info(
        f"Person {form.person_id.data} joined race {event_id} ({attempt_id})."
    )
    return jsonify({"status": "success", "attempt_id": attempt_id}), 201


@bp.route("/events/<string:event_id>/edit", methods=["POST"])
@login_required
def edit(event_id):
    """Update a person's result, note or picture for a race."""
    form = RaceEntryForm()
    validate_form(form)
    attempt_id = RegistrationService.edit(
        firestore.client(),
        team_id(),
        current_session(),
        form.person_id.data,
        event_id,
        team_today(),
        result=form.result.data or "",
        note=form.note.data or "",
        personal_image=form.framed_image() if form.image.data else None,
    )
    return jsonify({"status": "success", "attempt_id": attempt_id})


@bp.route("/events/<string:event_id>/withdraw", methods=["POST"])
@login_required
def withdraw(event_id):
    """Remove a person from a race."""
    form = WithdrawForm()
    validate_form(form)
    attempt_id = RegistrationService.withdraw(
        firestore.client(),
        team_id(),
        current_session(),
        form.person_id.data,
        event_id,
        team_today(),
    )
    current_app.logger.info(
        f"Person {form.person_id.data} withdrew from race {event_id}."
    )
    return jsonify({"status": "success", "attempt_id": attempt_id})
