"""Routes for the training blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, request

from runbike.auth.decorators import login_required
from runbike.errors import NotFoundError, ValidationError
from runbike.stats import attempts_for_day, build_person_trend, personal_best
from runbike.store import RecordStore
from runbike.utils import current_session, parse_date_arg, team_id, validate_form

from . import bp
from .forms import TrainingAttemptForm, TrainingValueForm


def _active_person(db, person_id):
    """Fetch a person, treating retired people as missing."""
    person = RecordStore.get_person(db, team_id(), person_id)
    if person.hidden:
        raise NotFoundError(f"No active team member {person_id}.")
    return person


@bp.route("/people/<string:person_id>/trend", methods=["GET"])
@login_required
def trend(person_id):
    """Day-by-day history of one person, newest first."""
    db = firestore.client()
    person = _active_person(db, person_id)
    type_name = request.args.get("type") or None
    attempts = RecordStore.list_training_attempts(db, team_id())
    history = build_person_trend(attempts, person, type_name)
    return jsonify(
        {
            "person_id": person.id,
            "name": person.name,
            "type": type_name,
            "personal_best": (
                personal_best(attempts, person, type_name) if type_name else None
            ),
            "trend": [t.to_dict() for t in history],
        }
    )


@bp.route("/people/<string:person_id>/day/<string:day>", methods=["GET"])
@login_required
def day_detail(person_id, day):
    """Every attempt of one person on one day, best first."""
    db = firestore.client()
    person = _active_person(db, person_id)
    date = parse_date_arg(day, "day")
    selected = attempts_for_day(
        RecordStore.list_training_attempts(db, team_id()),
        person.id,
        date,
        request.args.get("type") or None,
    )
    return jsonify(
        {
            "person_id": person.id,
            "date": date.isoformat(),
            "attempts": [
                {"id": a.id, "type": a.type_name, "value": a.numeric_value}
                for a in selected
            ],
        }
    )


@bp.route("/attempts", methods=["POST"])
@login_required
def add_attempt():
    """Record a timed attempt."""
    form = TrainingAttemptForm()
    validate_form(form)
    current_session().require_person(form.person_id.data)
    db = firestore.client()
    person = _active_person(db, form.person_id.data)
    type_name = form.type_name.data.strip()
    if not any(t.name == type_name for t in RecordStore.list_training_types(db)):
        raise ValidationError(f"Unknown training type '{type_name}'.")
    attempt_id = RecordStore.add_training_attempt(
        db, team_id(), person.id, type_name, form.date.data, form.value.data
    )
    current_app.logger.info(
        f"Recorded {type_name} attempt {attempt_id} for person {person.id}."
    )
    return jsonify({"status": "success", "id": attempt_id}), 201


@bp.route("/attempts/<string:attempt_id>", methods=["POST"])
@login_required
def edit_attempt(attempt_id):
    """Correct the time of an attempt."""
    form = TrainingValueForm()
    validate_form(form)
    db = firestore.client()
    tid = team_id()
    attempt = RecordStore.get_training_attempt(db, tid, attempt_id)
    current_session().require_person(attempt.person_id)
    RecordStore.update_training_value(
        db, tid, attempt_id, form.value.data, day=form.date.data
    )
    return jsonify({"status": "success", "id": attempt_id})


@bp.route("/attempts/<string:attempt_id>/delete", methods=["POST"])
@login_required
def delete_attempt(attempt_id):
    """Delete an attempt."""
    db = firestore.client()
    tid = team_id()
    attempt = RecordStore.get_training_attempt(db, tid, attempt_id)
    current_session().require_person(attempt.person_id)
    RecordStore.delete_training_attempt(db, tid, attempt_id)
    current_app.logger.info(f"Deleted training attempt {attempt_id}.")
    return jsonify({"status": "success", "id": attempt_id})
