"""Routes for the people blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify

from runbike.auth.decorators import login_required
from runbike.core.framing import ImageFrame
from runbike.stats.filters import active_people
from runbike.store import RecordStore
from runbike.utils import current_session, team_id, validate_form

from . import bp
from .forms import HiddenForm, PersonForm, RaceSeriesForm, TrainingTypeForm


def _person_dict(person):
    return {
        "id": person.id,
        "name": person.name,
        "birthday": person.birthday.isoformat() if person.birthday else None,
        "hidden": person.hidden,
        "motto": person.motto,
        "small_image": ImageFrame.decode(person.small_image).to_dict(),
        "large_image": ImageFrame.decode(person.large_image).to_dict(),
    }


@bp.route("/", methods=["GET"])
@login_required
def list_people():
    """Team members. Only the admin sees retired members."""
    people = RecordStore.list_people(firestore.client(), team_id())
    if not current_session().is_admin:
        people = active_people(people)
    return jsonify({"people": [_person_dict(p) for p in people]})


def _save(form, person_id=None):
    return RecordStore.save_person(
        firestore.client(),
        team_id(),
        form.name.data.strip(),
        birthday=form.birthday.data,
        small_image=form.small_image.data or "",
        large_image=form.large_image.data or "",
        motto=form.motto.data or "",
        password=form.password.data or None,
        person_id=person_id,
    )


@bp.route("/", methods=["POST"])
@login_required(admin_required=True)
def add_person():
    """Add a team member."""
    form = PersonForm()
    validate_form(form)
    person_id = _save(form)
    current_app.logger.info(f"Added team member {person_id}.")
    return jsonify({"status": "success", "id": person_id}), 201


@bp.route("/<string:person_id>", methods=["POST"])
@login_required
def edit_person(person_id):
    """Edit a member's profile. Members may edit only their own."""
    current_session().require_person(person_id)
    form = PersonForm()
    validate_form(form)
    _save(form, person_id)
    return jsonify({"status": "success", "id": person_id})


@bp.route("/<string:person_id>/hidden", methods=["POST"])
@login_required(admin_required=True)
def set_hidden(person_id):
    """Retire or restore a member."""
    form = HiddenForm()
    validate_form(form)
    RecordStore.set_person_hidden(
        firestore.client(), team_id(), person_id, bool(form.hidden.data)
    )
    state = "retired" if form.hidden.data else "restored"
    current_app.logger.info(f"Team member {person_id} {state}.")
    return jsonify({"status": "success", "id": person_id, "hidden": form.hidden.data})


@bp.route("/<string:person_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_person(person_id):
    """Delete a member and every attempt they recorded."""
    removed = RecordStore.delete_person(firestore.client(), team_id(), person_id)
    current_app.logger.info(
        f"Deleted team member {person_id} and {removed} attempts."
    )
    return jsonify({"status": "success", "id": person_id, "removed_attempts": removed})



@bp.route("/training-types", methods=["GET"])
@login_required
def list_training_types():
    types = RecordStore.list_training_types(firestore.client())
    return jsonify(
        {
            "training_types": [
                {"id": t.id, "name": t.name, "is_default": t.is_default}
                for t in types
            ]
        }
    )


@bp.route("/training-types", methods=["POST"])
@login_required(admin_required=True)
def add_training_type():
    """Add a training drill, optionally making it the default."""
    form = TrainingTypeForm()
    validate_form(form)
    type_id = RecordStore.add_training_type(
        firestore.client(), form.name.data.strip(), bool(form.is_default.data)
    )
    return jsonify({"status": "success", "id": type_id}), 201


@bp.route("/training-types/<string:type_id>", methods=["POST"])
@login_required(admin_required=True)
def update_training_type(type_id):
    """Rename a training drill or make it the default."""
    form = TrainingTypeForm()
    validate_form(form)
    renamed = RecordStore.update_training_type(
        firestore.client(), type_id, form.name.data.strip(), bool(form.is_default.data)
    )
    if renamed:
        current_app.logger.info(
            f"Renamed training type {type_id} on {renamed} attempts."
        )
    return jsonify({"status": "success", "id": type_id})


@bp.route("/training-types/<string:type_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_training_type(type_id):
    RecordStore.delete_training_type(firestore.client(), type_id)
    current_app.logger.info(f"Deleted training type {type_id}.")
    return jsonify({"status": "success", "id": type_id})



@bp.route("/race-series", methods=["GET"])
@login_required
def list_race_series():
    series = RecordStore.list_race_series(firestore.client())
    return jsonify({"race_series": [{"id": s.id, "name": s.name} for s in series]})


@bp.route("/race-series", methods=["POST"])
@login_required(admin_required=True)
def add_race_series():
    form = RaceSeriesForm()
    validate_form(form)
    series_id = RecordStore.add_race_series(firestore.client(), form.name.data.strip())
    return jsonify({"status": "success", "id": series_id}), 201


@bp.route("/race-series/<string:series_id>", methods=["POST"])
@login_required(admin_required=True)
def update_race_series(series_id):
    """Rename a race series, including on its events."""
    form = RaceSeriesForm()
    validate_form(form)
    RecordStore.update_race_series(
        firestore.client(), series_id, form.name.data.strip()
    )
    return jsonify({"status": "success", "id": series_id})


@bp.route("/race-series/<string:series_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_race_series(series_id):
    RecordStore.delete_race_series(firestore.client(), series_id)
    current_app.logger.info(f"Deleted race series {series_id}.")
    return jsonify({"status": "success", "id": series_id})

