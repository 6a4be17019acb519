"""Routes for the dashboard blueprint."""

from firebase_admin import firestore
from flask import Response, current_app, jsonify, request

from runbike.auth.decorators import login_required
from runbike.core.constants import DEFAULT_QUICK_RANGE, UPCOMING_RACES_LIMIT
from runbike.errors import ValidationError
from runbike.races.services import upcoming_events
from runbike.stats import build_daily_summaries, find_age_bracket_bests
from runbike.stats.export import daily_csv, daily_csv_filename
from runbike.stats.filters import DateRange, filter_by_range, quick_range
from runbike.store import RecordStore
from runbike.utils import parse_date_arg, team_id, team_today

from . import bp

CUSTOM_RANGE = "custom"


def _requested_range():
    """The date window from ?range=, or ?start=&end= for a custom window."""
    code = request.args.get("range") or DEFAULT_QUICK_RANGE
    if code != CUSTOM_RANGE:
        return quick_range(code, team_today())
    start = parse_date_arg(request.args.get("start"), "start")
    end = parse_date_arg(request.args.get("end"), "end")
    if start is None or end is None:
        raise ValidationError("A custom range needs both start and end dates.")
    return DateRange.custom(start, end)


def _requested_type(db):
    """The drill from ?type=, falling back to the team's default drill."""
    type_name = request.args.get("type")
    if type_name:
        return type_name
    types = RecordStore.list_training_types(db)
    return types[0].name if types else None


@bp.route("/summaries", methods=["GET"])
@login_required
def summaries():
    """Per-day, per-person statistics inside a date window."""
    db = firestore.client()
    tid = team_id()
    date_range = _requested_range()
    attempts = filter_by_range(RecordStore.list_training_attempts(db, tid), date_range)
    result = build_daily_summaries(
        attempts, RecordStore.list_people(db, tid), request.args.get("type") or None
    )
    return jsonify(
        {
            "start": date_range.start.isoformat(),
            "end": date_range.end.isoformat(),
            "summaries": [s.to_dict() for s in result],
        }
    )


@bp.route("/age-bests", methods=["GET"])
@login_required
def age_bests():
    """Best value per age bracket for one drill."""
    db = firestore.client()
    tid = team_id()
    type_name = _requested_type(db)
    bests = find_age_bracket_bests(
        RecordStore.list_training_attempts(db, tid),
        RecordStore.list_people(db, tid),
        type_name,
    )
    return jsonify(
        {
            "type": type_name,
            "brackets": {
                str(age): best.to_dict() if best else None
                for age, best in bests.items()
            },
        }
    )


@bp.route("/upcoming", methods=["GET"])
@login_required
def upcoming():
    """The next races on the calendar."""
    db = firestore.client()
    events, has_more = upcoming_events(
        RecordStore.list_race_events(db, team_id()),
        team_today(),
        UPCOMING_RACES_LIMIT,
    )
    return jsonify(
        {
            "events": [
                {
                    "id": e.id,
                    "date": e.date.isoformat(),
                    "name": e.name,
                    "series_name": e.series_name,
                    "public_image": e.public_image,
                }
                for e in events
            ],
            "has_more": has_more,
        }
    )


@bp.route("/export.csv", methods=["GET"])
@login_required
def export_csv():
    """Download one day of one drill as a spreadsheet."""
    db = firestore.client()
    tid = team_id()
    type_name = _requested_type(db)
    if not type_name:
        raise ValidationError("Choose a training type to export.")
    day = parse_date_arg(request.args.get("date"), "date") or team_today()
    body = daily_csv(
        RecordStore.list_training_attempts(db, tid),
        RecordStore.list_people(db, tid),
        day,
        type_name,
    )
    if not body:
        current_app.logger.info(f"No {type_name} results to export for {day}.")
        return jsonify({"status": "empty", "message": "No results for that day."}), 404
    filename = daily_csv_filename(type_name, day)
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
