from datetime import date
from flask import current_app, jsonify, request

from . import stepup_bp
from .defaults import (
    ALL_WORKOUTS,
    DATE_RANGES,
    DEFAULT_TYPES,
    INTENSITY_LEVELS,
    SORT_NEWEST,
    SORT_OPTIONS,
    THIS_MONTH,
)
from .errors import DuplicateTypeError, NotFoundError, StorageError, ValidationError
from .listing import (
    display_date_short,
    display_workouts,
    group_by_date_for_calendar_marks,
    icon_name_for_type,
    workout_type_options,
)
from .models import with_id, workout_from_dict, workout_to_dict
from .progress import progress_summary
from .repository import WorkoutRepository
from .storage import JsonFileStore, ensure_data_files

from stepup_core import load_logs, log_action


def _repository():
    store_path = ensure_data_files(current_app.config["STEPUP_DATA_DIR"])
    return WorkoutRepository(JsonFileStore(store_path))


def _today():
    return date.today()


def _json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object body.")
    return payload


def _workout_view(workout, today):
    item = workout_to_dict(workout)
    item["display_date"] = display_date_short(workout.date, today)
    item["icon"] = icon_name_for_type(workout.type)
    return item


def _error(code, message, status):
    return jsonify({"ok": False, "error": code, "message": message}), status


# ───────── Error handlers ─────────

@stepup_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    log_action("validation_failed", {"field": e.field, "error": str(e)})
    return _error("invalid", str(e), 400)


@stepup_bp.errorhandler(NotFoundError)
def handle_not_found(e):
    log_action("workout_not_found", {"id": e.workout_id})
    return _error("not_found", str(e), 404)


@stepup_bp.errorhandler(DuplicateTypeError)
def handle_duplicate_type(e):
    log_action("custom_type_duplicate", {"name": e.name})
    return _error("duplicate_type", "This workout type already exists.", 409)


@stepup_bp.errorhandler(StorageError)
def handle_storage_error(e):
    log_action("storage_failed", {"kind": type(e).__name__, "error": str(e)})
    return _error("storage", "Failed to save workout", 500)


# ───────── Workouts ─────────

@stepup_bp.route("/workouts", methods=["GET"])
def list_workouts():
    today = _today()
    date_range = request.args.get("range", THIS_MONTH)
    type_filter = request.args.get("type", ALL_WORKOUTS)
    sort_by = request.args.get("sort", SORT_NEWEST)
    day = request.args.get("day") or None

    workouts = _repository().list_workouts()
    shown = display_workouts(workouts, today, date_range, type_filter, sort_by, day)

    log_action("workouts_view", {"range": date_range, "type": type_filter, "sort": sort_by, "day": day})
    return jsonify({
        "workouts": [_workout_view(w, today) for w in shown],
        "type_options": workout_type_options(workouts),
        "date_ranges": DATE_RANGES,
        "sort_options": SORT_OPTIONS,
    })


@stepup_bp.route("/workouts", methods=["POST"])
def create_workout():
    workout = workout_from_dict(_json_body())
    saved = _repository().save_workout(workout)
    log_action("workout_saved", {"id": saved.id, "type": saved.type, "date": saved.date.isoformat()})
    return jsonify({"ok": True, "workout": workout_to_dict(saved)}), 201


@stepup_bp.route("/workouts/<workout_id>", methods=["PUT"])
def update_workout(workout_id):
    workout = with_id(workout_from_dict(_json_body()), workout_id)
    _repository().update_workout(workout)
    log_action("workout_updated", {"id": workout_id})
    return jsonify({"ok": True, "workout": workout_to_dict(workout)})


@stepup_bp.route("/workouts/<workout_id>", methods=["DELETE"])
def delete_workout(workout_id):
    _repository().delete_workout(workout_id)
    log_action("workout_deleted", {"id": workout_id})
    return jsonify({"ok": True})


@stepup_bp.route("/rest-days", methods=["POST"])
def mark_rest_day():
    payload = _json_body()
    saved = _repository().save_rest_day(payload.get("date"))
    log_action("rest_day_marked", {"id": saved.id, "date": saved.date.isoformat()})
    return jsonify({"ok": True, "workout": workout_to_dict(saved)})


# ───────── Workout types ─────────

@stepup_bp.route("/types", methods=["GET"])
def list_types():
    custom = _repository().list_custom_types()
    return jsonify({
        "default_types": DEFAULT_TYPES,
        "custom_types": custom,
        "all_types": DEFAULT_TYPES + custom,
        "intensity_levels": INTENSITY_LEVELS,
    })


@stepup_bp.route("/types", methods=["POST"])
def add_type():
    name = (_json_body().get("name") or "").strip()
    _repository().add_custom_type(name)
    log_action("custom_type_added", {"name": name})
    return jsonify({"ok": True, "name": name}), 201


# ───────── Progress ─────────

@stepup_bp.route("/progress", methods=["GET"])
def progress():
    summary = progress_summary(_repository().list_workouts(), _today())

    best = summary["best_week"]
    summary["best_week"] = {
        "week_start": best["week_start"].isoformat() if best["week_start"] else None,
        "total_duration": best["total_duration"],
    }
    summary["calendar"] = [
        {"date": d["date"].isoformat(), "day": d["day"], "status": d["status"]}
        for d in summary["calendar"]
    ]

    log_action("progress_view")
    return jsonify(summary)


@stepup_bp.route("/calendar-marks", methods=["GET"])
def calendar_marks():
    marks = group_by_date_for_calendar_marks(_repository().list_workouts())
    return jsonify({"marks": marks})


@stepup_bp.route("/activity", methods=["GET"])
def activity():
    try:
        limit = int(request.args.get("limit", 200))
    except ValueError:
        raise ValidationError("limit must be an integer", "limit")
    if limit < 1:
        raise ValidationError("limit must be at least 1", "limit")
    return jsonify({"entries": load_logs(limit)})
