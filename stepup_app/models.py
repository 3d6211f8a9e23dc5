from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Union

from .defaults import (
    DEFAULT_INTENSITY,
    INTENSITY_LEVELS,
    REST_TYPE,
)
from .errors import ValidationError


def parse_date(value) -> date:
    """Accept a ``date``/``datetime`` or a ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value.strip()) != 10:
        raise ValidationError(f"Invalid date: {value!r}", "date")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}", "date")


def _parse_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_flag(value) -> bool:
    """Form checkboxes arrive as strings; only explicit true values count."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return False


@dataclass(frozen=True)
class RestDay:
    date: date
    id: Optional[str] = None
    notes: str = ""

    type = REST_TYPE
    duration = 0
    calories = 0
    intensity = REST_TYPE
    is_rest_day = True


@dataclass(frozen=True)
class ActiveWorkout:
    date: date
    type: str
    duration: int
    calories: int = 0
    intensity: str = DEFAULT_INTENSITY
    notes: str = ""
    id: Optional[str] = None

    is_rest_day = False


Workout = Union[RestDay, ActiveWorkout]


def with_id(workout: Workout, workout_id: str) -> Workout:
    return replace(workout, id=workout_id)


def workout_from_dict(data: dict, lenient: bool = False) -> Workout:
    """
    Build a Workout from submitted form data or, with ``lenient``, a stored record.

    Raises ValidationError when a required field is missing or malformed.
    Stored records only need an id-able shape, a valid date and a type: a
    missing or unparseable duration reads as 0 and an unknown intensity as
    the default. Fields the model does not know about are ignored.
    """
    if not isinstance(data, dict):
        raise ValidationError("Workout must be an object.")

    workout_id = data.get("id") or None
    day = parse_date(data.get("date"))
    notes = data.get("notes") or ""
    if not isinstance(notes, str):
        notes = str(notes)

    if parse_flag(data.get("isRestDay")):
        return RestDay(date=day, id=workout_id, notes=notes)

    workout_type = (data.get("type") or "").strip() if isinstance(data.get("type"), str) else ""
    if not workout_type:
        raise ValidationError("Please choose a workout type.", "type")
    if workout_type == REST_TYPE:
        raise ValidationError("'Rest' is reserved for rest days.", "type")

    raw_duration = data.get("duration")
    duration = _parse_int(raw_duration)
    if duration is None or duration < 0:
        if lenient:
            duration = 0
        elif raw_duration is None or (isinstance(raw_duration, str) and not raw_duration.strip()):
            raise ValidationError("Please enter a duration for your workout.", "duration")
        else:
            raise ValidationError(f"Invalid duration: {raw_duration!r}", "duration")

    calories = _parse_int(data.get("calories"))
    if calories is None:
        calories = 0
    if calories < 0:
        if not lenient:
            raise ValidationError(f"Invalid calories: {data.get('calories')!r}", "calories")
        calories = 0

    intensity = data.get("intensity") or DEFAULT_INTENSITY
    if intensity not in INTENSITY_LEVELS:
        if not lenient:
            raise ValidationError(f"Invalid intensity: {intensity!r}", "intensity")
        intensity = DEFAULT_INTENSITY

    return ActiveWorkout(
        date=day,
        type=workout_type,
        duration=duration,
        calories=calories,
        intensity=intensity,
        notes=notes,
        id=workout_id,
    )


def workout_to_dict(workout: Workout) -> dict:
    return {
        "id": workout.id,
        "date": workout.date.isoformat(),
        "type": workout.type,
        "duration": workout.duration,
        "calories": workout.calories,
        "intensity": workout.intensity,
        "notes": workout.notes,
        "isRestDay": workout.is_rest_day,
    }


@dataclass(frozen=True)
class StoreDocument:
    """
    Immutable snapshot of the persisted ``{workouts, customTypes}`` document.

    ``extra`` holds top-level fields this version does not know about, and
    ``unreadable_workouts``/``unreadable_types`` hold stored entries that do
    not parse, so all of them survive a rewrite untouched. ``revision``
    counts mutations applied since the document was read and is never
    persisted; a document still at revision 0 has nothing to write.
    """

    workouts: tuple = ()
    custom_types: tuple = ()
    extra: dict = field(default_factory=dict)
    unreadable_workouts: tuple = ()
    unreadable_types: tuple = ()
    revision: int = 0

    def evolve(self, **changes) -> "StoreDocument":
        changes.setdefault("revision", self.revision + 1)
        return replace(self, **changes)


def document_from_dict(data) -> StoreDocument:
    if not isinstance(data, dict):
        return StoreDocument()

    workouts = []
    unreadable = []
    raw_workouts = data.get("workouts")
    for record in raw_workouts if isinstance(raw_workouts, list) else []:
        try:
            workouts.append(workout_from_dict(record, lenient=True))
        except ValidationError:
            # Kept as-is so a later write does not lose it
            unreadable.append(record)

    raw_types = data.get("customTypes")
    raw_types = raw_types if isinstance(raw_types, list) else []
    custom_types = [t for t in raw_types if isinstance(t, str)]
    unreadable_types = [t for t in raw_types if not isinstance(t, str)]

    extra = {k: v for k, v in data.items() if k not in ("workouts", "customTypes")}
    return StoreDocument(
        workouts=tuple(workouts),
        custom_types=tuple(custom_types),
        extra=extra,
        unreadable_workouts=tuple(unreadable),
        unreadable_types=tuple(unreadable_types),
    )


def record_id(record):
    return record.get("id") if isinstance(record, dict) else None


def document_to_dict(document: StoreDocument) -> dict:
    data = dict(document.extra)
    data["workouts"] = [workout_to_dict(w) for w in document.workouts] + list(document.unreadable_workouts)
    data["customTypes"] = list(document.custom_types) + list(document.unreadable_types)
    return data
