from collections import Counter
from datetime import date, timedelta

from .defaults import (
    ALL_TIME,
    ALL_WORKOUTS,
    MAX_CALENDAR_DOTS,
    SORT_CALORIES,
    SORT_DURATION,
    SORT_NEWEST,
    SORT_OLDEST,
    THIS_MONTH,
    THIS_WEEK,
)
from .errors import ValidationError
from .models import parse_date
from .progress import week_start


def filter_by_date_range(workouts, date_range, today: date):
    if date_range == ALL_TIME:
        return list(workouts)
    if date_range == THIS_MONTH:
        start = today.replace(day=1)
    elif date_range == THIS_WEEK:
        start = week_start(today)
    else:
        raise ValidationError(f"Unknown date range: {date_range!r}", "range")
    return [w for w in workouts if start <= w.date <= today]


def filter_by_type(workouts, workout_type):
    if not workout_type or workout_type == ALL_WORKOUTS:
        return list(workouts)
    return [w for w in workouts if w.type == workout_type]


def filter_by_exact_date(workouts, day):
    day = parse_date(day)
    return [w for w in workouts if w.date == day]


# key, descending
_SORTS = {
    SORT_NEWEST: (lambda w: w.date.isoformat(), True),
    SORT_OLDEST: (lambda w: w.date.isoformat(), False),
    SORT_DURATION: (lambda w: w.duration, True),
    SORT_CALORIES: (lambda w: w.calories, True),
}


def sort_workouts(workouts, sort_by):
    if sort_by not in _SORTS:
        raise ValidationError(f"Unknown sort option: {sort_by!r}", "sort")
    key, descending = _SORTS[sort_by]
    # sorted() stays stable with reverse=True
    return sorted(workouts, key=key, reverse=descending)


def group_by_date_for_calendar_marks(workouts):
    counts = Counter(w.date.isoformat() for w in workouts)
    return {day: min(count, MAX_CALENDAR_DOTS) for day, count in counts.items()}


def workout_type_options(workouts):
    options = [ALL_WORKOUTS]
    for w in workouts:
        if w.type and w.type not in options:
            options.append(w.type)
    return options


def display_workouts(workouts, today, date_range=THIS_MONTH, type_filter=ALL_WORKOUTS,
                     sort_by=SORT_NEWEST, day=None):
    """
    Apply the history screen pipeline: date range, then type, then sort.

    A tapped calendar ``day`` replaces both filters.
    """
    if day:
        return sort_workouts(filter_by_exact_date(workouts, day), sort_by)
    selected = filter_by_date_range(workouts, date_range, today)
    selected = filter_by_type(selected, type_filter)
    return sort_workouts(selected, sort_by)


def display_date_short(day, today: date) -> str:
    day = parse_date(day)
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day.strftime('%b')} {day.day}"


def icon_name_for_type(workout_type) -> str:
    if not workout_type:
        return "run"
    t = workout_type.lower()
    if "strength" in t or "weight" in t:
        return "dumbbell"
    if "run" in t or "cardio" in t:
        return "run"
    if "yoga" in t:
        return "yoga"
    if "hiit" in t:
        return "fire"
    if "rest" in t:
        return "bed-empty"
    return "run"
