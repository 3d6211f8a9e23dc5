from datetime import date, timedelta
import math

from .defaults import BREAKDOWN_TYPES


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _days_with_entries(workouts):
    return {w.date for w in workouts}


def compute_streak(workouts, today: date) -> int:
    """
    Count consecutive days with at least one entry, walking back from today.

    Rest days keep the chain going. If nothing is logged today yet, today is
    a grace day and the count starts from yesterday.
    """
    logged = _days_with_entries(workouts)
    day = today if today in logged else today - timedelta(days=1)
    streak = 0
    while day in logged:
        streak += 1
        day -= timedelta(days=1)
    return streak


def get_best_week(workouts):
    totals = {}
    for w in workouts:
        start = week_start(w.date)
        totals[start] = totals.get(start, 0) + w.duration

    if not totals:
        return {"week_start": None, "total_duration": 0}

    # Earliest week wins a tie
    best = min(totals, key=lambda start: (-totals[start], start))
    return {"week_start": best, "total_duration": totals[best]}


def _in_week(workouts, start: date):
    end = start + timedelta(days=6)
    return [w for w in workouts if start <= w.date <= end]


def get_weekly_type_breakdown(workouts, today: date):
    durations = {}
    for w in _in_week(workouts, week_start(today)):
        if w.is_rest_day:
            continue
        durations[w.type] = durations.get(w.type, 0) + w.duration
    return [{"type": t, "duration": d} for t, d in durations.items()]


def get_total_duration_for_week(workouts, weeks_ago: int, today: date) -> int:
    start = week_start(today) - timedelta(weeks=weeks_ago)
    return sum(w.duration for w in _in_week(workouts, start))


def get_streak_calendar_data(workouts, today: date):
    active = set()
    rest = set()
    for w in workouts:
        (rest if w.is_rest_day else active).add(w.date)

    days = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        if day == today:
            status = "today"
        elif day in active:
            status = "completed"
        elif day in rest:
            status = "rest"
        else:
            status = "none"
        days.append({"date": day, "day": day.strftime("%a"), "status": status})
    return days


def get_percentage_change(current: int, previous: int) -> str:
    if previous == 0:
        return "+100%" if current > 0 else "0%"
    change = (current - previous) / previous * 100
    sign = "+" if change >= 0 else ""
    return f"{sign}{math.floor(change + 0.5)}%"


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def progress_summary(workouts, today: date):
    """Everything the progress view shows, computed from one snapshot."""
    total = get_total_duration_for_week(workouts, 0, today)
    last_week = get_total_duration_for_week(workouts, 1, today)
    breakdown = get_weekly_type_breakdown(workouts, today)
    by_type = {item["type"]: item["duration"] for item in breakdown}
    best = get_best_week(workouts)

    return {
        "streak": compute_streak(workouts, today),
        "best_week": best,
        "best_week_display": format_duration(best["total_duration"]),
        "total_duration": total,
        "total_duration_display": format_duration(total),
        "last_week_duration": last_week,
        "percentage_change": get_percentage_change(total, last_week),
        "weekly_breakdown": breakdown,
        "breakdown_rows": [{"type": t, "duration": by_type.get(t, 0)} for t in BREAKDOWN_TYPES],
        "calendar": get_streak_calendar_data(workouts, today),
    }
