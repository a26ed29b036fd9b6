"""When study sessions are allowed: daily routine or per-weekday ranges."""
import re
from datetime import date

from study_coach.errors import InvalidRangeError, ValidationError
from study_coach.models import Schedule, TimeRange, WEEKDAY_LABELS

DEFAULT_RANGE = TimeRange("09:00", "10:00")

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def persian_weekday(day: date) -> int:
    """Weekday index in the Persian week (0=Saturday .. 6=Friday)."""
    return (day.weekday() + 2) % 7


def _minutes(value: str) -> int:
    match = _HHMM.match(value or "")
    if not match:
        raise InvalidRangeError(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def validate_time_range(time_range: TimeRange) -> TimeRange:
    if _minutes(time_range.start) >= _minutes(time_range.end):
        raise InvalidRangeError(
            f"Session must end after it starts ({time_range.start}-{time_range.end})"
        )
    return time_range


def _check_weekday(weekday: int) -> None:
    if weekday not in range(7):
        raise ValidationError(f"Weekday must be 0-6, got {weekday}")


def session_for_date(schedule: Schedule, day: date) -> TimeRange | None:
    """The study session scheduled on `day`, or None if there is none."""
    if schedule.is_daily:
        return schedule.routine or TimeRange(DEFAULT_RANGE.start, DEFAULT_RANGE.end)
    return schedule.weekly_custom.get(persian_weekday(day))


def set_daily(schedule: Schedule, is_daily: bool) -> Schedule:
    schedule.is_daily = is_daily
    return schedule


def set_routine(schedule: Schedule, start: str, end: str) -> Schedule:
    schedule.routine = validate_time_range(TimeRange(start, end))
    return schedule


def toggle_weekday(schedule: Schedule, weekday: int) -> Schedule:
    """Turn a weekday on with the default range, or off by removing its entry."""
    _check_weekday(weekday)
    if weekday in schedule.weekly_custom:
        del schedule.weekly_custom[weekday]
    else:
        schedule.weekly_custom[weekday] = TimeRange(DEFAULT_RANGE.start, DEFAULT_RANGE.end)
    return schedule


def update_weekday(schedule: Schedule, weekday: int, start: str | None = None,
                   end: str | None = None) -> Schedule:
    """Change one weekday's start and/or end time, leaving other days alone."""
    _check_weekday(weekday)
    current = schedule.weekly_custom.get(weekday)
    if current is None:
        raise ValidationError(f"{WEEKDAY_LABELS[weekday]} has no session to update")
    updated = validate_time_range(TimeRange(start or current.start, end or current.end))
    schedule.weekly_custom[weekday] = updated
    return schedule


def validate_schedule(schedule: Schedule) -> Schedule:
    if schedule.is_daily:
        if schedule.routine:
            validate_time_range(schedule.routine)
    else:
        for weekday, time_range in schedule.weekly_custom.items():
            _check_weekday(weekday)
            validate_time_range(time_range)
    return schedule


def describe_schedule(schedule: Schedule) -> str:
    if schedule.is_daily:
        routine = schedule.routine or DEFAULT_RANGE
        return f"Daily Routine: {routine.start} to {routine.end}"
    days = ", ".join(
        f"{WEEKDAY_LABELS[day]}: {r.start}-{r.end}"
        for day, r in sorted(schedule.weekly_custom.items())
    )
    return f"Custom Weekly Schedule: {days or 'no study days'}"
