"""Place tasks on a window of calendar days."""
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from study_coach.errors import ValidationError
from study_coach.models import Project, TimeRange
from study_coach.schedule import session_for_date

DEFAULT_SPAN = 35
DEFAULT_DAYS_BEFORE = 10


class DayStatus(str, Enum):
    EMPTY = "empty"
    PENDING = "pending"
    DONE = "done"


@dataclass
class CalendarDay:
    day: date
    tasks: list = field(default_factory=list)
    status: DayStatus = DayStatus.EMPTY
    is_today: bool = False
    session: Optional[TimeRange] = None


def calendar_window(today: date, span: int = DEFAULT_SPAN,
                    days_before: int = DEFAULT_DAYS_BEFORE) -> list[date]:
    """`span` consecutive days starting `days_before` days before today."""
    if span < 1:
        raise ValidationError(f"Calendar span must be at least one day, got {span}")
    start = today - timedelta(days=days_before)
    return [start + timedelta(days=i) for i in range(span)]


def tasks_on_day(project: Project, day: date) -> list:
    return [t for t in project.tasks if t.date == day]


def day_status(tasks: list) -> DayStatus:
    if not tasks:
        return DayStatus.EMPTY
    if any(not t.is_completed for t in tasks):
        return DayStatus.PENDING
    return DayStatus.DONE


def build_calendar(project: Project, today: date, span: int = DEFAULT_SPAN,
                   days_before: int = DEFAULT_DAYS_BEFORE) -> list[CalendarDay]:
    window = calendar_window(today, span, days_before)
    first, last = window[0], window[-1]
    by_day: dict = {}
    for task in project.tasks:
        if first <= task.date <= last:
            by_day.setdefault(task.date, []).append(task)
    days = []
    for day in window:
        tasks = by_day.get(day, [])
        days.append(CalendarDay(
            day=day,
            tasks=tasks,
            status=day_status(tasks),
            is_today=day == today,
            session=session_for_date(project.schedule, day),
        ))
    return days


def tasks_due_on(projects: list, day: date) -> list[tuple]:
    """(project, task) pairs for every task on `day` across all projects."""
    return [(p, t) for p in projects for t in p.tasks if t.date == day]


def checkpoint_date(project: Project, checkpoint) -> date:
    return project.created_on + timedelta(days=checkpoint.day_offset)


def checkpoints_due_on(project: Project, day: date) -> list:
    return [c for c in project.checkpoints if checkpoint_date(project, c) == day]
