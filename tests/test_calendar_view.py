# tests/test_calendar_view.py
from datetime import date, timedelta

import pytest

from study_coach.calendar_view import (
    DayStatus, build_calendar, calendar_window, checkpoints_due_on, day_status,
    tasks_due_on, tasks_on_day,
)
from study_coach.errors import ValidationError
from study_coach.models import Checkpoint, Schedule, Task, TaskType, TimeRange
from conftest import make_project

TODAY = date(2025, 3, 15)


def test_window_places_today_at_index_ten():
    window = calendar_window(TODAY, span=35, days_before=10)
    assert len(window) == 35
    assert window[10] == TODAY
    assert window[0] == TODAY - timedelta(days=10)
    assert window[-1] == TODAY + timedelta(days=24)


def test_build_calendar_lists_exactly_tasks_in_window():
    project = make_project(total=60, start=TODAY - timedelta(days=20))
    days = build_calendar(project, TODAY, span=35, days_before=10)
    placed = [t for d in days for t in d.tasks]
    lo, hi = TODAY - timedelta(days=10), TODAY + timedelta(days=24)
    expected = [t for t in project.tasks if lo <= t.date <= hi]
    assert placed == expected
    assert len(placed) == 35
    assert all(lo <= t.date <= hi for t in placed)
    assert days[10].is_today
    assert sum(d.is_today for d in days) == 1


def test_build_calendar_multiple_tasks_per_day():
    project = make_project(total=1, start=TODAY)
    project.tasks.append(Task(id="x", project_id="p1", date=TODAY, type=TaskType.TEACH, description="explain"))
    days = build_calendar(project, TODAY)
    assert [t.id for t in days[10].tasks] == ["t0", "x"]


def test_day_status_classification():
    project = make_project(completed=1, total=2, start=TODAY)
    assert day_status([]) is DayStatus.EMPTY
    assert day_status(tasks_on_day(project, TODAY)) is DayStatus.DONE
    assert day_status(tasks_on_day(project, TODAY + timedelta(days=1))) is DayStatus.PENDING
    assert day_status(project.tasks) is DayStatus.PENDING


def test_build_calendar_attaches_schedule_sessions():
    project = make_project(start=TODAY)
    # 2025-03-15 is a Saturday
    project.schedule = Schedule(is_daily=False, weekly_custom={0: TimeRange("07:00", "08:00")})
    days = build_calendar(project, TODAY)
    assert days[10].session == TimeRange("07:00", "08:00")
    assert days[11].session is None


def test_tasks_due_on_across_projects():
    a = make_project(total=3, start=TODAY - timedelta(days=1))
    b = make_project(total=1, start=TODAY)
    b.id = "p2"
    due = tasks_due_on([a, b], TODAY)
    assert [(p.id, t.id) for p, t in due] == [("p1", "t1"), ("p2", "t0")]
    assert tasks_due_on([a, b], TODAY + timedelta(days=30)) == []


def test_checkpoints_due_on_uses_creation_offset():
    project = make_project(start=TODAY)
    project.checkpoints = [
        Checkpoint(id="c1", day_offset=0, purpose="baseline"),
        Checkpoint(id="c2", day_offset=7, purpose="week one"),
    ]
    assert [c.id for c in checkpoints_due_on(project, TODAY)] == ["c1"]
    assert [c.id for c in checkpoints_due_on(project, TODAY + timedelta(days=7))] == ["c2"]


@pytest.mark.parametrize("span", [0, -3])
def test_empty_span_rejected(span):
    with pytest.raises(ValidationError):
        calendar_window(TODAY, span=span)
    with pytest.raises(ValidationError):
        build_calendar(make_project(total=2), TODAY, span=span)


def test_single_day_span():
    days = build_calendar(make_project(total=1, start=TODAY), TODAY, span=1, days_before=0)
    assert [d.day for d in days] == [TODAY]
    assert days[0].is_today
