"""Tests for data model classes."""
from datetime import date
from enum import Enum

import pytest

from study_coach.models import (
    PHASE_LABELS, TASK_TYPE_LABELS, WEEKDAY_LABELS, Analysis, Checkpoint, ChoiceOption,
    CreateProjectInput, Difficulty, Importance, LearningState, Phase, Project, Question,
    Schedule, Task, TaskType, TimeRange, parse_day, require_total,
)
from conftest import make_project


def test_label_tables_are_total():
    assert set(TASK_TYPE_LABELS) == set(TaskType)
    assert set(PHASE_LABELS) == set(Phase)
    assert PHASE_LABELS[Phase.MASTERY] == "Deep Mastery"
    assert TASK_TYPE_LABELS[TaskType.TEACH] == "Teach"


def test_require_total_rejects_missing_member():
    class Color(Enum):
        RED = 1
        BLUE = 2

    with pytest.raises(TypeError, match="BLUE"):
        require_total({Color.RED: "red"}, Color)


def test_weekday_labels_start_on_saturday():
    assert WEEKDAY_LABELS[0] == "Saturday"
    assert WEEKDAY_LABELS[6] == "Friday"
    assert len(WEEKDAY_LABELS) == 7


def test_create_input_defaults():
    project_input = CreateProjectInput(name="Physics")
    assert project_input.page_count == 100
    assert project_input.chapter_count == 5
    assert project_input.chapters == ["", "", "", "", ""]
    assert project_input.difficulty is Difficulty.MEDIUM
    assert project_input.importance is Importance.MEDIUM
    assert project_input.schedule.is_daily is True
    assert project_input.schedule.routine == TimeRange("09:00", "10:00")


def test_task_defaults_to_incomplete():
    task = Task(id="t", project_id="p", date=date(2025, 1, 1), type=TaskType.STUDY, description="read")
    assert task.is_completed is False


def test_task_dict_uses_camel_case_keys():
    task = Task(id="t", project_id="p", date=date(2025, 1, 2), type=TaskType.REVIEW,
                description="flashcards", is_completed=True)
    assert task.to_dict() == {
        "id": "t", "projectId": "p", "date": "2025-01-02", "type": "REVIEW",
        "description": "flashcards", "isCompleted": True,
    }
    assert Task.from_dict(task.to_dict()) == task


def test_task_from_legacy_datetime():
    task = Task.from_dict({"id": "t", "projectId": "p", "date": "2025-01-02T00:00:00",
                           "type": "STUDY", "description": "x"})
    assert task.date == date(2025, 1, 2)
    assert task.is_completed is False


def test_parse_day_variants():
    assert parse_day("2025-06-01") == date(2025, 6, 1)
    assert parse_day(date(2025, 6, 1)) == date(2025, 6, 1)
    assert parse_day("2025-06-01T12:30:00") == date(2025, 6, 1)
    with pytest.raises(ValueError):
        parse_day("yesterday")


def test_schedule_from_empty_is_default():
    assert Schedule.from_dict(None) == Schedule()
    assert Schedule.from_dict({}) == Schedule()


def test_schedule_weekly_keys_restored_as_ints():
    schedule = Schedule(is_daily=False, routine=None,
                        weekly_custom={3: TimeRange("18:00", "19:30"), 0: TimeRange("08:00", "09:00")})
    data = schedule.to_dict()
    assert list(data["weeklyCustom"]) == ["0", "3"]
    assert data["routine"] is None
    assert Schedule.from_dict(data) == schedule


def test_checkpoint_questions_from_dict():
    cp = Checkpoint.from_dict({
        "id": 7, "day_offset": "3", "purpose": "recall",
        "questions": [{"qid": 1, "text": "2+2?", "answer_type": "number"},
                      {"qid": "2", "text": "Pick", "answer_type": "choice",
                       "choices": [{"key": "a", "label": "A"}]}],
    })
    assert cp.id == "7"
    assert cp.day_offset == 3
    assert cp.is_completed is False
    assert cp.questions[0].choices == []
    assert cp.questions[1].choices == [ChoiceOption("a", "A")]
    assert "choices" not in Question("q", "free").to_dict()


def test_project_dict_round_trip_keeps_analysis():
    project = make_project(completed=1, total=3)
    project.last_analysis = Analysis(learning_state=LearningState.DEEP, user_feedback="Great",
                                     estimated_dou=91, next_action=TaskType.TEACH,
                                     analyzed_at="2025-03-04T10:00:00")
    data = project.to_dict()
    assert data["lastAnalysis"]["analyzedAt"] == "2025-03-04T10:00:00"
    assert data["currentPhase"] == "EDUCATION"
    restored = Project.from_dict(data)
    assert restored == project
    assert restored.created_on == date(2025, 3, 1)


def test_project_from_minimal_dict():
    project = Project.from_dict({"id": "x", "name": "Old", "createdAt": "2024-12-01T09:00:00Z",
                                 "chapters": ["a", "b"]})
    assert project.chapter_count == 2
    assert project.tasks == []
    assert project.last_analysis is None
    assert project.color == "indigo"
