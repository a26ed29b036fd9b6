from datetime import date

import pytest

from study_coach.db import init_db
from study_coach.gemini import PlanResult, TaskDescriptor
from study_coach.models import Difficulty, Project, Importance, Task, TaskType


@pytest.fixture
def tmp_db(tmp_path):
    """Provide an initialized temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_study_coach.db")
    init_db(db_path)
    return db_path


def make_project(completed=0, total=0, start=date(2025, 3, 1)) -> Project:
    project = Project(
        id="p1", name="Linear Algebra", page_count=300, chapter_count=3,
        difficulty=Difficulty.MEDIUM, importance=Importance.HIGH,
        created_at=f"{start.isoformat()}T08:00:00",
    )
    for i in range(total):
        project.tasks.append(Task(
            id=f"t{i}", project_id="p1", date=date.fromordinal(start.toordinal() + i),
            type=TaskType.STUDY, description=f"Chapter {i + 1}", is_completed=i < completed,
        ))
    return project


class FakePlanner:
    """Stands in for the Gemini client; records calls and returns a canned plan."""

    def __init__(self, plan=None, error=None):
        self.plan = plan or PlanResult()
        self.error = error
        self.calls = []

    def generate_study_plan(self, project_input, start=None):
        self.calls.append((project_input, start))
        if self.error:
            raise self.error
        return self.plan


class FakeAnalyzer:
    def __init__(self, analysis=None, error=None):
        self.analysis = analysis
        self.error = error
        self.calls = []

    def analyze_learning_progress(self, project):
        self.calls.append(project)
        if self.error:
            raise self.error
        return self.analysis


def fourteen_day_plan() -> PlanResult:
    return PlanResult(tasks=[
        TaskDescriptor(day_offset=i, type=TaskType.STUDY if i % 2 == 0 else TaskType.REVIEW,
                       description=f"Day {i} work")
        for i in range(14)
    ])
