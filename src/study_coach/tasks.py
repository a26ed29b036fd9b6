"""Task mutations for a single project.

Every mutation keeps the project's tasks sorted by date (stable for equal
dates), recomputes progress and phase, and returns a TaskChange describing
both the task delta and the project's new derived state.
"""
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from study_coach.errors import NotFoundError, ValidationError
from study_coach.models import (
    Phase, PlacementPolicy, Project, Task, TaskType, TASK_TYPE_LABELS,
)
from study_coach.progress import recompute

logger = logging.getLogger(__name__)


@dataclass
class TaskChange:
    project_id: str
    progress: int
    phase: Phase
    added: list = field(default_factory=list)
    removed: list = field(default_factory=list)
    updated: Optional[Task] = None


def new_task_id() -> str:
    return str(uuid.uuid4())


def manual_description(task_type: TaskType) -> str:
    return f"{TASK_TYPE_LABELS[task_type]} (manual)"


def _finish(project: Project, added=(), removed=(), updated=None) -> TaskChange:
    project.tasks.sort(key=lambda t: t.date)
    recompute(project)
    return TaskChange(
        project_id=project.id,
        progress=project.progress,
        phase=project.current_phase,
        added=list(added),
        removed=list(removed),
        updated=updated,
    )


def _find(project: Project, task_id: str) -> Task:
    for task in project.tasks:
        if task.id == task_id:
            return task
    raise NotFoundError(f"Task {task_id} not found in project {project.id}")


def _require_description(description: str) -> str:
    if not description or not description.strip():
        raise ValidationError("Task description must not be empty")
    return description.strip()


def _task_type(value) -> TaskType:
    try:
        return TaskType(value)
    except ValueError as e:
        raise ValidationError(f"Unknown task type {value!r}") from e


def tasks_on(project: Project, day: date) -> list:
    return [t for t in project.tasks if t.date == day]


def add_task(project: Project, day: date, task_type: TaskType, description: str,
             policy: PlacementPolicy = PlacementPolicy.MULTI_PER_DAY) -> TaskChange:
    description = _require_description(description)
    if policy is PlacementPolicy.SINGLE_PER_DAY and tasks_on(project, day):
        raise ValidationError(f"{day.isoformat()} already has a task")
    task = Task(
        id=new_task_id(),
        project_id=project.id,
        date=day,
        type=_task_type(task_type),
        description=description,
    )
    project.tasks.append(task)
    logger.debug("Added %s task on %s to project %s", task.type.value, day, project.id)
    return _finish(project, added=[task])


def toggle_completion(project: Project, task_id: str) -> TaskChange:
    task = _find(project, task_id)
    task.is_completed = not task.is_completed
    return _finish(project, updated=task)


def replace_task_for_date(project: Project, day: date,
                          task_type: Optional[TaskType]) -> TaskChange:
    """Clear `day` and, if task_type is given, put exactly one manual task there."""
    if task_type is not None:
        task_type = _task_type(task_type)
    removed = tasks_on(project, day)
    project.tasks = [t for t in project.tasks if t.date != day]
    added = []
    if task_type is not None:
        task = Task(
            id=new_task_id(),
            project_id=project.id,
            date=day,
            type=task_type,
            description=manual_description(task_type),
        )
        project.tasks.append(task)
        added.append(task)
    return _finish(project, added=added, removed=removed)


def edit_task(project: Project, task_id: str, *, description: Optional[str] = None,
              task_type: Optional[TaskType] = None, day: Optional[date] = None,
              is_completed: Optional[bool] = None,
              policy: PlacementPolicy = PlacementPolicy.MULTI_PER_DAY) -> TaskChange:
    """Update only the fields that are passed; everything else is kept."""
    task = _find(project, task_id)
    changes = {}
    if description is not None:
        changes["description"] = _require_description(description)
    if task_type is not None:
        changes["type"] = _task_type(task_type)
    if day is not None and day != task.date:
        if policy is PlacementPolicy.SINGLE_PER_DAY and tasks_on(project, day):
            raise ValidationError(f"{day.isoformat()} already has a task")
        changes["date"] = day
    if is_completed is not None:
        changes["is_completed"] = bool(is_completed)
    updated = replace(task, **changes)
    project.tasks = [updated if t.id == task_id else t for t in project.tasks]
    return _finish(project, updated=updated)


def delete_task(project: Project, task_id: str) -> TaskChange:
    task = _find(project, task_id)
    project.tasks = [t for t in project.tasks if t.id != task_id]
    logger.debug("Deleted task %s from project %s", task_id, project.id)
    return _finish(project, removed=[task])
