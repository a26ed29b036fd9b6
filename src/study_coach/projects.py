"""In-memory project list backed by a whole-document snapshot.

The snapshot is read once when the store is created. Every successful
change rewrites it completely. Collaborator calls happen before any state is
touched, so a failed plan or analysis leaves the project list as it was.
"""
import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from study_coach import tasks as task_ops
from study_coach.errors import NotFoundError, ValidationError
from study_coach.models import (
    CreateProjectInput, Phase, PlacementPolicy, Project, Schedule, Task, TaskType,
)
from study_coach.progress import recompute
from study_coach.schedule import validate_schedule
from study_coach.store import load_projects, save_projects

logger = logging.getLogger(__name__)

MIN_CHAPTERS = 1
MAX_CHAPTERS = 50


def resize_chapters(chapters: list, count: int) -> tuple[int, list]:
    """Clamp count to the allowed range and pad or cut the title list to match."""
    count = max(MIN_CHAPTERS, min(count, MAX_CHAPTERS))
    resized = list(chapters[:count])
    resized.extend([""] * (count - len(resized)))
    return count, resized


def validate_create_input(project_input: CreateProjectInput) -> CreateProjectInput:
    if not project_input.name or not project_input.name.strip():
        raise ValidationError("Project name must not be empty")
    if project_input.page_count <= 0:
        raise ValidationError("Page count must be positive")
    if not MIN_CHAPTERS <= project_input.chapter_count <= MAX_CHAPTERS:
        raise ValidationError(f"Chapter count must be between {MIN_CHAPTERS} and {MAX_CHAPTERS}")
    if len(project_input.chapters) > project_input.chapter_count:
        raise ValidationError("More chapter titles than chapters")
    validate_schedule(project_input.schedule)
    return project_input


class ProjectStore:
    def __init__(self, db_path: str, planner=None, analyzer=None,
                 policy: PlacementPolicy = PlacementPolicy.MULTI_PER_DAY,
                 color: str = "indigo"):
        self.db_path = db_path
        self.planner = planner
        self.analyzer = analyzer
        self.policy = PlacementPolicy(policy)
        self.color = color
        self._projects = load_projects(db_path)
        logger.debug("Loaded %d project(s) from %s", len(self._projects), db_path)

    @property
    def projects(self) -> tuple:
        return tuple(self._projects)

    def _save(self) -> None:
        save_projects(self.db_path, self._projects)

    def get_project(self, project_id: str) -> Project:
        for project in self._projects:
            if project.id == project_id:
                return project
        raise NotFoundError(f"Project {project_id} not found")

    def create_project(self, project_input: CreateProjectInput,
                       today: Optional[date] = None) -> Project:
        validate_create_input(project_input)
        today = today or date.today()
        plan = self.planner.generate_study_plan(project_input, today)

        project_id = str(uuid.uuid4())
        project = Project(
            id=project_id,
            name=project_input.name.strip(),
            page_count=project_input.page_count,
            chapter_count=project_input.chapter_count,
            chapters=[c.strip() for c in project_input.chapters if c.strip()],
            difficulty=project_input.difficulty,
            importance=project_input.importance,
            schedule=Schedule.from_dict(project_input.schedule.to_dict()),
            color=self.color,
            created_at=datetime.combine(today, datetime.now().time()).isoformat(timespec="seconds"),
            current_phase=Phase.EDUCATION,
            progress=0,
        )
        occupied = set()
        for item in plan.tasks:
            day = today + timedelta(days=item.day_offset)
            if self.policy is PlacementPolicy.SINGLE_PER_DAY:
                if day in occupied:
                    logger.debug("Dropping extra planned task on %s", day)
                    continue
                occupied.add(day)
            project.tasks.append(Task(
                id=task_ops.new_task_id(),
                project_id=project_id,
                date=day,
                type=item.type,
                description=item.description,
                is_completed=False,
            ))
        project.checkpoints = [replace(cp, is_completed=False) for cp in plan.checkpoints]
        project.tasks.sort(key=lambda t: t.date)
        recompute(project)

        self._projects.append(project)
        self._save()
        logger.info("Created project %r with %d tasks", project.name, len(project.tasks))
        return project

    def delete_project(self, project_id: str) -> Project:
        """Remove a project together with its tasks and checkpoints."""
        project = self.get_project(project_id)
        self._projects = [p for p in self._projects if p.id != project_id]
        self._save()
        logger.info("Deleted project %r", project.name)
        return project

    def add_task(self, project_id: str, day: date, task_type: TaskType,
                 description: str) -> task_ops.TaskChange:
        change = task_ops.add_task(self.get_project(project_id), day, task_type, description, self.policy)
        self._save()
        return change

    def toggle_task(self, project_id: str, task_id: str) -> task_ops.TaskChange:
        change = task_ops.toggle_completion(self.get_project(project_id), task_id)
        self._save()
        return change

    def replace_task_for_date(self, project_id: str, day: date,
                              task_type: Optional[TaskType]) -> task_ops.TaskChange:
        change = task_ops.replace_task_for_date(self.get_project(project_id), day, task_type)
        self._save()
        return change

    def edit_task(self, project_id: str, task_id: str, **updates) -> task_ops.TaskChange:
        change = task_ops.edit_task(self.get_project(project_id), task_id, policy=self.policy, **updates)
        self._save()
        return change

    def delete_task(self, project_id: str, task_id: str) -> task_ops.TaskChange:
        change = task_ops.delete_task(self.get_project(project_id), task_id)
        self._save()
        return change

    def complete_checkpoint(self, project_id: str, checkpoint_id: str):
        project = self.get_project(project_id)
        for checkpoint in project.checkpoints:
            if checkpoint.id == checkpoint_id:
                checkpoint.is_completed = True
                self._save()
                return checkpoint
        raise NotFoundError(f"Checkpoint {checkpoint_id} not found in project {project_id}")

    def analyze_project(self, project_id: str):
        project = self.get_project(project_id)
        analysis = self.analyzer.analyze_learning_progress(project)
        project.last_analysis = analysis
        self._save()
        logger.info("Stored analysis for %r: %s", project.name, analysis.learning_state.value)
        return analysis
