"""Progress percentage and learning phase derived from task completion."""
from study_coach.models import Phase, Project


def compute_progress(tasks: list) -> int:
    """Percentage of completed tasks, rounded half up. 0 for an empty list.

    Integer arithmetic: floor(100 * completed / total + 0.5).
    """
    total = len(tasks)
    if total == 0:
        return 0
    completed = sum(1 for t in tasks if t.is_completed)
    return (200 * completed + total) // (2 * total)


def phase_for_progress(progress: int) -> Phase:
    """Map progress to a phase. Thresholds are strict: 25 is still Education."""
    if progress > 80:
        return Phase.MASTERY
    elif progress > 50:
        return Phase.CONSOLIDATION
    elif progress > 25:
        return Phase.PRACTICE
    return Phase.EDUCATION


def recompute(project: Project) -> Project:
    """Refresh the project's derived progress and phase in place."""
    project.progress = compute_progress(project.tasks)
    project.current_phase = phase_for_progress(project.progress)
    return project
