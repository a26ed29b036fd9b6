"""Read-only projections used by the dashboard and calendar views."""
from study_coach.calendar_view import DayStatus
from study_coach.models import (
    LEARNING_STATE_LABELS, PHASE_LABELS, Phase, Project, TaskType, require_total,
)

TASK_TYPE_COLORS = require_total({
    TaskType.STUDY: "blue",
    TaskType.REVIEW: "yellow",
    TaskType.TEST: "red",
    TaskType.PRACTICE: "green",
    TaskType.TEACH: "cyan",
}, TaskType)

PHASE_COLORS = require_total({
    Phase.EDUCATION: "red",
    Phase.PRACTICE: "dark_orange",
    Phase.CONSOLIDATION: "yellow",
    Phase.MASTERY: "green",
}, Phase)

DAY_STATUS_STYLES = require_total({
    DayStatus.EMPTY: "dim",
    DayStatus.PENDING: "bold yellow",
    DayStatus.DONE: "bold green",
}, DayStatus)

# rich color for each theme tag
THEME_STYLES = {
    "indigo": "slate_blue1",
    "emerald": "green3",
    "rose": "deep_pink2",
    "amber": "orange1",
    "sky": "sky_blue1",
    "violet": "medium_purple",
}

# lighter shades that stay readable on a dark terminal
DARK_THEME_STYLES = {
    "indigo": "light_slate_blue",
    "emerald": "sea_green1",
    "rose": "hot_pink",
    "amber": "light_goldenrod1",
    "sky": "light_sky_blue1",
    "violet": "plum1",
}


def theme_style(color: str, dark_mode: bool = False) -> str:
    if dark_mode:
        return DARK_THEME_STYLES.get(color, "bright_blue")
    return THEME_STYLES.get(color, "blue")


def progress_bar(progress: int, width: int = 20) -> str:
    filled = round(progress * width / 100)
    return "█" * filled + "░" * (width - filled)


def get_learning_label(project: Project) -> str:
    """Latest analysis state if there is one, otherwise the phase."""
    if project.last_analysis:
        return LEARNING_STATE_LABELS[project.last_analysis.learning_state]
    return PHASE_LABELS[project.current_phase]


def project_summary(project: Project) -> dict:
    completed = sum(1 for t in project.tasks if t.is_completed)
    return {
        "id": project.id,
        "name": project.name,
        "chapters": project.chapter_count,
        "pages": project.page_count,
        "progress": project.progress,
        "phase": project.current_phase,
        "label": get_learning_label(project),
        "color": PHASE_COLORS[project.current_phase],
        "tasks_completed": completed,
        "tasks_total": len(project.tasks),
        "checkpoints_completed": sum(1 for c in project.checkpoints if c.is_completed),
        "checkpoints_total": len(project.checkpoints),
    }


def get_study_stats(projects) -> dict:
    total = sum(len(p.tasks) for p in projects)
    completed = sum(1 for p in projects for t in p.tasks if t.is_completed)
    avg = round(sum(p.progress for p in projects) / len(projects), 1) if projects else 0.0
    return {
        "projects": len(projects),
        "tasks_total": total,
        "tasks_completed": completed,
        "avg_progress": avg,
        "mastered": sum(1 for p in projects if p.current_phase is Phase.MASTERY),
    }
