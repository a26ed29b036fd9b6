"""Tests for dashboard projections."""
from study_coach.config import THEME_COLORS
from study_coach.dashboard import (
    DARK_THEME_STYLES, THEME_STYLES, get_learning_label, get_study_stats, progress_bar,
    project_summary, theme_style,
)
from study_coach.models import Analysis, Checkpoint, LearningState, Phase, TaskType
from study_coach.progress import recompute
from conftest import make_project


def test_progress_bar():
    assert progress_bar(0) == "░" * 20
    assert progress_bar(100) == "█" * 20
    assert progress_bar(50, width=10) == "█" * 5 + "░" * 5
    assert len(progress_bar(33)) == 20


def test_learning_label_falls_back_to_phase():
    project = recompute(make_project(completed=9, total=10))
    assert get_learning_label(project) == "Deep Mastery"
    project.last_analysis = Analysis(learning_state=LearningState.FRAGILE, user_feedback="",
                                     estimated_dou=20, next_action=TaskType.TEST)
    assert get_learning_label(project) == "Fragile"


def test_project_summary():
    project = recompute(make_project(completed=3, total=4))
    project.checkpoints = [Checkpoint(id="c1", day_offset=1, purpose="p", is_completed=True),
                           Checkpoint(id="c2", day_offset=5, purpose="p")]
    s = project_summary(project)
    assert s["progress"] == 75
    assert s["phase"] is Phase.CONSOLIDATION
    assert s["label"] == "Consolidation"
    assert s["tasks_completed"] == 3
    assert s["tasks_total"] == 4
    assert s["checkpoints_completed"] == 1
    assert s["checkpoints_total"] == 2


def test_get_study_stats_empty():
    stats = get_study_stats([])
    assert stats == {"projects": 0, "tasks_total": 0, "tasks_completed": 0,
                     "avg_progress": 0.0, "mastered": 0}


def test_get_study_stats():
    done = recompute(make_project(completed=5, total=5))
    started = recompute(make_project(completed=1, total=4))
    stats = get_study_stats([done, started])
    assert stats["projects"] == 2
    assert stats["tasks_total"] == 9
    assert stats["tasks_completed"] == 6
    assert stats["avg_progress"] == 62.5
    assert stats["mastered"] == 1


def test_theme_style_unknown_color():
    assert theme_style("rose") == "deep_pink2"
    assert theme_style("plaid") == "blue"


def test_theme_style_dark_mode_palette():
    assert theme_style("rose", dark_mode=True) == "hot_pink"
    assert theme_style("plaid", dark_mode=True) == "bright_blue"
    assert set(DARK_THEME_STYLES) == set(THEME_STYLES) == set(THEME_COLORS)
