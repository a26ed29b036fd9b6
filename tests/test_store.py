"""Tests for snapshot persistence and settings."""
from study_coach.db import get_connection
from study_coach.store import (
    PROJECTS_KEY, get_setting, load_document, load_projects, save_document, save_projects,
    set_setting,
)
from conftest import make_project


def test_get_setting_default(tmp_db):
    assert get_setting(tmp_db, "missing") is None
    assert get_setting(tmp_db, "missing", "fallback") == "fallback"


def test_set_setting_upserts(tmp_db):
    set_setting(tmp_db, "theme_color", "rose")
    set_setting(tmp_db, "theme_color", "sky")
    assert get_setting(tmp_db, "theme_color") == "sky"
    conn = get_connection(tmp_db)
    count = conn.execute("SELECT COUNT(*) FROM user_settings WHERE key='theme_color'").fetchone()[0]
    conn.close()
    assert count == 1


def test_absent_snapshot_loads_empty(tmp_db):
    assert load_document(tmp_db, PROJECTS_KEY) is None
    assert load_projects(tmp_db) == []


def test_save_document_overwrites(tmp_db):
    save_document(tmp_db, "notes", {"a": 1})
    save_document(tmp_db, "notes", ["b"])
    assert load_document(tmp_db, "notes") == ["b"]
    conn = get_connection(tmp_db)
    row = conn.execute("SELECT saved_at FROM documents WHERE key='notes'").fetchone()
    conn.close()
    assert row["saved_at"]


def test_save_projects_round_trip(tmp_db):
    project = make_project(completed=2, total=5)
    project.name = "Rhetorik und Stil"
    save_projects(tmp_db, [project])
    assert load_projects(tmp_db) == [project]

    save_projects(tmp_db, [])
    assert load_projects(tmp_db) == []
