"""Whole-document persistence for projects, plus key/value settings."""
import json
import logging
from datetime import datetime

from study_coach.db import get_connection
from study_coach.models import Project

logger = logging.getLogger(__name__)

PROJECTS_KEY = "projects"


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def load_document(db_path: str, key: str):
    """Decoded JSON stored under key, or None when absent."""
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM documents WHERE key = ?", (key,)).fetchone()
    conn.close()
    return json.loads(row["value"]) if row else None


def save_document(db_path: str, key: str, data) -> None:
    """Overwrite the whole document stored under key."""
    payload = json.dumps(data, ensure_ascii=False)
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO documents (key, value, saved_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value, saved_at=excluded.saved_at""",
        (key, payload, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()


def load_projects(db_path: str) -> list[Project]:
    data = load_document(db_path, PROJECTS_KEY)
    if not data:
        return []
    return [Project.from_dict(p) for p in data]


def save_projects(db_path: str, projects: list[Project]) -> None:
    save_document(db_path, PROJECTS_KEY, [p.to_dict() for p in projects])
    logger.debug("Saved snapshot of %d project(s)", len(projects))
