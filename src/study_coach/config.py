"""Application configuration: defaults, environment, then stored settings."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from study_coach.db import DEFAULT_DB_PATH
from study_coach.store import get_setting

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 120.0

THEME_COLORS = ("indigo", "emerald", "rose", "amber", "sky", "violet")

# Setting keys in the user_settings table
API_KEY_SETTING = "gemini_api_key"
MODEL_SETTING = "active_model"
THEME_COLOR_SETTING = "theme_color"
THEME_MODE_SETTING = "theme_mode"


@dataclass(frozen=True)
class AppConfig:
    db_path: str = DEFAULT_DB_PATH
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    theme_color: str = "indigo"
    dark_mode: bool = False
    log_level: str = "WARNING"


def default_db_path() -> str:
    load_dotenv()
    return os.getenv("STUDY_COACH_DB", DEFAULT_DB_PATH)


def load_config(db_path: str | None = None) -> AppConfig:
    """Build the config. Stored settings win over the environment.

    The database must already be initialized.
    """
    load_dotenv()
    db_path = db_path or default_db_path()
    env_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    theme_color = get_setting(db_path, THEME_COLOR_SETTING, "indigo")
    if theme_color not in THEME_COLORS:
        theme_color = "indigo"
    return AppConfig(
        db_path=db_path,
        api_key=get_setting(db_path, API_KEY_SETTING) or env_key or None,
        model=get_setting(db_path, MODEL_SETTING) or os.getenv("STUDY_COACH_MODEL", DEFAULT_MODEL),
        base_url=os.getenv("STUDY_COACH_BASE_URL", DEFAULT_BASE_URL),
        request_timeout=float(os.getenv("STUDY_COACH_TIMEOUT", DEFAULT_TIMEOUT)),
        theme_color=theme_color,
        dark_mode=get_setting(db_path, THEME_MODE_SETTING, "light") == "dark",
        log_level=os.getenv("STUDY_COACH_LOG_LEVEL", "WARNING").upper(),
    )
