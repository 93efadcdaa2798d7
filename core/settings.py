"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "StudyPlanner"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

DB_PATH = DATA_DIR / "app.db"
CONFIG_PATH = DATA_DIR / "config.json"
LOG_PATH = LOG_DIR / "planner.log"


def ensure_data_dirs() -> None:
    for _dir in (DATA_DIR, LOG_DIR):
        _dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class PomodoroSettings:
    default_focus_minutes: int = 25
    # Standard Pomodoro ratio: one break minute per five focus minutes.
    break_ratio: int = 5
    min_break_minutes: int = 1
    min_session_count: int = 1
    fallback_session_count: int = 4
    start_time_step_minutes: int = 5
    default_window_hours: int = 3


POMODORO = PomodoroSettings()


@dataclass(frozen=True)
class ConflictSettings:
    # Existing tasks on a day before the candidate is considered an overload.
    busy_day_threshold: int = 3


CONFLICTS = ConflictSettings()


@dataclass(frozen=True)
class TaskSettings:
    default_priority: str = "Medium"
    default_subject: str = "General"
    end_of_day_time: str = "23:59"
    max_title_length: int = 200


TASKS = TaskSettings()


@dataclass(frozen=True)
class GeminiSettings:
    api_key: Optional[str] = field(default_factory=lambda: os.environ.get("GEMINI_API_KEY") or None)
    model: str = "models/gemini-1.5-flash"
    temperature: float = 0.5
    max_output_tokens: int = 150

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


GEMINI = GeminiSettings()


@dataclass(frozen=True)
class LoggingSettings:
    to_file: bool = field(default_factory=lambda: os.environ.get("PLANNER_LOG_TO_FILE", "1") != "0")
    path: Path = LOG_PATH
    max_bytes: int = 1_000_000
    backup_count: int = 3


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "CONFIG_PATH",
    "LOG_PATH",
    "POMODORO",
    "CONFLICTS",
    "TASKS",
    "GEMINI",
    "LOGGING",
    "ensure_data_dirs",
    "get_default_data_dir",
]
