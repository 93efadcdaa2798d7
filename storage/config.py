"""Simple JSON-backed store for per-device user preferences."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from core.settings import CONFIG_PATH, POMODORO
from helpers.cycle_planner import AUTO, MANUAL


@dataclass
class AppConfig:
    """Lightweight preferences persisted to ``config.json``."""

    user_id: Optional[str] = None
    focus_minutes: int = POMODORO.default_focus_minutes
    planner_mode: str = AUTO
    dark_mode: bool = False


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _focus_value(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return POMODORO.default_focus_minutes
    return number if number > 0 else POMODORO.default_focus_minutes


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    data = _load_raw(target)
    mode = data.get("planner_mode")
    return AppConfig(
        user_id=data.get("user_id"),
        focus_minutes=_focus_value(data.get("focus_minutes")),
        planner_mode=mode if mode in (AUTO, MANUAL) else AUTO,
        dark_mode=bool(data.get("dark_mode", False)),
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    _ensure_parent(target)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    target = path or CONFIG_PATH
    cfg = load_config(target)
    for key, value in changes.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)
    save_config(cfg, target)
    return cfg


__all__ = ["AppConfig", "load_config", "save_config", "update_config"]
