"""Utility helpers for task priorities."""
from __future__ import annotations

from typing import Tuple

HIGH = "High"
MEDIUM = "Medium"
LOW = "Low"

# Ordered from most to least urgent.
PRIORITY_LEVELS: Tuple[str, ...] = (HIGH, MEDIUM, LOW)

DEFAULT_PRIORITY = MEDIUM


def normalize_priority(value: str | None) -> str:
    """Map external values (any case, surrounding spaces) to a known level."""
    if value is None:
        return DEFAULT_PRIORITY
    text = str(value).strip().capitalize()
    if text in PRIORITY_LEVELS:
        return text
    return DEFAULT_PRIORITY


def is_priority(value: str | None) -> bool:
    if value is None:
        return False
    return str(value).strip().capitalize() in PRIORITY_LEVELS


__all__ = [
    "HIGH",
    "MEDIUM",
    "LOW",
    "DEFAULT_PRIORITY",
    "PRIORITY_LEVELS",
    "is_priority",
    "normalize_priority",
]
