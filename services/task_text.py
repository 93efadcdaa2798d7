"""Text helpers shared by the assistant chat and task forms."""
from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional, Tuple

from core.priorities import HIGH, LOW, MEDIUM
from core.settings import TASKS
from helpers.datetime_utils import format_time_12h

SUBJECT_RE = re.compile(r"\bfor\s+(\w+)|\bin\s+(\w+)|\bsubject[:\s]+(\w+)", re.IGNORECASE)
DATE_RE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b")

PRIORITY_KEYWORDS = (
    (HIGH, ("urgent", "asap")),
    (MEDIUM, ("medium", "important")),
    (LOW, ("low", "whenever")),
)


def parse_action(text: str) -> Optional[Tuple[str, Dict[str, Any]]]:
    """Find the first JSON object with an ``action`` key in an assistant reply.

    Returns ``(action, payload)`` or ``None`` when the reply carries no action.
    """

    if not text:
        return None
    decoder = json.JSONDecoder()
    for index, char in enumerate(text):
        if char != "{":
            continue
        try:
            payload, _ = decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            continue
        if isinstance(payload, dict) and isinstance(payload.get("action"), str):
            return payload["action"], payload
    return None


def extract_task_fields(text: str) -> Optional[Dict[str, str]]:
    """Pick priority, subject and a ``M/D/YY`` date out of free text."""

    if not text:
        return None
    lowered = text.lower()
    fields: Dict[str, str] = {}

    for level, words in PRIORITY_KEYWORDS:
        if any(word in lowered for word in words):
            fields["priority"] = level
            break

    subject = SUBJECT_RE.search(text)
    if subject:
        fields["subject"] = next(group for group in subject.groups() if group)

    found = DATE_RE.search(text)
    if found:
        month, day, year = found.groups()
        if len(year) == 2:
            year = f"20{year}"
        fields["due_date"] = f"{year}-{int(month):02d}-{int(day):02d}"

    return fields or None


def format_task(task: Any) -> str:
    due_time = getattr(task, "due_time", None)
    when = format_time_12h(due_time) if due_time else "End of day"
    subject = getattr(task, "subject", None) or TASKS.default_subject
    return (
        f"{task.title}\n"
        f"   Priority: {task.priority}\n"
        f"   Due: {task.due_date} at {when}\n"
        f"   Subject: {subject}"
    )


__all__ = ["extract_task_fields", "format_task", "parse_action"]
