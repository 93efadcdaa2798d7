"""Scheduling conflict detection for new tasks.

Checks run in a fixed order and the first match wins:

1. time      - another task on the same day has the same due time
2. priority  - the candidate is High and the day already has a High task
3. date      - the day already holds ``CONFLICTS.busy_day_threshold`` tasks

Detection is advisory: a failing task store yields a "no conflict" report.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from core.log import get_logger
from core.priorities import HIGH, normalize_priority
from core.settings import CONFLICTS, TASKS
from helpers.datetime_utils import (
    format_time_12h,
    normalize_time_text,
    parse_date_input,
)

NONE = "none"
TIME = "time"
PRIORITY = "priority"
DATE = "date"


def _logger():
    return get_logger("conflicts")


class TaskLike(Protocol):
    title: str
    priority: str
    due_date: date
    due_time: Optional[str]


class TaskStore(Protocol):
    def list_incomplete_tasks(self, user_id: str) -> Iterable[Any]:
        ...


class OrderingGenerator(Protocol):
    def suggest_ordering(self, task_a: Any, task_b: Any) -> str:
        ...


@dataclass
class Candidate:
    """A proposed task that has not been persisted yet."""

    title: str
    due_date: date
    due_time: Optional[str] = None
    priority: str = TASKS.default_priority
    subject: str = TASKS.default_subject
    description: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class ConflictReport:
    has_conflict: bool = False
    conflict_type: str = NONE
    conflicting_tasks: List[Any] = field(default_factory=list)
    recommendation: str = ""

    @classmethod
    def clear(cls) -> "ConflictReport":
        return cls()


def _day(value: Any) -> Optional[date]:
    return parse_date_input(value)


def _time(task: Any) -> Optional[str]:
    return normalize_time_text(getattr(task, "due_time", None))


def _sort_time(task: Any) -> str:
    return _time(task) or TASKS.end_of_day_time


def _created(task: Any) -> datetime:
    value = getattr(task, "created_at", None)
    if value is None:
        return datetime.max
    # Compare naive and aware timestamps on the same footing.
    return value.replace(tzinfo=None)


def order_pair(task_a: Any, task_b: Any) -> tuple:
    """Return ``(first, second)``: earlier due time first, then earlier creation."""
    key_a = (_sort_time(task_a), _created(task_a))
    key_b = (_sort_time(task_b), _created(task_b))
    if key_b < key_a:
        return task_b, task_a
    return task_a, task_b


def default_ordering_text(task_a: Any, task_b: Any) -> str:
    first, second = order_pair(task_a, task_b)
    return f'Complete "{first.title}" first, then "{second.title}".'


def recommend_ordering(
    task_a: Any,
    task_b: Any,
    generator: Optional[OrderingGenerator] = None,
) -> str:
    """Suggest which of two same-day, same-priority tasks to do first.

    Generator output is used when available; any failure or empty answer
    falls back to the deterministic due-time rule.
    """

    if generator is not None:
        try:
            text = generator.suggest_ordering(task_a, task_b)
        except Exception as exc:
            _logger().warning("Ordering generator failed, using default rule: %s", exc)
        else:
            if isinstance(text, str) and text.strip():
                return text.strip()
            _logger().warning("Ordering generator returned no usable text: %r", text)
    return default_ordering_text(task_a, task_b)


def check_conflicts(candidate: Any, existing_tasks: Sequence[Any]) -> ConflictReport:
    """Classify ``candidate`` against the user's incomplete tasks."""

    day = _day(candidate.due_date)
    if day is None:
        return ConflictReport.clear()
    day_text = day.isoformat()
    candidate_id = getattr(candidate, "id", None)

    same_date = [
        t
        for t in existing_tasks
        if _day(t.due_date) == day and (candidate_id is None or getattr(t, "id", None) != candidate_id)
    ]

    candidate_time = _time(candidate)
    if candidate_time is not None:
        same_time = [t for t in same_date if _time(t) == candidate_time]
        if same_time:
            first = same_time[0]
            return ConflictReport(
                has_conflict=True,
                conflict_type=TIME,
                conflicting_tasks=same_time,
                recommendation=(
                    f'Time conflict: you already have "{first.title}" at '
                    f"{format_time_12h(candidate_time)} on {day_text}. "
                    "Consider adjusting the time."
                ),
            )

    if normalize_priority(candidate.priority) == HIGH:
        same_priority = [t for t in same_date if normalize_priority(t.priority) == HIGH]
        if same_priority:
            competitor = same_priority[0]
            return ConflictReport(
                has_conflict=True,
                conflict_type=PRIORITY,
                conflicting_tasks=same_priority,
                recommendation=(
                    f'Priority conflict: "{competitor.title}" is also high priority on {day_text}. '
                    + default_ordering_text(competitor, candidate)
                ),
            )

    if len(same_date) >= CONFLICTS.busy_day_threshold:
        return ConflictReport(
            has_conflict=True,
            conflict_type=DATE,
            conflicting_tasks=same_date,
            recommendation=(
                f"Busy day: you already have {len(same_date)} tasks on {day_text}. "
                "Consider spreading them out or prioritizing carefully."
            ),
        )

    return ConflictReport.clear()


def find_priority_groups(tasks: Sequence[Any]) -> List[Any]:
    """First group of two or more tasks sharing priority and due date, else ``[]``."""

    groups: Dict[tuple, List[Any]] = {}
    for task in tasks:
        key = (normalize_priority(task.priority), _day(task.due_date))
        groups.setdefault(key, []).append(task)
    for group in groups.values():
        if len(group) > 1:
            return group
    return []


def candidate_from_payload(payload: Mapping[str, Any]) -> Optional[Candidate]:
    """Build a candidate from an assistant ``create_task`` payload.

    Accepts both ``dueDate``/``dueTime`` and ``due_date``/``due_time`` keys.
    Returns ``None`` when the title or date is missing or malformed.
    """

    data = payload.get("task") if isinstance(payload.get("task"), Mapping) else payload
    title = str(data.get("title") or "").strip()
    day = parse_date_input(data.get("dueDate") or data.get("due_date"))
    if not title or day is None:
        return None
    return Candidate(
        title=title,
        due_date=day,
        due_time=normalize_time_text(data.get("dueTime") or data.get("due_time")),
        priority=normalize_priority(data.get("priority")),
        subject=str(data.get("subject") or "").strip() or TASKS.default_subject,
        description=str(data.get("description") or ""),
    )


class ConflictDetector:
    """Runs :func:`check_conflicts` against a task store, one read per check."""

    def __init__(self, store: TaskStore, generator: Optional[OrderingGenerator] = None) -> None:
        self.store = store
        self.generator = generator
        self.logger = get_logger("conflicts")

    def check(self, candidate: Any, user_id: str) -> ConflictReport:
        try:
            existing = list(self.store.list_incomplete_tasks(user_id))
        except Exception:
            self.logger.exception("Conflict check skipped, task store query failed for user %s", user_id)
            return ConflictReport.clear()
        report = check_conflicts(candidate, existing)
        if report.has_conflict:
            self.logger.info(
                "Conflict %s for %r with %d task(s)",
                report.conflict_type,
                candidate.title,
                len(report.conflicting_tasks),
            )
        return report

    def check_proposal(self, payload: Mapping[str, Any], user_id: str) -> ConflictReport:
        candidate = candidate_from_payload(payload)
        if candidate is None:
            self.logger.warning("Proposed task is missing a title or a valid due date")
            return ConflictReport.clear()
        return self.check(candidate, user_id)

    def recommend_ordering(self, task_a: Any, task_b: Any) -> str:
        return recommend_ordering(task_a, task_b, self.generator)


__all__ = [
    "NONE",
    "TIME",
    "PRIORITY",
    "DATE",
    "Candidate",
    "ConflictDetector",
    "ConflictReport",
    "candidate_from_payload",
    "check_conflicts",
    "default_ordering_text",
    "find_priority_groups",
    "order_pair",
    "recommend_ordering",
]
