# planner/services/tasks.py
from __future__ import annotations

from typing import Callable, List, Optional

from sqlmodel import Session, select

from core.log import get_logger
from core.priorities import is_priority, normalize_priority
from core.settings import TASKS
from helpers.cycle_planner import (
    PlannerEvent,
    PlannerState,
    SetWindow,
    initial_state,
    reduce,
    state_from_fields,
)
from helpers.datetime_utils import (
    is_date_in_past,
    normalize_time_text,
    parse_date_input,
    window_minutes,
)
from models.task import Task
from storage.db import get_session
from utils.datetime_utils import Clock, SystemClock, utc_now


class TaskValidationError(ValueError):
    """Raised when a task cannot be created; nothing is persisted."""


def planner_state(task: Task) -> PlannerState:
    """Planner state for a stored task, with the window taken from its times."""
    return state_from_fields(
        task.planner_mode,
        task.focus_minutes,
        task.break_minutes,
        task.session_count,
        window_minutes(task.start_time, task.end_time),
    )


def _store_plan(task: Task, state: PlannerState) -> None:
    plan = state.plan()
    task.planner_mode = state.mode
    task.focus_minutes = plan.focus_minutes
    task.break_minutes = plan.break_minutes
    task.session_count = plan.session_count


class TaskService:
    _listeners = {
        "after_create": set(),
        "after_update": set(),
        "after_delete": set(),
    }

    def __init__(
        self,
        session_factory: Optional[Callable[[], Session]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._session_factory = session_factory or get_session
        self.clock = clock or SystemClock()
        self.logger = get_logger("tasks")

    @classmethod
    def subscribe(cls, event: str, callback):
        if event not in cls._listeners:
            raise ValueError(f"Unsupported event: {event}")
        cls._listeners[event].add(callback)

    @classmethod
    def unsubscribe(cls, event: str, callback):
        if event not in cls._listeners:
            return
        cls._listeners[event].discard(callback)

    def _emit(self, event: str, task_id: str):
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            try:
                listener(task_id)
            except Exception:
                self.logger.exception("Listener for %s failed on task %s", event, task_id)

    # ---------- validation ----------
    def _validate(
        self,
        title: str,
        due_date,
        due_time,
        start_time,
        end_time,
        priority,
    ):
        cleaned_title = (title or "").strip()
        if not cleaned_title:
            raise TaskValidationError("Please enter a task title")
        if len(cleaned_title) > TASKS.max_title_length:
            raise TaskValidationError("Task title is too long")

        parsed_date = parse_date_input(due_date)
        if parsed_date is None:
            raise TaskValidationError("Please enter a valid due date (YYYY-MM-DD)")
        if is_date_in_past(parsed_date, self.clock):
            raise TaskValidationError("Please select today or a future date")

        times = []
        for label, value in (("due", due_time), ("start", start_time), ("end", end_time)):
            normalized = normalize_time_text(value)
            if value not in (None, "") and normalized is None:
                raise TaskValidationError(f"Invalid {label} time, expected HH:MM")
            times.append(normalized)

        if priority not in (None, "") and not is_priority(priority):
            raise TaskValidationError("Priority must be High, Medium or Low")

        return cleaned_title, parsed_date, times[0], times[1], times[2]

    # ---------- CRUD ----------
    def create(
        self,
        *,
        user_id: str,
        title: str,
        due_date,
        due_time=None,
        start_time=None,
        end_time=None,
        priority: Optional[str] = None,
        subject: Optional[str] = None,
        description: str = "",
        planner: Optional[PlannerState] = None,
        emit: bool = True,
    ) -> Task:
        """Validate and persist a new task.

        A cycle plan is attached when a planner state is supplied or when the
        start/end window is known; the window always comes from the task's
        own times.
        """

        cleaned_title, parsed_date, due_t, start_t, end_t = self._validate(
            title, due_date, due_time, start_time, end_time, priority
        )
        task = Task(
            user_id=user_id,
            title=cleaned_title,
            description=(description or "").strip(),
            priority=normalize_priority(priority),
            due_date=parsed_date,
            due_time=due_t,
            start_time=start_t,
            end_time=end_t,
            subject=(subject or "").strip() or TASKS.default_subject,
        )
        if planner is not None:
            _store_plan(task, reduce(planner, SetWindow(start_t, end_t)))
        elif window_minutes(start_t, end_t) is not None:
            _store_plan(task, initial_state(None, start_t, end_t))

        with self._session_factory() as s:
            s.add(task)
            s.commit()
            s.refresh(task)
        self.logger.info("Task created: %s", task.id)
        if emit:
            self._emit("after_create", task.id)
        return task

    def get(self, task_id: str) -> Optional[Task]:
        with self._session_factory() as s:
            return s.get(Task, task_id)

    def list_incomplete_tasks(self, user_id: str) -> List[Task]:
        with self._session_factory() as s:
            stmt = (
                select(Task)
                .where(Task.user_id == user_id, Task.completed == False)  # noqa: E712
                .order_by(Task.due_date.asc(), Task.created_at.asc())
            )
            return list(s.exec(stmt))

    def toggle_completed(self, task_id: str, *, emit: bool = True) -> Optional[Task]:
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return None
            t.completed = not t.completed
            t.updated_at = utc_now()
            s.add(t)
            s.commit()
            s.refresh(t)
        if emit:
            self._emit("after_update", t.id)
        return t

    def update_window(
        self,
        task_id: str,
        start_time,
        end_time,
        *,
        emit: bool = True,
    ) -> Optional[Task]:
        """Move the task's time window; auto plans follow it, manual plans stay frozen."""
        start_t = normalize_time_text(start_time)
        end_t = normalize_time_text(end_time)
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return None
            t.start_time = start_t
            t.end_time = end_t
            state = reduce(planner_state(t), SetWindow(start_t, end_t))
            _store_plan(t, state)
            t.updated_at = utc_now()
            s.add(t)
            s.commit()
            s.refresh(t)
        if emit:
            self._emit("after_update", t.id)
        return t

    def update_plan(
        self,
        task_id: str,
        *events: PlannerEvent,
        emit: bool = True,
    ) -> Optional[Task]:
        """Feed planner edit events (field edits, mode switches) to a stored task."""
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return None
            state = planner_state(t)
            for event in events:
                state = reduce(state, event)
            _store_plan(t, state)
            t.updated_at = utc_now()
            s.add(t)
            s.commit()
            s.refresh(t)
        if emit:
            self._emit("after_update", t.id)
        return t

    def delete(self, task_id: str, *, emit: bool = True):
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if t:
                s.delete(t)
                s.commit()
                if emit:
                    self._emit("after_delete", task_id)


__all__ = ["TaskService", "TaskValidationError", "planner_state"]
