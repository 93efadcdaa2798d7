# planner/models/task.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from core.priorities import DEFAULT_PRIORITY
from core.settings import TASKS
from utils.datetime_utils import utc_now


def _new_id() -> str:
    return uuid.uuid4().hex


class Task(SQLModel, table=True):
    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    description: str = ""
    priority: str = DEFAULT_PRIORITY      # High / Medium / Low
    due_date: date = Field(index=True)
    due_time: Optional[str] = None        # HH:MM, None = end of day
    start_time: Optional[str] = None      # HH:MM
    end_time: Optional[str] = None        # HH:MM
    subject: str = TASKS.default_subject
    completed: bool = False
    planner_mode: str = "auto"            # auto / manual
    focus_minutes: Optional[int] = None
    break_minutes: Optional[int] = None
    session_count: Optional[int] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def effective_due_time(self) -> str:
        return self.due_time or TASKS.end_of_day_time


__all__ = ["Task"]
