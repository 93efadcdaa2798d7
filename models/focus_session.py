# planner/models/focus_session.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from utils.datetime_utils import utc_now


class FocusSession(SQLModel, table=True):
    __tablename__ = "focus_sessions"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    task_id: Optional[str] = Field(default=None, foreign_key="task.id")
    duration_minutes: int
    break_minutes: int = 5
    sessions_completed: int = 1
    completed_at: datetime = Field(default_factory=utc_now)


__all__ = ["FocusSession"]
