# planner/services/focus_sessions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlmodel import Session, select

from core.log import get_logger
from models.focus_session import FocusSession
from storage.db import get_session


@dataclass(frozen=True)
class FocusStatistics:
    total_sessions: int = 0
    total_focus_minutes: int = 0
    total_break_minutes: int = 0
    total_pomodoros: int = 0
    average_session_minutes: float = 0.0


class FocusSessionService:
    def __init__(self, session_factory: Optional[Callable[[], Session]] = None) -> None:
        self._session_factory = session_factory or get_session
        self.logger = get_logger("focus")

    def record(
        self,
        *,
        user_id: str,
        duration_minutes: int,
        break_minutes: int = 5,
        sessions_completed: int = 1,
        task_id: Optional[str] = None,
    ) -> FocusSession:
        if duration_minutes <= 0:
            raise ValueError("Focus duration must be positive")
        with self._session_factory() as s:
            entry = FocusSession(
                user_id=user_id,
                task_id=task_id,
                duration_minutes=duration_minutes,
                break_minutes=max(break_minutes, 0),
                sessions_completed=max(sessions_completed, 1),
            )
            s.add(entry)
            s.commit()
            s.refresh(entry)
        self.logger.info("Focus session recorded: %s min for %s", duration_minutes, user_id)
        return entry

    def list_for_user(self, user_id: str) -> List[FocusSession]:
        with self._session_factory() as s:
            stmt = (
                select(FocusSession)
                .where(FocusSession.user_id == user_id)
                .order_by(FocusSession.completed_at.desc())
            )
            return list(s.exec(stmt))

    def statistics(self, user_id: str) -> FocusStatistics:
        sessions = self.list_for_user(user_id)
        if not sessions:
            return FocusStatistics()
        total_focus = sum(x.duration_minutes for x in sessions)
        return FocusStatistics(
            total_sessions=len(sessions),
            total_focus_minutes=total_focus,
            total_break_minutes=sum(x.break_minutes for x in sessions),
            total_pomodoros=sum(x.sessions_completed for x in sessions),
            average_session_minutes=total_focus / len(sessions),
        )


__all__ = ["FocusSessionService", "FocusStatistics"]
