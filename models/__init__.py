"""ORM models exposed by the StudyPlanner application."""
from .task import Task
from .focus_session import FocusSession

__all__ = ["Task", "FocusSession"]
