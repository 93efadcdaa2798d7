# planner/storage/db.py
from sqlmodel import SQLModel, create_engine, Session

from core.settings import DB_PATH, ensure_data_dirs

# Ensure SQLModel metadata is populated
import models.task  # noqa: F401
import models.focus_session  # noqa: F401


_engine = None


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_engine(f"sqlite:///{DB_PATH.as_posix()}", echo=False)
    return _engine


def init_db():
    ensure_data_dirs()
    SQLModel.metadata.create_all(get_engine())


def get_session() -> Session:
    return Session(get_engine())
