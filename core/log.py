from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from core.settings import LOGGING

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(area: str) -> logging.Logger:
    """Return the ``planner.<area>`` logger, attaching a handler on first use."""
    logger = logging.getLogger(f"planner.{area}")
    if not logger.handlers:
        if LOGGING.to_file:
            LOGGING.path.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = RotatingFileHandler(
                LOGGING.path,
                maxBytes=LOGGING.max_bytes,
                backupCount=LOGGING.backup_count,
                encoding="utf-8",
            )
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger


__all__ = ["get_logger", "LOG_FORMAT"]
