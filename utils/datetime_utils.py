"""Clock collaborators and UTC helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Protocol

UTC = timezone.utc


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Local wall-clock time of the running device."""

    def now(self) -> datetime:
        return datetime.now()


@dataclass
class FixedClock:
    """Clock frozen at ``current``."""

    current: datetime

    def now(self) -> datetime:
        return self.current

    @classmethod
    def on(cls, day: date, hour: int = 9, minute: int = 0) -> "FixedClock":
        return cls(datetime(day.year, day.month, day.day, hour, minute))


def utc_now() -> datetime:
    return datetime.now(UTC)


__all__ = [
    "UTC",
    "Clock",
    "FixedClock",
    "SystemClock",
    "utc_now",
]
