"""Shared utilities for parsing, formatting and comparing task dates and times.

Everything here is pure: functions that need "now" take it as an argument or
receive a :class:`utils.datetime_utils.Clock`.
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Union

from core.settings import POMODORO
from utils.datetime_utils import Clock

DateLike = Union[date, datetime]
MINUTES_PER_DAY = 24 * 60


def snap_minutes(value: int, *, step: int, direction: str = "forward") -> int:
    """Snap ``value`` to ``step`` minutes using the provided ``direction``.

    ``direction`` can be ``forward`` (ceil), ``nearest`` or ``backward``.
    """

    if step <= 0:
        return value
    if direction == "nearest":
        return int(round(value / step) * step)
    remainder = value % step
    if remainder == 0:
        return value
    if direction == "backward":
        return value - remainder
    # forward (ceil)
    return value + (step - remainder)


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_date_input(value: Union[str, date, None]) -> Optional[date]:
    """Parse ISO ``YYYY-MM-DD`` or US ``MM/DD/YYYY`` input into a ``date``."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_time_input(value: Union[str, time, None]) -> Optional[time]:
    """Parse ``HH:MM`` strings (or short ``HMM``/``HHMM``) into a ``time``."""

    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in ("%H:%M", "%H.%M", "%H:%M:%S"):
        try:
            dt = datetime.strptime(text, fmt)
            return time(dt.hour, dt.minute)
        except ValueError:
            continue

    # short hhmm (e.g. 930 -> 09:30)
    if len(text) in {3, 4} and text.isdigit():
        hours = _parse_int(text[:-2])
        minutes = _parse_int(text[-2:])
        if hours is not None and minutes is not None and 0 <= hours <= 23 and 0 <= minutes <= 59:
            return time(hours, minutes)

    return None


def format_time_hhmm(value: time) -> str:
    """Stored representation: 24-hour ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def normalize_time_text(value: Union[str, time, None]) -> Optional[str]:
    parsed = parse_time_input(value)
    if parsed is None:
        return None
    return format_time_hhmm(parsed)


def format_time_12h(value: Union[str, time]) -> str:
    """Convert stored ``HH:MM`` into the display form ``h:mm AM/PM``.

    ``00:00`` becomes ``12:00 AM`` and ``12:30`` becomes ``12:30 PM``.
    Unparseable text is returned unchanged.
    """

    parsed = parse_time_input(value)
    if parsed is None:
        return value if isinstance(value, str) else str(value)
    suffix = "AM" if parsed.hour < 12 else "PM"
    hour = parsed.hour % 12 or 12
    return f"{hour}:{parsed.minute:02d} {suffix}"


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def window_minutes(start: Union[str, time, None], end: Union[str, time, None]) -> Optional[int]:
    """Length of the ``start``..``end`` window in minutes.

    Returns ``None`` when either bound is missing or malformed, or when the
    window is empty (``end <= start``).
    """

    start_t = parse_time_input(start)
    end_t = parse_time_input(end)
    if start_t is None or end_t is None:
        return None
    length = minutes_of_day(end_t) - minutes_of_day(start_t)
    if length <= 0:
        return None
    return length


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def is_same_day(a: DateLike, b: DateLike) -> bool:
    """Compare only year, month and day."""
    return _as_date(a) == _as_date(b)


def is_today(value: DateLike, clock: Clock) -> bool:
    return is_same_day(value, clock.now())


def is_date_in_past(value: DateLike, clock: Clock) -> bool:
    """``True`` for days strictly before today; today itself is not past."""
    return _as_date(value) < _as_date(clock.now())


def default_start_time(now: datetime, *, step_minutes: Optional[int] = None) -> time:
    """Current time rounded up to the next ``step_minutes`` boundary."""

    if step_minutes is None:
        step_minutes = POMODORO.start_time_step_minutes
    total = snap_minutes(now.hour * 60 + now.minute, step=step_minutes, direction="forward")
    if total >= MINUTES_PER_DAY:
        return time(23, 59)
    return time(total // 60, total % 60)


def default_end_time(start: time, *, hours: Optional[int] = None) -> time:
    """``start`` plus ``hours``, clamped to the end of the same day."""

    if hours is None:
        hours = POMODORO.default_window_hours
    total = minutes_of_day(start) + hours * 60
    if total >= MINUTES_PER_DAY:
        return time(23, 59)
    return time(total // 60, total % 60)


__all__ = [
    "default_end_time",
    "default_start_time",
    "format_time_12h",
    "format_time_hhmm",
    "is_date_in_past",
    "is_same_day",
    "is_today",
    "minutes_of_day",
    "normalize_time_text",
    "parse_date_input",
    "parse_time_input",
    "snap_minutes",
    "window_minutes",
]
