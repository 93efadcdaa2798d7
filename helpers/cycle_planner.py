"""Pomodoro cycle planning.

A planner is always in one of two states:

* :class:`AutoPlan` owns only the focus duration and the available window;
  break length and session count are derived on demand by
  :func:`derive_autoplan`.
* :class:`ManualPlan` owns all three values; nothing is derived.

:func:`reduce` is the single transition function. UI code feeds it edit
events and renders ``state.plan()``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Union

from core.settings import POMODORO
from helpers.datetime_utils import window_minutes

AUTO = "auto"
MANUAL = "manual"

FOCUS = "focus_minutes"
BREAK = "break_minutes"
SESSIONS = "session_count"
PLAN_FIELDS = (FOCUS, BREAK, SESSIONS)


@dataclass(frozen=True)
class CyclePlan:
    focus_minutes: int
    break_minutes: int
    session_count: int
    available_minutes: Optional[int] = None

    @property
    def cycle_minutes(self) -> int:
        return self.focus_minutes + self.break_minutes

    @property
    def total_focus_minutes(self) -> int:
        return self.focus_minutes * self.session_count


def _positive_int(value: object) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number > 0 else None


def _usable_window(value: object) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def break_for(focus_minutes: int) -> int:
    return max(POMODORO.min_break_minutes, math.ceil(focus_minutes / POMODORO.break_ratio))


def derive_autoplan(focus_minutes: object, available_minutes: object = None) -> CyclePlan:
    """Derive a complete plan from a focus duration and an optional window.

    Non-positive or malformed ``focus_minutes`` falls back to the default
    focus length. Without a positive window the session count is the fixed
    fallback of four.
    """

    focus = _positive_int(focus_minutes) or POMODORO.default_focus_minutes
    brk = break_for(focus)
    window = _usable_window(available_minutes)
    if window is None:
        sessions = POMODORO.fallback_session_count
        available = None
    else:
        sessions = max(POMODORO.min_session_count, math.floor(window / (focus + brk)))
        available = int(window)
    return CyclePlan(
        focus_minutes=focus,
        break_minutes=brk,
        session_count=sessions,
        available_minutes=available,
    )


def apply_manual_edit(plan: CyclePlan, field: str, value: object) -> CyclePlan:
    """Set exactly one of the three plan fields; the other two are untouched.

    Values below one are clamped to one. Unknown field names leave the plan
    as it was.
    """

    if field not in PLAN_FIELDS:
        return plan
    number = _positive_int(value) or 1
    return replace(plan, **{field: number})


@dataclass(frozen=True)
class AutoPlan:
    mode: ClassVar[str] = AUTO

    focus_minutes: int = POMODORO.default_focus_minutes
    available_minutes: Optional[int] = None

    def plan(self) -> CyclePlan:
        return derive_autoplan(self.focus_minutes, self.available_minutes)


@dataclass(frozen=True)
class ManualPlan:
    mode: ClassVar[str] = MANUAL

    focus_minutes: int
    break_minutes: int
    session_count: int
    available_minutes: Optional[int] = None

    def plan(self) -> CyclePlan:
        return CyclePlan(
            focus_minutes=self.focus_minutes,
            break_minutes=self.break_minutes,
            session_count=self.session_count,
            available_minutes=self.available_minutes,
        )


PlannerState = Union[AutoPlan, ManualPlan]


# ---------- events ----------
@dataclass(frozen=True)
class EditField:
    field: str
    value: object


@dataclass(frozen=True)
class SetWindow:
    start_time: object
    end_time: object


@dataclass(frozen=True)
class SwitchMode:
    mode: str


PlannerEvent = Union[EditField, SetWindow, SwitchMode]


def initial_state(
    focus_minutes: object = None,
    start_time: object = None,
    end_time: object = None,
) -> AutoPlan:
    focus = _positive_int(focus_minutes) or POMODORO.default_focus_minutes
    return AutoPlan(focus_minutes=focus, available_minutes=window_minutes(start_time, end_time))


def switch_mode(state: PlannerState, mode: str) -> PlannerState:
    if mode == state.mode:
        return state
    if mode == AUTO:
        # Manual break/session values are discarded.
        return AutoPlan(focus_minutes=state.focus_minutes, available_minutes=state.available_minutes)
    if mode == MANUAL:
        current = state.plan()
        return ManualPlan(
            focus_minutes=current.focus_minutes,
            break_minutes=current.break_minutes,
            session_count=current.session_count,
            available_minutes=state.available_minutes,
        )
    return state


def reduce(state: PlannerState, event: PlannerEvent) -> PlannerState:
    """Apply one edit event and return the next planner state."""

    if isinstance(event, SwitchMode):
        return switch_mode(state, event.mode)

    if isinstance(event, SetWindow):
        available = window_minutes(event.start_time, event.end_time)
        return replace(state, available_minutes=available)

    if isinstance(event, EditField):
        if isinstance(state, ManualPlan):
            edited = apply_manual_edit(state.plan(), event.field, event.value)
            return replace(
                state,
                focus_minutes=edited.focus_minutes,
                break_minutes=edited.break_minutes,
                session_count=edited.session_count,
            )
        # In auto mode only the focus duration is editable.
        if event.field == FOCUS:
            focus = _positive_int(event.value)
            if focus is None:
                return state
            return replace(state, focus_minutes=focus)
        return state

    return state


def state_from_fields(
    mode: Optional[str],
    focus_minutes: Optional[int],
    break_minutes: Optional[int],
    session_count: Optional[int],
    available_minutes: Optional[int] = None,
) -> PlannerState:
    """Rebuild a planner state from persisted task columns."""

    focus = _positive_int(focus_minutes) or POMODORO.default_focus_minutes
    if mode == MANUAL:
        derived = derive_autoplan(focus, available_minutes)
        return ManualPlan(
            focus_minutes=focus,
            break_minutes=_positive_int(break_minutes) or derived.break_minutes,
            session_count=_positive_int(session_count) or derived.session_count,
            available_minutes=available_minutes,
        )
    return AutoPlan(focus_minutes=focus, available_minutes=available_minutes)


__all__ = [
    "AUTO",
    "MANUAL",
    "BREAK",
    "FOCUS",
    "SESSIONS",
    "PLAN_FIELDS",
    "AutoPlan",
    "CyclePlan",
    "EditField",
    "ManualPlan",
    "PlannerEvent",
    "PlannerState",
    "SetWindow",
    "SwitchMode",
    "apply_manual_edit",
    "break_for",
    "derive_autoplan",
    "initial_state",
    "reduce",
    "state_from_fields",
    "switch_mode",
]
