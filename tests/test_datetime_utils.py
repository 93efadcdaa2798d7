from datetime import date, datetime, time

import pytest

from helpers.datetime_utils import (
    default_end_time,
    default_start_time,
    format_time_12h,
    is_date_in_past,
    is_today,
    normalize_time_text,
    parse_date_input,
    parse_time_input,
    snap_minutes,
    window_minutes,
)
from core.settings import POMODORO
from utils.datetime_utils import FixedClock


def test_parse_date_input_iso_and_us():
    assert parse_date_input("2025-12-05") == date(2025, 12, 5)
    assert parse_date_input("12/05/2025") == date(2025, 12, 5)
    assert parse_date_input("12/5/25") == date(2025, 12, 5)
    assert parse_date_input(datetime(2025, 12, 5, 8, 0)) == date(2025, 12, 5)
    assert parse_date_input("tomorrow") is None


def test_parse_time_input_formats():
    assert parse_time_input("14:00") == time(14, 0)
    assert parse_time_input("9:05") == time(9, 5)
    assert parse_time_input("930") == time(9, 30)
    assert parse_time_input("25:00") is None
    assert normalize_time_text("9:05") == "09:05"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("00:00", "12:00 AM"),
        ("00:30", "12:30 AM"),
        ("09:05", "9:05 AM"),
        ("12:00", "12:00 PM"),
        ("13:45", "1:45 PM"),
        ("23:59", "11:59 PM"),
    ],
)
def test_format_time_12h(value, expected):
    assert format_time_12h(value) == expected


def test_window_minutes():
    assert window_minutes("09:00", "12:00") == 180
    assert window_minutes("12:00", "12:00") is None
    assert window_minutes("13:00", "12:00") is None
    assert window_minutes(None, "12:00") is None


def test_day_checks_ignore_time_of_day():
    clock = FixedClock(datetime(2025, 12, 5, 23, 59))
    assert is_today(datetime(2025, 12, 5, 0, 1), clock)
    assert not is_date_in_past(date(2025, 12, 5), clock)
    assert is_date_in_past(date(2025, 12, 4), clock)
    assert not is_today(date(2025, 12, 6), clock)


def test_default_window_times():
    assert default_start_time(datetime(2025, 12, 5, 10, 7)) == time(10, 10)
    assert default_start_time(datetime(2025, 12, 5, 10, 55)) == time(10, 55)
    assert default_start_time(datetime(2025, 12, 5, 23, 58)) == time(23, 59)
    assert default_end_time(time(10, 10)) == time(13, 10)
    assert default_end_time(time(22, 0)) == time(23, 59)


def test_snap_minutes_rounding():
    assert snap_minutes(17, step=15, direction="nearest") == 15
    assert snap_minutes(8, step=15, direction="forward") == 15
    assert snap_minutes(22, step=15, direction="backward") == 15


def test_parsers_accept_datetime_and_reject_other_types():
    assert parse_time_input(datetime(2025, 12, 5, 14, 30, 15)) == time(14, 30)
    assert parse_time_input(1430) is None
    assert parse_date_input(20251205) is None
    assert window_minutes(datetime(2025, 12, 5, 9, 0), "10:30") == 90


def test_default_window_follows_pomodoro_settings():
    start = default_start_time(datetime(2025, 12, 5, 10, 1))
    assert start.minute % POMODORO.start_time_step_minutes == 0
    assert start == time(10, 5)
    assert default_end_time(start) == time(10 + POMODORO.default_window_hours, 5)
    assert default_start_time(datetime(2025, 12, 5, 10, 1), step_minutes=15) == time(10, 15)
    assert default_end_time(start, hours=1) == time(11, 5)
