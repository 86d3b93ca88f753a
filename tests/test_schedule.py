"""
Tests for the weekly baseline calendar trigger (Monday 19:00 America/Chicago).
"""

from datetime import datetime

import pytest
import pytz

from rapid_leaderboard.utils.schedule import WeeklySchedule

MONDAY_EVENING_CHICAGO = WeeklySchedule(0, 19, 0, "America/Chicago")


def _utc(*args):
    return pytz.utc.localize(datetime(*args))


def test_next_run_later_in_the_week():
    # Saturday noon UTC -> Monday 19:00 CDT (UTC-5)
    assert MONDAY_EVENING_CHICAGO.next_run_after(_utc(2026, 10, 17, 12, 0)) == _utc(2026, 10, 20, 0, 0)


def test_exact_trigger_time_moves_to_next_week():
    assert MONDAY_EVENING_CHICAGO.next_run_after(_utc(2026, 10, 20, 0, 0)) == _utc(2026, 10, 27, 0, 0)


def test_same_day_before_trigger():
    # Monday 10:00 CDT
    assert MONDAY_EVENING_CHICAGO.next_run_after(_utc(2026, 10, 26, 15, 0)) == _utc(2026, 10, 27, 0, 0)


def test_wall_clock_time_is_kept_across_dst_change():
    # DST ends 2026-11-01; the following Monday 19:00 is CST (UTC-6)
    assert MONDAY_EVENING_CHICAGO.next_run_after(_utc(2026, 10, 27, 0, 1)) == _utc(2026, 11, 3, 1, 0)


def test_naive_now_is_treated_as_utc():
    assert MONDAY_EVENING_CHICAGO.next_run_after(datetime(2026, 10, 17, 12, 0)) == _utc(2026, 10, 20, 0, 0)


def test_invalid_weekday():
    with pytest.raises(ValueError):
        WeeklySchedule(7, 19)
