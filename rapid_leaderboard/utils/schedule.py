"""
Weekly calendar trigger for the baseline refresh.

Handles DST by localizing the wall-clock time in the configured timezone
for each candidate date instead of adding fixed 7-day offsets in UTC.
"""

from datetime import datetime, time, timedelta

import pytz

from rapid_leaderboard.config import Config


class WeeklySchedule:
    """A fixed weekday and wall-clock time in a named timezone."""

    def __init__(self, weekday: int, hour: int, minute: int = 0, timezone_name: str = 'UTC'):
        if not 0 <= weekday <= 6:
            raise ValueError("weekday must be between 0 (Monday) and 6 (Sunday)")
        self.weekday = weekday
        self.at = time(hour, minute)
        self.tz = pytz.timezone(timezone_name)

    @classmethod
    def from_config(cls) -> "WeeklySchedule":
        return cls(
            Config.WEEKLY_BASELINE_WEEKDAY,
            Config.WEEKLY_BASELINE_HOUR,
            Config.WEEKLY_BASELINE_MINUTE,
            Config.WEEKLY_BASELINE_TIMEZONE,
        )

    def next_run_after(self, now: datetime) -> datetime:
        """
        First occurrence strictly after ``now``, as an aware UTC datetime.

        Args:
            now: Aware datetime (naive values are treated as UTC)
        """
        if now.tzinfo is None:
            now = pytz.utc.localize(now)
        local_now = now.astimezone(self.tz)

        days_ahead = (self.weekday - local_now.weekday()) % 7
        candidate_date = local_now.date() + timedelta(days=days_ahead)
        candidate = self.tz.localize(datetime.combine(candidate_date, self.at))
        if candidate <= local_now:
            candidate = self.tz.localize(datetime.combine(candidate_date + timedelta(days=7), self.at))
        return candidate.astimezone(pytz.utc)

    def __repr__(self):
        return f"<WeeklySchedule(weekday={self.weekday}, at={self.at}, tz='{self.tz.zone}')>"
