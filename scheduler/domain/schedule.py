"""
Interval schedule used to space out reviews.

A schedule is an ordered list of positive interval lengths plus a unit. It is
loaded once when the app starts and never changes afterwards; services get it
through their constructor.
"""

import json
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

import structlog

from ..config import DEFAULT_INTERVALS, DEFAULT_UNIT, UNIT_SECONDS
from ..errors import InvalidScheduleError
from .enums import IntervalUnit

logger = structlog.get_logger()


@dataclass(frozen=True)
class ScheduleProfile:
    unit: IntervalUnit
    intervals: Tuple[int, ...]


@dataclass(frozen=True)
class Schedule:
    profile: ScheduleProfile

    @classmethod
    def from_profile(cls, profile: ScheduleProfile) -> "Schedule":
        intervals = tuple(profile.intervals)
        if not intervals:
            raise InvalidScheduleError("schedule needs at least one interval")
        for value in intervals:
            # bool is an int subclass; reject it along with floats and strings
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidScheduleError(f"invalid interval value: {value!r}")
        try:
            unit = IntervalUnit(profile.unit)
        except ValueError:
            raise InvalidScheduleError(f"unknown interval unit: {profile.unit!r}") from None
        return cls(ScheduleProfile(unit=unit, intervals=intervals))

    @classmethod
    def from_raw(cls, raw) -> "Schedule":
        """Build a schedule from one profile entry of the JSON config."""
        if not isinstance(raw, dict):
            raise InvalidScheduleError("profile must be an object")
        intervals = raw.get("intervals")
        if not isinstance(intervals, list):
            raise InvalidScheduleError("profile intervals must be a list")
        return cls.from_profile(
            ScheduleProfile(unit=raw.get("unit", DEFAULT_UNIT), intervals=tuple(intervals))
        )

    @property
    def unit(self) -> IntervalUnit:
        return self.profile.unit

    @property
    def intervals(self) -> Tuple[int, ...]:
        return self.profile.intervals

    def max_index(self) -> int:
        return len(self.profile.intervals) - 1

    def duration_for_index(self, index: int) -> timedelta:
        # Out of range indices are clamped so a shrunk profile never breaks scheduling
        index = min(max(index, 0), self.max_index())
        seconds = self.profile.intervals[index] * UNIT_SECONDS[self.profile.unit.value]
        return timedelta(seconds=seconds)


DEFAULT_SCHEDULE = Schedule.from_profile(
    ScheduleProfile(unit=IntervalUnit(DEFAULT_UNIT), intervals=DEFAULT_INTERVALS)
)


def load_schedule(config_path: Optional[str] = None, profile_name: Optional[str] = None) -> Schedule:
    """
    Resolve the schedule for this process.

    The profile is picked by explicit name, else by the file's
    ``active_profile``. Any problem (no path, unreadable or unparseable file,
    missing or malformed profile) falls back to DEFAULT_SCHEDULE; this
    function never raises.
    """
    if not config_path:
        logger.info("schedule_default", reason="no_config_path")
        return DEFAULT_SCHEDULE

    try:
        with open(config_path, encoding="utf-8") as fh:
            config = json.load(fh)
    except (OSError, ValueError) as exc:
        logger.warning("schedule_fallback", reason="unreadable_config", path=config_path, error=str(exc))
        return DEFAULT_SCHEDULE

    if not isinstance(config, dict):
        logger.warning("schedule_fallback", reason="config_not_object", path=config_path)
        return DEFAULT_SCHEDULE

    name = profile_name or config.get("active_profile")
    profiles = config.get("profiles")
    if not isinstance(name, str) or not isinstance(profiles, dict) or name not in profiles:
        logger.warning("schedule_fallback", reason="profile_missing", path=config_path, profile=name)
        return DEFAULT_SCHEDULE

    try:
        schedule = Schedule.from_raw(profiles[name])
    except InvalidScheduleError as exc:
        logger.warning("schedule_fallback", reason="invalid_profile", profile=name, error=str(exc))
        return DEFAULT_SCHEDULE

    logger.info("schedule_loaded",
        profile=name,
        unit=schedule.unit.value,
        intervals=list(schedule.intervals),
    )
    return schedule
