from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo

from timecard.services.time_intervals import local_minute_of_day, to_minute_of_day


@dataclass(frozen=True)
class LateStatus:
    is_late: bool
    minutes_late: int


@dataclass(frozen=True)
class EarlyLeaveStatus:
    is_early_leave: bool
    minutes_early: int


def _wall_minutes(value: str | datetime, tz: tzinfo | None) -> int:
    if isinstance(value, datetime):
        return local_minute_of_day(value, tz)
    return to_minute_of_day(value)


def check_late(check_in: datetime, work_start: str | datetime, tz: tzinfo | None = None) -> LateStatus:
    # Wall-clock comparison at minute resolution; seconds never make a check-in late.
    check_in_minutes = local_minute_of_day(check_in, tz)
    start_minutes = _wall_minutes(work_start, tz)
    if check_in_minutes > start_minutes:
        return LateStatus(is_late=True, minutes_late=check_in_minutes - start_minutes)
    return LateStatus(is_late=False, minutes_late=0)


def check_early_leave(check_out: datetime, work_end: str | datetime, tz: tzinfo | None = None) -> EarlyLeaveStatus:
    check_out_minutes = local_minute_of_day(check_out, tz)
    end_minutes = _wall_minutes(work_end, tz)
    if check_out_minutes < end_minutes:
        return EarlyLeaveStatus(is_early_leave=True, minutes_early=end_minutes - check_out_minutes)
    return EarlyLeaveStatus(is_early_leave=False, minutes_early=0)
