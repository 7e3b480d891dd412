from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from timecard.services.time_intervals import format_minutes_hhmm


@dataclass(frozen=True)
class WorkHours:
    total_minutes: int

    @property
    def formatted(self) -> str:
        return format_minutes_hhmm(self.total_minutes)


def _net_minutes(
    start: datetime,
    end: datetime,
    lunch_start: datetime | None,
    lunch_end: datetime | None,
) -> int:
    total_seconds = (end - start).total_seconds()
    if lunch_start is not None and lunch_end is not None:
        if start <= lunch_start and end >= lunch_end:
            total_seconds -= (lunch_end - lunch_start).total_seconds()
        elif start <= lunch_start and lunch_start < end < lunch_end:
            total_seconds -= (end - lunch_start).total_seconds()
        elif lunch_start < start < lunch_end and end >= lunch_end:
            total_seconds -= (lunch_end - start).total_seconds()
    return int(total_seconds // 60)


def compute_work_minutes(
    check_in: datetime,
    last_activity: datetime,
    lunch_start: datetime | None = None,
    lunch_end: datetime | None = None,
) -> WorkHours:
    """Elapsed minutes from check-in to last activity, minus the part spent in lunch.

    The result is not clamped: a last activity earlier than the check-in yields
    a negative value, which callers treat as no contribution.
    """
    return WorkHours(total_minutes=_net_minutes(check_in, last_activity, lunch_start, lunch_end))


def compute_clipped_work_minutes(
    check_in: datetime,
    last_activity: datetime,
    work_start: datetime,
    work_end: datetime,
    lunch_start: datetime | None = None,
    lunch_end: datetime | None = None,
) -> WorkHours:
    """Like ``compute_work_minutes`` but bounded to the scheduled ``[work_start, work_end]``."""
    effective_start = work_start if check_in < work_start else check_in
    effective_end = work_end if last_activity > work_end else last_activity
    if effective_end <= effective_start:
        return WorkHours(total_minutes=0)
    return WorkHours(total_minutes=_net_minutes(effective_start, effective_end, lunch_start, lunch_end))
