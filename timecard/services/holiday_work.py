from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable, Sequence

from timecard.models import AttendanceEvent, AttendanceType, HolidayWorkEntry
from timecard.services.time_intervals import local_date

HOLIDAY_STANDARD_MINUTES = 480


@dataclass(frozen=True)
class HolidayWorkTotals:
    total_minutes: int
    regular_minutes: int
    exceeded_minutes: int
    extra_minutes: int


EMPTY_HOLIDAY_WORK = HolidayWorkTotals(total_minutes=0, regular_minutes=0, exceeded_minutes=0, extra_minutes=0)


def find_holiday_entry(holidays: Iterable[HolidayWorkEntry], day: date) -> HolidayWorkEntry | None:
    for entry in holidays:
        if entry.date == day:
            return entry
    return None


def check_in_dates(
    user_id: str,
    events: Iterable[AttendanceEvent],
    tz: tzinfo | None = None,
) -> set[date]:
    return {
        local_date(event.timestamp, tz)
        for event in events
        if event.user_id == user_id and event.kind == AttendanceType.CHECK_IN
    }


def split_holiday_minutes(
    allotted_minutes: int,
    standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> tuple[int, int]:
    """Split allotted holiday minutes into ``(regular, exceeded)`` around the daily standard."""
    if allotted_minutes <= standard_minutes:
        return allotted_minutes, 0
    return standard_minutes, allotted_minutes - standard_minutes


def aggregate_holiday_work_for_dates(
    worked_dates: set[date],
    holidays: Sequence[HolidayWorkEntry],
    standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> HolidayWorkTotals:
    regular = 0
    exceeded = 0
    extra = 0
    for entry in holidays:
        if entry.date not in worked_dates:
            continue
        entry_regular, entry_exceeded = split_holiday_minutes(entry.allotted_minutes or 0, standard_minutes)
        regular += entry_regular
        exceeded += entry_exceeded
        # Manually entered extra time is never capped.
        extra += entry.extra_overtime_minutes or 0

    return HolidayWorkTotals(
        total_minutes=regular + exceeded + extra,
        regular_minutes=regular,
        exceeded_minutes=exceeded,
        extra_minutes=extra,
    )


def aggregate_holiday_work(
    user_id: str,
    events: Sequence[AttendanceEvent],
    holidays: Sequence[HolidayWorkEntry],
    tz: tzinfo | None = None,
    standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> HolidayWorkTotals:
    if not holidays or not events:
        return EMPTY_HOLIDAY_WORK
    return aggregate_holiday_work_for_dates(
        check_in_dates(user_id, events, tz),
        holidays,
        standard_minutes,
    )
