from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Sequence

from timecard.models import AttendanceEvent, AttendanceType, DaySchedule, HolidayWorkEntry
from timecard.services.holiday_work import HOLIDAY_STANDARD_MINUTES, find_holiday_entry
from timecard.services.lateness import check_early_leave, check_late
from timecard.services.overtime import NO_OVERTIME, OvertimeResult, calculate_overtime, first_check_in, last_activity
from timecard.services.shift_window import find_day_schedule, resolve_shift_window, schedule_weekday
from timecard.services.time_intervals import format_minutes_hhmm, local_date
from timecard.services.work_hours import compute_clipped_work_minutes, compute_work_minutes


@dataclass(frozen=True)
class DayStatus:
    """Derived attendance status of one employee-day.

    ``regular_work_minutes`` is bounded by the scheduled window on working
    days; ``elapsed_work_minutes`` is the unbounded check-in to last-punch
    span minus lunch. Both are ``None`` while the day has only a check-in.
    """

    date: date
    weekday: int
    check_in_time: datetime
    last_activity_time: datetime | None
    last_activity_type: AttendanceType | None
    is_holiday: bool
    is_non_working_day: bool
    is_late: bool = False
    minutes_late: int = 0
    is_early_leave: bool = False
    minutes_early: int = 0
    regular_work_minutes: int | None = None
    elapsed_work_minutes: int | None = None
    overtime: OvertimeResult = NO_OVERTIME
    total_work_minutes: int | None = None
    holiday_work_minutes: int | None = None
    is_holiday_work_exceeded: bool = False

    @property
    def is_complete(self) -> bool:
        return self.last_activity_time is not None

    @property
    def overtime_minutes(self) -> int:
        return self.overtime.total_minutes

    @property
    def lunch_overtime_minutes(self) -> int:
        return self.overtime.lunch_overtime_minutes

    @property
    def regular_work_formatted(self) -> str | None:
        if self.regular_work_minutes is None:
            return None
        return format_minutes_hhmm(self.regular_work_minutes)

    @property
    def overtime_formatted(self) -> str:
        return format_minutes_hhmm(self.overtime.total_minutes)

    @property
    def total_work_formatted(self) -> str | None:
        if self.total_work_minutes is None:
            return None
        return format_minutes_hhmm(self.total_work_minutes)


def compose_day_status(
    events: Sequence[AttendanceEvent],
    schedules: Sequence[DaySchedule],
    holidays: Sequence[HolidayWorkEntry],
    tz: tzinfo | None = None,
    holiday_standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> DayStatus | None:
    """Combine one employee-day's punches into a ``DayStatus``.

    Returns ``None`` when the day has no check-in or when ``schedules`` has
    no entry for the check-in's weekday.
    """
    check_in = first_check_in(events)
    if check_in is None:
        return None

    day = local_date(check_in.timestamp, tz)
    weekday = schedule_weekday(day)
    schedule = find_day_schedule(schedules, weekday)
    if schedule is None:
        return None

    holiday_entry = find_holiday_entry(holidays, day)
    is_holiday = holiday_entry is not None
    is_non_working_day = not schedule.is_working_day
    window = resolve_shift_window(schedule, day, tz)

    holiday_work_minutes = None
    is_holiday_work_exceeded = False
    if holiday_entry is not None:
        holiday_work_minutes = (holiday_entry.allotted_minutes or 0) + (holiday_entry.extra_overtime_minutes or 0)
        is_holiday_work_exceeded = (holiday_entry.allotted_minutes or 0) > holiday_standard_minutes

    late = None
    # A check-in after the end of work opens an off-schedule session, not a late arrival.
    if window is not None and check_in.timestamp <= window.work_end:
        late = check_late(check_in.timestamp, window.work_start, tz)

    closing = last_activity(events)
    if closing is None:
        return DayStatus(
            date=day,
            weekday=weekday,
            check_in_time=check_in.timestamp,
            last_activity_time=None,
            last_activity_type=None,
            is_holiday=is_holiday,
            is_non_working_day=is_non_working_day,
            is_late=late.is_late if late else False,
            minutes_late=late.minutes_late if late else 0,
            holiday_work_minutes=holiday_work_minutes,
            is_holiday_work_exceeded=is_holiday_work_exceeded,
        )

    early = None
    if window is not None and closing.kind == AttendanceType.CHECK_OUT:
        early = check_early_leave(closing.timestamp, window.work_end, tz)

    if window is not None:
        work_hours = compute_clipped_work_minutes(
            check_in.timestamp,
            closing.timestamp,
            window.work_start,
            window.work_end,
            window.lunch_start,
            window.lunch_end,
        )
        elapsed = compute_work_minutes(check_in.timestamp, closing.timestamp, window.lunch_start, window.lunch_end)
    else:
        work_hours = compute_work_minutes(check_in.timestamp, closing.timestamp)
        elapsed = work_hours

    overtime = NO_OVERTIME
    total_work_minutes = work_hours.total_minutes
    has_overtime_end = any(event.kind == AttendanceType.OVERTIME_END for event in events)
    if has_overtime_end and not is_holiday:
        overtime = calculate_overtime(events, schedule, is_non_working_day, tz)
        if is_non_working_day:
            total_work_minutes = overtime.total_minutes
        else:
            total_work_minutes = work_hours.total_minutes + overtime.lunch_overtime_minutes

    return DayStatus(
        date=day,
        weekday=weekday,
        check_in_time=check_in.timestamp,
        last_activity_time=closing.timestamp,
        last_activity_type=closing.kind,
        is_holiday=is_holiday,
        is_non_working_day=is_non_working_day,
        is_late=late.is_late if late else False,
        minutes_late=late.minutes_late if late else 0,
        is_early_leave=early.is_early_leave if early else False,
        minutes_early=early.minutes_early if early else 0,
        regular_work_minutes=work_hours.total_minutes,
        elapsed_work_minutes=elapsed.total_minutes,
        overtime=overtime,
        total_work_minutes=total_work_minutes,
        holiday_work_minutes=holiday_work_minutes,
        is_holiday_work_exceeded=is_holiday_work_exceeded,
    )
