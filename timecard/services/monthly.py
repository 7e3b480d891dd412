from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from typing import Iterable, Mapping, Sequence

from timecard.models import AttendanceEvent, AttendanceType, DaySchedule, HolidayWorkEntry
from timecard.services.daily_status import DayStatus, compose_day_status
from timecard.services.holiday_work import HOLIDAY_STANDARD_MINUTES, aggregate_holiday_work_for_dates
from timecard.services.overtime import sort_events
from timecard.services.time_intervals import local_date, local_minute_of_day

_CLOSING_TYPES = (AttendanceType.CHECK_OUT, AttendanceType.OVERTIME_END)
_ROLLOVER_CUTOFF_MINUTES = 12 * 60


@dataclass(frozen=True)
class MonthlyTotals:
    regular_work_minutes: int
    overtime_minutes: int
    holiday_regular_minutes: int
    holiday_exceeded_minutes: int
    holiday_extra_minutes: int
    late_minutes: int = 0
    late_days: int = 0
    early_leave_days: int = 0
    worked_days: int = 0
    incomplete_days: int = 0

    @property
    def total_minutes(self) -> int:
        return (
            self.regular_work_minutes
            + self.overtime_minutes
            + self.holiday_regular_minutes
            + self.holiday_exceeded_minutes
            + self.holiday_extra_minutes
        )


EMPTY_MONTHLY_TOTALS = MonthlyTotals(
    regular_work_minutes=0,
    overtime_minutes=0,
    holiday_regular_minutes=0,
    holiday_exceeded_minutes=0,
    holiday_extra_minutes=0,
)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    days_in_month = monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days_in_month)


def group_events_by_date(
    events: Iterable[AttendanceEvent],
    tz: tzinfo | None = None,
) -> dict[date, list[AttendanceEvent]]:
    """Group punches by local calendar date, oldest date first.

    A check-out or overtime-end punched before noon, with no check-in of its
    own date yet, closes the previous day's session when that session is
    still open, so a night session ending after midnight stays on the day it
    started. Closing punches against an already closed day keep their own date.
    """
    grouped: dict[date, list[AttendanceEvent]] = {}
    for event in sort_events(list(events)):
        day = local_date(event.timestamp, tz)
        if (
            event.kind in _CLOSING_TYPES
            and not _has_check_in(grouped.get(day))
            and local_minute_of_day(event.timestamp, tz) < _ROLLOVER_CUTOFF_MINUTES
        ):
            previous_day = day - timedelta(days=1)
            if _is_open_session(grouped.get(previous_day), previous_day, tz):
                day = previous_day
        grouped.setdefault(day, []).append(event)
    return dict(sorted(grouped.items()))


def _has_check_in(day_events: list[AttendanceEvent] | None) -> bool:
    return bool(day_events) and any(event.kind == AttendanceType.CHECK_IN for event in day_events)


def _is_open_session(day_events: list[AttendanceEvent] | None, day: date, tz: tzinfo | None) -> bool:
    # Punches already rolled over from the next morning do not count as closing the day.
    same_day = [event for event in day_events or [] if local_date(event.timestamp, tz) == day]
    return bool(same_day) and same_day[-1].kind == AttendanceType.CHECK_IN


def compose_month_statuses(
    events_by_date: Mapping[date, Sequence[AttendanceEvent]],
    schedules: Sequence[DaySchedule],
    holidays: Sequence[HolidayWorkEntry],
    tz: tzinfo | None = None,
    holiday_standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> dict[date, DayStatus]:
    statuses: dict[date, DayStatus] = {}
    for day, day_events in sorted(events_by_date.items()):
        status = compose_day_status(day_events, schedules, holidays, tz, holiday_standard_minutes)
        if status is not None:
            statuses[day] = status
    return statuses


def aggregate_month(
    events_by_date: Mapping[date, Sequence[AttendanceEvent]],
    schedules: Sequence[DaySchedule],
    holidays: Sequence[HolidayWorkEntry],
    tz: tzinfo | None = None,
    holiday_standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> MonthlyTotals:
    """Fold one employee's grouped punches into monthly totals.

    Regular minutes come from working, non-holiday days (schedule-bounded).
    Overtime comes from every non-holiday day. Holiday work is credited from
    the declared entries for dates the employee checked in on.
    """
    if not events_by_date:
        return EMPTY_MONTHLY_TOTALS

    statuses = compose_month_statuses(events_by_date, schedules, holidays, tz, holiday_standard_minutes)

    regular = 0
    overtime = 0
    late_minutes = 0
    late_days = 0
    early_leave_days = 0
    incomplete_days = 0
    for status in statuses.values():
        if not status.is_complete:
            incomplete_days += 1
        if status.is_holiday:
            continue
        if not status.is_non_working_day:
            regular += status.regular_work_minutes or 0
            if status.is_late:
                late_days += 1
                late_minutes += status.minutes_late
            if status.is_early_leave:
                early_leave_days += 1
        overtime += status.overtime.total_minutes

    worked_dates = {
        local_date(event.timestamp, tz)
        for day_events in events_by_date.values()
        for event in day_events
        if event.kind == AttendanceType.CHECK_IN
    }
    holiday_totals = aggregate_holiday_work_for_dates(worked_dates, holidays, holiday_standard_minutes)

    return MonthlyTotals(
        regular_work_minutes=regular,
        overtime_minutes=overtime,
        holiday_regular_minutes=holiday_totals.regular_minutes,
        holiday_exceeded_minutes=holiday_totals.exceeded_minutes,
        holiday_extra_minutes=holiday_totals.extra_minutes,
        late_minutes=late_minutes,
        late_days=late_days,
        early_leave_days=early_leave_days,
        worked_days=len(statuses),
        incomplete_days=incomplete_days,
    )


def events_for_employee_month(
    user_id: str,
    events: Iterable[AttendanceEvent],
    year: int,
    month: int,
    tz: tzinfo | None = None,
) -> dict[date, list[AttendanceEvent]]:
    start, end = month_bounds(year, month)
    grouped = group_events_by_date((event for event in events if event.user_id == user_id), tz)
    return {day: day_events for day, day_events in grouped.items() if start <= day <= end}


def aggregate_employee_month(
    user_id: str,
    events: Iterable[AttendanceEvent],
    schedules: Sequence[DaySchedule],
    holidays: Sequence[HolidayWorkEntry],
    year: int,
    month: int,
    tz: tzinfo | None = None,
    holiday_standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> MonthlyTotals:
    events_by_date = events_for_employee_month(user_id, events, year, month, tz)
    return aggregate_month(events_by_date, schedules, holidays, tz, holiday_standard_minutes)
