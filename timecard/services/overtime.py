from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Sequence

from timecard.models import AttendanceEvent, AttendanceType, DaySchedule
from timecard.services.shift_window import ShiftWindow, resolve_shift_window
from timecard.services.time_intervals import elapsed_minutes, format_minutes_hhmm, local_date
from timecard.services.work_hours import compute_work_minutes


@dataclass(frozen=True)
class OvertimeResult:
    """Overtime minutes of one day.

    ``total_minutes`` already contains ``lunch_overtime_minutes``; the other
    bucket fields break the total down by the rule that produced each part.
    """

    total_minutes: int
    lunch_overtime_minutes: int
    before_work_minutes: int = 0
    after_work_minutes: int = 0
    night_shift_minutes: int = 0
    off_schedule_minutes: int = 0
    non_working_day_minutes: int = 0

    @property
    def formatted(self) -> str:
        return format_minutes_hhmm(self.total_minutes)


NO_OVERTIME = OvertimeResult(total_minutes=0, lunch_overtime_minutes=0)


def sort_events(events: Sequence[AttendanceEvent]) -> list[AttendanceEvent]:
    return sorted(events, key=lambda event: event.timestamp)


def first_check_in(events: Sequence[AttendanceEvent]) -> AttendanceEvent | None:
    for event in sort_events(events):
        if event.kind == AttendanceType.CHECK_IN:
            return event
    return None


def last_activity(events: Sequence[AttendanceEvent]) -> AttendanceEvent | None:
    closing = [
        event
        for event in events
        if event.kind in (AttendanceType.CHECK_OUT, AttendanceType.OVERTIME_END)
    ]
    if not closing:
        return None
    return max(closing, key=lambda event: event.timestamp)


def _overtime_for_working_day(
    check_in: datetime,
    overtime_ends: list[AttendanceEvent],
    window: ShiftWindow,
) -> OvertimeResult:
    checked_in_after_work_end = check_in > window.work_end

    lunch_minutes = 0
    before_minutes = 0
    after_minutes = 0
    night_minutes = 0
    off_schedule_minutes = 0

    for event in overtime_ends:
        end = event.timestamp
        if event.night_shift_anchor is not None:
            night_minutes += elapsed_minutes(event.night_shift_anchor, end)
            continue
        if checked_in_after_work_end:
            off_schedule_minutes += elapsed_minutes(check_in, end)
            continue

        if window.has_lunch and window.lunch_start <= end <= window.lunch_end:
            lunch_minutes += elapsed_minutes(window.lunch_start, end)
        if end > window.work_end:
            after_minutes += elapsed_minutes(window.work_end, end)
        if end <= window.work_start:
            before_minutes += elapsed_minutes(check_in, end)

    total = lunch_minutes + before_minutes + after_minutes + night_minutes + off_schedule_minutes
    return OvertimeResult(
        total_minutes=total,
        lunch_overtime_minutes=lunch_minutes,
        before_work_minutes=before_minutes,
        after_work_minutes=after_minutes,
        night_shift_minutes=night_minutes,
        off_schedule_minutes=off_schedule_minutes,
    )


def calculate_overtime(
    events: Sequence[AttendanceEvent],
    schedule: DaySchedule,
    is_non_working_day: bool,
    tz: tzinfo | None = None,
) -> OvertimeResult:
    """Sum the overtime of one employee-day from its ``overtime_end`` punches.

    On a non-working day the whole span from check-in to the last punch is
    overtime. On a working day every ``overtime_end`` punch contributes on its
    own: a night-shift anchor wins over everything, a check-in after the end
    of work counts from the check-in, and otherwise the lunch, after-work and
    before-work parts are added independently.
    """
    check_in = first_check_in(events)
    if check_in is None:
        return NO_OVERTIME

    overtime_ends = [event for event in sort_events(events) if event.kind == AttendanceType.OVERTIME_END]
    if not overtime_ends:
        return NO_OVERTIME

    window = None
    if not is_non_working_day:
        window = resolve_shift_window(schedule, local_date(check_in.timestamp, tz), tz)

    if window is None:
        closing = last_activity(events)
        if closing is None:
            return NO_OVERTIME
        minutes = compute_work_minutes(check_in.timestamp, closing.timestamp).total_minutes
        return OvertimeResult(
            total_minutes=minutes,
            lunch_overtime_minutes=0,
            non_working_day_minutes=minutes,
        )

    return _overtime_for_working_day(check_in.timestamp, overtime_ends, window)
