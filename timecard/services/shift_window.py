from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Iterable, Sequence

from timecard.errors import ScheduleConfigError
from timecard.models import DaySchedule
from timecard.services.time_intervals import local_minute_of_day, resolve_tz, to_local, to_minute_of_day

NO_LUNCH_SENTINEL = "00:00"
WEEKDAYS = range(7)


@dataclass(frozen=True)
class ShiftWindow:
    work_start: datetime
    work_end: datetime
    lunch_start: datetime | None = None
    lunch_end: datetime | None = None

    @property
    def has_lunch(self) -> bool:
        return self.lunch_start is not None and self.lunch_end is not None


def has_lunch(schedule: DaySchedule) -> bool:
    if not schedule.lunch_start or not schedule.lunch_end:
        return False
    return not (schedule.lunch_start == NO_LUNCH_SENTINEL and schedule.lunch_end == NO_LUNCH_SENTINEL)


def schedule_weekday(day: date) -> int:
    """Weekday index used by schedules: 0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def anchor_time(day: date, value: str, tz: tzinfo | None = None) -> datetime:
    minute_of_day = to_minute_of_day(value)
    hours, minutes = divmod(minute_of_day, 60)
    return datetime.combine(day, time(hours, minutes), tzinfo=resolve_tz(tz))


def resolve_shift_window(schedule: DaySchedule, day: date, tz: tzinfo | None = None) -> ShiftWindow | None:
    if not schedule.is_working_day:
        return None

    zone = resolve_tz(tz)
    lunch_start: datetime | None = None
    lunch_end: datetime | None = None
    if has_lunch(schedule):
        lunch_start = anchor_time(day, schedule.lunch_start, zone)
        lunch_end = anchor_time(day, schedule.lunch_end, zone)

    return ShiftWindow(
        work_start=anchor_time(day, schedule.work_start, zone),
        work_end=anchor_time(day, schedule.work_end, zone),
        lunch_start=lunch_start,
        lunch_end=lunch_end,
    )


def find_day_schedule(schedules: Iterable[DaySchedule], weekday: int) -> DaySchedule | None:
    for schedule in schedules:
        if schedule.weekday == weekday:
            return schedule
    return None


def validate_day_schedule(schedule: DaySchedule) -> None:
    """Reject a working day whose times cannot form a shift window."""
    if not schedule.is_working_day:
        return
    work_start = to_minute_of_day(schedule.work_start)
    work_end = to_minute_of_day(schedule.work_end)
    if work_start >= work_end:
        raise ScheduleConfigError(
            f"work_start must be earlier than work_end on weekday {schedule.weekday}"
        )
    if has_lunch(schedule):
        lunch_start = to_minute_of_day(schedule.lunch_start)
        lunch_end = to_minute_of_day(schedule.lunch_end)
        if lunch_start > lunch_end:
            raise ScheduleConfigError(
                f"lunch_start must not be later than lunch_end on weekday {schedule.weekday}"
            )
        if lunch_start < work_start < lunch_end:
            raise ScheduleConfigError(
                f"work_start falls inside the lunch break on weekday {schedule.weekday}"
            )


def validate_schedule_set(schedules: Sequence[DaySchedule]) -> list[DaySchedule]:
    """Check a weekly configuration and return it ordered by weekday.

    Every weekday must appear exactly once, and every working day must pass
    ``validate_day_schedule``.
    """
    by_weekday: dict[int, DaySchedule] = {}
    for schedule in schedules:
        if schedule.weekday not in WEEKDAYS:
            raise ScheduleConfigError(f"weekday must be between 0 and 6, got {schedule.weekday}")
        if schedule.weekday in by_weekday:
            raise ScheduleConfigError(f"duplicate schedule for weekday {schedule.weekday}")
        by_weekday[schedule.weekday] = schedule

    missing = [weekday for weekday in WEEKDAYS if weekday not in by_weekday]
    if missing:
        raise ScheduleConfigError(f"missing schedule for weekdays {missing}")

    for schedule in by_weekday.values():
        validate_day_schedule(schedule)

    return [by_weekday[weekday] for weekday in WEEKDAYS]


def is_within_work_hours(ts: datetime, schedules: Iterable[DaySchedule], tz: tzinfo | None = None) -> bool:
    local_ts = to_local(ts, tz)
    schedule = find_day_schedule(schedules, schedule_weekday(local_ts.date()))
    if schedule is None or not schedule.is_working_day:
        return False
    current = local_minute_of_day(local_ts, tz)
    return to_minute_of_day(schedule.work_start) <= current <= to_minute_of_day(schedule.work_end)
