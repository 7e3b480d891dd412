from __future__ import annotations

from datetime import datetime
import unittest
from zoneinfo import ZoneInfo

from timecard.models import AttendanceEvent, AttendanceType, DaySchedule
from timecard.services.overtime import NO_OVERTIME, calculate_overtime, last_activity

KST = ZoneInfo("Asia/Seoul")

WEEKDAY = DaySchedule(
    weekday=1,
    is_working_day=True,
    work_start="09:00",
    work_end="18:00",
    lunch_start="12:00",
    lunch_end="13:00",
)
SUNDAY = DaySchedule(
    weekday=0,
    is_working_day=False,
    work_start="09:00",
    work_end="18:00",
    lunch_start="12:00",
    lunch_end="13:00",
)


def _monday(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute, tzinfo=KST)


def _event(kind: AttendanceType, ts: datetime, anchor: datetime | None = None) -> AttendanceEvent:
    return AttendanceEvent(user_id="u1", kind=kind, timestamp=ts, night_shift_anchor=anchor)


class OvertimeTests(unittest.TestCase):
    def test_non_working_day_counts_whole_span_without_lunch(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, datetime(2026, 3, 1, 10, 0, tzinfo=KST)),
            _event(AttendanceType.OVERTIME_END, datetime(2026, 3, 1, 14, 0, tzinfo=KST)),
        ]
        result = calculate_overtime(events, SUNDAY, True, KST)

        self.assertEqual(result.total_minutes, 240)
        self.assertEqual(result.lunch_overtime_minutes, 0)
        self.assertEqual(result.non_working_day_minutes, 240)
        self.assertEqual(result.formatted, "4:00")

    def test_night_shift_anchor_wins(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(9)),
            _event(AttendanceType.CHECK_OUT, _monday(18)),
            _event(AttendanceType.OVERTIME_END, _monday(21, 30), anchor=_monday(19)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)

        self.assertEqual(result.total_minutes, 150)
        self.assertEqual(result.night_shift_minutes, 150)
        self.assertEqual(result.after_work_minutes, 0)

    def test_after_work_overtime(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(9)),
            _event(AttendanceType.OVERTIME_END, _monday(20)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)
        self.assertEqual(result.total_minutes, 120)
        self.assertEqual(result.after_work_minutes, 120)

    def test_lunch_overtime(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(9)),
            _event(AttendanceType.OVERTIME_END, _monday(12, 40)),
            _event(AttendanceType.CHECK_OUT, _monday(18)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)
        self.assertEqual(result.lunch_overtime_minutes, 40)
        self.assertEqual(result.total_minutes, 40)

    def test_before_work_overtime_counts_from_check_in(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(7)),
            _event(AttendanceType.OVERTIME_END, _monday(8, 30)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)
        self.assertEqual(result.before_work_minutes, 90)
        self.assertEqual(result.total_minutes, 90)

    def test_overtime_end_before_check_in_is_negative(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(8)),
            _event(AttendanceType.OVERTIME_END, _monday(7)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)
        self.assertEqual(result.before_work_minutes, -60)
        self.assertEqual(result.total_minutes, -60)
        self.assertEqual(result.formatted, "0:00")

    def test_check_in_after_work_end_counts_from_check_in(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(19)),
            _event(AttendanceType.OVERTIME_END, _monday(21)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)
        self.assertEqual(result.off_schedule_minutes, 120)
        self.assertEqual(result.after_work_minutes, 0)
        self.assertEqual(result.total_minutes, 120)

    def test_each_overtime_end_contributes(self) -> None:
        events = [
            _event(AttendanceType.CHECK_IN, _monday(9)),
            _event(AttendanceType.OVERTIME_END, _monday(12, 30)),
            _event(AttendanceType.OVERTIME_END, _monday(20)),
        ]
        result = calculate_overtime(events, WEEKDAY, False, KST)
        self.assertEqual(result.lunch_overtime_minutes, 30)
        self.assertEqual(result.after_work_minutes, 120)
        self.assertEqual(result.total_minutes, 150)

    def test_no_overtime_without_overtime_end_or_check_in(self) -> None:
        only_checkout = [
            _event(AttendanceType.CHECK_IN, _monday(9)),
            _event(AttendanceType.CHECK_OUT, _monday(20)),
        ]
        no_check_in = [_event(AttendanceType.OVERTIME_END, _monday(20))]

        self.assertEqual(calculate_overtime(only_checkout, WEEKDAY, False, KST), NO_OVERTIME)
        self.assertEqual(calculate_overtime(no_check_in, WEEKDAY, False, KST), NO_OVERTIME)

    def test_last_activity_picks_latest_closing_punch(self) -> None:
        events = [
            _event(AttendanceType.OVERTIME_END, _monday(20)),
            _event(AttendanceType.CHECK_IN, _monday(9)),
            _event(AttendanceType.CHECK_OUT, _monday(18)),
        ]
        closing = last_activity(events)
        assert closing is not None
        self.assertEqual(closing.kind, AttendanceType.OVERTIME_END)
        self.assertEqual(closing.timestamp, _monday(20))


if __name__ == "__main__":
    unittest.main()
