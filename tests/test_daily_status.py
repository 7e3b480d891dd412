from __future__ import annotations

from datetime import date, datetime
import unittest
from zoneinfo import ZoneInfo

from timecard.models import AttendanceEvent, AttendanceType, DaySchedule, HolidayWorkEntry
from timecard.services.daily_status import compose_day_status

KST = ZoneInfo("Asia/Seoul")


def _week() -> list[DaySchedule]:
    return [
        DaySchedule(
            weekday=weekday,
            is_working_day=weekday not in (0, 6),
            work_start="09:00",
            work_end="18:00",
            lunch_start="12:00",
            lunch_end="13:00",
        )
        for weekday in range(7)
    ]


def _punch(kind: AttendanceType, day: int, hour: int, minute: int = 0) -> AttendanceEvent:
    return AttendanceEvent(user_id="u1", kind=kind, timestamp=datetime(2026, 3, day, hour, minute, tzinfo=KST))


class DayStatusTests(unittest.TestCase):
    def test_regular_day(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 2, 9),
            _punch(AttendanceType.CHECK_OUT, 2, 18),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertEqual(status.date, date(2026, 3, 2))
        self.assertEqual(status.weekday, 1)
        self.assertTrue(status.is_complete)
        self.assertFalse(status.is_late)
        self.assertFalse(status.is_early_leave)
        self.assertEqual(status.regular_work_minutes, 480)
        self.assertEqual(status.total_work_minutes, 480)
        self.assertEqual(status.overtime_minutes, 0)
        self.assertEqual(status.regular_work_formatted, "8:00")

    def test_late_and_early_leave(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 2, 9, 10),
            _punch(AttendanceType.CHECK_OUT, 2, 17, 30),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertTrue(status.is_late)
        self.assertEqual(status.minutes_late, 10)
        self.assertTrue(status.is_early_leave)
        self.assertEqual(status.minutes_early, 30)
        self.assertEqual(status.regular_work_minutes, 440)

    def test_after_work_overtime_is_not_part_of_total(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 2, 9),
            _punch(AttendanceType.CHECK_OUT, 2, 18),
            _punch(AttendanceType.OVERTIME_END, 2, 20),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertEqual(status.last_activity_type, AttendanceType.OVERTIME_END)
        self.assertFalse(status.is_early_leave)
        self.assertEqual(status.regular_work_minutes, 480)
        self.assertEqual(status.elapsed_work_minutes, 600)
        self.assertEqual(status.overtime_minutes, 120)
        self.assertEqual(status.total_work_minutes, 480)
        self.assertEqual(status.overtime_formatted, "2:00")

    def test_lunch_overtime_is_added_to_total(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 2, 9),
            _punch(AttendanceType.OVERTIME_END, 2, 12, 30),
            _punch(AttendanceType.CHECK_OUT, 2, 18),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertEqual(status.lunch_overtime_minutes, 30)
        self.assertEqual(status.total_work_minutes, 510)

    def test_non_working_day(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 1, 10),
            _punch(AttendanceType.OVERTIME_END, 1, 14),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertTrue(status.is_non_working_day)
        self.assertFalse(status.is_late)
        self.assertEqual(status.regular_work_minutes, 240)
        self.assertEqual(status.overtime_minutes, 240)
        self.assertEqual(status.lunch_overtime_minutes, 0)
        self.assertEqual(status.total_work_minutes, 240)

    def test_incomplete_day_keeps_lateness(self) -> None:
        status = compose_day_status([_punch(AttendanceType.CHECK_IN, 2, 9, 5)], _week(), [], KST)

        assert status is not None
        self.assertFalse(status.is_complete)
        self.assertTrue(status.is_late)
        self.assertEqual(status.minutes_late, 5)
        self.assertIsNone(status.regular_work_minutes)
        self.assertIsNone(status.total_work_formatted)

    def test_check_in_after_work_end_is_not_late(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 2, 19),
            _punch(AttendanceType.OVERTIME_END, 2, 21),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertFalse(status.is_late)
        self.assertEqual(status.overtime.off_schedule_minutes, 120)

    def test_overtime_end_before_check_in_is_not_clamped(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_IN, 2, 8),
            _punch(AttendanceType.OVERTIME_END, 2, 7),
        ]
        status = compose_day_status(events, _week(), [], KST)

        assert status is not None
        self.assertFalse(status.is_late)
        self.assertEqual(status.overtime_minutes, -60)
        self.assertEqual(status.overtime_formatted, "0:00")
        self.assertEqual(status.elapsed_work_minutes, -60)
        self.assertEqual(status.regular_work_minutes, 0)
        self.assertEqual(status.total_work_minutes, 0)

    def test_holiday_suppresses_overtime(self) -> None:
        holidays = [HolidayWorkEntry(date=date(2026, 3, 1), allotted_minutes=600)]
        events = [
            _punch(AttendanceType.CHECK_IN, 1, 9),
            _punch(AttendanceType.OVERTIME_END, 1, 19),
        ]
        status = compose_day_status(events, _week(), holidays, KST)

        assert status is not None
        self.assertTrue(status.is_holiday)
        self.assertEqual(status.overtime_minutes, 0)
        self.assertEqual(status.holiday_work_minutes, 600)
        self.assertTrue(status.is_holiday_work_exceeded)

    def test_none_without_check_in_or_schedule(self) -> None:
        self.assertIsNone(compose_day_status([_punch(AttendanceType.CHECK_OUT, 2, 18)], _week(), [], KST))
        monday_only = [item for item in _week() if item.weekday == 1]
        self.assertIsNone(compose_day_status([_punch(AttendanceType.CHECK_IN, 3, 9)], monday_only, [], KST))

    def test_composition_is_repeatable(self) -> None:
        events = [
            _punch(AttendanceType.CHECK_OUT, 2, 18),
            _punch(AttendanceType.CHECK_IN, 2, 9),
            _punch(AttendanceType.OVERTIME_END, 2, 20),
        ]
        first = compose_day_status(events, _week(), [], KST)
        second = compose_day_status(list(reversed(events)), _week(), [], KST)
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
