from __future__ import annotations

from datetime import date, datetime, timezone
import unittest
from zoneinfo import ZoneInfo

from timecard.errors import InvalidTimeFormatError
from timecard.services.time_intervals import (
    elapsed_minutes,
    format_duration,
    format_minutes_hhmm,
    format_minutes_korean,
    format_minutes_only,
    format_minutes_with_total,
    local_date,
    local_minute_of_day,
    minutes_between,
    parse_duration,
    to_minute_of_day,
)

KST = ZoneInfo("Asia/Seoul")


class MinuteOfDayTests(unittest.TestCase):
    def test_parses_wall_clock_strings(self) -> None:
        self.assertEqual(to_minute_of_day("00:00"), 0)
        self.assertEqual(to_minute_of_day("09:30"), 570)
        self.assertEqual(to_minute_of_day("9:05"), 545)
        self.assertEqual(to_minute_of_day("23:59"), 1439)

    def test_rejects_malformed_values(self) -> None:
        for value in ["24:00", "12:60", "0930", "", "ab:cd", "12:5", "-1:00"]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidTimeFormatError):
                    to_minute_of_day(value)

    def test_invalid_time_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            to_minute_of_day("25:00")
        self.assertIn("25:00", str(ctx.exception))

    def test_minutes_between_is_signed(self) -> None:
        self.assertEqual(minutes_between("09:00", "18:00"), 540)
        self.assertEqual(minutes_between("18:00", "09:00"), -540)
        self.assertEqual(minutes_between("12:00", "12:00"), 0)


class ElapsedMinutesTests(unittest.TestCase):
    def test_floors_partial_minutes(self) -> None:
        start = datetime(2026, 3, 2, 9, 0, 0, tzinfo=KST)
        end = datetime(2026, 3, 2, 9, 1, 59, tzinfo=KST)
        self.assertEqual(elapsed_minutes(start, end), 1)

    def test_negative_when_end_precedes_start(self) -> None:
        start = datetime(2026, 3, 2, 10, 0, tzinfo=KST)
        end = datetime(2026, 3, 2, 9, 30, tzinfo=KST)
        self.assertEqual(elapsed_minutes(start, end), -30)

    def test_local_date_and_minute_use_attendance_zone(self) -> None:
        late_utc = datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc)
        self.assertEqual(local_date(late_utc, KST), date(2026, 3, 3))
        self.assertEqual(local_minute_of_day(late_utc, KST), 8 * 60 + 30)


class DurationFormattingTests(unittest.TestCase):
    def test_hhmm(self) -> None:
        self.assertEqual(format_minutes_hhmm(0), "0:00")
        self.assertEqual(format_minutes_hhmm(59), "0:59")
        self.assertEqual(format_minutes_hhmm(60), "1:00")
        self.assertEqual(format_minutes_hhmm(125), "2:05")
        self.assertEqual(format_minutes_hhmm(-5), "0:00")

    def test_korean(self) -> None:
        self.assertEqual(format_minutes_korean(0), "0시간 0분")
        self.assertEqual(format_minutes_korean(125), "2시간 5분")
        self.assertEqual(format_minutes_korean(120, compact=True), "2시간")
        self.assertEqual(format_minutes_korean(5, compact=True), "5분")
        self.assertEqual(format_minutes_korean(0, compact=True), "0분")

    def test_minutes_and_with_total(self) -> None:
        self.assertEqual(format_minutes_only(481), "481분")
        self.assertEqual(format_minutes_only(0), "0분")
        self.assertEqual(format_minutes_with_total(125), "125분 (2시간 5분)")
        self.assertEqual(format_minutes_with_total(0), "0분 (0시간 0분)")

    def test_format_duration_rejects_unknown_style(self) -> None:
        with self.assertRaises(ValueError):
            format_duration(10, "weeks")  # type: ignore[arg-type]

    def test_parse_reads_back_every_style(self) -> None:
        for minutes in [0, 59, 60, 125, 481]:
            for style in ["hhmm", "korean", "minutes", "with_total"]:
                with self.subTest(minutes=minutes, style=style):
                    self.assertEqual(parse_duration(format_duration(minutes, style)), minutes)

    def test_parse_rejects_garbage(self) -> None:
        for value in ["", "abc", "1:5", "시간"]:
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_duration(value)


if __name__ == "__main__":
    unittest.main()
