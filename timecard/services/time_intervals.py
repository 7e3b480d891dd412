from __future__ import annotations

import re
from datetime import date, datetime, tzinfo
from typing import Literal

from timecard.errors import InvalidTimeFormatError
from timecard.settings import get_attendance_timezone

DurationStyle = Literal["hhmm", "korean", "minutes", "with_total"]

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_KOREAN_RE = re.compile(r"^(?:(\d+)시간)?\s*(?:(\d+)분)?$")
_WITH_TOTAL_RE = re.compile(r"^(\d+)분\s*\((\d+)시간\s*(\d+)분\)$")


def to_minute_of_day(value: str) -> int:
    if not isinstance(value, str):
        raise InvalidTimeFormatError(value)
    match = _HHMM_RE.match(value)
    if match is None:
        raise InvalidTimeFormatError(value)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormatError(value)
    return hours * 60 + minutes


def minutes_between(time_a: str, time_b: str) -> int:
    """Signed wall-clock difference ``time_b - time_a`` in minutes."""
    return to_minute_of_day(time_b) - to_minute_of_day(time_a)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, floored; negative when ``end`` precedes ``start``."""
    return int((end - start).total_seconds() // 60)


def resolve_tz(tz: tzinfo | None) -> tzinfo:
    return tz if tz is not None else get_attendance_timezone()


def to_local(ts: datetime, tz: tzinfo | None = None) -> datetime:
    zone = resolve_tz(tz)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=zone)
    return ts.astimezone(zone)


def local_date(ts: datetime, tz: tzinfo | None = None) -> date:
    return to_local(ts, tz).date()


def local_minute_of_day(ts: datetime, tz: tzinfo | None = None) -> int:
    local_ts = to_local(ts, tz)
    return local_ts.hour * 60 + local_ts.minute


def format_minutes_hhmm(total_minutes: int) -> str:
    if total_minutes <= 0:
        return "0:00"
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}:{minutes:02d}"


def format_minutes_korean(total_minutes: int, *, compact: bool = False) -> str:
    if total_minutes <= 0:
        return "0분" if compact else "0시간 0분"
    hours, minutes = divmod(total_minutes, 60)
    if compact:
        if hours and minutes:
            return f"{hours}시간 {minutes}분"
        if hours:
            return f"{hours}시간"
        return f"{minutes}분"
    return f"{hours}시간 {minutes}분"


def format_minutes_only(total_minutes: int) -> str:
    if total_minutes <= 0:
        return "0분"
    return f"{total_minutes}분"


def format_minutes_with_total(total_minutes: int) -> str:
    if total_minutes <= 0:
        return "0분 (0시간 0분)"
    hours, minutes = divmod(total_minutes, 60)
    return f"{total_minutes}분 ({hours}시간 {minutes}분)"


def format_duration(total_minutes: int, style: DurationStyle = "hhmm") -> str:
    if style == "hhmm":
        return format_minutes_hhmm(total_minutes)
    if style == "korean":
        return format_minutes_korean(total_minutes)
    if style == "minutes":
        return format_minutes_only(total_minutes)
    if style == "with_total":
        return format_minutes_with_total(total_minutes)
    raise ValueError(f"Unknown duration style: {style}")


def parse_duration(value: str) -> int:
    """Parse any string produced by ``format_duration`` back into minutes."""
    text = (value or "").strip()
    if not text:
        raise ValueError("Empty duration")

    match = _WITH_TOTAL_RE.match(text)
    if match is not None:
        return int(match.group(1))

    if ":" in text:
        hours_text, _, minutes_text = text.partition(":")
        if hours_text.isdigit() and len(minutes_text) == 2 and minutes_text.isdigit():
            return int(hours_text) * 60 + int(minutes_text)
        raise ValueError(f"Invalid duration: {value!r}")

    match = _KOREAN_RE.match(text)
    if match is not None and (match.group(1) or match.group(2)):
        return int(match.group(1) or 0) * 60 + int(match.group(2) or 0)
    raise ValueError(f"Invalid duration: {value!r}")
