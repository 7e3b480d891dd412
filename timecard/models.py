from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime


class AttendanceType(str, enum.Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    OVERTIME_END = "overtime_end"


class LeaveType(str, enum.Enum):
    ANNUAL = "annual"
    SPECIAL = "special"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


@dataclass(frozen=True)
class AttendanceEvent:
    user_id: str
    kind: AttendanceType
    timestamp: datetime
    location: str | None = None
    night_shift_anchor: datetime | None = None
    reason: str | None = None


@dataclass(frozen=True)
class DaySchedule:
    """Work configuration of one weekday (0 = Sunday ... 6 = Saturday).

    A missing lunch break is stored as ``lunch_start == lunch_end == "00:00"``
    or as empty strings; use ``shift_window.has_lunch`` to test for it.
    """

    weekday: int
    is_working_day: bool
    work_start: str
    work_end: str
    lunch_start: str = "00:00"
    lunch_end: str = "00:00"


@dataclass(frozen=True)
class HolidayWorkEntry:
    date: date
    allotted_minutes: int
    extra_overtime_minutes: int = 0
    description: str = ""


@dataclass(frozen=True)
class Employee:
    user_id: str
    name: str
    department: str | None = None


@dataclass(frozen=True)
class LeaveBalance:
    total_days: float
    used_days: float
    remaining_days: float


@dataclass(frozen=True)
class LeaveRequest:
    user_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    half_day: bool = False
    status: LeaveStatus = LeaveStatus.PENDING
    reason: str | None = None
    special_leave_id: int | None = None
