from datetime import date, datetime
from typing import Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator, model_validator

from timecard.models import (
    AttendanceEvent,
    AttendanceType,
    DaySchedule,
    Employee,
    HolidayWorkEntry,
    LeaveBalance,
    LeaveRequest,
    LeaveStatus,
    LeaveType,
)
from timecard.services.daily_status import DayStatus
from timecard.services.holiday_work import HolidayWorkTotals
from timecard.services.monthly import MonthlyTotals
from timecard.services.overtime import OvertimeResult
from timecard.services.reports import EmployeeReportRow, ReportSortField, SortDirection
from timecard.services.shift_window import validate_day_schedule
from timecard.services.time_intervals import format_minutes_hhmm, to_minute_of_day


class AttendanceEventIn(BaseModel):
    user_id: str = Field(min_length=1)
    kind: AttendanceType
    timestamp: AwareDatetime
    location: str | None = None
    night_shift_anchor: AwareDatetime | None = None
    reason: str | None = None

    def to_domain(self) -> AttendanceEvent:
        return AttendanceEvent(
            user_id=self.user_id,
            kind=self.kind,
            timestamp=self.timestamp,
            location=self.location,
            night_shift_anchor=self.night_shift_anchor,
            reason=self.reason,
        )


class DayScheduleIn(BaseModel):
    weekday: int = Field(ge=0, le=6)
    is_working_day: bool
    work_start: str
    work_end: str
    lunch_start: str = "00:00"
    lunch_end: str = "00:00"

    @field_validator("work_start", "work_end")
    @classmethod
    def _validate_work_time(cls, value: str) -> str:
        to_minute_of_day(value)
        return value

    @field_validator("lunch_start", "lunch_end")
    @classmethod
    def _validate_lunch_time(cls, value: str) -> str:
        # Empty lunch fields mean "no lunch break".
        if value:
            to_minute_of_day(value)
        return value

    @model_validator(mode="after")
    def _validate_work_window(self) -> "DayScheduleIn":
        validate_day_schedule(self.to_domain())
        return self

    def to_domain(self) -> DaySchedule:
        return DaySchedule(
            weekday=self.weekday,
            is_working_day=self.is_working_day,
            work_start=self.work_start,
            work_end=self.work_end,
            lunch_start=self.lunch_start,
            lunch_end=self.lunch_end,
        )


class DayScheduleRead(BaseModel):
    weekday: int
    is_working_day: bool
    work_start: str
    work_end: str
    lunch_start: str
    lunch_end: str
    has_lunch: bool

    model_config = ConfigDict(from_attributes=True)


class HolidayWorkEntryIn(BaseModel):
    date: date
    allotted_minutes: int = Field(ge=0)
    extra_overtime_minutes: int = Field(default=0, ge=0)
    description: str = ""

    def to_domain(self) -> HolidayWorkEntry:
        return HolidayWorkEntry(
            date=self.date,
            allotted_minutes=self.allotted_minutes,
            extra_overtime_minutes=self.extra_overtime_minutes,
            description=self.description,
        )


class EmployeeIn(BaseModel):
    user_id: str = Field(min_length=1)
    name: str
    department: str | None = None

    def to_domain(self) -> Employee:
        return Employee(user_id=self.user_id, name=self.name, department=self.department)


class AttendanceDataRequest(BaseModel):
    events: list[AttendanceEventIn] = Field(default_factory=list)
    schedules: list[DayScheduleIn] = Field(default_factory=list)
    holidays: list[HolidayWorkEntryIn] = Field(default_factory=list)

    def domain_events(self) -> list[AttendanceEvent]:
        return [event.to_domain() for event in self.events]

    def domain_schedules(self) -> list[DaySchedule]:
        return [schedule.to_domain() for schedule in self.schedules]

    def domain_holidays(self) -> list[HolidayWorkEntry]:
        return [holiday.to_domain() for holiday in self.holidays]


class DayStatusRequest(AttendanceDataRequest):
    pass


class MonthlyEmployeeRequest(AttendanceDataRequest):
    user_id: str = Field(min_length=1)
    year: int = Field(ge=1970)
    month: int = Field(ge=1, le=12)


class HolidayWorkRequest(BaseModel):
    user_id: str = Field(min_length=1)
    events: list[AttendanceEventIn] = Field(default_factory=list)
    holidays: list[HolidayWorkEntryIn] = Field(default_factory=list)


class ScheduleValidateRequest(BaseModel):
    schedules: list[DayScheduleIn]


class EmployeeReportRequest(AttendanceDataRequest):
    employees: list[EmployeeIn] = Field(default_factory=list)
    year: int = Field(ge=1970)
    month: int = Field(ge=1, le=12)
    department: str | None = None
    sort_field: ReportSortField = "name"
    sort_direction: SortDirection = "asc"


class OvertimeRead(BaseModel):
    total_minutes: int
    lunch_overtime_minutes: int
    before_work_minutes: int
    after_work_minutes: int
    night_shift_minutes: int
    off_schedule_minutes: int
    non_working_day_minutes: int
    formatted: str

    @classmethod
    def from_result(cls, result: OvertimeResult) -> "OvertimeRead":
        return cls(
            total_minutes=result.total_minutes,
            lunch_overtime_minutes=result.lunch_overtime_minutes,
            before_work_minutes=result.before_work_minutes,
            after_work_minutes=result.after_work_minutes,
            night_shift_minutes=result.night_shift_minutes,
            off_schedule_minutes=result.off_schedule_minutes,
            non_working_day_minutes=result.non_working_day_minutes,
            formatted=result.formatted,
        )


class DayStatusRead(BaseModel):
    date: date
    weekday: int
    check_in_time: datetime
    last_activity_time: datetime | None = None
    last_activity_type: AttendanceType | None = None
    is_complete: bool
    is_holiday: bool
    is_non_working_day: bool
    is_late: bool
    minutes_late: int
    is_early_leave: bool
    minutes_early: int
    regular_work_minutes: int | None = None
    regular_work_formatted: str | None = None
    elapsed_work_minutes: int | None = None
    overtime_minutes: int
    overtime_formatted: str
    overtime: OvertimeRead
    total_work_minutes: int | None = None
    total_work_formatted: str | None = None
    holiday_work_minutes: int | None = None
    is_holiday_work_exceeded: bool

    @classmethod
    def from_status(cls, status: DayStatus) -> "DayStatusRead":
        return cls(
            date=status.date,
            weekday=status.weekday,
            check_in_time=status.check_in_time,
            last_activity_time=status.last_activity_time,
            last_activity_type=status.last_activity_type,
            is_complete=status.is_complete,
            is_holiday=status.is_holiday,
            is_non_working_day=status.is_non_working_day,
            is_late=status.is_late,
            minutes_late=status.minutes_late,
            is_early_leave=status.is_early_leave,
            minutes_early=status.minutes_early,
            regular_work_minutes=status.regular_work_minutes,
            regular_work_formatted=status.regular_work_formatted,
            elapsed_work_minutes=status.elapsed_work_minutes,
            overtime_minutes=status.overtime_minutes,
            overtime_formatted=status.overtime_formatted,
            overtime=OvertimeRead.from_result(status.overtime),
            total_work_minutes=status.total_work_minutes,
            total_work_formatted=status.total_work_formatted,
            holiday_work_minutes=status.holiday_work_minutes,
            is_holiday_work_exceeded=status.is_holiday_work_exceeded,
        )


class MonthlyTotalsRead(BaseModel):
    regular_work_minutes: int
    overtime_minutes: int
    holiday_regular_minutes: int
    holiday_exceeded_minutes: int
    holiday_extra_minutes: int
    total_minutes: int
    total_formatted: str
    late_minutes: int
    late_days: int
    early_leave_days: int
    worked_days: int
    incomplete_days: int

    @classmethod
    def from_totals(cls, totals: MonthlyTotals) -> "MonthlyTotalsRead":
        return cls(
            regular_work_minutes=totals.regular_work_minutes,
            overtime_minutes=totals.overtime_minutes,
            holiday_regular_minutes=totals.holiday_regular_minutes,
            holiday_exceeded_minutes=totals.holiday_exceeded_minutes,
            holiday_extra_minutes=totals.holiday_extra_minutes,
            total_minutes=totals.total_minutes,
            total_formatted=format_minutes_hhmm(totals.total_minutes),
            late_minutes=totals.late_minutes,
            late_days=totals.late_days,
            early_leave_days=totals.early_leave_days,
            worked_days=totals.worked_days,
            incomplete_days=totals.incomplete_days,
        )


class MonthlyEmployeeResponse(BaseModel):
    user_id: str
    year: int
    month: int
    days: list[DayStatusRead]
    totals: MonthlyTotalsRead


class HolidayWorkTotalsRead(BaseModel):
    total_minutes: int
    regular_minutes: int
    exceeded_minutes: int
    extra_minutes: int

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_totals(cls, totals: HolidayWorkTotals) -> "HolidayWorkTotalsRead":
        return cls.model_validate(totals)


class EmployeeReportRowRead(BaseModel):
    user_id: str
    name: str
    department: str | None = None
    totals: MonthlyTotalsRead
    total_formatted: str
    overtime_formatted: str
    holiday_regular_formatted: str
    holiday_exceeded_formatted: str
    late_formatted: str

    @classmethod
    def from_row(cls, row: EmployeeReportRow) -> "EmployeeReportRowRead":
        return cls(
            user_id=row.user_id,
            name=row.name,
            department=row.department,
            totals=MonthlyTotalsRead.from_totals(row.totals),
            total_formatted=row.total_formatted,
            overtime_formatted=row.overtime_formatted,
            holiday_regular_formatted=row.holiday_regular_formatted,
            holiday_exceeded_formatted=row.holiday_exceeded_formatted,
            late_formatted=row.late_formatted,
        )


class LeaveRequestIn(BaseModel):
    user_id: str = Field(min_length=1)
    leave_type: LeaveType
    start_date: date
    end_date: date
    half_day: bool = False
    status: LeaveStatus = LeaveStatus.PENDING
    reason: str | None = None
    special_leave_id: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _validate_special_leave(self) -> "LeaveRequestIn":
        if self.leave_type == LeaveType.SPECIAL and self.special_leave_id is None:
            raise ValueError("special_leave_id is required for special leave")
        if not self.half_day and self.end_date < self.start_date:
            raise ValueError("end_date must be greater than or equal to start_date")
        return self

    def to_domain(self) -> LeaveRequest:
        return LeaveRequest(
            user_id=self.user_id,
            leave_type=self.leave_type,
            start_date=self.start_date,
            end_date=self.end_date,
            half_day=self.half_day,
            status=self.status,
            reason=self.reason,
            special_leave_id=self.special_leave_id,
        )


class LeaveRequestRead(BaseModel):
    user_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    half_day: bool
    status: LeaveStatus
    reason: str | None = None
    special_leave_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class LeaveBalanceIn(BaseModel):
    total_days: float = Field(ge=0)
    used_days: float = Field(ge=0)
    remaining_days: float

    def to_domain(self) -> LeaveBalance:
        return LeaveBalance(
            total_days=self.total_days,
            used_days=self.used_days,
            remaining_days=self.remaining_days,
        )


class LeaveBalanceRead(BaseModel):
    total_days: float
    used_days: float
    remaining_days: float

    model_config = ConfigDict(from_attributes=True)


class LeavePreviewRequest(BaseModel):
    start_date: date
    end_date: date
    half_day: bool = False


class LeavePreviewResponse(BaseModel):
    total_days: float
    dates: list[date]


class LeaveDecisionRequest(BaseModel):
    request: LeaveRequestIn
    balance: LeaveBalanceIn
    decision: Literal["approve", "reject"]


class LeaveDecisionResponse(BaseModel):
    request: LeaveRequestRead
    balance: LeaveBalanceRead
