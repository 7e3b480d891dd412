from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Literal, Sequence

from timecard.models import AttendanceEvent, DaySchedule, Employee, HolidayWorkEntry
from timecard.services.holiday_work import HOLIDAY_STANDARD_MINUTES
from timecard.services.monthly import EMPTY_MONTHLY_TOTALS, MonthlyTotals, aggregate_employee_month
from timecard.services.time_intervals import format_minutes_korean, format_minutes_only

logger = logging.getLogger("timecard.reports")

ReportSortField = Literal[
    "name",
    "total_minutes",
    "overtime_minutes",
    "holiday_regular_minutes",
    "holiday_exceeded_minutes",
    "late_minutes",
]
SortDirection = Literal["asc", "desc"]

ALL_DEPARTMENTS = "all"


@dataclass(frozen=True)
class EmployeeReportRow:
    user_id: str
    name: str
    department: str | None
    totals: MonthlyTotals

    @property
    def total_formatted(self) -> str:
        return format_minutes_korean(self.totals.total_minutes)

    @property
    def overtime_formatted(self) -> str:
        return format_minutes_only(self.totals.overtime_minutes)

    @property
    def holiday_regular_formatted(self) -> str:
        return format_minutes_only(self.totals.holiday_regular_minutes)

    @property
    def holiday_exceeded_formatted(self) -> str:
        return format_minutes_only(self.totals.holiday_exceeded_minutes)

    @property
    def late_formatted(self) -> str:
        return format_minutes_only(self.totals.late_minutes)

    def sort_value(self, field: ReportSortField) -> str | int:
        if field == "name":
            return self.name
        if field == "total_minutes":
            return self.totals.total_minutes
        return int(getattr(self.totals, field))


def list_departments(employees: Sequence[Employee]) -> list[str]:
    return sorted({employee.department for employee in employees if employee.department})


def sort_report_rows(
    rows: list[EmployeeReportRow],
    *,
    sort_field: ReportSortField = "name",
    sort_direction: SortDirection = "asc",
) -> list[EmployeeReportRow]:
    return sorted(
        rows,
        key=lambda row: (row.sort_value(sort_field), row.name, row.user_id),
        reverse=sort_direction == "desc",
    )


def build_employee_report(
    employees: Sequence[Employee],
    events: Sequence[AttendanceEvent],
    schedules: Sequence[DaySchedule],
    holidays: Sequence[HolidayWorkEntry],
    *,
    year: int,
    month: int,
    department: str | None = None,
    sort_field: ReportSortField = "name",
    sort_direction: SortDirection = "asc",
    tz: tzinfo | None = None,
    holiday_standard_minutes: int = HOLIDAY_STANDARD_MINUTES,
) -> list[EmployeeReportRow]:
    """One row of monthly totals per employee.

    Each row is computed with ``aggregate_employee_month``, so a row always
    matches the employee's own monthly card for the same inputs.
    """
    rows: list[EmployeeReportRow] = []
    for employee in employees:
        if department and department != ALL_DEPARTMENTS and employee.department != department:
            continue
        totals = aggregate_employee_month(
            employee.user_id,
            events,
            schedules,
            holidays,
            year,
            month,
            tz,
            holiday_standard_minutes,
        )
        rows.append(
            EmployeeReportRow(
                user_id=employee.user_id,
                name=employee.name,
                department=employee.department,
                totals=totals,
            )
        )

    rows = sort_report_rows(rows, sort_field=sort_field, sort_direction=sort_direction)
    logger.info(
        "employee_report_built",
        extra={
            "year": year,
            "month": month,
            "department": department or ALL_DEPARTMENTS,
            "employee_count": len(rows),
            "event_count": len(events),
        },
    )
    return rows


def summarize_report(rows: Sequence[EmployeeReportRow]) -> MonthlyTotals:
    summary = EMPTY_MONTHLY_TOTALS
    for row in rows:
        totals = row.totals
        summary = MonthlyTotals(
            regular_work_minutes=summary.regular_work_minutes + totals.regular_work_minutes,
            overtime_minutes=summary.overtime_minutes + totals.overtime_minutes,
            holiday_regular_minutes=summary.holiday_regular_minutes + totals.holiday_regular_minutes,
            holiday_exceeded_minutes=summary.holiday_exceeded_minutes + totals.holiday_exceeded_minutes,
            holiday_extra_minutes=summary.holiday_extra_minutes + totals.holiday_extra_minutes,
            late_minutes=summary.late_minutes + totals.late_minutes,
            late_days=summary.late_days + totals.late_days,
            early_leave_days=summary.early_leave_days + totals.early_leave_days,
            worked_days=summary.worked_days + totals.worked_days,
            incomplete_days=summary.incomplete_days + totals.incomplete_days,
        )
    return summary
