import logging
from urllib.parse import quote

from fastapi import APIRouter, Response, status

from timecard.errors import ApiError, ScheduleConfigError
from timecard.schemas import (
    DayScheduleRead,
    EmployeeReportRequest,
    EmployeeReportRowRead,
    ScheduleValidateRequest,
)
from timecard.services.exports import XLSX_MEDIA_TYPE, build_employee_report_xlsx_bytes, report_filename
from timecard.services.reports import EmployeeReportRow, build_employee_report
from timecard.services.shift_window import has_lunch, validate_schedule_set
from timecard.settings import get_attendance_timezone, get_settings

router = APIRouter(tags=["admin"])
logger = logging.getLogger("timecard.admin")


def _build_report_rows(payload: EmployeeReportRequest) -> list[EmployeeReportRow]:
    return build_employee_report(
        [employee.to_domain() for employee in payload.employees],
        payload.domain_events(),
        payload.domain_schedules(),
        payload.domain_holidays(),
        year=payload.year,
        month=payload.month,
        department=payload.department,
        sort_field=payload.sort_field,
        sort_direction=payload.sort_direction,
        tz=get_attendance_timezone(),
        holiday_standard_minutes=get_settings().holiday_standard_minutes,
    )


@router.post("/api/admin/schedules/validate", response_model=list[DayScheduleRead])
def validate_schedules(payload: ScheduleValidateRequest) -> list[DayScheduleRead]:
    try:
        schedules = validate_schedule_set([item.to_domain() for item in payload.schedules])
    except ScheduleConfigError as exc:
        raise ApiError(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="INVALID_SCHEDULE",
            message=str(exc),
        ) from exc

    return [
        DayScheduleRead(
            weekday=schedule.weekday,
            is_working_day=schedule.is_working_day,
            work_start=schedule.work_start,
            work_end=schedule.work_end,
            lunch_start=schedule.lunch_start,
            lunch_end=schedule.lunch_end,
            has_lunch=has_lunch(schedule),
        )
        for schedule in schedules
    ]


@router.post("/api/admin/reports/employees", response_model=list[EmployeeReportRowRead])
def employee_report(payload: EmployeeReportRequest) -> list[EmployeeReportRowRead]:
    rows = _build_report_rows(payload)
    return [EmployeeReportRowRead.from_row(row) for row in rows]


@router.post("/api/admin/reports/employees.xlsx")
def export_employee_report_xlsx(payload: EmployeeReportRequest) -> Response:
    rows = _build_report_rows(payload)
    content = build_employee_report_xlsx_bytes(
        rows,
        year=payload.year,
        month=payload.month,
        department=payload.department,
    )
    logger.info(
        "employee_report_exported",
        extra={
            "year": payload.year,
            "month": payload.month,
            "department": payload.department,
            "row_count": len(rows),
            "size_bytes": len(content),
        },
    )

    filename = report_filename(year=payload.year, month=payload.month, department=payload.department)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )
