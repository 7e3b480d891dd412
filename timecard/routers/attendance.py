from fastapi import APIRouter, Request

from timecard.schemas import (
    DayStatusRead,
    DayStatusRequest,
    HolidayWorkRequest,
    HolidayWorkTotalsRead,
    MonthlyEmployeeRequest,
    MonthlyEmployeeResponse,
    MonthlyTotalsRead,
)
from timecard.services.daily_status import compose_day_status
from timecard.services.holiday_work import aggregate_holiday_work
from timecard.services.monthly import aggregate_month, compose_month_statuses, events_for_employee_month
from timecard.settings import get_attendance_timezone, get_settings

router = APIRouter(tags=["attendance"])


@router.post("/api/attendance/day-status", response_model=DayStatusRead | None)
def day_status(payload: DayStatusRequest, request: Request) -> DayStatusRead | None:
    result = compose_day_status(
        payload.domain_events(),
        payload.domain_schedules(),
        payload.domain_holidays(),
        tz=get_attendance_timezone(),
        holiday_standard_minutes=get_settings().holiday_standard_minutes,
    )
    if result is None:
        return None
    request.state.flags = {"is_late": result.is_late, "is_early_leave": result.is_early_leave}
    return DayStatusRead.from_status(result)


@router.post("/api/attendance/monthly", response_model=MonthlyEmployeeResponse)
def employee_monthly(payload: MonthlyEmployeeRequest, request: Request) -> MonthlyEmployeeResponse:
    tz = get_attendance_timezone()
    standard_minutes = get_settings().holiday_standard_minutes
    schedules = payload.domain_schedules()
    holidays = payload.domain_holidays()
    events_by_date = events_for_employee_month(payload.user_id, payload.domain_events(), payload.year, payload.month, tz)

    statuses = compose_month_statuses(events_by_date, schedules, holidays, tz, standard_minutes)
    totals = aggregate_month(events_by_date, schedules, holidays, tz, standard_minutes)

    request.state.employee_id = payload.user_id
    return MonthlyEmployeeResponse(
        user_id=payload.user_id,
        year=payload.year,
        month=payload.month,
        days=[DayStatusRead.from_status(item) for item in statuses.values()],
        totals=MonthlyTotalsRead.from_totals(totals),
    )


@router.post("/api/attendance/holiday-work", response_model=HolidayWorkTotalsRead)
def holiday_work(payload: HolidayWorkRequest, request: Request) -> HolidayWorkTotalsRead:
    totals = aggregate_holiday_work(
        payload.user_id,
        [event.to_domain() for event in payload.events],
        [holiday.to_domain() for holiday in payload.holidays],
        tz=get_attendance_timezone(),
        standard_minutes=get_settings().holiday_standard_minutes,
    )
    request.state.employee_id = payload.user_id
    return HolidayWorkTotalsRead.from_totals(totals)
