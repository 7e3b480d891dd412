from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable

from timecard.errors import LeaveDecisionError
from timecard.models import LeaveBalance, LeaveRequest, LeaveStatus
from timecard.services.monthly import month_bounds

HALF_DAY = 0.5
_SUNDAY = 6


def leave_dates(start_date: date, end_date: date, half_day: bool = False) -> list[date]:
    if half_day:
        return [start_date]
    dates: list[date] = []
    current = start_date
    while current <= end_date:
        if current.weekday() != _SUNDAY:
            dates.append(current)
        current += timedelta(days=1)
    return dates


def count_leave_days(start_date: date, end_date: date, half_day: bool = False) -> float:
    """Leave days charged for a request: 0.5 for a half day, otherwise every non-Sunday date."""
    if half_day:
        return HALF_DAY
    if end_date < start_date:
        raise LeaveDecisionError("end_date must be greater than or equal to start_date")
    return float(len(leave_dates(start_date, end_date)))


def normalize_leave_request(request: LeaveRequest) -> LeaveRequest:
    # A half day always covers a single date.
    if request.half_day and request.end_date != request.start_date:
        return replace(request, end_date=request.start_date)
    return request


def _require_pending(request: LeaveRequest) -> None:
    if request.status != LeaveStatus.PENDING:
        raise LeaveDecisionError(f"leave request is already {request.status.value}")


def approve_leave(request: LeaveRequest, balance: LeaveBalance) -> tuple[LeaveRequest, LeaveBalance]:
    _require_pending(request)
    request = normalize_leave_request(request)
    days = count_leave_days(request.start_date, request.end_date, request.half_day)
    updated_balance = LeaveBalance(
        total_days=balance.total_days,
        used_days=balance.used_days + days,
        remaining_days=balance.remaining_days - days,
    )
    return replace(request, status=LeaveStatus.APPROVED), updated_balance


def reject_leave(request: LeaveRequest) -> LeaveRequest:
    _require_pending(request)
    return replace(request, status=LeaveStatus.REJECTED)


def withdraw_leave(request: LeaveRequest) -> LeaveRequest:
    """Only pending requests may be withdrawn; the withdrawn copy never counts against a balance."""
    _require_pending(request)
    return replace(request, status=LeaveStatus.WITHDRAWN)


def leaves_in_month(requests: Iterable[LeaveRequest], year: int, month: int) -> list[LeaveRequest]:
    start, end = month_bounds(year, month)
    overlapping = [request for request in requests if request.start_date <= end and request.end_date >= start]
    return sorted(overlapping, key=lambda request: (request.start_date, request.user_id))
