from fastapi import APIRouter, status

from timecard.errors import ApiError, LeaveDecisionError
from timecard.schemas import (
    LeaveBalanceRead,
    LeaveDecisionRequest,
    LeaveDecisionResponse,
    LeavePreviewRequest,
    LeavePreviewResponse,
    LeaveRequestIn,
    LeaveRequestRead,
)
from timecard.services.leaves import approve_leave, count_leave_days, leave_dates, reject_leave, withdraw_leave

router = APIRouter(tags=["leaves"])


@router.post("/api/leaves/preview", response_model=LeavePreviewResponse)
def preview_leave(payload: LeavePreviewRequest) -> LeavePreviewResponse:
    end_date = payload.start_date if payload.half_day else payload.end_date
    try:
        total_days = count_leave_days(payload.start_date, end_date, payload.half_day)
    except LeaveDecisionError as exc:
        raise ApiError(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="INVALID_LEAVE_RANGE",
            message=str(exc),
        ) from exc

    return LeavePreviewResponse(
        total_days=total_days,
        dates=leave_dates(payload.start_date, end_date, payload.half_day),
    )


@router.post("/api/leaves/decision", response_model=LeaveDecisionResponse)
def decide_leave(payload: LeaveDecisionRequest) -> LeaveDecisionResponse:
    leave_request = payload.request.to_domain()
    balance = payload.balance.to_domain()
    try:
        if payload.decision == "approve":
            leave_request, balance = approve_leave(leave_request, balance)
        else:
            leave_request = reject_leave(leave_request)
    except LeaveDecisionError as exc:
        raise ApiError(
            status_code=status.HTTP_409_CONFLICT,
            code="LEAVE_ALREADY_DECIDED",
            message=str(exc),
        ) from exc

    return LeaveDecisionResponse(
        request=LeaveRequestRead.model_validate(leave_request),
        balance=LeaveBalanceRead.model_validate(balance),
    )


@router.post("/api/leaves/withdraw", response_model=LeaveRequestRead)
def withdraw_leave_request(payload: LeaveRequestIn) -> LeaveRequestRead:
    try:
        leave_request = withdraw_leave(payload.to_domain())
    except LeaveDecisionError as exc:
        raise ApiError(
            status_code=status.HTTP_409_CONFLICT,
            code="LEAVE_ALREADY_DECIDED",
            message=str(exc),
        ) from exc

    return LeaveRequestRead.model_validate(leave_request)
