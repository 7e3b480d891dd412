from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse


class InvalidTimeFormatError(ValueError):
    """A wall-clock value is not a valid ``HH:MM`` string."""

    def __init__(self, value: object):
        super().__init__(f"Invalid time format: {value!r} (expected HH:MM)")
        self.value = value


class ScheduleConfigError(ValueError):
    pass


class LeaveDecisionError(ValueError):
    pass


class ApiError(Exception):
    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


def get_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return str(request_id)
    return "unknown"


def error_response(request: Request, *, status_code: int, code: str, message: str) -> JSONResponse:
    payload = {
        "error": {
            "code": code,
            "message": message,
            "request_id": get_request_id(request),
        }
    }
    return JSONResponse(status_code=status_code, content=payload)
