"""
Custom exception hierarchy for the Daybreak API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class DaybreakException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# --- competitions ----------------------------------------------------------

class SameParticipantError(DaybreakException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "SAME_PARTICIPANT"

    def __init__(self, user: str):
        super().__init__(
            message="User and challenger must be different individuals.",
            details={"user": user},
        )


class InvalidDateRangeError(DaybreakException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DATE_RANGE"

    def __init__(self, start_date: date, end_date: date):
        super().__init__(
            message=f"End date {end_date} is before start date {start_date}.",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )


class OverlappingCompetitionError(DaybreakException):
    http_status = status.HTTP_409_CONFLICT
    code = "COMPETITION_OVERLAP"

    def __init__(self, participant: str, competition_id: int):
        super().__init__(
            message="One of the users is already in a competition during this time period.",
            details={"participant": participant, "competition_id": competition_id},
        )


class NoMatchingCompetitionError(DaybreakException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NO_MATCHING_COMPETITION"

    def __init__(self, user: str, day: date):
        super().__init__(
            message=f"No valid competition found for user {user} on {day}.",
            details={"user": user, "date": str(day)},
        )


class UnknownEventKindError(DaybreakException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNKNOWN_EVENT_KIND"

    def __init__(self, event_kind: str, allowed: list[str]):
        super().__init__(
            message=f"Unrecognized event kind {event_kind!r}. Expected one of {allowed}.",
            details={"event": event_kind, "allowed": allowed},
        )


class CompetitionNotFoundError(DaybreakException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "COMPETITION_NOT_FOUND"

    def __init__(self, competition_id: int):
        super().__init__(
            message=f"Competition {competition_id} does not exist.",
            details={"competition_id": competition_id},
        )


# --- LLM output -------------------------------------------------------------

class LLMResponseParseError(DaybreakException):
    """The model answered, but no usable JSON object could be read from it."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "LLM_RESPONSE_UNPARSEABLE"

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(
            message=message,
            details={"raw_preview": raw[:500]} if raw else {},
        )


class SummaryValidationError(DaybreakException):
    """A generated competition summary disagrees with the recorded stats."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "SUMMARY_VALIDATION_FAILED"

    def __init__(
        self,
        reason: str,
        expected_user_total: int,
        expected_challenger_total: int,
    ):
        super().__init__(
            message=f"LLM output validation failed: {reason}",
            details={
                "reason": reason,
                "expected_user_total": expected_user_total,
                "expected_challenger_total": expected_challenger_total,
            },
        )


class LLMNotConfiguredError(DaybreakException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "LLM_NOT_CONFIGURED"

    def __init__(self):
        super().__init__(
            message="LLM_API_KEY is not configured. Set it in the environment or .env.",
        )


class LLMServiceError(DaybreakException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "LLM_SERVICE_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            details={"status_code": status_code} if status_code else {},
        )


# --- planner / student schedule --------------------------------------------

class ActivityNotFoundError(DaybreakException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ACTIVITY_NOT_FOUND"

    def __init__(self, title: str):
        super().__init__(
            message=f"Activity {title!r} is not in the planner.",
            details={"title": title},
        )


class DuplicateActivityError(DaybreakException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_ACTIVITY"

    def __init__(self, title: str):
        super().__init__(
            message=f"Activity {title!r} already exists.",
            details={"title": title},
        )


class InvalidTimeSlotError(DaybreakException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_TIME_SLOT"

    def __init__(self, slot: int, max_slot: int):
        super().__init__(
            message=f"Time slot {slot} is outside 0..{max_slot}.",
            details={"slot": slot, "max_slot": max_slot},
        )


class StudentDataError(DaybreakException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "STUDENT_DATA_INVALID"

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            message=message,
            details={"path": path} if path else {},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def daybreak_exception_handler(request: Request, exc: DaybreakException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
