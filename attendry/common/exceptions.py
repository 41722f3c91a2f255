"""Domain exceptions and their RFC 7807 Problem Detail rendering.

Every rejection the engine can produce is an ``AppException`` subclass that
declares its HTTP status, problem ``type`` slug and title as class attributes.
Services raise them; the handlers registered in main.py turn them into
``application/problem+json`` responses.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://attendry.app/errors"
PROBLEM_JSON = "application/problem+json"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    status_code: int = 500
    error_type: str = "internal-error"
    title: str = "Internal Error"
    default_detail: str = "The request could not be processed."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.detail = detail or self.default_detail
        self.errors = errors
        super().__init__(self.detail)


class NotFoundException(AppException):
    status_code = 404
    error_type = "not-found"
    title = "Not Found"

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' does not exist.")


class ConflictError(AppException):
    """409 — the entity is not in a state that allows the change."""

    status_code = 409
    error_type = "conflict"
    title = "Conflict"

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            f"Cannot change {field} from '{value}'.",
            errors={field: [str(value)]},
        )


class ValidationException(AppException):
    """422 — business-rule validation failures, keyed by field."""

    status_code = 422
    error_type = "validation-error"
    title = "Validation Error"
    default_detail = "One or more fields failed validation."

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(errors=errors)


# ── Configuration errors ────────────────────────────────────────────

class EmployeeNotFoundError(NotFoundException):
    error_type = "employee-not-found"
    title = "Employee Not Found"

    def __init__(self, employee_id: Any) -> None:
        super().__init__("Employee", employee_id)


class ScheduleNotFoundError(NotFoundException):
    error_type = "schedule-not-found"
    title = "Schedule Not Configured"

    def __init__(self, tenant_id: Any) -> None:
        super().__init__("ScheduleConfig", tenant_id)


# ── QR token errors (never retryable with the same token) ──────────

class QrTokenError(AppException):
    """Base for rejected scans; the client must re-scan a fresh code."""

    status_code = 400
    error_type = "invalid-token"
    title = "Invalid QR Code"


class MalformedTokenError(QrTokenError):
    error_type = "malformed-token"
    title = "Malformed QR Code"


class WrongTenantError(QrTokenError):
    status_code = 403
    error_type = "wrong-tenant"
    title = "Wrong Shop"
    default_detail = "This QR code does not belong to your assigned shop."


class WrongQrModeError(QrTokenError):
    error_type = "expired-or-wrong-mode-token"
    title = "Dynamic QR Code Expected"
    default_detail = "Please scan the QR code currently displayed on the shop screen."


class TokenExpiredError(QrTokenError):
    status_code = 410
    error_type = "token-expired"
    title = "QR Code Expired"

    def __init__(self, age_seconds: float) -> None:
        self.age_seconds = age_seconds
        super().__init__(
            f"This QR code is {age_seconds:.1f}s old. Please scan the current one."
        )


# ── Attendance state errors ─────────────────────────────────────────

class DayAlreadyCompleteError(AppException):
    status_code = 409
    error_type = "day-already-complete"
    title = "Already Checked Out"

    def __init__(self, day: Any) -> None:
        self.day = day
        super().__init__(f"You have already checked in and out for {day}.")


class DuplicateScanError(AppException):
    """Lost the race against a concurrent scan for the same employee/day."""

    status_code = 409
    error_type = "duplicate-scan"
    title = "Duplicate Scan"

    def __init__(self, day: Any) -> None:
        self.day = day
        super().__init__(f"A check-in for {day} was recorded by a concurrent scan.")


# ── RFC 7807 rendering ──────────────────────────────────────────────

def _problem(
    request: Request,
    *,
    status_code: int,
    error_type: str,
    title: str,
    detail: str,
    errors: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{error_type}",
        "title": title,
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
    }
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body, media_type=PROBLEM_JSON)


async def _handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    logger.info(
        "%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.error_type,
    )
    return _problem(
        request,
        status_code=exc.status_code,
        error_type=exc.error_type,
        title=exc.title,
        detail=exc.detail,
        errors=exc.errors,
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        # Drop the leading "body" / "query" segment
        loc = [str(part) for part in err.get("loc", ())]
        name = ".".join(loc[1:]) if len(loc) > 1 else (loc[0] if loc else "unknown")
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return _problem(
        request,
        status_code=422,
        error_type=ValidationException.error_type,
        title=ValidationException.title,
        detail="Request validation failed.",
        errors=field_errors,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the problem-detail handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
