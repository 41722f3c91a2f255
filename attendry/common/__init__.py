"""Common module — shared utilities for Attendry."""

from attendry.common.audit import AuditTrail, create_audit_entry, entries_for
from attendry.common.constants import (
    NOT_APPLICABLE,
    QR_FRESHNESS_SECONDS,
    QR_MARKER,
    QR_REFRESH_SECONDS,
    AttendanceSource,
    AttendanceStatus,
    DayState,
    EmploymentStatus,
    LeaveStatus,
    MusterSymbol,
    QrMode,
    ScanAction,
)
from attendry.common.exceptions import (
    AppException,
    ConflictError,
    DayAlreadyCompleteError,
    DuplicateScanError,
    EmployeeNotFoundError,
    MalformedTokenError,
    NotFoundException,
    QrTokenError,
    ScheduleNotFoundError,
    TokenExpiredError,
    ValidationException,
    WrongQrModeError,
    WrongTenantError,
    register_exception_handlers,
)
from attendry.common.periods import MonthWindow, parse_month

__all__ = [
    # Audit
    "AuditTrail",
    "create_audit_entry",
    "entries_for",
    # Constants / Enums
    "AttendanceSource",
    "AttendanceStatus",
    "DayState",
    "EmploymentStatus",
    "LeaveStatus",
    "MusterSymbol",
    "QrMode",
    "ScanAction",
    "NOT_APPLICABLE",
    "QR_FRESHNESS_SECONDS",
    "QR_MARKER",
    "QR_REFRESH_SECONDS",
    # Exceptions
    "AppException",
    "ConflictError",
    "DayAlreadyCompleteError",
    "DuplicateScanError",
    "EmployeeNotFoundError",
    "MalformedTokenError",
    "NotFoundException",
    "QrTokenError",
    "ScheduleNotFoundError",
    "TokenExpiredError",
    "ValidationException",
    "WrongQrModeError",
    "WrongTenantError",
    "register_exception_handlers",
    # Periods
    "MonthWindow",
    "parse_month",
]
