"""Enums and constants for Attendry — matching PostgreSQL ENUM types."""

from __future__ import annotations

import enum


# ── Employee ────────────────────────────────────────────────────────

class EmploymentStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


# ── Tenant / QR ─────────────────────────────────────────────────────

class QrMode(str, enum.Enum):
    permanent = "permanent"
    dynamic = "dynamic"


# ── Attendance ──────────────────────────────────────────────────────

class AttendanceStatus(str, enum.Enum):
    on_time = "on_time"
    late = "late"
    half_day = "half_day"
    manual = "manual"
    absent = "absent"


class AttendanceSource(str, enum.Enum):
    scan = "scan"
    manual = "manual"


class DayState(str, enum.Enum):
    not_started = "not_started"
    open = "open"
    closed = "closed"


class ScanAction(str, enum.Enum):
    checked_in = "checked_in"
    checked_out = "checked_out"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    denied = "denied"


# ── Muster roll ─────────────────────────────────────────────────────

class MusterSymbol(str, enum.Enum):
    leave = "L"
    half_day = "H"
    present = "P"
    absent = "A"


# ── QR token contract ───────────────────────────────────────────────

QR_MARKER = "attendry-shop-qr"
QR_REFRESH_SECONDS = 15
QR_FRESHNESS_SECONDS = 20          # one refresh interval + 5s skew buffer

# ── Gamification ────────────────────────────────────────────────────

ON_TIME_POINTS = 10
LATE_PENALTY_POINTS = 5
STREAK_BONUS_EVERY = 5
STREAK_BONUS_POINTS = 50

# ── Schedule defaults ───────────────────────────────────────────────

DEFAULT_GRACE_PERIOD_MINUTES = 15

# ── Misc constants ──────────────────────────────────────────────────

MONTH_FORMAT = "%Y-%m"
NOT_APPLICABLE = "N/A"
