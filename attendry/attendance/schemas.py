"""Attendance Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Request  → request bodies (write)
  - *Response           → response bodies (read)
"""


import uuid
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from attendry.common.constants import (
    AttendanceSource,
    AttendanceStatus,
    DayState,
    ScanAction,
)


# ═════════════════════════════════════════════════════════════════════
# Attendance record
# ═════════════════════════════════════════════════════════════════════


class AttendanceRecordResponse(BaseModel):
    """Single attendance record for a day."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    tenant_id: uuid.UUID
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus
    source: AttendanceSource = AttendanceSource.scan
    reason: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# QR scan
# ═════════════════════════════════════════════════════════════════════


class ScanRequest(BaseModel):
    """A scanned QR payload from an employee's device."""

    employee_id: uuid.UUID
    token: str = Field(..., min_length=1, max_length=1000)


class ScanResponse(BaseModel):
    """Outcome of an accepted scan."""

    action: ScanAction
    record: AttendanceRecordResponse
    points: int
    streak: int
    points_delta: int = 0
    bonus_awarded: bool = False


class DayStateResponse(BaseModel):
    """Where an employee stands for today: not started, open or closed."""

    employee_id: uuid.UUID
    work_date: date
    state: DayState
    record: Optional[AttendanceRecordResponse] = None


# ═════════════════════════════════════════════════════════════════════
# Administrative entry
# ═════════════════════════════════════════════════════════════════════


class ManualAttendanceCreate(BaseModel):
    """Admin-entered record; times are tenant-local wall-clock times on work_date."""

    employee_id: uuid.UUID
    work_date: date
    check_in: time
    check_out: Optional[time] = None
    status: AttendanceStatus = AttendanceStatus.manual
    reason: Optional[str] = Field(None, max_length=500)


# ═════════════════════════════════════════════════════════════════════
# History
# ═════════════════════════════════════════════════════════════════════


class AttendanceHistoryResponse(BaseModel):
    """One employee's records for a month, newest first, with status tallies."""

    employee_id: uuid.UUID
    month: str
    records: list[AttendanceRecordResponse]
    on_time_count: int = 0
    late_count: int = 0
    half_day_count: int = 0
