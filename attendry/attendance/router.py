"""Attendance router — QR scan, day state, manual entry, forced checkout."""

import uuid

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.attendance.schemas import (
    AttendanceHistoryResponse,
    AttendanceRecordResponse,
    DayStateResponse,
    ManualAttendanceCreate,
    ScanRequest,
    ScanResponse,
)
from attendry.attendance.service import AttendanceService
from attendry.common.periods import parse_month
from attendry.common.rate_limit import limiter
from attendry.config import settings
from attendry.database import get_db

router = APIRouter(prefix="", tags=["attendance"])


# ── POST /scan ──────────────────────────────────────────────────────

@router.post("/scan", response_model=ScanResponse)
@limiter.limit(settings.SCAN_RATE_LIMIT)
async def scan(
    body: ScanRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Check the employee in or out from a scanned shop QR code."""
    return await AttendanceService.scan_qr(db, body.token, body.employee_id)


# ── GET /day-state/{employee_id} ────────────────────────────────────

@router.get("/day-state/{employee_id}", response_model=DayStateResponse)
async def day_state(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Whether the employee has not started, is checked in, or has finished today."""
    return await AttendanceService.get_day_state(db, employee_id)


# ── GET /history/{employee_id} ──────────────────────────────────────

@router.get("/history/{employee_id}", response_model=AttendanceHistoryResponse)
async def history(
    employee_id: uuid.UUID,
    month: str = Query(..., description="Reporting month, YYYY-MM"),
    db: AsyncSession = Depends(get_db),
):
    """Monthly attendance history for one employee, newest first."""
    return await AttendanceService.get_history(db, employee_id, parse_month(month))


# ── POST /manual ────────────────────────────────────────────────────

@router.post(
    "/manual",
    response_model=AttendanceRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def manual_entry(
    body: ManualAttendanceCreate,
    db: AsyncSession = Depends(get_db),
):
    """Administrative record entry; does not affect points or streak."""
    return await AttendanceService.record_manual_attendance(db, body)


# ── POST /{record_id}/force-checkout ────────────────────────────────

@router.post("/{record_id}/force-checkout", response_model=AttendanceRecordResponse)
async def force_checkout(
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Close an open record on the employee's behalf."""
    return await AttendanceService.force_checkout(db, record_id)
