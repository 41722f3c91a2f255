"""Leave router — apply, decide, and monthly summary."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.common.constants import LeaveStatus
from attendry.common.periods import parse_month
from attendry.database import get_db
from attendry.leave.schemas import (
    LeaveDecision,
    LeaveRequestCreate,
    LeaveRequestResponse,
    LeaveSummaryItem,
    LeaveSummaryResponse,
)
from attendry.leave.service import LeaveService

router = APIRouter(prefix="", tags=["leave"])


# ── POST /requests ──────────────────────────────────────────────────

@router.post(
    "/requests",
    response_model=LeaveRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_request(
    body: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """File a leave request (pending until decided)."""
    request = await LeaveService.submit_request(db, body)
    return LeaveRequestResponse.model_validate(request)


# ── POST /requests/{request_id}/decision ────────────────────────────

@router.post("/requests/{request_id}/decision", response_model=LeaveRequestResponse)
async def decide_request(
    request_id: uuid.UUID,
    body: LeaveDecision,
    db: AsyncSession = Depends(get_db),
):
    """Approve or deny a pending request."""
    request = await LeaveService.decide_request(db, request_id, LeaveStatus(body.decision))
    return LeaveRequestResponse.model_validate(request)


# ── GET /summary ────────────────────────────────────────────────────

@router.get("/summary", response_model=LeaveSummaryResponse)
async def month_summary(
    tenant_id: uuid.UUID = Query(...),
    month: str = Query(..., description="Reporting month, YYYY-MM"),
    employee_id: Optional[uuid.UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Approved leave days per employee, clipped to the month."""
    window = parse_month(month)
    aggregate = await LeaveService.aggregate_month(
        db, tenant_id, window, employee_id=employee_id,
    )
    return LeaveSummaryResponse(
        month=str(window),
        data=[
            LeaveSummaryItem(employee_id=emp_id, total_leave_days=days)
            for emp_id, days in sorted(aggregate.days_by_employee.items(), key=lambda kv: str(kv[0]))
        ],
    )
