"""Payroll router — month computation and manual overrides."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.common.periods import parse_month
from attendry.database import get_db
from attendry.payroll.schemas import (
    PayrollAdjustmentResponse,
    PayrollAdjustmentUpdate,
    PayrollResponse,
)
from attendry.payroll.service import PayrollService

router = APIRouter(prefix="", tags=["payroll"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=PayrollResponse)
async def compute_payroll(
    tenant_id: uuid.UUID = Query(...),
    month: str = Query(..., description="Payroll month, YYYY-MM"),
    db: AsyncSession = Depends(get_db),
):
    """Payroll lines for every employee of the tenant. Read-only."""
    return await PayrollService.compute_payroll(db, tenant_id, parse_month(month))


# ── PUT /adjustments ────────────────────────────────────────────────

@router.put("/adjustments", response_model=PayrollAdjustmentResponse)
async def set_adjustment(
    body: PayrollAdjustmentUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Set bonus and advances for one employee-month."""
    return await PayrollService.set_adjustment(db, body)
