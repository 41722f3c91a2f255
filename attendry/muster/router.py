"""Muster router."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.common.periods import parse_month
from attendry.database import get_db
from attendry.muster.schemas import MusterResponse
from attendry.muster.service import MusterService

router = APIRouter(prefix="", tags=["muster"])


@router.get("", response_model=MusterResponse)
async def get_muster(
    tenant_id: uuid.UUID = Query(...),
    month: str = Query(..., description="Muster month, YYYY-MM"),
    db: AsyncSession = Depends(get_db),
):
    """Day-by-day P/A/H/L grid for active employees."""
    return await MusterService.get_muster(db, tenant_id, parse_month(month))
