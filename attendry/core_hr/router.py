"""Core HR router — points leaderboard."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.core_hr.schemas import LeaderboardResponse
from attendry.core_hr.service import EmployeeService
from attendry.database import get_db

router = APIRouter(prefix="", tags=["employees"])


# ── GET /leaderboard ────────────────────────────────────────────────

@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    tenant_id: uuid.UUID = Query(...),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Active employees of a tenant ranked by gamification points."""
    entries = await EmployeeService.leaderboard(db, tenant_id, limit=limit)
    return LeaderboardResponse(data=entries, total=len(entries))
