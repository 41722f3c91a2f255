"""Tenants router — provisioning and schedule snapshot."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.database import get_db
from attendry.tenants.schemas import ScheduleSnapshot, TenantCreate
from attendry.tenants.service import TenantService

router = APIRouter(prefix="", tags=["tenants"])


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=ScheduleSnapshot, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    body: TenantCreate,
    db: AsyncSession = Depends(get_db),
):
    """Provision a tenant with its schedule; returns the resulting snapshot."""
    tenant = await TenantService.create_tenant(db, body)
    return await TenantService.get_schedule(db, tenant.id)


# ── GET /{tenant_id}/schedule ───────────────────────────────────────

@router.get("/{tenant_id}/schedule", response_model=ScheduleSnapshot)
async def get_schedule(
    tenant_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await TenantService.get_schedule(db, tenant_id)
