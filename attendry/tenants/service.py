"""Tenant service layer — schedule snapshots for the attendance engine.

The engine never reads ambient per-tenant state: every caller loads a
``ScheduleSnapshot`` once and passes it down.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendry.common.exceptions import NotFoundException, ScheduleNotFoundError
from attendry.common.periods import resolve_timezone
from attendry.config import settings
from attendry.tenants.models import BusinessHours, ScheduleConfig, Tenant
from attendry.tenants.schemas import (
    DayHours,
    ScheduleSnapshot,
    TenantCreate,
    default_business_hours,
)

logger = logging.getLogger(__name__)


class TenantService:
    """Read tenant rows and build immutable schedule snapshots."""

    @staticmethod
    async def get_tenant(db: AsyncSession, tenant_id: uuid.UUID) -> Tenant:
        tenant = await db.get(Tenant, tenant_id)
        if tenant is None:
            raise NotFoundException("Tenant", tenant_id)
        return tenant

    @staticmethod
    async def get_schedule(
        db: AsyncSession,
        tenant_id: uuid.UUID,
    ) -> ScheduleSnapshot:
        """Load the tenant's schedule; raise ScheduleNotFoundError when unset."""

        result = await db.execute(
            select(ScheduleConfig)
            .where(ScheduleConfig.tenant_id == tenant_id)
            .options(
                selectinload(ScheduleConfig.business_hours),
                selectinload(ScheduleConfig.tenant),
            )
        )
        config = result.scalars().first()
        if config is None or len(config.business_hours) != 7:
            logger.warning("Tenant %s has no complete schedule configured", tenant_id)
            raise ScheduleNotFoundError(tenant_id)

        tenant = config.tenant
        return ScheduleSnapshot(
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            timezone=tenant.timezone,
            qr_mode=tenant.qr_mode,
            grace_period_minutes=config.grace_period_minutes,
            monthly_paid_leave=config.monthly_paid_leave,
            business_hours=tuple(
                DayHours.model_validate(h) for h in config.business_hours
            ),
        )

    @staticmethod
    async def get_monthly_paid_leave(db: AsyncSession, tenant_id: uuid.UUID) -> int:
        """Paid-leave quota for payroll; falls back to the default when unset."""

        config = await db.get(ScheduleConfig, tenant_id)
        if config is None:
            logger.warning(
                "Tenant %s has no schedule; using default paid-leave quota %d",
                tenant_id,
                settings.DEFAULT_MONTHLY_PAID_LEAVE,
            )
            return settings.DEFAULT_MONTHLY_PAID_LEAVE
        return config.monthly_paid_leave

    @staticmethod
    async def create_tenant(db: AsyncSession, data: TenantCreate) -> Tenant:
        """Provision a tenant together with its schedule config and seven day rows."""

        tz_name = data.timezone or settings.DEFAULT_TIMEZONE
        resolve_timezone(tz_name)

        tenant = Tenant(name=data.name, qr_mode=data.qr_mode, timezone=tz_name)
        db.add(tenant)
        await db.flush()

        config = ScheduleConfig(
            tenant=tenant,
            grace_period_minutes=data.grace_period_minutes,
            monthly_paid_leave=data.monthly_paid_leave,
        )
        hours = data.business_hours or default_business_hours()
        config.business_hours = [
            BusinessHours(
                weekday=h.weekday,
                is_open=h.is_open,
                start_time=h.start_time,
                end_time=h.end_time,
            )
            for h in hours
        ]
        db.add(config)
        await db.flush()
        logger.info("Provisioned tenant %s (%s)", tenant.id, tenant.name)
        return tenant
