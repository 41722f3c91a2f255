"""QR router — current shop token for the admin display."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.common.periods import utc_now
from attendry.database import get_db
from attendry.qr.schemas import QrTokenResponse
from attendry.qr.tokens import issue_token
from attendry.tenants.service import TenantService

router = APIRouter(prefix="", tags=["qr"])


# ── GET /{tenant_id}/token ──────────────────────────────────────────

@router.get("/{tenant_id}/token", response_model=QrTokenResponse)
async def current_token(
    tenant_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Issue the tenant's QR payload; dynamic tokens must be re-fetched every refresh."""
    tenant = await TenantService.get_tenant(db, tenant_id)
    now = utc_now()
    payload, refresh = issue_token(str(tenant.id), tenant.name, tenant.qr_mode, now=now)
    return QrTokenResponse(
        tenant_id=tenant.id,
        mode=tenant.qr_mode,
        payload=payload,
        issued_at=now,
        refresh_seconds=refresh,
    )
