"""QR token codec and validator.

Payload: ``attendry-shop-qr;tenantId=<id>;tenantName=<name>[;ts=<millis>]``.
Values are percent-encoded so tenant names may contain ``;`` or ``=``.
Validation is pure: it reads no storage and writes nothing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import quote, unquote

from attendry.common.constants import (
    QR_FRESHNESS_SECONDS,
    QR_MARKER,
    QR_REFRESH_SECONDS,
    QrMode,
)
from attendry.common.exceptions import (
    MalformedTokenError,
    TokenExpiredError,
    WrongQrModeError,
    WrongTenantError,
)
from attendry.common.periods import as_aware, utc_now

FIELD_TENANT_ID = "tenantId"
FIELD_TENANT_NAME = "tenantName"
FIELD_TIMESTAMP = "ts"


@dataclass(frozen=True)
class QrToken:
    tenant_id: str
    tenant_name: str
    issued_at_millis: Optional[int] = None

    @property
    def mode(self) -> QrMode:
        return QrMode.permanent if self.issued_at_millis is None else QrMode.dynamic


def to_millis(moment: datetime) -> int:
    return int(as_aware(moment).timestamp() * 1000)


def parse_token(raw: str) -> QrToken:
    """Decode a scanned payload; raise MalformedTokenError on any format problem."""

    if not raw:
        raise MalformedTokenError("Empty QR code.")
    parts = raw.strip().split(";")
    if parts[0] != QR_MARKER or len(parts) < 2:
        raise MalformedTokenError("Invalid QR code format.")

    fields: dict[str, str] = {}
    for part in parts[1:]:
        key, sep, value = part.partition("=")
        if not sep or not key:
            raise MalformedTokenError(f"Invalid QR field '{part}'.")
        fields[key] = unquote(value)

    tenant_id = fields.get(FIELD_TENANT_ID)
    tenant_name = fields.get(FIELD_TENANT_NAME)
    if not tenant_id or tenant_name is None:
        raise MalformedTokenError("QR code is missing the shop identity.")

    issued_at = None
    if FIELD_TIMESTAMP in fields:
        try:
            issued_at = int(fields[FIELD_TIMESTAMP])
        except ValueError:
            raise MalformedTokenError("QR timestamp is not an integer.")

    return QrToken(tenant_id=tenant_id, tenant_name=tenant_name, issued_at_millis=issued_at)


def validate_token(
    raw: str,
    *,
    employee_tenant_id: uuid.UUID,
    tenant_mode: QrMode,
    now: Optional[datetime] = None,
) -> QrToken:
    """Apply the scan rules in order: format, tenant, then dynamic freshness."""

    token = parse_token(raw)

    try:
        token_tenant = uuid.UUID(token.tenant_id)
    except ValueError:
        raise MalformedTokenError("QR code carries an invalid shop id.")

    if token_tenant != employee_tenant_id:
        raise WrongTenantError()

    if tenant_mode == QrMode.dynamic:
        if token.issued_at_millis is None:
            raise WrongQrModeError()
        age_seconds = (to_millis(now or utc_now()) - token.issued_at_millis) / 1000
        if age_seconds > QR_FRESHNESS_SECONDS:
            raise TokenExpiredError(age_seconds)

    return token


def encode_token(token: QrToken) -> str:
    fields = [
        QR_MARKER,
        f"{FIELD_TENANT_ID}={quote(token.tenant_id, safe='')}",
        f"{FIELD_TENANT_NAME}={quote(token.tenant_name, safe='')}",
    ]
    if token.issued_at_millis is not None:
        fields.append(f"{FIELD_TIMESTAMP}={token.issued_at_millis}")
    return ";".join(fields)


def issue_token(
    tenant_id: str,
    tenant_name: str,
    mode: QrMode,
    *,
    now: Optional[datetime] = None,
) -> tuple[str, Optional[int]]:
    """Build the payload the shop screen renders.

    Returns ``(payload, refresh_seconds)``; permanent codes never refresh.
    """
    if mode == QrMode.dynamic:
        token = QrToken(str(tenant_id), tenant_name, to_millis(now or utc_now()))
        return encode_token(token), QR_REFRESH_SECONDS
    return encode_token(QrToken(str(tenant_id), tenant_name)), None
