"""QR Pydantic v2 schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from attendry.common.constants import QrMode


class QrTokenResponse(BaseModel):
    """Payload to render as a QR image on the shop screen."""

    tenant_id: uuid.UUID
    mode: QrMode
    payload: str
    issued_at: datetime
    refresh_seconds: Optional[int] = None
