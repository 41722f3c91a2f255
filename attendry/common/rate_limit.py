"""Per-client rate limiting (slowapi).

The app-wide default comes from ``DEFAULT_RATE_LIMIT``; the scan endpoint
applies the stricter ``SCAN_RATE_LIMIT`` so a phone stuck re-submitting the
same QR frame is throttled before it reaches the database.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from attendry.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.DEFAULT_RATE_LIMIT],
)
