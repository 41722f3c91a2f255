"""Reporting-period and tenant-clock helpers."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from attendry.common.constants import MONTH_FORMAT
from attendry.common.exceptions import ValidationException


@dataclass(frozen=True)
class MonthWindow:
    """Inclusive calendar-month window [start, end]."""

    year: int
    month: int

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __str__(self) -> str:
        return self.start.strftime(MONTH_FORMAT)


def parse_month(value: str) -> MonthWindow:
    """Parse a ``YYYY-MM`` string into a MonthWindow."""
    try:
        parsed = datetime.strptime(value, MONTH_FORMAT)
    except (TypeError, ValueError):
        raise ValidationException({"month": [f"'{value}' is not a YYYY-MM month."]})
    return MonthWindow(parsed.year, parsed.month)


def utc_now() -> datetime:
    """Current UTC instant. Wrapped so services can take an injected ``now``."""
    return datetime.now(timezone.utc)


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationException({"timezone": [f"Unknown timezone '{name}'."]})


def as_aware(value: datetime) -> datetime:
    """Treat naive datetimes read back from storage as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_now(tz: ZoneInfo, now: Optional[datetime] = None) -> datetime:
    """``now`` (default: current instant) expressed in the tenant's timezone."""
    return as_aware(now or utc_now()).astimezone(tz)
