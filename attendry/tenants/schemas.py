"""Schedule snapshot schemas — immutable inputs to the attendance engine."""

import uuid
from datetime import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from attendry.common.constants import QrMode


class DayHours(BaseModel):
    """Opening hours for a single weekday."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    weekday: int = Field(..., ge=0, le=6)
    is_open: bool = True
    start_time: time
    end_time: time


def _check_full_week(hours) -> None:
    if sorted(h.weekday for h in hours) != list(range(7)):
        raise ValueError("business_hours must hold exactly one entry per weekday")


class ScheduleSnapshot(BaseModel):
    """Point-in-time copy of a tenant's schedule, passed explicitly to the engine."""

    model_config = ConfigDict(frozen=True)

    tenant_id: uuid.UUID
    tenant_name: str
    timezone: str
    qr_mode: QrMode = QrMode.permanent
    grace_period_minutes: int = Field(0, ge=0)
    monthly_paid_leave: int = Field(0, ge=0)
    business_hours: tuple[DayHours, ...]

    @model_validator(mode="after")
    def _one_entry_per_weekday(self) -> "ScheduleSnapshot":
        _check_full_week(self.business_hours)
        return self

    def hours_for(self, weekday: int) -> DayHours:
        for hours in self.business_hours:
            if hours.weekday == weekday:
                return hours
        raise KeyError(weekday)


def default_business_hours() -> list[DayHours]:
    """Mon–Fri 09:00–17:00 open; Sat/Sun 10:00–14:00 closed."""
    hours = []
    for weekday in range(7):
        weekend = weekday >= 5
        hours.append(
            DayHours(
                weekday=weekday,
                is_open=not weekend,
                start_time=time(10, 0) if weekend else time(9, 0),
                end_time=time(14, 0) if weekend else time(17, 0),
            )
        )
    return hours


class TenantCreate(BaseModel):
    """Payload for provisioning a tenant with its schedule."""

    name: str = Field(..., min_length=1, max_length=150)
    qr_mode: QrMode = QrMode.permanent
    timezone: Optional[str] = None
    grace_period_minutes: int = Field(15, ge=0)
    monthly_paid_leave: int = Field(4, ge=0)
    business_hours: Optional[list[DayHours]] = None

    @model_validator(mode="after")
    def _full_week_when_given(self) -> "TenantCreate":
        if self.business_hours is not None:
            _check_full_week(self.business_hours)
        return self
