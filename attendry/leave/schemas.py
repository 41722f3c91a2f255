"""Leave Pydantic v2 schemas — request / response validation."""

import uuid
from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from attendry.common.constants import LeaveStatus


class LeaveRequestCreate(BaseModel):
    """Employee leave application. Partial-day leave sets both times on a single date."""

    employee_id: uuid.UUID
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    reason: str = Field(..., min_length=3, max_length=500)


class LeaveDecision(BaseModel):
    decision: Literal["approved", "denied"]


class LeaveRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    tenant_id: uuid.UUID
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    reason: str
    status: LeaveStatus
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class LeaveSummaryItem(BaseModel):
    employee_id: uuid.UUID
    total_leave_days: int


class LeaveSummaryResponse(BaseModel):
    """Approved leave days per employee, clipped to the month."""

    month: str
    data: List[LeaveSummaryItem]
