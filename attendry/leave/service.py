"""Leave service layer — request workflow and monthly aggregation.

Aggregation clips each approved request to the reporting window and counts
inclusive calendar days. A partial-day request counts as one whole day.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.common.constants import LeaveStatus
from attendry.common.exceptions import ConflictError, NotFoundException, ValidationException
from attendry.common.periods import MonthWindow, utc_now
from attendry.core_hr.service import EmployeeService
from attendry.leave.models import LeaveRequest
from attendry.leave.schemas import LeaveRequestCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaveAggregate:
    """Per-employee day totals plus the exact covered (employee, date) pairs."""

    days_by_employee: dict[uuid.UUID, int]
    covered_days: frozenset[tuple[uuid.UUID, date]]

    def total_for(self, employee_id: uuid.UUID) -> int:
        return self.days_by_employee.get(employee_id, 0)

    def is_on_leave(self, employee_id: uuid.UUID, day: date) -> bool:
        return (employee_id, day) in self.covered_days


# ── Pure aggregation ────────────────────────────────────────────────

def clip_to_window(
    start: date,
    end: date,
    window_start: date,
    window_end: date,
) -> Optional[tuple[date, date]]:
    """Intersect [start, end] with the window; None when they don't overlap."""

    effective_start = max(start, window_start)
    effective_end = min(end, window_end)
    if effective_start > effective_end:
        return None
    return effective_start, effective_end


def aggregate_leave(
    requests: Iterable[LeaveRequest],
    window_start: date,
    window_end: date,
) -> LeaveAggregate:
    """Sum approved leave per employee inside the window.

    Overlapping requests for the same employee are summed as-is for the day
    count; the covered-day set naturally de-duplicates them.
    """
    days: dict[uuid.UUID, int] = defaultdict(int)
    covered: set[tuple[uuid.UUID, date]] = set()

    for request in requests:
        if request.status != LeaveStatus.approved:
            continue
        clipped = clip_to_window(request.start_date, request.end_date, window_start, window_end)
        if clipped is None:
            continue
        effective_start, effective_end = clipped
        days[request.employee_id] += (effective_end - effective_start).days + 1

        current = effective_start
        while current <= effective_end:
            covered.add((request.employee_id, current))
            current += timedelta(days=1)

    return LeaveAggregate(days_by_employee=dict(days), covered_days=frozenset(covered))


# ═════════════════════════════════════════════════════════════════════
# LeaveService
# ═════════════════════════════════════════════════════════════════════


class LeaveService:
    """Leave request workflow and month aggregation over storage."""

    @staticmethod
    async def get_approved_overlapping(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        window: MonthWindow,
        *,
        employee_id: Optional[uuid.UUID] = None,
    ) -> list[LeaveRequest]:
        stmt = select(LeaveRequest).where(
            LeaveRequest.tenant_id == tenant_id,
            LeaveRequest.status == LeaveStatus.approved,
            LeaveRequest.start_date <= window.end,
            LeaveRequest.end_date >= window.start,
        )
        if employee_id is not None:
            stmt = stmt.where(LeaveRequest.employee_id == employee_id)
        result = await db.execute(stmt.order_by(LeaveRequest.start_date))
        return list(result.scalars().all())

    @staticmethod
    async def aggregate_month(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        window: MonthWindow,
        *,
        employee_id: Optional[uuid.UUID] = None,
    ) -> LeaveAggregate:
        requests = await LeaveService.get_approved_overlapping(
            db, tenant_id, window, employee_id=employee_id,
        )
        return aggregate_leave(requests, window.start, window.end)

    # ── Workflow ────────────────────────────────────────────────────

    @staticmethod
    async def submit_request(
        db: AsyncSession,
        data: LeaveRequestCreate,
    ) -> LeaveRequest:
        """File a pending leave request after date/time sanity checks."""

        errors: dict[str, list[str]] = {}
        if data.end_date < data.start_date:
            errors["end_date"] = ["end_date must be on or after start_date."]
        if (data.start_time is None) != (data.end_time is None):
            errors["end_time"] = ["Partial-day leave needs both start_time and end_time."]
        elif data.start_time is not None:
            if data.start_date != data.end_date:
                errors["end_date"] = ["Partial-day leave must start and end on the same date."]
            if data.end_time <= data.start_time:
                errors["end_time"] = ["end_time must be after start_time."]
        if errors:
            raise ValidationException(errors)

        employee = await EmployeeService.get_employee(db, data.employee_id)
        request = LeaveRequest(
            employee_id=employee.id,
            tenant_id=employee.tenant_id,
            start_date=data.start_date,
            end_date=data.end_date,
            start_time=data.start_time,
            end_time=data.end_time,
            reason=data.reason,
            status=LeaveStatus.pending,
        )
        db.add(request)
        await db.flush()
        logger.info(
            "Leave request %s filed for employee %s (%s → %s)",
            request.id, employee.id, data.start_date, data.end_date,
        )
        return request

    @staticmethod
    async def decide_request(
        db: AsyncSession,
        request_id: uuid.UUID,
        decision: LeaveStatus,
    ) -> LeaveRequest:
        """Move a pending request to approved or denied."""

        if decision not in (LeaveStatus.approved, LeaveStatus.denied):
            raise ValidationException({"decision": ["Must be approved or denied."]})

        request = await db.get(LeaveRequest, request_id)
        if request is None:
            raise NotFoundException("LeaveRequest", request_id)
        if request.status != LeaveStatus.pending:
            raise ConflictError("status", request.status.value)

        request.status = decision
        request.decided_at = utc_now()
        await db.flush()
        logger.info("Leave request %s %s", request.id, decision.value)
        return request
