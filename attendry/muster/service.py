"""Muster service layer — loads the month and hands it to the builder."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from attendry.attendance.service import AttendanceService
from attendry.common.constants import EmploymentStatus
from attendry.common.periods import MonthWindow
from attendry.core_hr.service import EmployeeService
from attendry.leave.service import LeaveService
from attendry.muster.builder import build_muster
from attendry.muster.schemas import MusterResponse

logger = logging.getLogger(__name__)


class MusterService:

    @staticmethod
    async def get_muster(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        window: MonthWindow,
    ) -> MusterResponse:
        """Grid for active employees only. Read-only."""

        employees = await EmployeeService.list_employees(
            db, tenant_id, status=EmploymentStatus.active,
        )
        records = await AttendanceService.get_month_records(db, tenant_id, window)
        leave = await LeaveService.aggregate_month(db, tenant_id, window)

        rows = build_muster(employees, records, leave, window)
        logger.info("Built muster for tenant %s %s: %d rows", tenant_id, window, len(rows))
        return MusterResponse(
            month=str(window),
            days_in_month=window.days_in_month,
            data=rows,
        )
