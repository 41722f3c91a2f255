"""Payroll service layer — month snapshot and manual overrides.

Business logic:
  - ``compute_payroll`` is a read: it loads the month once per source
    (employees, attendance, approved leave, quota, overrides) and calls the
    pure calculator per employee
  - A failing employee yields an excluded line; the batch always completes
  - ``set_adjustment`` upserts bonus/advances for one employee-month
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.attendance.service import AttendanceService
from attendry.common.audit import create_audit_entry
from attendry.common.constants import AttendanceStatus
from attendry.common.exceptions import ValidationException
from attendry.common.periods import MonthWindow, parse_month
from attendry.core_hr.service import EmployeeService
from attendry.leave.service import LeaveService
from attendry.payroll.calculator import calculate_line, excluded_line
from attendry.payroll.models import PayrollAdjustment
from attendry.payroll.schemas import (
    ZERO,
    PayrollAdjustmentResponse,
    PayrollAdjustmentUpdate,
    PayrollLine,
    PayrollResponse,
)
from attendry.tenants.service import TenantService

logger = logging.getLogger(__name__)


class PayrollService:
    """Async payroll reads and adjustment writes."""

    @staticmethod
    async def _adjustments_for_month(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        window: MonthWindow,
    ) -> dict[uuid.UUID, PayrollAdjustment]:
        result = await db.execute(
            select(PayrollAdjustment).where(
                PayrollAdjustment.tenant_id == tenant_id,
                PayrollAdjustment.year == window.year,
                PayrollAdjustment.month == window.month,
            )
        )
        return {adj.employee_id: adj for adj in result.scalars().all()}

    @staticmethod
    async def compute_payroll(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        window: MonthWindow,
    ) -> PayrollResponse:
        """One line per tenant employee for the month; no writes."""

        employees = await EmployeeService.list_employees(db, tenant_id)
        records = await AttendanceService.get_month_records(db, tenant_id, window)
        leave = await LeaveService.aggregate_month(db, tenant_id, window)
        quota = await TenantService.get_monthly_paid_leave(db, tenant_id)
        adjustments = await PayrollService._adjustments_for_month(db, tenant_id, window)

        statuses: dict[uuid.UUID, list[AttendanceStatus]] = defaultdict(list)
        for record in records:
            statuses[record.employee_id].append(record.status)

        lines: list[PayrollLine] = []
        for employee in employees:
            adjustment = adjustments.get(employee.id)
            try:
                line = calculate_line(
                    employee_id=employee.id,
                    employee_name=employee.name,
                    base_salary=employee.base_salary,
                    days_in_month=window.days_in_month,
                    statuses=statuses.get(employee.id, []),
                    total_leave_days=leave.total_for(employee.id),
                    monthly_paid_leave=quota,
                    bonus=adjustment.bonus if adjustment else ZERO,
                    advances=adjustment.advances if adjustment else ZERO,
                )
            except (ArithmeticError, ValueError):
                logger.exception(
                    "Payroll failed for employee %s in %s; excluding", employee.id, window,
                )
                line = excluded_line(employee.id, employee.name, window.days_in_month)
            lines.append(line)

        total: Decimal = sum(
            (line.final_salary for line in lines if line.is_payable), ZERO,
        )
        logger.info(
            "Computed payroll for tenant %s %s: %d lines", tenant_id, window, len(lines),
        )
        return PayrollResponse(month=str(window), data=lines, total_payable=total)

    @staticmethod
    async def set_adjustment(
        db: AsyncSession,
        data: PayrollAdjustmentUpdate,
    ) -> PayrollAdjustmentResponse:
        """Upsert bonus/advances and return the re-derived line."""

        window = parse_month(data.month)
        employee = await EmployeeService.get_employee(db, data.employee_id)
        if employee.tenant_id != data.tenant_id:
            raise ValidationException(
                {"employee_id": ["Employee does not belong to this tenant."]}
            )
        if not employee.is_payable:
            raise ValidationException(
                {"employee_id": ["Employee has no base salary; payroll is N/A."]}
            )

        result = await db.execute(
            select(PayrollAdjustment).where(
                PayrollAdjustment.employee_id == employee.id,
                PayrollAdjustment.year == window.year,
                PayrollAdjustment.month == window.month,
            )
        )
        adjustment = result.scalars().first()
        old_values = None
        if adjustment is None:
            adjustment = PayrollAdjustment(
                tenant_id=employee.tenant_id,
                employee_id=employee.id,
                year=window.year,
                month=window.month,
            )
            db.add(adjustment)
        else:
            old_values = {
                "bonus": str(adjustment.bonus),
                "advances": str(adjustment.advances),
            }
        adjustment.bonus = data.bonus
        adjustment.advances = data.advances
        await db.flush()

        await create_audit_entry(
            db,
            action="payroll_adjustment",
            entity_type="payroll_adjustment",
            entity_id=adjustment.id,
            tenant_id=employee.tenant_id,
            old_values=old_values,
            new_values={"bonus": str(data.bonus), "advances": str(data.advances)},
        )
        logger.info(
            "Payroll adjustment for employee %s %s: bonus=%s advances=%s",
            employee.id, window, data.bonus, data.advances,
        )

        payroll = await PayrollService.compute_payroll(db, employee.tenant_id, window)
        line = next(
            (row for row in payroll.data if row.employee_id == employee.id), None,
        )

        response = PayrollAdjustmentResponse.model_validate(adjustment)
        return response.model_copy(update={"line": line})
