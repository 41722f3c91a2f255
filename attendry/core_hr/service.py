"""Core HR service layer — employee lookups and the points leaderboard."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.common.constants import EmploymentStatus
from attendry.common.exceptions import EmployeeNotFoundError
from attendry.core_hr.models import Employee
from attendry.core_hr.schemas import LeaderboardEntry

logger = logging.getLogger(__name__)


class EmployeeService:
    """Employee reads used by the attendance engine and report builders."""

    @staticmethod
    async def get_employee(
        db: AsyncSession,
        employee_id: uuid.UUID,
        *,
        for_update: bool = False,
    ) -> Employee:
        """Fetch one employee; ``for_update`` takes a row lock for the transaction."""

        stmt = select(Employee).where(Employee.id == employee_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        employee = result.scalars().first()
        if employee is None:
            logger.warning("Employee %s not found", employee_id)
            raise EmployeeNotFoundError(employee_id)
        return employee

    @staticmethod
    async def list_employees(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        *,
        status: Optional[EmploymentStatus] = None,
    ) -> list[Employee]:
        stmt = select(Employee).where(Employee.tenant_id == tenant_id)
        if status is not None:
            stmt = stmt.where(Employee.status == status)
        stmt = stmt.order_by(Employee.name, Employee.id)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def leaderboard(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        *,
        limit: int = 50,
    ) -> list[LeaderboardEntry]:
        """Active employees ranked by points, highest first."""

        result = await db.execute(
            select(Employee)
            .where(
                Employee.tenant_id == tenant_id,
                Employee.status == EmploymentStatus.active,
            )
            .order_by(Employee.points.desc(), Employee.name)
            .limit(limit)
        )
        return [
            LeaderboardEntry(
                rank=rank,
                id=emp.id,
                name=emp.name,
                points=emp.points,
                streak=emp.streak,
            )
            for rank, emp in enumerate(result.scalars().all(), start=1)
        ]
