"""Core HR ORM models: Employee.

SQLAlchemy 2.0 async-compatible models with Mapped[] annotations.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from attendry.common.constants import EmploymentStatus
from attendry.database import Base


class Employee(Base):
    """Staff member of a tenant; carries salary and gamification balances."""

    __tablename__ = "employees"
    __table_args__ = (
        sa.CheckConstraint("points >= 0", name="ck_employee_points"),
        sa.CheckConstraint("streak >= 0", name="ck_employee_streak"),
        sa.Index("ix_employees_tenant_status", "tenant_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False,
    )
    name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    base_salary: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(12, 2))
    points: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    streak: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    status: Mapped[EmploymentStatus] = mapped_column(
        sa.Enum(EmploymentStatus, name="employment_status"),
        nullable=False,
        default=EmploymentStatus.active,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_payable(self) -> bool:
        return bool(self.base_salary)

    def __repr__(self) -> str:
        return f"<Employee {self.name!r} points={self.points} streak={self.streak}>"
