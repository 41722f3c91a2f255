"""Payroll ORM models: PayrollAdjustment.

SQLAlchemy 2.0 async-compatible models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from attendry.database import Base


class PayrollAdjustment(Base):
    """Manual bonus / advance overrides for one employee-month."""

    __tablename__ = "payroll_adjustments"
    __table_args__ = (
        sa.UniqueConstraint(
            "employee_id", "year", "month", name="uq_payroll_adjustment_emp_month"
        ),
        sa.CheckConstraint("bonus >= 0", name="ck_payroll_adjustment_bonus"),
        sa.CheckConstraint("advances >= 0", name="ck_payroll_adjustment_advances"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False,
    )
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    month: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    bonus: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False, default=0)
    advances: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<PayrollAdjustment {self.employee_id} {self.year}-{self.month:02d} "
            f"bonus={self.bonus} advances={self.advances}>"
        )
