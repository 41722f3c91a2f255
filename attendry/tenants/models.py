"""Tenant ORM models: Tenant, ScheduleConfig, BusinessHours."""

from __future__ import annotations

import uuid
from datetime import datetime, time, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from attendry.common.constants import DEFAULT_GRACE_PERIOD_MINUTES, QrMode
from attendry.database import Base


class Tenant(Base):
    """One shop / business account; every other entity is scoped to it."""

    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    qr_mode: Mapped[QrMode] = mapped_column(
        sa.Enum(QrMode, name="qr_mode"),
        nullable=False,
        default=QrMode.permanent,
    )
    timezone: Mapped[str] = mapped_column(
        sa.String(50), nullable=False, default="Asia/Kolkata",
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    schedule: Mapped[Optional[ScheduleConfig]] = relationship(
        back_populates="tenant", uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Tenant {self.name!r}>"


class ScheduleConfig(Base):
    """Per-tenant singleton: grace period and monthly paid-leave quota."""

    __tablename__ = "schedule_configs"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("tenants.id", ondelete="CASCADE"),
        primary_key=True,
    )
    grace_period_minutes: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=DEFAULT_GRACE_PERIOD_MINUTES,
    )
    monthly_paid_leave: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=4,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.CheckConstraint("grace_period_minutes >= 0", name="ck_schedule_grace"),
        sa.CheckConstraint("monthly_paid_leave >= 0", name="ck_schedule_paid_leave"),
    )

    # Relationships
    tenant: Mapped[Tenant] = relationship(back_populates="schedule")
    business_hours: Mapped[list[BusinessHours]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="BusinessHours.weekday",
    )


class BusinessHours(Base):
    """Opening hours for one weekday (0 = Monday … 6 = Sunday)."""

    __tablename__ = "business_hours"
    __table_args__ = (
        sa.UniqueConstraint("tenant_id", "weekday", name="uq_business_hours_day"),
        sa.CheckConstraint("weekday BETWEEN 0 AND 6", name="ck_business_hours_weekday"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("schedule_configs.tenant_id", ondelete="CASCADE"),
        nullable=False,
    )
    weekday: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    is_open: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    start_time: Mapped[time] = mapped_column(sa.Time, nullable=False)
    end_time: Mapped[time] = mapped_column(sa.Time, nullable=False)

    # Relationships
    schedule: Mapped[ScheduleConfig] = relationship(back_populates="business_hours")
