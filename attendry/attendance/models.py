"""Attendance ORM models: AttendanceRecord."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from attendry.common.constants import AttendanceSource, AttendanceStatus
from attendry.database import Base

if TYPE_CHECKING:
    from attendry.core_hr.models import Employee

_SCAN_ONLY = sa.text("source = 'scan'")


class AttendanceRecord(Base):
    """One check-in (and optional check-out) on a tenant-local calendar day.

    A row with both times set closes the day; with only ``check_in_time`` the
    day is open. The partial unique index allows a single scan-created row per
    employee per day while manual entries stay unrestricted.
    """

    __tablename__ = "attendance_records"
    __table_args__ = (
        sa.Index(
            "uq_attendance_scan_emp_day",
            "employee_id",
            "work_date",
            unique=True,
            postgresql_where=_SCAN_ONLY,
            sqlite_where=_SCAN_ONLY,
        ),
        sa.Index("ix_attendance_tenant_day", "tenant_id", "work_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("tenants.id"), nullable=False
    )
    work_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    check_in_time: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False
    )
    check_out_time: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )
    status: Mapped[AttendanceStatus] = mapped_column(
        sa.Enum(AttendanceStatus, name="attendance_status"),
        nullable=False,
    )
    source: Mapped[AttendanceSource] = mapped_column(
        sa.Enum(AttendanceSource, name="attendance_source"),
        nullable=False,
        default=AttendanceSource.scan,
    )
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    employee: Mapped[Employee] = relationship()

    @property
    def is_closed(self) -> bool:
        return self.check_out_time is not None

    def __repr__(self) -> str:
        return f"<AttendanceRecord {self.employee_id} {self.work_date} {self.status}>"
