"""Attendance service layer — QR scan state machine and administrative entry.

Business logic:
  - One state machine per (employee, tenant-local day):
    not_started → open (check-in) → closed (check-out)
  - Punctuality from the tenant's business hours plus grace period
  - Gamification ledger applied with the check-in, in the same flush
  - Manual entry and forced checkout as separate admin write paths that
    never touch points or streak
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from attendry.attendance.gamification import apply_check_in
from attendry.attendance.models import AttendanceRecord
from attendry.attendance.schemas import (
    AttendanceHistoryResponse,
    AttendanceRecordResponse,
    DayStateResponse,
    ManualAttendanceCreate,
    ScanResponse,
)
from attendry.common.audit import create_audit_entry
from attendry.common.constants import (
    AttendanceSource,
    AttendanceStatus,
    DayState,
    ScanAction,
)
from attendry.common.exceptions import (
    DayAlreadyCompleteError,
    DuplicateScanError,
    NotFoundException,
    QrTokenError,
    ValidationException,
)
from attendry.common.periods import MonthWindow, local_now, resolve_timezone, utc_now
from attendry.core_hr.models import Employee
from attendry.core_hr.service import EmployeeService
from attendry.qr.tokens import validate_token
from attendry.tenants.schemas import ScheduleSnapshot
from attendry.tenants.service import TenantService

logger = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════
# AttendanceService
# ═════════════════════════════════════════════════════════════════════


class AttendanceService:
    """Async attendance operations: scan, day state, manual entry, month reads."""

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def determine_status(
        check_in_local: datetime,
        schedule: ScheduleSnapshot,
    ) -> AttendanceStatus:
        """Compare a tenant-local check-in against shift start + grace."""

        hours = schedule.hours_for(check_in_local.weekday())
        if not hours.is_open:
            return AttendanceStatus.on_time

        shift_start = datetime.combine(
            check_in_local.date(),
            hours.start_time,
            tzinfo=check_in_local.tzinfo,
        )
        deadline = shift_start + timedelta(minutes=schedule.grace_period_minutes)
        if check_in_local > deadline:
            return AttendanceStatus.late
        return AttendanceStatus.on_time

    @staticmethod
    def day_state(record: Optional[AttendanceRecord]) -> DayState:
        if record is None:
            return DayState.not_started
        if record.is_closed:
            return DayState.closed
        return DayState.open

    @staticmethod
    async def _latest_record_for_day(
        db: AsyncSession,
        employee_id: uuid.UUID,
        work_date: date,
    ) -> Optional[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.work_date == work_date,
            )
            .order_by(
                AttendanceRecord.check_in_time.desc(),
                AttendanceRecord.created_at.desc(),
            )
            .limit(1)
        )
        return result.scalars().first()

    # ── Day state ───────────────────────────────────────────────────

    @staticmethod
    async def get_day_state(
        db: AsyncSession,
        employee_id: uuid.UUID,
        *,
        now: Optional[datetime] = None,
    ) -> DayStateResponse:
        """Today's state for the employee in their tenant's timezone."""

        employee = await EmployeeService.get_employee(db, employee_id)
        tenant = await TenantService.get_tenant(db, employee.tenant_id)
        today = local_now(resolve_timezone(tenant.timezone), now).date()

        record = await AttendanceService._latest_record_for_day(db, employee_id, today)
        return DayStateResponse(
            employee_id=employee_id,
            work_date=today,
            state=AttendanceService.day_state(record),
            record=AttendanceRecordResponse.model_validate(record) if record else None,
        )

    # ── QR scan ─────────────────────────────────────────────────────

    @staticmethod
    async def scan_qr(
        db: AsyncSession,
        raw_token: str,
        employee_id: uuid.UUID,
        *,
        now: Optional[datetime] = None,
    ) -> ScanResponse:
        """Validate a scanned token and apply the day's next transition.

        The employee row is locked for the rest of the transaction, so the
        day's state is re-read and written under that lock. Nothing is
        written when validation fails.
        """

        now = now or utc_now()

        employee = await EmployeeService.get_employee(db, employee_id, for_update=True)
        tenant = await TenantService.get_tenant(db, employee.tenant_id)

        try:
            validate_token(
                raw_token,
                employee_tenant_id=employee.tenant_id,
                tenant_mode=tenant.qr_mode,
                now=now,
            )
        except QrTokenError as exc:
            logger.warning(
                "Rejected scan for employee %s: %s", employee_id, exc.error_type,
            )
            raise

        schedule = await TenantService.get_schedule(db, employee.tenant_id)
        local = local_now(resolve_timezone(schedule.timezone), now)
        today = local.date()

        record = await AttendanceService._latest_record_for_day(db, employee_id, today)
        state = AttendanceService.day_state(record)

        if state == DayState.not_started:
            return await AttendanceService._check_in(
                db, employee, schedule, local, now,
            )
        if state == DayState.open:
            return await AttendanceService._check_out(db, employee, record, now)

        logger.info("Employee %s already closed %s", employee_id, today)
        raise DayAlreadyCompleteError(today)

    @staticmethod
    async def _check_in(
        db: AsyncSession,
        employee: Employee,
        schedule: ScheduleSnapshot,
        local: datetime,
        now: datetime,
    ) -> ScanResponse:
        status = AttendanceService.determine_status(local, schedule)

        record = AttendanceRecord(
            employee_id=employee.id,
            tenant_id=employee.tenant_id,
            work_date=local.date(),
            check_in_time=now,
            status=status,
            source=AttendanceSource.scan,
            created_at=now,
            updated_at=now,
        )
        db.add(record)
        ledger = apply_check_in(employee, status)

        # ORM attributes are unreadable once the flush fails
        employee_id = employee.id
        work_date = local.date()

        # Record insert and points update go out in one flush
        try:
            await db.flush()
        except IntegrityError:
            logger.warning(
                "Concurrent check-in for employee %s on %s", employee_id, work_date,
            )
            raise DuplicateScanError(work_date)

        await create_audit_entry(
            db,
            action="check_in",
            entity_type="attendance_record",
            entity_id=record.id,
            tenant_id=employee.tenant_id,
            actor_id=employee.id,
            new_values={
                "status": status.value,
                "timestamp": now.isoformat(),
                "points": ledger.points,
                "streak": ledger.streak,
            },
        )
        logger.info(
            "Employee %s checked in (%s), points %+d",
            employee.id, status.value, ledger.points_delta,
        )

        return ScanResponse(
            action=ScanAction.checked_in,
            record=AttendanceRecordResponse.model_validate(record),
            points=ledger.points,
            streak=ledger.streak,
            points_delta=ledger.points_delta,
            bonus_awarded=ledger.bonus_awarded,
        )

    @staticmethod
    async def _check_out(
        db: AsyncSession,
        employee: Employee,
        record: AttendanceRecord,
        now: datetime,
    ) -> ScanResponse:
        # Conditional write: only a still-open record can be closed
        result = await db.execute(
            update(AttendanceRecord)
            .where(
                AttendanceRecord.id == record.id,
                AttendanceRecord.check_out_time.is_(None),
            )
            .values(check_out_time=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise DayAlreadyCompleteError(record.work_date)
        await db.refresh(record)

        await create_audit_entry(
            db,
            action="check_out",
            entity_type="attendance_record",
            entity_id=record.id,
            tenant_id=employee.tenant_id,
            actor_id=employee.id,
            new_values={"timestamp": now.isoformat()},
        )
        logger.info("Employee %s checked out", employee.id)

        return ScanResponse(
            action=ScanAction.checked_out,
            record=AttendanceRecordResponse.model_validate(record),
            points=employee.points,
            streak=employee.streak,
        )

    # ── Manual entry (admin) ────────────────────────────────────────

    @staticmethod
    async def record_manual_attendance(
        db: AsyncSession,
        data: ManualAttendanceCreate,
        *,
        actor_id: Optional[uuid.UUID] = None,
    ) -> AttendanceRecordResponse:
        """Create a record directly with any status; points and streak untouched."""

        if data.check_out is not None and data.check_out < data.check_in:
            raise ValidationException(
                {"check_out": ["check_out must not be earlier than check_in."]}
            )

        employee = await EmployeeService.get_employee(db, data.employee_id)
        tenant = await TenantService.get_tenant(db, employee.tenant_id)
        tz = resolve_timezone(tenant.timezone)

        check_in = datetime.combine(data.work_date, data.check_in, tzinfo=tz)
        check_out = (
            datetime.combine(data.work_date, data.check_out, tzinfo=tz)
            if data.check_out is not None
            else None
        )

        record = AttendanceRecord(
            employee_id=employee.id,
            tenant_id=employee.tenant_id,
            work_date=data.work_date,
            check_in_time=check_in,
            check_out_time=check_out,
            status=data.status,
            source=AttendanceSource.manual,
            reason=data.reason,
        )
        db.add(record)
        await db.flush()

        await create_audit_entry(
            db,
            action="manual_entry",
            entity_type="attendance_record",
            entity_id=record.id,
            tenant_id=employee.tenant_id,
            actor_id=actor_id,
            new_values={
                "work_date": data.work_date.isoformat(),
                "status": data.status.value,
                "reason": data.reason,
            },
        )
        logger.info(
            "Manual %s record for employee %s on %s",
            data.status.value, employee.id, data.work_date,
        )
        return AttendanceRecordResponse.model_validate(record)

    @staticmethod
    async def force_checkout(
        db: AsyncSession,
        record_id: uuid.UUID,
        *,
        actor_id: Optional[uuid.UUID] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecordResponse:
        """Admin override: close an open record now and mark it manual."""

        now = now or utc_now()
        record = await db.get(AttendanceRecord, record_id)
        if record is None:
            raise NotFoundException("AttendanceRecord", record_id)

        old_status = record.status
        result = await db.execute(
            update(AttendanceRecord)
            .where(
                AttendanceRecord.id == record_id,
                AttendanceRecord.check_out_time.is_(None),
            )
            .values(
                check_out_time=now,
                status=AttendanceStatus.manual,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise DayAlreadyCompleteError(record.work_date)
        await db.refresh(record)

        await create_audit_entry(
            db,
            action="force_checkout",
            entity_type="attendance_record",
            entity_id=record.id,
            tenant_id=record.tenant_id,
            actor_id=actor_id,
            old_values={"status": old_status.value},
            new_values={
                "status": AttendanceStatus.manual.value,
                "timestamp": now.isoformat(),
            },
        )
        return AttendanceRecordResponse.model_validate(record)

    # ── Month reads (payroll / muster) ──────────────────────────────

    @staticmethod
    async def get_month_records(
        db: AsyncSession,
        tenant_id: uuid.UUID,
        window: MonthWindow,
    ) -> list[AttendanceRecord]:
        result = await db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.tenant_id == tenant_id,
                AttendanceRecord.work_date >= window.start,
                AttendanceRecord.work_date <= window.end,
            )
            .order_by(AttendanceRecord.work_date, AttendanceRecord.check_in_time)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_history(
        db: AsyncSession,
        employee_id: uuid.UUID,
        window: MonthWindow,
    ) -> AttendanceHistoryResponse:
        """Employee's records for the month, most recent day first."""

        await EmployeeService.get_employee(db, employee_id)
        result = await db.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.work_date >= window.start,
                AttendanceRecord.work_date <= window.end,
            )
            .order_by(
                AttendanceRecord.work_date.desc(),
                AttendanceRecord.check_in_time.desc(),
            )
        )
        records = list(result.scalars().all())
        tally = Counter(r.status for r in records)

        return AttendanceHistoryResponse(
            employee_id=employee_id,
            month=str(window),
            records=[AttendanceRecordResponse.model_validate(r) for r in records],
            on_time_count=tally[AttendanceStatus.on_time],
            late_count=tally[AttendanceStatus.late],
            half_day_count=tally[AttendanceStatus.half_day],
        )
