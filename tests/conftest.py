"""Shared test fixtures — async DB, client, factories.

Reusable across all test modules (qr, attendance, leave, payroll, muster).
Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from attendry.common.constants import (
    AttendanceSource,
    AttendanceStatus,
    EmploymentStatus,
    LeaveStatus,
    QrMode,
)
from attendry.database import Base, get_db
from attendry.main import create_app

# Import ALL model modules so every table is registered on Base.metadata
import attendry.tenants.models  # noqa: F401
import attendry.core_hr.models  # noqa: F401
import attendry.attendance.models  # noqa: F401
import attendry.leave.models  # noqa: F401
import attendry.payroll.models  # noqa: F401
import attendry.common.audit  # noqa: F401

# ── SQLite compat: compile PG UUID to CHAR(36) ──────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from attendry.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_tenant(
    *,
    name: str = "Corner Bakery",
    qr_mode: QrMode = QrMode.permanent,
    tz: str = "UTC",
) -> dict:
    return dict(
        id=uuid.uuid4(),
        name=name,
        qr_mode=qr_mode,
        timezone=tz,
        created_at=datetime.now(timezone.utc),
    )


def _make_employee(
    *,
    tenant_id: uuid.UUID,
    name: str = "Asha Rao",
    base_salary: Optional[Decimal] = Decimal("30000"),
    points: int = 0,
    streak: int = 0,
    status: EmploymentStatus = EmploymentStatus.active,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        tenant_id=tenant_id,
        name=name,
        base_salary=base_salary,
        points=points,
        streak=streak,
        status=status,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _make_record(
    *,
    employee_id: uuid.UUID,
    tenant_id: uuid.UUID,
    work_date: date,
    status: AttendanceStatus = AttendanceStatus.on_time,
    source: AttendanceSource = AttendanceSource.manual,
    closed: bool = True,
) -> dict:
    check_in = datetime.combine(work_date, time(9, 0), tzinfo=timezone.utc)
    return dict(
        id=uuid.uuid4(),
        employee_id=employee_id,
        tenant_id=tenant_id,
        work_date=work_date,
        check_in_time=check_in,
        check_out_time=check_in.replace(hour=17) if closed else None,
        status=status,
        source=source,
        created_at=check_in,
        updated_at=check_in,
    )


def _make_leave(
    *,
    employee_id: uuid.UUID,
    tenant_id: uuid.UUID,
    start_date: date,
    end_date: date,
    status: LeaveStatus = LeaveStatus.approved,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        employee_id=employee_id,
        tenant_id=tenant_id,
        start_date=start_date,
        end_date=end_date,
        reason="Family function",
        status=status,
        created_at=datetime.now(timezone.utc),
    )


async def _seed_tenant(
    db: AsyncSession,
    *,
    qr_mode: QrMode = QrMode.permanent,
    grace_period_minutes: int = 15,
    monthly_paid_leave: int = 4,
    with_schedule: bool = True,
    tz: str = "UTC",
):
    """Insert a tenant; by default with Mon–Fri 09:00–17:00 hours, weekends closed."""
    from attendry.tenants.models import BusinessHours, ScheduleConfig, Tenant
    from attendry.tenants.schemas import default_business_hours

    tenant = Tenant(**_make_tenant(qr_mode=qr_mode, tz=tz))
    db.add(tenant)
    await db.flush()

    if with_schedule:
        config = ScheduleConfig(
            tenant=tenant,
            grace_period_minutes=grace_period_minutes,
            monthly_paid_leave=monthly_paid_leave,
        )
        config.business_hours = [
            BusinessHours(
                weekday=h.weekday,
                is_open=h.is_open,
                start_time=h.start_time,
                end_time=h.end_time,
            )
            for h in default_business_hours()
        ]
        db.add(config)
        await db.flush()
    return tenant


async def _seed_employee(db: AsyncSession, tenant_id: uuid.UUID, **overrides):
    from attendry.core_hr.models import Employee

    emp = Employee(**_make_employee(tenant_id=tenant_id, **overrides))
    db.add(emp)
    await db.flush()
    return emp


@pytest.fixture
async def test_tenant(db):
    """Permanent-QR tenant in UTC with the default schedule."""
    return await _seed_tenant(db)


@pytest.fixture
async def test_employee(db, test_tenant):
    """Active employee with a 30000 base salary and a fresh ledger."""
    return await _seed_employee(db, test_tenant.id)
