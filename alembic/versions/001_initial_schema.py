"""001 – Initial schema: tenants, schedules, employees, attendance, leave, payroll.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 10:00:00.000000+05:30
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("qr_mode", ["permanent", "dynamic"]),
    ("employment_status", ["active", "inactive"]),
    ("attendance_status", ["on_time", "late", "half_day", "manual", "absent"]),
    ("attendance_source", ["scan", "manual"]),
    ("leave_status", ["pending", "approved", "denied"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── Enum types ────────────────────────────────────────────────────────
    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. tenants ────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE tenants (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name        VARCHAR(150) NOT NULL,
            qr_mode     qr_mode NOT NULL DEFAULT 'permanent',
            timezone    VARCHAR(50) NOT NULL DEFAULT 'Asia/Kolkata',
            created_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # ── 2. schedule_configs ───────────────────────────────────────────────
    op.execute("""
        CREATE TABLE schedule_configs (
            tenant_id            UUID PRIMARY KEY REFERENCES tenants(id) ON DELETE CASCADE,
            grace_period_minutes INTEGER NOT NULL DEFAULT 15,
            monthly_paid_leave   INTEGER NOT NULL DEFAULT 4,
            updated_at           TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_schedule_grace CHECK (grace_period_minutes >= 0),
            CONSTRAINT ck_schedule_paid_leave CHECK (monthly_paid_leave >= 0)
        )
    """)

    # ── 3. business_hours ─────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE business_hours (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            tenant_id   UUID NOT NULL
                        REFERENCES schedule_configs(tenant_id) ON DELETE CASCADE,
            weekday     INTEGER NOT NULL,
            is_open     BOOLEAN NOT NULL DEFAULT TRUE,
            start_time  TIME NOT NULL,
            end_time    TIME NOT NULL,
            CONSTRAINT uq_business_hours_day UNIQUE (tenant_id, weekday),
            CONSTRAINT ck_business_hours_weekday CHECK (weekday BETWEEN 0 AND 6)
        )
    """)

    # ── 4. employees ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE employees (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            tenant_id   UUID NOT NULL REFERENCES tenants(id),
            name        VARCHAR(150) NOT NULL,
            base_salary NUMERIC(12, 2),
            points      INTEGER NOT NULL DEFAULT 0,
            streak      INTEGER NOT NULL DEFAULT 0,
            status      employment_status NOT NULL DEFAULT 'active',
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_employee_points CHECK (points >= 0),
            CONSTRAINT ck_employee_streak CHECK (streak >= 0)
        )
    """)
    op.execute(
        "CREATE INDEX ix_employees_tenant_status ON employees(tenant_id, status)"
    )

    # ── 5. attendance_records ─────────────────────────────────────────────
    op.execute("""
        CREATE TABLE attendance_records (
            id              UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id     UUID NOT NULL REFERENCES employees(id),
            tenant_id       UUID NOT NULL REFERENCES tenants(id),
            work_date       DATE NOT NULL,
            check_in_time   TIMESTAMPTZ NOT NULL,
            check_out_time  TIMESTAMPTZ,
            status          attendance_status NOT NULL,
            source          attendance_source NOT NULL DEFAULT 'scan',
            reason          TEXT,
            created_at      TIMESTAMPTZ DEFAULT NOW(),
            updated_at      TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    # One scan-created record per employee per local day
    op.execute("""
        CREATE UNIQUE INDEX uq_attendance_scan_emp_day
            ON attendance_records(employee_id, work_date)
            WHERE source = 'scan'
    """)
    op.execute(
        "CREATE INDEX ix_attendance_tenant_day ON attendance_records(tenant_id, work_date)"
    )

    # ── 6. leave_requests ─────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE leave_requests (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id UUID NOT NULL REFERENCES employees(id),
            tenant_id   UUID NOT NULL REFERENCES tenants(id),
            start_date  DATE NOT NULL,
            end_date    DATE NOT NULL,
            start_time  TIME,
            end_time    TIME,
            reason      TEXT NOT NULL DEFAULT '',
            status      leave_status NOT NULL DEFAULT 'pending',
            decided_at  TIMESTAMPTZ,
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_leave_dates CHECK (end_date >= start_date)
        )
    """)
    op.execute("""
        CREATE INDEX ix_leave_tenant_status_dates
            ON leave_requests(tenant_id, status, start_date, end_date)
    """)

    # ── 7. payroll_adjustments ────────────────────────────────────────────
    op.execute("""
        CREATE TABLE payroll_adjustments (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            tenant_id   UUID NOT NULL REFERENCES tenants(id),
            employee_id UUID NOT NULL REFERENCES employees(id),
            year        INTEGER NOT NULL,
            month       INTEGER NOT NULL,
            bonus       NUMERIC(12, 2) NOT NULL DEFAULT 0,
            advances    NUMERIC(12, 2) NOT NULL DEFAULT 0,
            updated_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_payroll_adjustment_emp_month UNIQUE (employee_id, year, month),
            CONSTRAINT ck_payroll_adjustment_bonus CHECK (bonus >= 0),
            CONSTRAINT ck_payroll_adjustment_advances CHECK (advances >= 0)
        )
    """)

    # ── 8. audit_trail ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE audit_trail (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            tenant_id   UUID,
            actor_id    UUID,
            action      VARCHAR(50) NOT NULL,
            entity_type VARCHAR(50) NOT NULL,
            entity_id   UUID NOT NULL,
            old_values  JSON,
            new_values  JSON,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute(
        "CREATE INDEX ix_audit_trail_entity ON audit_trail(entity_type, entity_id)"
    )
    op.execute("CREATE INDEX ix_audit_trail_created_at ON audit_trail(created_at)")
    op.execute("CREATE INDEX ix_audit_trail_action ON audit_trail(action)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "audit_trail",
        "payroll_adjustments",
        "leave_requests",
        "attendance_records",
        "employees",
        "business_hours",
        "schedule_configs",
        "tenants",
    ]
    for t in tables:
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)

    op.execute('DROP EXTENSION IF EXISTS "uuid-ossp"')
