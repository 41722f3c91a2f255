"""Muster roll tests — symbol precedence and month grid."""

from __future__ import annotations

from datetime import date

from attendry.attendance.models import AttendanceRecord
from attendry.common.constants import AttendanceStatus, EmploymentStatus, MusterSymbol
from attendry.common.periods import MonthWindow
from attendry.leave.models import LeaveRequest
from attendry.muster.builder import day_symbol
from attendry.muster.service import MusterService
from tests.conftest import _make_leave, _make_record, _seed_employee

FEBRUARY = MonthWindow(2026, 2)  # 28 days


class TestDaySymbol:

    def test_leave_beats_half_day(self):
        assert day_symbol(True, [AttendanceStatus.half_day]) == MusterSymbol.leave

    def test_half_day_beats_present(self):
        assert day_symbol(False, [AttendanceStatus.on_time, AttendanceStatus.half_day]) == MusterSymbol.half_day

    def test_any_record_is_present(self):
        assert day_symbol(False, [AttendanceStatus.late]) == MusterSymbol.present

    def test_nothing_is_absent(self):
        assert day_symbol(False, []) == MusterSymbol.absent


async def test_muster_grid(db, test_tenant, test_employee):
    db.add(AttendanceRecord(**_make_record(
        employee_id=test_employee.id, tenant_id=test_tenant.id,
        work_date=date(2026, 2, 2), status=AttendanceStatus.on_time,
    )))
    db.add(AttendanceRecord(**_make_record(
        employee_id=test_employee.id, tenant_id=test_tenant.id,
        work_date=date(2026, 2, 3), status=AttendanceStatus.half_day,
    )))
    db.add(AttendanceRecord(**_make_record(
        employee_id=test_employee.id, tenant_id=test_tenant.id,
        work_date=date(2026, 2, 4), status=AttendanceStatus.half_day,
    )))
    db.add(LeaveRequest(**_make_leave(
        employee_id=test_employee.id, tenant_id=test_tenant.id,
        start_date=date(2026, 2, 4), end_date=date(2026, 2, 5),
    )))
    await db.flush()

    muster = await MusterService.get_muster(db, test_tenant.id, FEBRUARY)

    assert muster.days_in_month == 28
    [row] = muster.data
    assert len(row.daily_status) == 28
    assert row.daily_status[2] == MusterSymbol.present
    assert row.daily_status[3] == MusterSymbol.half_day
    assert row.daily_status[4] == MusterSymbol.leave
    assert row.daily_status[5] == MusterSymbol.leave
    assert row.daily_status[6] == MusterSymbol.absent
    assert row.count(MusterSymbol.absent) == 24


async def test_muster_skips_inactive(db, test_tenant, test_employee):
    await _seed_employee(db, test_tenant.id, name="Former Staff", status=EmploymentStatus.inactive)

    muster = await MusterService.get_muster(db, test_tenant.id, FEBRUARY)
    assert [row.employee_id for row in muster.data] == [test_employee.id]


async def test_muster_endpoint(client, db, test_tenant, test_employee):
    await db.commit()
    resp = await client.get(
        "/api/v1/muster",
        params={"tenant_id": str(test_tenant.id), "month": "2026-02"},
    )
    assert resp.status_code == 200
    row = resp.json()["data"][0]
    assert row["daily_status"]["1"] == "A"
