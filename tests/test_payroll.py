"""Payroll test suite — calculator arithmetic and rounding, month
computation over stored data, adjustments, and API endpoints.

Tests run against SQLite via the shared conftest.py fixtures.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest

from attendry.attendance.models import AttendanceRecord
from attendry.common.constants import AttendanceStatus
from attendry.common.exceptions import ValidationException
from attendry.common.periods import MonthWindow
from attendry.leave.models import LeaveRequest
from attendry.payroll.calculator import apply_adjustments, calculate_line, round_currency
from attendry.payroll.schemas import PayrollAdjustmentUpdate
from attendry.payroll.service import PayrollService
from tests.conftest import _make_leave, _make_record, _seed_employee, _seed_tenant

APRIL = MonthWindow(2026, 4)  # 30 days


def _line(**overrides):
    params = dict(
        employee_id=uuid.uuid4(),
        employee_name="Asha Rao",
        base_salary=Decimal("30000"),
        days_in_month=30,
        statuses=[AttendanceStatus.on_time] * 20 + [AttendanceStatus.half_day] * 2,
        total_leave_days=6,
        monthly_paid_leave=4,
    )
    params.update(overrides)
    return calculate_line(**params)


# ═════════════════════════════════════════════════════════════════════
# 1. Calculator — pure logic tests (no DB)
# ═════════════════════════════════════════════════════════════════════


class TestCalculateLine:

    def test_reference_month(self):
        line = _line()
        assert line.daily_rate == Decimal("1000")
        assert line.half_day_count == 2
        assert line.present_count == 20
        assert line.paid_leave_used == 4
        assert line.unpaid_leave == 2
        assert line.half_day_deduction == Decimal("1000")
        assert line.unpaid_leave_deduction == Decimal("2000")
        assert line.total_earnings == Decimal("30000")
        assert line.total_deductions == Decimal("3000")
        assert line.final_salary == Decimal("27000")

    def test_leave_within_quota_costs_nothing(self):
        line = _line(total_leave_days=3, statuses=[])
        assert line.paid_leave_used == 3
        assert line.unpaid_leave == 0
        assert line.final_salary == Decimal("30000")

    def test_each_term_rounded_half_up(self):
        line = _line(
            base_salary=Decimal("25000"), days_in_month=31,
            statuses=[AttendanceStatus.half_day], total_leave_days=5,
        )
        # half day: 403.22... -> 403; one unpaid day: 806.45... -> 806
        assert line.half_day_deduction == Decimal("403")
        assert line.unpaid_leave_deduction == Decimal("806")
        assert line.final_salary == Decimal("23791")

    def test_round_currency_half_up(self):
        assert round_currency(Decimal("10.5")) == Decimal("11")
        assert round_currency(Decimal("10.49")) == Decimal("10")

    @pytest.mark.parametrize("base", [None, Decimal("0")])
    def test_no_salary_is_excluded(self, base):
        line = _line(base_salary=base, bonus=Decimal("500"))
        assert line.is_payable is False
        assert line.final_salary == Decimal("0")
        assert line.half_day_deduction == Decimal("0")
        assert line.final_salary_display == "N/A"
        assert line.base_salary_display == "N/A"

    def test_apply_adjustments_only_changes_totals(self):
        line = _line()
        adjusted = apply_adjustments(line, bonus=Decimal("1500"), advances=Decimal("2000"))
        assert adjusted.final_salary == Decimal("26500")
        assert adjusted.total_earnings == Decimal("31500")
        assert adjusted.total_deductions == Decimal("5000")
        assert adjusted.unpaid_leave_deduction == line.unpaid_leave_deduction
        assert adjusted.present_count == line.present_count

    def test_apply_adjustments_is_repeatable(self):
        line = _line()
        once = apply_adjustments(line, bonus=Decimal("100"))
        twice = apply_adjustments(once, bonus=Decimal("100"))
        assert once == twice

    def test_apply_adjustments_skips_excluded(self):
        line = _line(base_salary=None)
        assert apply_adjustments(line, bonus=Decimal("100")) == line


# ═════════════════════════════════════════════════════════════════════
# 2. compute_payroll — service layer
# ═════════════════════════════════════════════════════════════════════


async def _seed_reference_month(db, tenant, employee):
    for offset in range(22):
        status = AttendanceStatus.half_day if offset < 2 else AttendanceStatus.on_time
        db.add(AttendanceRecord(**_make_record(
            employee_id=employee.id, tenant_id=tenant.id,
            work_date=APRIL.start + timedelta(days=offset), status=status,
        )))
    db.add(LeaveRequest(**_make_leave(
        employee_id=employee.id, tenant_id=tenant.id,
        start_date=date(2026, 4, 25), end_date=date(2026, 4, 30),
    )))
    await db.flush()


async def test_compute_payroll_reference_scenario(db, test_tenant, test_employee):
    await _seed_reference_month(db, test_tenant, test_employee)

    payroll = await PayrollService.compute_payroll(db, test_tenant.id, APRIL)

    assert payroll.month == "2026-04"
    [line] = payroll.data
    assert line.total_leave_days == 6
    assert line.final_salary == Decimal("27000")
    assert payroll.total_payable == Decimal("27000")


async def test_compute_payroll_is_idempotent(db, test_tenant, test_employee):
    await _seed_reference_month(db, test_tenant, test_employee)

    first = await PayrollService.compute_payroll(db, test_tenant.id, APRIL)
    second = await PayrollService.compute_payroll(db, test_tenant.id, APRIL)
    assert first == second


async def test_compute_payroll_marks_unsalaried_na(db, test_tenant, test_employee):
    await _seed_employee(db, test_tenant.id, name="Zed Volunteer", base_salary=None)

    payroll = await PayrollService.compute_payroll(db, test_tenant.id, APRIL)

    by_name = {line.employee_name: line for line in payroll.data}
    assert by_name["Zed Volunteer"].is_payable is False
    assert by_name["Zed Volunteer"].final_salary_display == "N/A"
    assert payroll.total_payable == by_name["Asha Rao"].final_salary


async def test_missing_schedule_uses_default_quota(db):
    tenant = await _seed_tenant(db, with_schedule=False)
    emp = await _seed_employee(db, tenant.id)
    db.add(LeaveRequest(**_make_leave(
        employee_id=emp.id, tenant_id=tenant.id,
        start_date=date(2026, 4, 1), end_date=date(2026, 4, 5),
    )))
    await db.flush()

    payroll = await PayrollService.compute_payroll(db, tenant.id, APRIL)
    assert payroll.data[0].paid_leave_used == 4
    assert payroll.data[0].unpaid_leave == 1


async def test_set_adjustment_upserts(db, test_tenant, test_employee):
    data = PayrollAdjustmentUpdate(
        tenant_id=test_tenant.id, employee_id=test_employee.id, month="2026-04",
        bonus=Decimal("2000"), advances=Decimal("500"),
    )
    first = await PayrollService.set_adjustment(db, data)
    assert first.line.final_salary == Decimal("31500")

    second = await PayrollService.set_adjustment(
        db, data.model_copy(update={"bonus": Decimal("0")}),
    )
    assert second.id == first.id
    assert second.line.final_salary == Decimal("29500")

    payroll = await PayrollService.compute_payroll(db, test_tenant.id, APRIL)
    assert payroll.data[0].advances == Decimal("500")


async def test_set_adjustment_rejects_unsalaried(db, test_tenant):
    emp = await _seed_employee(db, test_tenant.id, base_salary=None)
    with pytest.raises(ValidationException):
        await PayrollService.set_adjustment(
            db,
            PayrollAdjustmentUpdate(
                tenant_id=test_tenant.id, employee_id=emp.id, month="2026-04",
                bonus=Decimal("100"),
            ),
        )


# ═════════════════════════════════════════════════════════════════════
# 3. API endpoints
# ═════════════════════════════════════════════════════════════════════


async def test_payroll_endpoint(client, db, test_tenant, test_employee):
    await _seed_reference_month(db, test_tenant, test_employee)
    await db.commit()

    resp = await client.get(
        "/api/v1/payroll",
        params={"tenant_id": str(test_tenant.id), "month": "2026-04"},
    )
    assert resp.status_code == 200
    line = resp.json()["data"][0]
    assert Decimal(line["final_salary"]) == Decimal("27000")
    assert line["final_salary_display"] == "27000"


async def test_adjustment_endpoint_rejects_negative_bonus(client, test_tenant, test_employee):
    resp = await client.put(
        "/api/v1/payroll/adjustments",
        json={
            "tenant_id": str(test_tenant.id),
            "employee_id": str(test_employee.id),
            "month": "2026-04",
            "bonus": "-1",
        },
    )
    assert resp.status_code == 422
