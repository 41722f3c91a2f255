"""Leave test suite — window clipping, monthly aggregation, request
workflow, and API endpoints.

Tests run against SQLite via the shared conftest.py fixtures.
"""

from __future__ import annotations

import uuid
from datetime import date, time, timedelta

import pytest

from attendry.common.constants import LeaveStatus
from attendry.common.exceptions import ConflictError, NotFoundException, ValidationException
from attendry.common.periods import MonthWindow
from attendry.leave.models import LeaveRequest
from attendry.leave.schemas import LeaveRequestCreate
from attendry.leave.service import LeaveService, aggregate_leave, clip_to_window
from tests.conftest import _make_leave, _seed_employee, _seed_tenant

MARCH = MonthWindow(2026, 3)
EMP = uuid.uuid4()
TENANT = uuid.uuid4()


def _leave(start: date, end: date, *, status=LeaveStatus.approved, employee_id=EMP) -> LeaveRequest:
    return LeaveRequest(**_make_leave(
        employee_id=employee_id, tenant_id=TENANT,
        start_date=start, end_date=end, status=status,
    ))


# ═════════════════════════════════════════════════════════════════════
# 1. Clipping and aggregation — pure logic tests (no DB)
# ═════════════════════════════════════════════════════════════════════


class TestClipToWindow:

    def test_inside_window_unchanged(self):
        assert clip_to_window(date(2026, 3, 5), date(2026, 3, 7), MARCH.start, MARCH.end) == (
            date(2026, 3, 5), date(2026, 3, 7),
        )

    def test_straddling_start_is_clipped(self):
        clipped = clip_to_window(
            MARCH.start - timedelta(days=3), MARCH.start + timedelta(days=2),
            MARCH.start, MARCH.end,
        )
        assert clipped == (MARCH.start, MARCH.start + timedelta(days=2))

    def test_outside_window(self):
        assert clip_to_window(date(2026, 2, 1), date(2026, 2, 5), MARCH.start, MARCH.end) is None


class TestAggregateLeave:

    def test_request_straddling_month_start_counts_three_days(self):
        agg = aggregate_leave(
            [_leave(MARCH.start - timedelta(days=3), MARCH.start + timedelta(days=2))],
            MARCH.start, MARCH.end,
        )
        assert agg.total_for(EMP) == 3
        assert agg.is_on_leave(EMP, MARCH.start)
        assert not agg.is_on_leave(EMP, MARCH.start - timedelta(days=1))

    def test_single_day_counts_one(self):
        agg = aggregate_leave([_leave(date(2026, 3, 10), date(2026, 3, 10))], MARCH.start, MARCH.end)
        assert agg.total_for(EMP) == 1

    def test_straddling_month_end(self):
        agg = aggregate_leave([_leave(date(2026, 3, 30), date(2026, 4, 3))], MARCH.start, MARCH.end)
        assert agg.total_for(EMP) == 2

    def test_pending_and_denied_ignored(self):
        agg = aggregate_leave(
            [
                _leave(date(2026, 3, 2), date(2026, 3, 3), status=LeaveStatus.pending),
                _leave(date(2026, 3, 9), date(2026, 3, 9), status=LeaveStatus.denied),
            ],
            MARCH.start, MARCH.end,
        )
        assert agg.total_for(EMP) == 0
        assert not agg.covered_days

    def test_sums_multiple_requests(self):
        agg = aggregate_leave(
            [_leave(date(2026, 3, 2), date(2026, 3, 3)), _leave(date(2026, 3, 20), date(2026, 3, 23))],
            MARCH.start, MARCH.end,
        )
        assert agg.total_for(EMP) == 6

    def test_unknown_employee_has_zero(self):
        agg = aggregate_leave([], MARCH.start, MARCH.end)
        assert agg.total_for(uuid.uuid4()) == 0


# ═════════════════════════════════════════════════════════════════════
# 2. Workflow — service layer
# ═════════════════════════════════════════════════════════════════════


async def test_submit_creates_pending(db, test_employee):
    request = await LeaveService.submit_request(
        db,
        LeaveRequestCreate(
            employee_id=test_employee.id,
            start_date=date(2026, 3, 9),
            end_date=date(2026, 3, 11),
            reason="Sister's wedding",
        ),
    )
    assert request.status == LeaveStatus.pending
    assert request.tenant_id == test_employee.tenant_id


async def test_submit_rejects_inverted_dates(db, test_employee):
    with pytest.raises(ValidationException) as exc_info:
        await LeaveService.submit_request(
            db,
            LeaveRequestCreate(
                employee_id=test_employee.id,
                start_date=date(2026, 3, 11),
                end_date=date(2026, 3, 9),
                reason="Backwards",
            ),
        )
    assert "end_date" in exc_info.value.errors


async def test_partial_day_must_be_single_date(db, test_employee):
    with pytest.raises(ValidationException):
        await LeaveService.submit_request(
            db,
            LeaveRequestCreate(
                employee_id=test_employee.id,
                start_date=date(2026, 3, 9),
                end_date=date(2026, 3, 10),
                start_time=time(9, 0),
                end_time=time(12, 0),
                reason="Bank visit",
            ),
        )


async def test_partial_day_needs_both_times(db, test_employee):
    with pytest.raises(ValidationException):
        await LeaveService.submit_request(
            db,
            LeaveRequestCreate(
                employee_id=test_employee.id,
                start_date=date(2026, 3, 9),
                end_date=date(2026, 3, 9),
                start_time=time(9, 0),
                reason="Bank visit",
            ),
        )


async def test_partial_day_counts_full_day(db, test_employee):
    request = await LeaveService.submit_request(
        db,
        LeaveRequestCreate(
            employee_id=test_employee.id,
            start_date=date(2026, 3, 9),
            end_date=date(2026, 3, 9),
            start_time=time(14, 0),
            end_time=time(17, 0),
            reason="School meeting",
        ),
    )
    assert request.is_partial_day
    await LeaveService.decide_request(db, request.id, LeaveStatus.approved)

    agg = await LeaveService.aggregate_month(db, test_employee.tenant_id, MARCH)
    assert agg.total_for(test_employee.id) == 1


async def test_decide_only_pending(db, test_employee):
    request = await LeaveService.submit_request(
        db,
        LeaveRequestCreate(
            employee_id=test_employee.id,
            start_date=date(2026, 3, 9),
            end_date=date(2026, 3, 9),
            reason="Errand",
        ),
    )
    decided = await LeaveService.decide_request(db, request.id, LeaveStatus.denied)
    assert decided.status == LeaveStatus.denied
    assert decided.decided_at is not None

    with pytest.raises(ConflictError):
        await LeaveService.decide_request(db, request.id, LeaveStatus.approved)


async def test_decide_unknown_request(db):
    with pytest.raises(NotFoundException):
        await LeaveService.decide_request(db, uuid.uuid4(), LeaveStatus.approved)


async def test_aggregate_month_is_tenant_scoped(db, test_tenant, test_employee):
    other_tenant = await _seed_tenant(db)
    outsider = await _seed_employee(db, other_tenant.id, name="Other Shop")
    for emp in (test_employee, outsider):
        db.add(LeaveRequest(**_make_leave(
            employee_id=emp.id, tenant_id=emp.tenant_id,
            start_date=date(2026, 3, 2), end_date=date(2026, 3, 4),
        )))
    await db.flush()

    agg = await LeaveService.aggregate_month(db, test_tenant.id, MARCH)
    assert agg.total_for(test_employee.id) == 3
    assert agg.total_for(outsider.id) == 0


# ═════════════════════════════════════════════════════════════════════
# 3. API endpoints
# ═════════════════════════════════════════════════════════════════════


async def test_summary_endpoint(client, db, test_tenant, test_employee):
    db.add(LeaveRequest(**_make_leave(
        employee_id=test_employee.id, tenant_id=test_tenant.id,
        start_date=date(2026, 2, 26), end_date=date(2026, 3, 3),
    )))
    await db.commit()

    resp = await client.get(
        "/api/v1/leave/summary",
        params={"tenant_id": str(test_tenant.id), "month": "2026-03"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["month"] == "2026-03"
    assert body["data"] == [{"employee_id": str(test_employee.id), "total_leave_days": 3}]


async def test_summary_rejects_bad_month(client, test_tenant):
    resp = await client.get(
        "/api/v1/leave/summary",
        params={"tenant_id": str(test_tenant.id), "month": "March"},
    )
    assert resp.status_code == 422


async def test_submit_and_decide_endpoints(client, db, test_employee):
    await db.commit()
    resp = await client.post(
        "/api/v1/leave/requests",
        json={
            "employee_id": str(test_employee.id),
            "start_date": "2026-03-09",
            "end_date": "2026-03-10",
            "reason": "Travel home",
        },
    )
    assert resp.status_code == 201
    request_id = resp.json()["id"]

    resp = await client.post(
        f"/api/v1/leave/requests/{request_id}/decision",
        json={"decision": "approved"},
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
