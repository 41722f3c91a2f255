"""Muster roll builder — one symbol per employee per calendar day.

Precedence is L > H > P > A: an approved-leave day is always L, even when a
half-day or full record exists for it.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date
from typing import Iterable

from attendry.attendance.models import AttendanceRecord
from attendry.common.constants import AttendanceStatus, MusterSymbol
from attendry.common.periods import MonthWindow
from attendry.core_hr.models import Employee
from attendry.leave.service import LeaveAggregate
from attendry.muster.schemas import MusterRow


def day_symbol(
    on_leave: bool,
    statuses: Iterable[AttendanceStatus],
) -> MusterSymbol:
    if on_leave:
        return MusterSymbol.leave
    statuses = list(statuses)
    if any(s == AttendanceStatus.half_day for s in statuses):
        return MusterSymbol.half_day
    if statuses:
        return MusterSymbol.present
    return MusterSymbol.absent


def build_muster(
    employees: Iterable[Employee],
    records: Iterable[AttendanceRecord],
    leave: LeaveAggregate,
    window: MonthWindow,
) -> list[MusterRow]:
    by_day: dict[tuple[uuid.UUID, date], list[AttendanceStatus]] = defaultdict(list)
    for record in records:
        by_day[(record.employee_id, record.work_date)].append(record.status)

    rows = []
    for employee in employees:
        daily = {
            day.day: day_symbol(
                leave.is_on_leave(employee.id, day),
                by_day.get((employee.id, day), ()),
            )
            for day in window.days()
        }
        rows.append(
            MusterRow(
                employee_id=employee.id,
                employee_name=employee.name,
                daily_status=daily,
            )
        )
    return rows
