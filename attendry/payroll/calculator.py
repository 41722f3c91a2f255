"""Payroll calculator — pure functions over one employee's month.

Rounding follows the established payroll policy: the daily rate keeps full
precision, each deduction term is rounded half-up to a whole currency unit on
its own, and the final salary is rounded once more. Rounding once at the end
instead can differ by one unit.
"""

from __future__ import annotations

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from attendry.common.constants import AttendanceStatus
from attendry.payroll.schemas import ZERO, PayrollLine

WHOLE_UNIT = Decimal("1")


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def _as_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def excluded_line(
    employee_id: uuid.UUID,
    employee_name: str,
    days_in_month: int,
) -> PayrollLine:
    """Zeroed line for an employee without a base salary."""
    return PayrollLine(
        employee_id=employee_id,
        employee_name=employee_name,
        is_payable=False,
        days_in_month=days_in_month,
    )


def calculate_line(
    *,
    employee_id: uuid.UUID,
    employee_name: str,
    base_salary: Optional[Decimal],
    days_in_month: int,
    statuses: Iterable[AttendanceStatus],
    total_leave_days: int,
    monthly_paid_leave: int,
    bonus: Decimal = ZERO,
    advances: Decimal = ZERO,
) -> PayrollLine:
    base = _as_decimal(base_salary)
    if base <= 0:
        return excluded_line(employee_id, employee_name, days_in_month)

    statuses = list(statuses)
    half_day_count = sum(1 for s in statuses if s == AttendanceStatus.half_day)
    present_count = len(statuses) - half_day_count

    daily_rate = base / Decimal(days_in_month)
    paid_leave_used = min(total_leave_days, monthly_paid_leave)
    unpaid_leave = max(0, total_leave_days - monthly_paid_leave)

    half_day_deduction = round_currency(half_day_count * daily_rate / 2)
    unpaid_leave_deduction = round_currency(unpaid_leave * daily_rate)

    line = PayrollLine(
        employee_id=employee_id,
        employee_name=employee_name,
        base_salary=base,
        days_in_month=days_in_month,
        daily_rate=daily_rate,
        present_count=present_count,
        half_day_count=half_day_count,
        total_leave_days=total_leave_days,
        paid_leave_used=paid_leave_used,
        unpaid_leave=unpaid_leave,
        half_day_deduction=half_day_deduction,
        unpaid_leave_deduction=unpaid_leave_deduction,
    )
    return apply_adjustments(line, bonus=bonus, advances=advances)


def apply_adjustments(
    line: PayrollLine,
    *,
    bonus: Decimal = ZERO,
    advances: Decimal = ZERO,
) -> PayrollLine:
    """Re-derive totals for new bonus/advance values.

    Attendance- and leave-derived figures are carried over untouched, so this
    can be applied any number of times before the payroll is finalised.
    """
    if not line.is_payable:
        return line

    bonus = _as_decimal(bonus)
    advances = _as_decimal(advances)
    total_earnings = line.base_salary + bonus
    total_deductions = line.half_day_deduction + line.unpaid_leave_deduction + advances

    return line.model_copy(
        update={
            "bonus": bonus,
            "advances": advances,
            "total_earnings": total_earnings,
            "total_deductions": total_deductions,
            "final_salary": round_currency(total_earnings - total_deductions),
        }
    )
