"""Payroll Pydantic v2 schemas — request/response validation."""

import uuid
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from attendry.common.constants import NOT_APPLICABLE

ZERO = Decimal("0")


# ═════════════════════════════════════════════════════════════════════
# Payroll line
# ═════════════════════════════════════════════════════════════════════


class PayrollLine(BaseModel):
    """One employee's pay for the month. Excluded employees carry zeros."""

    model_config = ConfigDict(frozen=True)

    employee_id: uuid.UUID
    employee_name: str
    is_payable: bool = True
    base_salary: Decimal = ZERO
    days_in_month: int
    daily_rate: Decimal = ZERO
    present_count: int = 0
    half_day_count: int = 0
    total_leave_days: int = 0
    paid_leave_used: int = 0
    unpaid_leave: int = 0
    half_day_deduction: Decimal = ZERO
    unpaid_leave_deduction: Decimal = ZERO
    bonus: Decimal = ZERO
    advances: Decimal = ZERO
    total_earnings: Decimal = ZERO
    total_deductions: Decimal = ZERO
    final_salary: Decimal = ZERO

    @computed_field
    @property
    def base_salary_display(self) -> str:
        return str(self.base_salary) if self.is_payable else NOT_APPLICABLE

    @computed_field
    @property
    def final_salary_display(self) -> str:
        return str(self.final_salary) if self.is_payable else NOT_APPLICABLE


class PayrollResponse(BaseModel):
    month: str
    data: List[PayrollLine]
    total_payable: Decimal = ZERO


# ═════════════════════════════════════════════════════════════════════
# Manual overrides
# ═════════════════════════════════════════════════════════════════════


class PayrollAdjustmentUpdate(BaseModel):
    """Bonus / advance override for one employee-month."""

    tenant_id: uuid.UUID
    employee_id: uuid.UUID
    month: str = Field(..., description="YYYY-MM")
    bonus: Decimal = Field(ZERO, ge=0)
    advances: Decimal = Field(ZERO, ge=0)


class PayrollAdjustmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    tenant_id: uuid.UUID
    employee_id: uuid.UUID
    year: int
    month: int
    bonus: Decimal
    advances: Decimal
    line: Optional[PayrollLine] = None
