"""Muster roll schemas."""

import uuid
from typing import Dict, List

from pydantic import BaseModel

from attendry.common.constants import MusterSymbol


class MusterRow(BaseModel):
    employee_id: uuid.UUID
    employee_name: str
    daily_status: Dict[int, MusterSymbol]

    def count(self, symbol: MusterSymbol) -> int:
        return sum(1 for value in self.daily_status.values() if value == symbol)


class MusterResponse(BaseModel):
    month: str
    days_in_month: int
    data: List[MusterRow]
