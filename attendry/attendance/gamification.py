"""Gamification ledger — points and punctuality streak.

Applied exactly once per successful check-in, never on check-out or manual
entry. The caller holds the employee row lock and flushes the update together
with the new attendance record.
"""

from __future__ import annotations

from dataclasses import dataclass

from attendry.common.constants import (
    LATE_PENALTY_POINTS,
    ON_TIME_POINTS,
    STREAK_BONUS_EVERY,
    STREAK_BONUS_POINTS,
    AttendanceStatus,
)
from attendry.core_hr.models import Employee


@dataclass(frozen=True)
class LedgerUpdate:
    points: int
    streak: int
    points_delta: int
    bonus_awarded: bool


def compute_check_in_update(
    points: int,
    streak: int,
    status: AttendanceStatus,
) -> LedgerUpdate:
    """New balances after a check-in with ``status``."""

    points = points or 0
    streak = streak or 0

    if status == AttendanceStatus.on_time:
        new_points = points + ON_TIME_POINTS
        new_streak = streak + 1
    else:
        new_points = max(0, points - LATE_PENALTY_POINTS)
        new_streak = 0

    bonus = new_streak > 0 and new_streak % STREAK_BONUS_EVERY == 0
    if bonus:
        new_points += STREAK_BONUS_POINTS

    return LedgerUpdate(
        points=new_points,
        streak=new_streak,
        points_delta=new_points - points,
        bonus_awarded=bonus,
    )


def apply_check_in(employee: Employee, status: AttendanceStatus) -> LedgerUpdate:
    update = compute_check_in_update(employee.points, employee.streak, status)
    employee.points = update.points
    employee.streak = update.streak
    return update
