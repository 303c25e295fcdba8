from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..common.numbers import ZERO, parse_hours, round_money
from ..core.constants import MAX_WORKING_HOURS, OVERTIME_THRESHOLD_HOURS
from ..core.exceptions import ValidationError
from .model import NormalizedAttendance


def overtime_for(working_hours: Decimal) -> Decimal:
    """Hours worked beyond the daily threshold, never negative."""
    return max(ZERO, working_hours - OVERTIME_THRESHOLD_HOURS)


def normalize_attendance(*, present: bool, is_paid_leave: bool, working_hours: Any) -> NormalizedAttendance:
    """Apply the attendance invariants before a record is persisted.

    - paid leave: not present, zero working and overtime hours;
    - present: hours must be within [0, 24], overtime is everything above 10;
    - absent: zero working and overtime hours.

    Caller-supplied overtime is never accepted; it is always derived here.
    Hours are ignored (not validated) for paid leave and absent days.
    """
    if is_paid_leave:
        return NormalizedAttendance(present=False, is_paid_leave=True, working_hours=ZERO, overtime_hours=ZERO)

    if not present:
        return NormalizedAttendance(present=False, is_paid_leave=False, working_hours=ZERO, overtime_hours=ZERO)

    hours = parse_hours(working_hours)
    if hours < 0 or hours > MAX_WORKING_HOURS:
        raise ValidationError("Working hours must be between 0 and 24")
    hours = round_money(hours)

    return NormalizedAttendance(
        present=True,
        is_paid_leave=False,
        working_hours=hours,
        overtime_hours=overtime_for(hours),
    )
