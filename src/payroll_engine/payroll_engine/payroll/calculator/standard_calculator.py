from __future__ import annotations

from decimal import Decimal

from ...core.constants import OVERTIME_RATE_DIVISOR
from .base import OvertimeRatePolicy


class StandardOvertimeRate(OvertimeRatePolicy):
    """Standard rule: daily wage (basic / days in month) divided by 10 hours."""

    def hourly_rate(self, *, basic_salary: Decimal, days_in_month: int) -> Decimal:
        if days_in_month <= 0:
            raise ValueError(f"days_in_month must be positive, got {days_in_month}")
        return (Decimal(basic_salary) / Decimal(days_in_month)) / OVERTIME_RATE_DIVISOR
