from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class OvertimeRatePolicy(ABC):
    """Rate interface (Strategy Pattern for overtime pay)."""

    @abstractmethod
    def hourly_rate(self, *, basic_salary: Decimal, days_in_month: int) -> Decimal:
        """Unrounded hourly overtime rate for a monthly basic salary."""

        raise NotImplementedError
