from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.numbers import ZERO, round_money
from ..core.constants import FALLBACK_DAYS_IN_MONTH
from .calculator.base import OvertimeRatePolicy
from .calculator.standard_calculator import StandardOvertimeRate
from .period import Period, PeriodResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OvertimeResult:
    overtime_hours: Decimal
    overtime_amount: Decimal
    hourly_rate: Decimal
    days_in_month: int

    @classmethod
    def zero(cls) -> "OvertimeResult":
        return cls(overtime_hours=ZERO, overtime_amount=ZERO, hourly_rate=ZERO, days_in_month=FALLBACK_DAYS_IN_MONTH)

    def to_dict(self) -> dict:
        return {
            "overtimeHours": float(self.overtime_hours),
            "overtimeAmount": float(self.overtime_amount),
            "hourlyRate": float(self.hourly_rate),
            "daysInMonth": self.days_in_month,
        }


class OvertimeCalculator:
    """Overtime hours and amount of one employee for one payroll period.

    Stateless; the attendance ledger and the period resolver are injected.

    Failure policy: any error while reading attendance or computing the
    amount is logged and a zeroed result (``OvertimeResult.zero()``) is
    returned, so payroll creation is never blocked by the attendance side.

    ``round_rate_first`` selects how the amount is rounded: by default the
    amount is ``hours x exact rate`` rounded once to the cent, and only the
    reported ``hourly_rate`` is rounded; when True the already-rounded rate is
    multiplied and the product rounded again.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: PeriodResolver,
        *,
        rate_policy: Optional[OvertimeRatePolicy] = None,
        round_rate_first: bool = False,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._rate_policy = rate_policy or StandardOvertimeRate()
        self._round_rate_first = bool(round_rate_first)

    def calculate(self, employee_id: int, basic_salary: Decimal, *, period: Optional[Period] = None) -> OvertimeResult:
        try:
            return self._calculate(employee_id, Decimal(basic_salary), period or self._resolver.current_period())
        except Exception:
            logger.exception("Error calculating overtime for employee %s; falling back to zero", employee_id)
            return OvertimeResult.zero()

    def _calculate(self, employee_id: int, basic_salary: Decimal, period: Period) -> OvertimeResult:
        date_range = self._resolver.attendance_range(period)
        days_in_month = period.days_in_month

        records = self._attendance.list_for_employee_between(
            employee_id=employee_id,
            start_date=date_range.start,
            end_date=date_range.end,
            present_only=True,
        )
        total_hours = sum((Decimal(r.overtime_hours or 0) for r in records if r.present), ZERO)

        exact_rate = self._rate_policy.hourly_rate(basic_salary=basic_salary, days_in_month=days_in_month)
        hourly_rate = round_money(exact_rate)
        multiplier = hourly_rate if self._round_rate_first else exact_rate
        amount = round_money(total_hours * multiplier)

        return OvertimeResult(
            overtime_hours=round_money(total_hours),
            overtime_amount=amount,
            hourly_rate=hourly_rate,
            days_in_month=days_in_month,
        )
