from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import PayrollFilter, PayrollRecord, PayrollTotals


class PayrollRepository(Protocol):
    """Persistence port for payroll records.

    Implementations must enforce uniqueness of (employee_id, period) at the
    storage level and raise ``ConflictError`` when a write violates it.
    """

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def find_by_employee_and_period(
        self,
        employee_id: int,
        period: str,
        *,
        exclude_id: Optional[int] = None,
    ) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, payroll_id: int, values: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def list(self, flt: PayrollFilter, *, offset: int = 0, limit: Optional[int] = None) -> Sequence[PayrollRecord]:
        """Filtered records, newest period first (year then month), then created_at desc."""

        raise NotImplementedError

    def totals(self, flt: PayrollFilter) -> PayrollTotals:
        raise NotImplementedError
