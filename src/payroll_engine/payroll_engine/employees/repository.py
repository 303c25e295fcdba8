from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee, EmployeeExpenseProfile


class EmployeeRepository(Protocol):
    """Read-only port onto employee master data and their expense profiles."""

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_expense_profile(self, employee_id: int) -> Optional[EmployeeExpenseProfile]:
        """Latest expense profile of the employee, or None when none was recorded."""

        raise NotImplementedError
