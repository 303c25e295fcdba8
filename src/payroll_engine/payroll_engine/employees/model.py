from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as seen by payroll (owned by the HR collaborator)."""

    employee_id: int
    first_name: str
    last_name: str
    role: Optional[str] = None
    emirates_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class EmployeeExpenseProfile:
    """Read-only salary input. The engine never mutates it."""

    employee_id: int
    basic_salary: Decimal
    allowance: Decimal
