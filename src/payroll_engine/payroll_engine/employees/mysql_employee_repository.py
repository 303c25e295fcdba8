from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import Employee, EmployeeExpenseProfile
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, first_name, last_name, role, emirates_id
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                first_name=row["first_name"],
                last_name=row.get("last_name") or "",
                role=row.get("role"),
                emirates_id=row.get("emirates_id"),
            )

    def get_expense_profile(self, employee_id: int) -> Optional[EmployeeExpenseProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, basic_salary, allowance
                FROM employee_expenses
                WHERE employee_id=%s
                ORDER BY created_at DESC, expense_id DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return EmployeeExpenseProfile(
                employee_id=int(row["employee_id"]),
                basic_salary=as_decimal(row.get("basic_salary")),
                allowance=as_decimal(row.get("allowance")),
            )
