from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.payroll_engine.payroll_engine.attendance.model import AttendanceRecord
from src.payroll_engine.payroll_engine.container import wire_services
from src.payroll_engine.payroll_engine.core.enums import AttendanceType
from src.payroll_engine.payroll_engine.core.exceptions import ConflictError
from src.payroll_engine.payroll_engine.employees.model import Employee, EmployeeExpenseProfile
from src.payroll_engine.payroll_engine.payroll.model import PayrollFilter, PayrollRecord, PayrollTotals
from src.payroll_engine.payroll_engine.payroll.period import PeriodResolver


class InMemoryEmployees:
    def __init__(self):
        self.employees: dict[int, Employee] = {}
        self.profiles: dict[int, EmployeeExpenseProfile] = {}

    def add(self, employee_id: int, *, role: Optional[str] = "worker", basic_salary=None, allowance="0") -> Employee:
        employee = Employee(employee_id=employee_id, first_name=f"Emp{employee_id}", last_name="Test", role=role)
        self.employees[employee_id] = employee
        if basic_salary is not None:
            self.profiles[employee_id] = EmployeeExpenseProfile(
                employee_id=employee_id,
                basic_salary=Decimal(str(basic_salary)),
                allowance=Decimal(str(allowance)),
            )
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def get_expense_profile(self, employee_id: int) -> Optional[EmployeeExpenseProfile]:
        return self.profiles.get(employee_id)


class InMemoryAttendance:
    def __init__(self):
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._rows.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date):
        rows = [r for r in self._rows.values() if r.employee_id == employee_id and r.work_date == work_date]
        return sorted(rows, key=lambda r: r.type.value)

    def upsert(self, *, employee_id, work_date, type, present, is_paid_leave, working_hours, overtime_hours, project_id=None, marked_by=None) -> int:
        existing = next(
            (r for r in self._rows.values() if (r.employee_id, r.work_date, r.type) == (employee_id, work_date, type)),
            None,
        )
        if existing:
            attendance_id = existing.attendance_id
        else:
            self._id += 1
            attendance_id = self._id
        self._rows[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            type=type,
            present=present,
            is_paid_leave=is_paid_leave,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
            project_id=project_id,
            marked_by=marked_by,
        )
        return attendance_id

    def list_for_employee_between(self, *, employee_id, start_date, end_date, present_only=False):
        rows = [
            r
            for r in self._rows.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date and (r.present or not present_only)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.type.value))

    def delete(self, attendance_id: int) -> bool:
        return self._rows.pop(attendance_id, None) is not None

    # test helper: store a raw row without going through normalization
    def seed(self, employee_id: int, work_date: date, *, working_hours="0", overtime_hours="0", present=True, is_paid_leave=False, type=AttendanceType.NORMAL):
        return self.upsert(
            employee_id=employee_id,
            work_date=work_date,
            type=type,
            present=present,
            is_paid_leave=is_paid_leave,
            working_hours=Decimal(str(working_hours)),
            overtime_hours=Decimal(str(overtime_hours)),
            project_id=1 if type == AttendanceType.PROJECT else None,
        )


class FailingAttendance(InMemoryAttendance):
    def list_for_employee_between(self, **kwargs):
        raise RuntimeError("attendance store unavailable")


class InMemoryPayrolls:
    """Mirrors the UNIQUE(employee_id, period) key of the payrolls table."""

    def __init__(self):
        self._rows: dict[int, PayrollRecord] = {}
        self._id = 0

    def _check_unique(self, employee_id: int, period: str, exclude_id: Optional[int] = None) -> None:
        if self._find(employee_id, period, exclude_id):
            raise ConflictError("Payroll already exists for this employee and period")

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self._rows.get(payroll_id)

    def _find(self, employee_id, period, exclude_id=None):
        for r in self._rows.values():
            if r.employee_id == employee_id and r.period == period and r.payroll_id != exclude_id:
                return r
        return None

    def find_by_employee_and_period(self, employee_id, period, *, exclude_id=None):
        return self._find(employee_id, period, exclude_id)

    def create(self, values) -> int:
        self._check_unique(values["employee_id"], values["period"])
        self._id += 1
        self._rows[self._id] = PayrollRecord(payroll_id=self._id, **values)
        return self._id

    def update(self, payroll_id, values) -> bool:
        current = self._rows.get(payroll_id)
        if not current:
            return False
        self._check_unique(values.get("employee_id", current.employee_id), current.period, exclude_id=payroll_id)
        self._rows[payroll_id] = dataclasses.replace(current, **values)
        return True

    def delete(self, payroll_id) -> bool:
        return self._rows.pop(payroll_id, None) is not None

    def _matching(self, flt: PayrollFilter):
        rows = []
        for r in self._rows.values():
            if flt.employee_id is not None and r.employee_id != flt.employee_id:
                continue
            if flt.period and r.period != flt.period:
                continue
            if flt.labour_card and r.labour_card != flt.labour_card:
                continue
            if flt.labour_card_personal_no and r.labour_card_personal_no != flt.labour_card_personal_no:
                continue
            if flt.created_from is not None and r.created_at < flt.created_from:
                continue
            if flt.created_to is not None and r.created_at >= flt.created_to:
                continue
            rows.append(r)
        return sorted(rows, key=lambda r: (r.period[3:], r.period[:2], r.created_at, r.payroll_id), reverse=True)

    def list(self, flt, *, offset=0, limit=None):
        rows = self._matching(flt)
        return rows[offset : offset + limit] if limit is not None else rows[offset:]

    def totals(self, flt) -> PayrollTotals:
        rows = self._matching(flt)
        return PayrollTotals(
            count=len(rows),
            total_net=sum((r.net for r in rows), Decimal("0")),
            total_overtime=sum((r.overtime for r in rows), Decimal("0")),
            total_overtime_hours=sum((r.overtime_hours for r in rows), Decimal("0")),
        )


APRIL_2025 = datetime(2025, 4, 15, 10, 0)


@pytest.fixture
def employees():
    return InMemoryEmployees()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def payrolls_repo():
    return InMemoryPayrolls()


@pytest.fixture
def resolver():
    return PeriodResolver(clock=lambda: APRIL_2025)


@pytest.fixture
def container(employees, attendance_repo, payrolls_repo, resolver):
    return wire_services(
        attendance_repo=attendance_repo,
        employees_repo=employees,
        payrolls_repo=payrolls_repo,
        resolver=resolver,
    )


@pytest.fixture
def failing_attendance():
    return FailingAttendance()
