from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.numbers import ZERO, round_money
from ..common.validators import require_id
from ..core.constants import DEFAULT_RECENT_PAYROLLS
from ..core.enums import AttendanceType
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import DEDUCTION_FIELDS, PayrollFilter, PayrollRecord
from .overtime import OvertimeCalculator, OvertimeResult
from .period import Period, PeriodResolver
from .repository import PayrollRepository

SUNDAY = 6
UNKNOWN_ROLE = "Unknown"


def _f(value: Decimal) -> float:
    return float(round_money(value))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class DayAttendance:
    work_date: date
    status: str  # present | duty_off | absent | unmarked
    working_hours: Decimal
    overtime_hours: Decimal
    entries: tuple[AttendanceRecord, ...] = ()

    @property
    def is_sunday(self) -> bool:
        return self.work_date.weekday() == SUNDAY

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "weekday": self.work_date.strftime("%A"),
            "isSunday": self.is_sunday,
            "status": self.status,
            "workingHours": _f(self.working_hours),
            "overtimeHours": _f(self.overtime_hours),
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class TypeTotals:
    present_days: int = 0
    working_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "presentDays": self.present_days,
            "totalWorkingHours": _f(self.working_hours),
            "totalOvertimeHours": _f(self.overtime_hours),
        }


@dataclass(frozen=True)
class AttendanceSummaryTotals:
    total_days: int
    present_days: int
    absent_days: int
    duty_off_days: int
    unmarked_days: int
    total_hours: Decimal
    overtime_hours: Decimal
    sundays: int
    sunday_working_days: int
    sunday_overtime_hours: Decimal

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "dutyOffDays": self.duty_off_days,
            "unmarkedDays": self.unmarked_days,
            "totalHours": _f(self.total_hours),
            "overtimeHours": _f(self.overtime_hours),
            "sundays": self.sundays,
            "sundayWorkingDays": self.sunday_working_days,
            "sundayOvertimeHours": _f(self.sunday_overtime_hours),
        }


@dataclass(frozen=True)
class AttendanceSummary:
    employee_id: int
    period: Period
    days: Sequence[DayAttendance]
    summary: AttendanceSummaryTotals
    totals_by_type: dict[str, TypeTotals]

    def to_dict(self) -> dict:
        return {
            "employee": self.employee_id,
            "month": self.period.month,
            "year": self.period.year,
            "records": [d.to_dict() for d in self.days],
            "summary": self.summary.to_dict(),
            "totals": {k: v.to_dict() for k, v in self.totals_by_type.items()},
        }


@dataclass(frozen=True)
class EmployeeOvertimeSummary:
    employee: Employee
    basic_salary: Decimal
    allowance: Decimal
    period: Period
    overtime: OvertimeResult

    def to_dict(self) -> dict:
        return {
            "employee": {
                "id": self.employee.employee_id,
                "firstName": self.employee.first_name,
                "lastName": self.employee.last_name,
                "role": self.employee.role,
                "emiratesId": self.employee.emirates_id,
                "basicSalary": float(self.basic_salary),
                "allowance": float(self.allowance),
            },
            "overtime": {
                "previousMonthAmount": float(self.overtime.overtime_amount),
                "previousMonthHours": float(self.overtime.overtime_hours),
                "hourlyRate": float(self.overtime.hourly_rate),
                "daysInMonth": self.overtime.days_in_month,
                "period": self.period.token,
            },
        }


@dataclass(frozen=True)
class RoleTotals:
    count: int
    total_salary: Decimal
    average_salary: Decimal

    def to_dict(self) -> dict:
        return {"count": self.count, "totalSalary": _f(self.total_salary), "averageSalary": _f(self.average_salary)}


@dataclass(frozen=True)
class PayrollReport:
    period: Period
    total_payroll: Decimal = ZERO
    average_salary: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    total_employees: int = 0
    breakdown: dict[str, Decimal] = field(default_factory=dict)
    deductions: dict[str, Decimal] = field(default_factory=dict)
    payroll_by_role: dict[str, RoleTotals] = field(default_factory=dict)
    recent_payrolls: list[dict] = field(default_factory=list)

    @property
    def total_deductions(self) -> Decimal:
        return self.deductions.get("total_deductions", ZERO)

    def to_dict(self) -> dict:
        return {
            "period": f"{self.period.month}/{self.period.year}",
            "totalPayroll": _f(self.total_payroll),
            "averageSalary": _f(self.average_salary),
            "overtimeHours": _f(self.overtime_hours),
            "totalEmployees": self.total_employees,
            "breakdown": {_camel(k): _f(v) for k, v in self.breakdown.items()},
            "deductions": {_camel(k): _f(v) for k, v in self.deductions.items()},
            "payrollByRole": {k: v.to_dict() for k, v in self.payroll_by_role.items()},
            "recentPayrolls": self.recent_payrolls,
            "summary": {
                "grossPay": _f(self.total_payroll + self.total_deductions),
                "totalDeductions": _f(self.total_deductions),
                "netPay": _f(self.total_payroll),
            },
        }


class PayrollReportService:
    """Read-side aggregation for dashboards and payslips."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        payrolls: PayrollRepository,
        calculator: OvertimeCalculator,
        resolver: PeriodResolver,
        *,
        recent_limit: int = DEFAULT_RECENT_PAYROLLS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._payrolls = payrolls
        self._calculator = calculator
        self._resolver = resolver
        self._recent_limit = int(recent_limit)

    def _require_employee(self, employee_id: Any) -> Employee:
        employee = self._employees.get_by_id(require_id(employee_id, "Employee ID"))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_attendance_summary(self, employee_id: Any, month: Any, year: Any) -> AttendanceSummary:
        period = Period.of(month, year)
        employee = self._require_employee(employee_id)
        date_range = self._resolver.attendance_range(period)

        records = self._attendance.list_for_employee_between(
            employee_id=employee.employee_id,
            start_date=date_range.start,
            end_date=date_range.end,
        )
        by_date: dict[date, list[AttendanceRecord]] = {}
        for r in records:
            by_date.setdefault(r.work_date, []).append(r)

        days: list[DayAttendance] = []
        present_days = absent_days = duty_off_days = unmarked_days = 0
        sundays = sunday_working_days = 0
        total_hours = overtime_hours = sunday_overtime_hours = ZERO

        current = date_range.start
        while current <= date_range.end:
            entries = by_date.get(current, [])
            present_entries = [e for e in entries if e.present]
            working = sum((e.working_hours for e in present_entries), ZERO)
            overtime = sum((e.overtime_hours for e in present_entries), ZERO)

            if present_entries:
                status = "present"
                present_days += 1
            elif any(e.is_paid_leave for e in entries):
                status = "duty_off"
                duty_off_days += 1
            elif entries:
                status = "absent"
                absent_days += 1
            else:
                status = "unmarked"
                unmarked_days += 1

            day = DayAttendance(
                work_date=current,
                status=status,
                working_hours=working,
                overtime_hours=overtime,
                entries=tuple(entries),
            )
            if day.is_sunday:
                sundays += 1
                if present_entries:
                    sunday_working_days += 1
                    sunday_overtime_hours += overtime

            total_hours += working
            overtime_hours += overtime
            days.append(day)
            current += timedelta(days=1)

        totals_by_type = {t.value: self._type_totals([r for r in records if r.type == t]) for t in AttendanceType}
        totals_by_type["overall"] = self._type_totals(records)

        return AttendanceSummary(
            employee_id=employee.employee_id,
            period=period,
            days=days,
            summary=AttendanceSummaryTotals(
                total_days=period.days_in_month,
                present_days=present_days,
                absent_days=absent_days,
                duty_off_days=duty_off_days,
                unmarked_days=unmarked_days,
                total_hours=total_hours,
                overtime_hours=overtime_hours,
                sundays=sundays,
                sunday_working_days=sunday_working_days,
                sunday_overtime_hours=sunday_overtime_hours,
            ),
            totals_by_type=totals_by_type,
        )

    @staticmethod
    def _type_totals(records: Sequence[AttendanceRecord]) -> TypeTotals:
        return TypeTotals(
            present_days=sum(1 for r in records if r.present),
            working_hours=sum((r.working_hours for r in records), ZERO),
            overtime_hours=sum((r.overtime_hours for r in records), ZERO),
        )

    def get_employee_overtime_summary(self, employee_id: Any, *, now: Optional[datetime] = None) -> EmployeeOvertimeSummary:
        """Previous-month overtime of one employee, as shown on the payslip screen."""
        employee = self._require_employee(employee_id)
        profile = self._employees.get_expense_profile(employee.employee_id)
        basic_salary = profile.basic_salary if profile else ZERO
        allowance = profile.allowance if profile else ZERO

        period = self._resolver.period_for(now or self._resolver.now())
        overtime = self._calculator.calculate(employee.employee_id, basic_salary, period=period)
        return EmployeeOvertimeSummary(
            employee=employee,
            basic_salary=basic_salary,
            allowance=allowance,
            period=period,
            overtime=overtime,
        )

    def build_payroll_report(self, month: Any, year: Any) -> PayrollReport:
        """Dashboard aggregates for the payroll of ``month``/``year``.

        Rows are selected by the period's creation window (payroll for
        November is created in December), not by parsing period tokens.
        """
        period = Period.of(month, year)
        window = self._resolver.creation_window(period)
        payrolls = list(self._payrolls.list(PayrollFilter(created_from=window.start, created_to=window.end)))

        if not payrolls:
            return PayrollReport(
                period=period,
                breakdown={k: ZERO for k in ("basic_salary", "overtime", "allowances", "bonuses", "transport", "medical")},
                deductions={k: ZERO for k in DEDUCTION_FIELDS + ("total_deductions",)},
            )

        count = len(payrolls)
        employees = self._employees_by_id(payrolls)

        total_payroll = sum((p.net for p in payrolls), ZERO)

        def average(attr: str) -> Decimal:
            return round_money(sum((getattr(p, attr) for p in payrolls), ZERO) / count)

        breakdown = {
            "basic_salary": average("basic_salary"),
            "overtime": average("overtime"),
            "allowances": average("allowance"),
            "bonuses": average("bonus"),
            "transport": average("transport"),
            "medical": average("medical"),
        }

        deductions = {name: sum((getattr(p, name) for p in payrolls), ZERO) for name in DEDUCTION_FIELDS}
        deductions["total_deductions"] = sum(deductions.values(), ZERO)

        # Fold all records first; averages only once the totals are final.
        folded: dict[str, list] = {}
        for p in payrolls:
            employee = employees.get(p.employee_id)
            role = (employee.role if employee else None) or UNKNOWN_ROLE
            entry = folded.setdefault(role, [0, ZERO])
            entry[0] += 1
            entry[1] += p.net
        payroll_by_role = {
            role: RoleTotals(count=n, total_salary=total, average_salary=round_money(total / n))
            for role, (n, total) in folded.items()
        }

        recent = [self._recent_row(p, employees.get(p.employee_id)) for p in payrolls[: self._recent_limit]]

        return PayrollReport(
            period=period,
            total_payroll=total_payroll,
            average_salary=round_money(total_payroll / count),
            overtime_hours=sum((p.overtime_hours for p in payrolls), ZERO),
            total_employees=count,
            breakdown=breakdown,
            deductions=deductions,
            payroll_by_role=payroll_by_role,
            recent_payrolls=recent,
        )

    def _employees_by_id(self, payrolls: Sequence[PayrollRecord]) -> dict[int, Optional[Employee]]:
        return {eid: self._employees.get_by_id(eid) for eid in {p.employee_id for p in payrolls}}

    @staticmethod
    def _recent_row(p: PayrollRecord, employee: Optional[Employee]) -> dict:
        return {
            "id": p.payroll_id,
            "employeeName": employee.full_name if employee else "",
            "role": (employee.role if employee else None) or UNKNOWN_ROLE,
            "period": p.period,
            "basicSalary": float(p.basic_salary),
            "overtime": float(p.overtime),
            "allowances": float(p.allowance + p.transport + p.medical),
            "deductions": float(p.total_deductions),
            "netSalary": float(p.net),
        }
