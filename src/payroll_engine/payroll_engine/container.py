from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.overtime import OvertimeCalculator
from .payroll.period import PeriodResolver
from .payroll.report_service import PayrollReportService
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    employees_repo: EmployeeRepository
    payrolls_repo: PayrollRepository

    period_resolver: PeriodResolver
    overtime_calculator: OvertimeCalculator
    attendance_service: AttendanceService
    payroll_service: PayrollService
    payroll_report_service: PayrollReportService


def wire_services(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    payrolls_repo: PayrollRepository,
    resolver: PeriodResolver | None = None,
    round_rate_first: bool = False,
    page_size: int = 10,
    recent_limit: int = 10,
) -> Container:
    """Compose services over any repository implementations (MySQL or in-memory)."""
    resolver = resolver or PeriodResolver()
    calculator = OvertimeCalculator(attendance_repo, resolver, round_rate_first=round_rate_first)

    return Container(
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        payrolls_repo=payrolls_repo,
        period_resolver=resolver,
        overtime_calculator=calculator,
        attendance_service=AttendanceService(attendance_repo, employees_repo),
        payroll_service=PayrollService(payrolls_repo, employees_repo, calculator, resolver, page_size=page_size),
        payroll_report_service=PayrollReportService(
            attendance_repo,
            employees_repo,
            payrolls_repo,
            calculator,
            resolver,
            recent_limit=recent_limit,
        ),
    )


def build_container(*, db_config: dict, round_rate_first: bool = False, page_size: int = 10, recent_limit: int = 10) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        payrolls_repo=MySQLPayrollRepository(conn),
        round_rate_first=round_rate_first,
        page_size=page_size,
        recent_limit=recent_limit,
    )
