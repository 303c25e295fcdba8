from datetime import date
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.attendance.service import AttendanceService
from src.payroll_engine.payroll_engine.core.enums import AttendanceType
from src.payroll_engine.payroll_engine.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def service(attendance_repo, employees):
    employees.add(1)
    return AttendanceService(attendance_repo, employees)


def test_record_attendance_derives_overtime(service):
    record = service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=12)

    assert record.working_hours == Decimal("12.00")
    assert record.overtime_hours == Decimal("2.00")
    assert record.type == AttendanceType.NORMAL


def test_marking_same_day_twice_replaces_entry(service, attendance_repo):
    first = service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=12)
    second = service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=9)

    assert first.attendance_id == second.attendance_id
    rows = service.get_day_records(1, date(2025, 3, 3))
    assert len(rows) == 1
    assert rows[0].overtime_hours == 0


def test_normal_and_project_entries_coexist_on_one_day(service):
    service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=8)
    service.record_attendance(
        employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=4, type="project", project_id=7
    )

    rows = service.get_day_records(1, date(2025, 3, 3))
    assert [r.type for r in rows] == [AttendanceType.NORMAL, AttendanceType.PROJECT]


def test_paid_leave_with_project_is_rejected(service):
    with pytest.raises(ValidationError):
        service.record_attendance(
            employee_id=1, work_date=date(2025, 3, 3), present=False, is_paid_leave=True, project_id=7
        )


def test_project_attendance_requires_project_id(service):
    with pytest.raises(ValidationError):
        service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=8, type="project")


def test_invalid_type_is_rejected(service):
    with pytest.raises(ValidationError):
        service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, type="remote")


def test_unknown_employee_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.record_attendance(employee_id=99, work_date=date(2025, 3, 3), present=True, working_hours=8)


def test_paid_leave_is_stored_with_zero_hours(service):
    record = service.record_attendance(
        employee_id=1, work_date=date(2025, 3, 4), present=True, is_paid_leave=True, working_hours=8
    )

    assert record.present is False
    assert record.is_paid_leave is True
    assert record.working_hours == 0


def test_delete_record(service):
    record = service.record_attendance(employee_id=1, work_date=date(2025, 3, 3), present=True, working_hours=8)

    service.delete_record(record.attendance_id)
    assert service.get_day_records(1, date(2025, 3, 3)) == []

    with pytest.raises(NotFoundError):
        service.delete_record(record.attendance_id)
