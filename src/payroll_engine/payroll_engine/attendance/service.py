from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.validators import require_id
from ..core.enums import AttendanceType
from ..core.exceptions import InternalError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord
from .normalization import normalize_attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    @staticmethod
    def _parse_type(value: Any) -> AttendanceType:
        if isinstance(value, AttendanceType):
            return value
        try:
            return AttendanceType(str(value or AttendanceType.NORMAL.value).strip().lower())
        except ValueError:
            raise ValidationError("Invalid attendance type")

    def record_attendance(
        self,
        *,
        employee_id: Any,
        work_date: Optional[date],
        present: bool,
        is_paid_leave: bool = False,
        working_hours: Any = 0,
        type: Any = AttendanceType.NORMAL,
        project_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> AttendanceRecord:
        """Mark (or re-mark) an employee's attendance for one day.

        The write is an upsert on (employee, date, type), so marking the same
        day twice replaces the earlier entry instead of duplicating it.
        """
        employee_id = require_id(employee_id, "Employee ID")
        if work_date is None:
            raise ValidationError("Date is required")
        attendance_type = self._parse_type(type)

        if is_paid_leave and project_id:
            raise ValidationError("Paid leave cannot be associated with a project")
        if attendance_type == AttendanceType.PROJECT and not is_paid_leave and not project_id:
            raise ValidationError("Project ID is required for project attendance")

        normalized = normalize_attendance(
            present=bool(present),
            is_paid_leave=bool(is_paid_leave),
            working_hours=working_hours,
        )

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        attendance_id = self._attendance.upsert(
            employee_id=employee_id,
            work_date=work_date,
            type=attendance_type,
            present=normalized.present,
            is_paid_leave=normalized.is_paid_leave,
            working_hours=normalized.working_hours,
            overtime_hours=normalized.overtime_hours,
            project_id=None if normalized.is_paid_leave else project_id,
            marked_by=marked_by,
        )
        logger.info(
            "Attendance saved for employee %s on %s (%s): working=%s overtime=%s paid_leave=%s",
            employee_id,
            work_date,
            attendance_type.value,
            normalized.working_hours,
            normalized.overtime_hours,
            normalized.is_paid_leave,
        )

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise InternalError("Attendance was saved but could not be read back")
        return record

    def get_day_records(self, employee_id: Any, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(require_id(employee_id, "Employee ID"), work_date)

    def delete_record(self, attendance_id: Any) -> None:
        attendance_id = require_id(attendance_id, "Attendance ID")
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s deleted", attendance_id)
