from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance entry per employee, date and type."""

    attendance_id: int
    employee_id: int
    work_date: date
    type: AttendanceType
    present: bool
    is_paid_leave: bool
    working_hours: Decimal
    overtime_hours: Decimal
    project_id: Optional[int] = None
    marked_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee": self.employee_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "type": self.type.value,
            "present": self.present,
            "isPaidLeave": self.is_paid_leave,
            "workingHours": float(self.working_hours),
            "overtimeHours": float(self.overtime_hours),
            "project": self.project_id,
            "markedBy": self.marked_by,
        }


@dataclass(frozen=True)
class NormalizedAttendance:
    """Write-side values after the attendance invariants were applied."""

    present: bool
    is_paid_leave: bool
    working_hours: Decimal
    overtime_hours: Decimal
