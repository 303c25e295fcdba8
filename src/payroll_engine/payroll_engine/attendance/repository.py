from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        """All records of the day (one per type), ordered by type."""

        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        type: AttendanceType,
        present: bool,
        is_paid_leave: bool,
        working_hours: Decimal,
        overtime_hours: Decimal,
        project_id: Optional[int] = None,
        marked_by: Optional[int] = None,
    ) -> int:
        """Insert or replace the record keyed by (employee, date, type); returns its id."""

        raise NotImplementedError

    def list_for_employee_between(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        present_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        """Records with start_date <= work_date <= end_date, ordered by date then type."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
