from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, type, present, is_paid_leave,
    working_hours, overtime_hours, project_id, marked_by, created_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        type=AttendanceType(r["type"]),
        present=bool(r["present"]),
        is_paid_leave=bool(r["is_paid_leave"]),
        working_hours=as_decimal(r.get("working_hours")),
        overtime_hours=as_decimal(r.get("overtime_hours")),
        project_id=r.get("project_id"),
        marked_by=r.get("marked_by"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                ORDER BY type ASC
                """,
                (int(employee_id), work_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes lastrowid point at the updated row on duplicates.
            cur.execute(
                """
                INSERT INTO attendance_records
                    (employee_id, work_date, type, present, is_paid_leave,
                     working_hours, overtime_hours, project_id, marked_by)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    present=VALUES(present),
                    is_paid_leave=VALUES(is_paid_leave),
                    working_hours=VALUES(working_hours),
                    overtime_hours=VALUES(overtime_hours),
                    project_id=VALUES(project_id),
                    marked_by=VALUES(marked_by)
                """,
                (
                    int(employee_id),
                    work_date,
                    type.value,
                    int(present),
                    int(is_paid_leave),
                    working_hours,
                    overtime_hours,
                    project_id,
                    marked_by,
                ),
            )
            return int(cur.lastrowid)

    def list_for_employee_between(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        present_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["employee_id=%s", "work_date BETWEEN %s AND %s"]
        params: list[object] = [int(employee_id), start_date, end_date]
        if present_only:
            clauses.append("present=1")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date ASC, type ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
