from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import MONEY_FIELDS, NEW_PAYROLL_FIELDS, PayrollFilter, PayrollRecord, PayrollTotals
from .repository import PayrollRepository

_DECIMAL_COLUMNS = MONEY_FIELDS + ("overtime_hours", "net")
_COLUMNS = ", ".join(("payroll_id",) + NEW_PAYROLL_FIELDS + ("created_at", "updated_at"))
_DUPLICATE_MESSAGE = "Payroll already exists for this employee and period"
# Period tokens are MM-YYYY; order by year, then month.
_PERIOD_ORDER = "SUBSTRING(period, 4, 4) DESC, SUBSTRING(period, 1, 2) DESC"


def _to_record(r: dict) -> PayrollRecord:
    values = {name: r.get(name) for name in ("payroll_id",) + NEW_PAYROLL_FIELDS + ("created_at", "updated_at")}
    for name in _DECIMAL_COLUMNS:
        values[name] = as_decimal(values.get(name))
    values["payroll_id"] = int(values["payroll_id"])
    values["employee_id"] = int(values["employee_id"])
    return PayrollRecord(**values)


def _where(flt: PayrollFilter) -> tuple[str, tuple]:
    clauses: list[str] = []
    params: list[object] = []

    if flt.employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(flt.employee_id))
    if flt.period:
        clauses.append("period=%s")
        params.append(flt.period)
    if flt.labour_card:
        clauses.append("labour_card=%s")
        params.append(flt.labour_card)
    if flt.labour_card_personal_no:
        clauses.append("labour_card_personal_no=%s")
        params.append(flt.labour_card_personal_no)
    if flt.created_from is not None:
        clauses.append("created_at >= %s")
        params.append(flt.created_from)
    if flt.created_to is not None:
        clauses.append("created_at < %s")
        params.append(flt.created_to)

    where = " AND ".join(clauses) if clauses else "1=1"
    return where, tuple(params)


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_employee_and_period(
        self,
        employee_id: int,
        period: str,
        *,
        exclude_id: Optional[int] = None,
    ) -> Optional[PayrollRecord]:
        sql = f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s AND period=%s"
        params: list[object] = [int(employee_id), period]
        if exclude_id is not None:
            sql += " AND payroll_id<>%s"
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, values: Mapping[str, Any]) -> int:
        columns = [name for name in NEW_PAYROLL_FIELDS + ("created_at",) if name in values]
        placeholders = ",".join(["%s"] * len(columns))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO payrolls ({', '.join(columns)}) VALUES ({placeholders})",
                    tuple(values[name] for name in columns),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(_DUPLICATE_MESSAGE) from e
            raise

    def update(self, payroll_id: int, values: Mapping[str, Any]) -> bool:
        columns = [name for name in NEW_PAYROLL_FIELDS if name in values]
        if not columns:
            return self.get_by_id(payroll_id) is not None

        assignments = ", ".join(f"{name}=%s" for name in columns)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE payrolls SET {assignments} WHERE payroll_id=%s",
                    tuple(values[name] for name in columns) + (int(payroll_id),),
                )
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(_DUPLICATE_MESSAGE) from e
            raise

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            return cur.rowcount > 0

    def list(self, flt: PayrollFilter, *, offset: int = 0, limit: Optional[int] = None) -> Sequence[PayrollRecord]:
        where, params = _where(flt)
        sql = f"SELECT {_COLUMNS} FROM payrolls WHERE {where} ORDER BY {_PERIOD_ORDER}, created_at DESC, payroll_id DESC"
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params = params + (int(limit), int(offset))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_record(r) for r in fetchall(cur)]

    def totals(self, flt: PayrollFilter) -> PayrollTotals:
        where, params = _where(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS cnt,
                       COALESCE(SUM(net), 0) AS total_net,
                       COALESCE(SUM(overtime), 0) AS total_overtime,
                       COALESCE(SUM(overtime_hours), 0) AS total_overtime_hours
                FROM payrolls
                WHERE {where}
                """,
                params,
            )
            r = fetchone(cur) or {}
            return PayrollTotals(
                count=int(r.get("cnt") or 0),
                total_net=as_decimal(r.get("total_net")),
                total_overtime=as_decimal(r.get("total_overtime")),
                total_overtime_hours=as_decimal(r.get("total_overtime_hours")),
            )
