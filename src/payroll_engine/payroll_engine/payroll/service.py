from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.numbers import ZERO, round_money, to_decimal
from ..common.validators import require_id, require_month, require_non_empty, require_non_negative, require_year
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import (
    DEDUCTION_FIELDS,
    EARNING_FIELDS,
    IMMUTABLE_FIELDS,
    UPDATABLE_FIELDS,
    PayrollFilter,
    PayrollPage,
    PayrollRecord,
    compute_net,
)
from .overtime import OvertimeCalculator
from .period import Period, PeriodResolver
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGE = "Payroll already exists for this employee and period"
MAX_PAGE_SIZE = 100


def _parse_amounts(values: Mapping[str, Any]) -> dict[str, Decimal]:
    """Earnings and deductions rounded to the cent, as stored, so net matches the stored row."""
    amounts: dict[str, Decimal] = {}
    for name in EARNING_FIELDS + DEDUCTION_FIELDS:
        if name in values and values[name] is not None:
            amounts[name] = round_money(require_non_negative(to_decimal(values[name], name, default=ZERO), name))
    return amounts


class PayrollService:
    """Builds payroll records: one per employee per period, net always derived."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        calculator: OvertimeCalculator,
        resolver: PeriodResolver,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._calculator = calculator
        self._resolver = resolver
        self._page_size = int(page_size)

    def _require(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(payroll_id)
        if not record:
            raise NotFoundError("Payroll not found")
        return record

    def create_payroll(
        self,
        *,
        employee_id: Any,
        labour_card: str,
        labour_card_personal_no: str,
        components: Optional[Mapping[str, Any]] = None,
        remark: Optional[str] = None,
        created_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> PayrollRecord:
        """Create the payroll of the month preceding ``now`` for one employee.

        ``components`` holds the earnings and deductions the caller controls;
        missing ones default to 0, except the allowance which defaults to the
        employee's expense profile. Overtime comes from the calculator and is
        frozen on the record.
        """
        employee_id = require_id(employee_id, "Employee ID")
        labour_card = require_non_empty(labour_card, "Labour card")
        labour_card_personal_no = require_non_empty(labour_card_personal_no, "Labour card personal number")
        amounts = _parse_amounts(components or {})

        now = now or self._resolver.now()
        period = self._resolver.period_for(now)

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        if self._payrolls.find_by_employee_and_period(employee_id, period.token):
            raise ConflictError(_DUPLICATE_MESSAGE)

        profile = self._employees.get_expense_profile(employee_id)
        basic_salary = profile.basic_salary if profile else ZERO
        if "allowance" not in amounts:
            amounts["allowance"] = profile.allowance if profile else ZERO

        overtime = self._calculator.calculate(employee_id, basic_salary, period=period)

        values: dict[str, Any] = {name: ZERO for name in EARNING_FIELDS + DEDUCTION_FIELDS}
        values.update(amounts)
        values.update(
            employee_id=employee_id,
            labour_card=labour_card,
            labour_card_personal_no=labour_card_personal_no,
            period=period.token,
            basic_salary=basic_salary,
            overtime=overtime.overtime_amount,
            overtime_hours=overtime.overtime_hours,
            remark=(remark or "").strip() or None,
            created_by=created_by,
            created_at=now,
        )
        values["net"] = compute_net(values)

        payroll_id = self._payrolls.create(values)
        logger.info(
            "Payroll %s created for employee %s, period %s: overtime=%s net=%s",
            payroll_id,
            employee_id,
            period.token,
            overtime.overtime_amount,
            values["net"],
        )
        record = self._payrolls.get_by_id(payroll_id)
        if not record:
            raise InternalError("Payroll was saved but could not be read back")
        return record

    def update_payroll(self, payroll_id: Any, changes: Mapping[str, Any]) -> PayrollRecord:
        """Revise a payroll record.

        ``period`` and ``overtime`` (and other creation-time fields) are
        dropped from ``changes``; net is recomputed from the merged values and
        the overtime calculator is not re-run.
        """
        payroll_id = require_id(payroll_id, "Payroll ID")
        existing = self._require(payroll_id)

        stripped = sorted(set(changes) & IMMUTABLE_FIELDS)
        if stripped:
            logger.warning("Ignoring immutable payroll fields %s on update of payroll %s", stripped, payroll_id)
        changes = {k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS}

        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown payroll fields: {', '.join(unknown)}")

        updates: dict[str, Any] = _parse_amounts(changes)
        if "labour_card" in changes:
            updates["labour_card"] = require_non_empty(changes["labour_card"], "Labour card")
        if "labour_card_personal_no" in changes:
            updates["labour_card_personal_no"] = require_non_empty(
                changes["labour_card_personal_no"], "Labour card personal number"
            )
        if "remark" in changes:
            updates["remark"] = (changes["remark"] or "").strip() or None

        employee_id = existing.employee_id
        if changes.get("employee_id") is not None:
            new_employee_id = require_id(changes["employee_id"], "Employee ID")
            if new_employee_id != existing.employee_id:
                if not self._employees.get_by_id(new_employee_id):
                    raise NotFoundError("Employee not found")
                if self._payrolls.find_by_employee_and_period(new_employee_id, existing.period, exclude_id=payroll_id):
                    raise ConflictError(_DUPLICATE_MESSAGE)
                employee_id = new_employee_id
            updates["employee_id"] = employee_id

        profile = self._employees.get_expense_profile(employee_id)
        if profile:
            basic_salary = profile.basic_salary
        elif employee_id != existing.employee_id:
            basic_salary = ZERO
        else:
            basic_salary = existing.basic_salary
        updates["basic_salary"] = basic_salary

        merged = existing.components()
        merged.update({k: v for k, v in updates.items() if k in merged})
        updates["net"] = compute_net(merged)

        if not self._payrolls.update(payroll_id, updates):
            raise NotFoundError("Payroll not found")
        logger.info("Payroll %s updated: net=%s", payroll_id, updates["net"])
        return self._require(payroll_id)

    def delete_payroll(self, payroll_id: Any) -> None:
        payroll_id = require_id(payroll_id, "Payroll ID")
        if not self._payrolls.delete(payroll_id):
            raise NotFoundError("Payroll not found")
        logger.info("Payroll %s deleted", payroll_id)

    def get_payroll(self, payroll_id: Any) -> PayrollRecord:
        return self._require(require_id(payroll_id, "Payroll ID"))

    def build_filter(
        self,
        *,
        employee_id: Any = None,
        period: Optional[str] = None,
        labour_card: Optional[str] = None,
        labour_card_personal_no: Optional[str] = None,
        month: Any = None,
        year: Any = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> PayrollFilter:
        """Translate listing criteria into a storage filter.

        A creation date range wins over month/year. Month and year name a
        payroll period and select rows by that period's creation window.
        """
        created_from: Optional[datetime] = None
        created_to: Optional[datetime] = None

        if start or end:
            if start and end and end < start:
                raise ValidationError("End date cannot be before start date")
            if start:
                created_from = datetime.combine(start, time.min)
            if end:
                created_to = datetime.combine(end + timedelta(days=1), time.min)
        elif month or year:
            if month:
                target_year = require_year(year) if year else self._resolver.now().year
                window = self._resolver.creation_window(Period.of(require_month(month), target_year))
            else:
                window = self._resolver.creation_window_for_year(require_year(year))
            created_from, created_to = window.start, window.end

        return PayrollFilter(
            employee_id=require_id(employee_id, "Employee ID") if employee_id else None,
            period=Period.parse(period).token if period else None,
            labour_card=(labour_card or "").strip() or None,
            labour_card_personal_no=(labour_card_personal_no or "").strip() or None,
            created_from=created_from,
            created_to=created_to,
        )

    def list_payrolls(self, *, page: Any = 1, limit: Any = None, **criteria: Any) -> PayrollPage:
        try:
            page = int(page) if page not in (None, "") else 1
            limit = int(limit) if limit not in (None, "") else self._page_size
        except (TypeError, ValueError):
            raise ValidationError("Invalid pagination parameters")
        if page < 1 or limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}")

        flt = self.build_filter(**criteria)
        records = self._payrolls.list(flt, offset=(page - 1) * limit, limit=limit)
        totals = self._payrolls.totals(flt)

        total_pages = (totals.count + limit - 1) // limit
        return PayrollPage(
            records=list(records),
            totals=totals,
            page=page,
            limit=limit,
            pagination={
                "total": totals.count,
                "page": page,
                "limit": limit,
                "totalPages": total_pages,
                "hasNextPage": page * limit < totals.count,
                "hasPreviousPage": page > 1,
            },
        )
