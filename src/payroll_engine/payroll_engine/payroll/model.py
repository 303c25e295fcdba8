from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.numbers import ZERO, round_money

# Caller-adjustable earnings; overtime is added separately from the calculator snapshot.
EARNING_FIELDS = ("allowance", "transport", "special_ot", "medical", "bonus")
DEDUCTION_FIELDS = ("mess", "salary_advance", "loan_deduction", "fine_amount", "visa_deduction")
MONEY_FIELDS = ("basic_salary",) + EARNING_FIELDS + ("overtime",) + DEDUCTION_FIELDS

# Fields fixed at creation time or derived; updates silently drop them.
IMMUTABLE_FIELDS = frozenset(
    {
        "payroll_id",
        "period",
        "basic_salary",
        "overtime",
        "overtime_hours",
        "net",
        "total_earnings",
        "total_deductions",
        "created_by",
        "created_at",
        "updated_at",
    }
)
UPDATABLE_FIELDS = frozenset({"employee_id", "labour_card", "labour_card_personal_no", "remark"} | set(EARNING_FIELDS) | set(DEDUCTION_FIELDS))

# Wire names (camelCase) -> attribute names.
API_FIELD_NAMES = {
    "id": "payroll_id",
    "employee": "employee_id",
    "labourCard": "labour_card",
    "labourCardPersonalNo": "labour_card_personal_no",
    "period": "period",
    "basic": "basic_salary",
    "allowance": "allowance",
    "transport": "transport",
    "overtime": "overtime",
    "overtimeHours": "overtime_hours",
    "specialOT": "special_ot",
    "medical": "medical",
    "bonus": "bonus",
    "mess": "mess",
    "salaryAdvance": "salary_advance",
    "loanDeduction": "loan_deduction",
    "fineAmount": "fine_amount",
    "visaDeduction": "visa_deduction",
    "totalEarning": "total_earnings",
    "totalDeduction": "total_deductions",
    "net": "net",
    "remark": "remark",
    "createdBy": "created_by",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def total_earnings(values: Mapping[str, Decimal]) -> Decimal:
    return sum((Decimal(values.get(name) or 0) for name in ("basic_salary", "overtime") + EARNING_FIELDS), ZERO)


def total_deductions(values: Mapping[str, Decimal]) -> Decimal:
    return sum((Decimal(values.get(name) or 0) for name in DEDUCTION_FIELDS), ZERO)


def compute_net(values: Mapping[str, Decimal]) -> Decimal:
    """(basic + allowance + transport + overtime + specialOT + medical + bonus)
    - (mess + salaryAdvance + loanDeduction + fineAmount + visaDeduction)."""
    return round_money(total_earnings(values) - total_deductions(values))


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    labour_card: str
    labour_card_personal_no: str
    period: str
    basic_salary: Decimal
    net: Decimal
    allowance: Decimal = ZERO
    transport: Decimal = ZERO
    overtime: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    special_ot: Decimal = ZERO
    medical: Decimal = ZERO
    bonus: Decimal = ZERO
    mess: Decimal = ZERO
    salary_advance: Decimal = ZERO
    loan_deduction: Decimal = ZERO
    fine_amount: Decimal = ZERO
    visa_deduction: Decimal = ZERO
    remark: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def components(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in MONEY_FIELDS}

    @property
    def total_earnings(self) -> Decimal:
        return total_earnings(self.components())

    @property
    def total_deductions(self) -> Decimal:
        return total_deductions(self.components())

    def recomputed_net(self) -> Decimal:
        return compute_net(self.components())

    def to_dict(self) -> dict:
        data = {}
        for api_name, attr in API_FIELD_NAMES.items():
            value = getattr(self, attr)
            if isinstance(value, Decimal):
                value = float(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            data[api_name] = value
        return data


NEW_PAYROLL_FIELDS = tuple(f.name for f in fields(PayrollRecord) if f.name not in {"payroll_id", "created_at", "updated_at"})


@dataclass(frozen=True)
class PayrollFilter:
    employee_id: Optional[int] = None
    period: Optional[str] = None
    labour_card: Optional[str] = None
    labour_card_personal_no: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollTotals:
    count: int = 0
    total_net: Decimal = ZERO
    total_overtime: Decimal = ZERO
    total_overtime_hours: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "totalNet": float(self.total_net),
            "totalOvertime": float(self.total_overtime),
            "totalOvertimeHours": float(self.total_overtime_hours),
        }


@dataclass(frozen=True)
class PayrollPage:
    records: Sequence[PayrollRecord]
    totals: PayrollTotals
    page: int
    limit: int
    pagination: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "payrolls": [r.to_dict() for r in self.records],
            "totals": self.totals.to_dict(),
            "pagination": self.pagination,
        }
