from datetime import date, datetime
from decimal import Decimal

import pytest

from src.payroll_engine.payroll_engine.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.payroll_engine.payroll_engine.payroll.overtime import OvertimeCalculator
from src.payroll_engine.payroll_engine.payroll.service import PayrollService

APRIL = datetime(2025, 4, 15, 10, 0)


@pytest.fixture
def staff(employees, attendance_repo):
    employees.add(1, role="engineer", basic_salary="3100", allowance="200")
    employees.add(2, role="driver", basic_salary="2000")
    employees.add(3, role="driver")  # no expense profile
    attendance_repo.seed(1, date(2025, 3, 10), working_hours=14, overtime_hours=4)
    attendance_repo.seed(1, date(2025, 3, 11), working_hours=12, overtime_hours=2)
    return employees


@pytest.fixture
def service(container, staff):
    return container.payroll_service


def _create(service, employee_id=1, **kwargs):
    kwargs.setdefault("labour_card", "LC-1")
    kwargs.setdefault("labour_card_personal_no", "P-1")
    kwargs.setdefault("now", APRIL)
    return service.create_payroll(employee_id=employee_id, **kwargs)


def test_create_payroll_for_previous_month(service):
    record = _create(service, components={"transport": 100, "mess": 50})

    assert record.period == "03-2025"
    assert record.basic_salary == Decimal("3100")
    assert record.allowance == Decimal("200")
    # 3100 / 31 / 10 = 10 per hour, 6 hours
    assert record.overtime_hours == Decimal("6.00")
    assert record.overtime == Decimal("60.00")
    assert record.net == Decimal("3100") + 200 + 100 + 60 - 50
    assert record.created_at == APRIL


def test_net_matches_formula(service):
    record = _create(
        service,
        components={
            "allowance": 150,
            "transport": 100,
            "special_ot": 25,
            "medical": 40,
            "bonus": 300,
            "mess": 80,
            "salary_advance": 500,
            "loan_deduction": 120,
            "fine_amount": 10,
            "visa_deduction": 60,
        },
    )

    assert record.net == record.recomputed_net()
    assert record.net == Decimal("3100") + 150 + 100 + 60 + 25 + 40 + 300 - (80 + 500 + 120 + 10 + 60)


def test_second_payroll_same_period_conflicts(service, payrolls_repo):
    _create(service)

    with pytest.raises(ConflictError):
        _create(service, now=datetime(2025, 4, 28, 18, 0))
    assert len(payrolls_repo.list(service.build_filter())) == 1


def test_next_month_is_a_new_period(service):
    _create(service)
    record = _create(service, now=datetime(2025, 5, 2, 9, 0))

    assert record.period == "04-2025"


def test_storage_unique_key_backstops_race(service, payrolls_repo, monkeypatch):
    _create(service)
    # both requests passed the pre-check before either wrote
    monkeypatch.setattr(payrolls_repo, "find_by_employee_and_period", lambda *a, **kw: None)

    with pytest.raises(ConflictError):
        _create(service)
    assert len(payrolls_repo.list(service.build_filter(employee_id=1))) == 1


def test_unknown_employee_is_not_found(service):
    with pytest.raises(NotFoundError):
        _create(service, employee_id=42)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"labour_card": ""},
        {"labour_card_personal_no": "  "},
        {"components": {"bonus": -5}},
        {"components": {"transport": "abc"}},
    ],
)
def test_invalid_input_is_rejected(service, kwargs):
    with pytest.raises(ValidationError):
        _create(service, **kwargs)


def test_employee_without_profile_gets_zero_basic(service):
    record = _create(service, employee_id=3, components={"bonus": 100})

    assert record.basic_salary == 0
    assert record.overtime == 0
    assert record.net == Decimal("100")


def test_attendance_failure_does_not_block_payroll(failing_attendance, employees, payrolls_repo, resolver):
    employees.add(1, basic_salary="3000")
    service = PayrollService(payrolls_repo, employees, OvertimeCalculator(failing_attendance, resolver), resolver)

    record = _create(service)

    assert record.overtime == 0
    assert record.overtime_hours == 0
    assert record.net == Decimal("3000")


def test_update_ignores_period_and_overtime(service):
    record = _create(service)

    updated = service.update_payroll(
        record.payroll_id, {"period": "01-2020", "overtime": 9999, "net": 1, "bonus": 500}
    )

    assert updated.period == "03-2025"
    assert updated.overtime == record.overtime
    assert updated.bonus == Decimal("500")
    assert updated.net == record.net + 500


def test_sub_cent_components_are_stored_rounded(service, payrolls_repo, monkeypatch):
    written = {}
    create = payrolls_repo.create

    def capture(values):
        written.update(values)
        return create(values)

    monkeypatch.setattr(payrolls_repo, "create", capture)
    record = _create(service, employee_id=3, components={"bonus": "0.004", "transport": "0.004", "mess": "0.005"})

    for name in ("bonus", "transport", "mess"):
        assert written[name].as_tuple().exponent == -2
    assert record.bonus == Decimal("0.00")
    assert record.mess == Decimal("0.01")
    assert record.net == record.recomputed_net()
    assert written["net"] == Decimal("-0.01")


def test_update_without_changes_keeps_net(service):
    record = _create(service, components={"bonus": 75, "mess": 20})

    updated = service.update_payroll(record.payroll_id, {})

    assert updated.net == record.net
    assert updated.net == updated.recomputed_net()


def test_update_rejects_unknown_fields(service):
    record = _create(service)

    with pytest.raises(ValidationError):
        service.update_payroll(record.payroll_id, {"salary": 5})


def test_update_rereads_basic_salary(service, staff):
    record = _create(service)
    staff.add(1, role="engineer", basic_salary="4000", allowance="200")

    updated = service.update_payroll(record.payroll_id, {"remark": "raise"})

    assert updated.basic_salary == Decimal("4000")
    assert updated.net == record.net + 900
    assert updated.remark == "raise"


def test_update_moving_to_employee_with_existing_payroll_conflicts(service):
    first = _create(service, employee_id=1)
    _create(service, employee_id=2)

    with pytest.raises(ConflictError):
        service.update_payroll(first.payroll_id, {"employee_id": 2})


def test_update_moving_to_employee_uses_their_profile(service):
    record = _create(service, employee_id=1)

    updated = service.update_payroll(record.payroll_id, {"employee_id": 2})

    assert updated.employee_id == 2
    assert updated.basic_salary == Decimal("2000")
    assert updated.overtime == record.overtime


def test_update_missing_payroll_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_payroll(404, {"bonus": 1})


def test_delete_payroll(service):
    record = _create(service)

    service.delete_payroll(record.payroll_id)

    with pytest.raises(NotFoundError):
        service.get_payroll(record.payroll_id)
    with pytest.raises(NotFoundError):
        service.delete_payroll(record.payroll_id)


def test_list_filters_by_period_creation_window(service):
    _create(service, employee_id=1, now=datetime(2025, 3, 20, 9, 0))  # period 02-2025
    _create(service, employee_id=1, now=APRIL)  # period 03-2025
    _create(service, employee_id=2, now=APRIL)

    page = service.list_payrolls(month=3, year=2025)

    assert {r.period for r in page.records} == {"03-2025"}
    assert page.totals.count == 2


def test_list_year_covers_periods_of_that_year(service):
    _create(service, employee_id=1, now=datetime(2025, 1, 10, 9, 0))  # period 12-2024
    _create(service, employee_id=1, now=datetime(2025, 2, 10, 9, 0))  # period 01-2025

    page = service.list_payrolls(year=2025)

    assert [r.period for r in page.records] == ["01-2025"]


def test_list_date_range_is_inclusive(service):
    _create(service, employee_id=1, now=datetime(2025, 4, 30, 23, 0))
    _create(service, employee_id=2, now=datetime(2025, 5, 1, 8, 0))

    page = service.list_payrolls(start=date(2025, 4, 1), end=date(2025, 4, 30))

    assert [r.employee_id for r in page.records] == [1]


def test_list_rejects_inverted_range(service):
    with pytest.raises(ValidationError):
        service.list_payrolls(start=date(2025, 5, 1), end=date(2025, 4, 1))


def test_list_paginates(service):
    for employee_id in (1, 2, 3):
        _create(service, employee_id=employee_id)

    page = service.list_payrolls(page=2, limit=2)

    assert len(page.records) == 1
    assert page.pagination == {
        "total": 3,
        "page": 2,
        "limit": 2,
        "totalPages": 2,
        "hasNextPage": False,
        "hasPreviousPage": True,
    }


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101), ("x", 10)])
def test_list_rejects_bad_pagination(service, page, limit):
    with pytest.raises(ValidationError):
        service.list_payrolls(page=page, limit=limit)
