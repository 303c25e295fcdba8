from datetime import date, datetime

import pytest

from src.payroll_engine.payroll_engine.core.exceptions import ValidationError
from src.payroll_engine.payroll_engine.payroll.period import Period, PeriodResolver


def test_period_is_previous_month():
    period = PeriodResolver.period_for(datetime(2025, 4, 15, 10, 0))

    assert period.token == "03-2025"
    assert PeriodResolver.attendance_range(period).start == date(2025, 3, 1)
    assert PeriodResolver.attendance_range(period).end == date(2025, 3, 31)


def test_january_rolls_back_to_december_of_previous_year():
    period = PeriodResolver.period_for(datetime(2025, 1, 2, 8, 0))

    assert period == Period(year=2024, month=12)
    assert period.token == "12-2024"


def test_creation_window_is_following_month():
    window = PeriodResolver.creation_window(Period.of(11, 2024))

    assert window.start == datetime(2024, 12, 1)
    assert window.end == datetime(2025, 1, 1)


def test_creation_window_of_december_crosses_year():
    window = PeriodResolver.creation_window(Period.of(12, 2024))

    assert window.start == datetime(2025, 1, 1)
    assert window.end == datetime(2025, 2, 1)


@pytest.mark.parametrize(
    "instant",
    [
        datetime(2025, 1, 1, 0, 0),
        datetime(2025, 3, 1, 0, 0),
        datetime(2024, 2, 29, 23, 59),
        datetime(2025, 12, 31, 23, 59, 59),
    ],
)
def test_instant_falls_in_creation_window_of_its_period(instant):
    period = PeriodResolver.period_for(instant)

    assert instant in PeriodResolver.creation_window(period)


def test_creation_window_for_year_spans_all_periods():
    window = PeriodResolver.creation_window_for_year(2024)

    assert window.start == datetime(2024, 2, 1)
    assert window.end == datetime(2025, 2, 1)


def test_current_period_uses_injected_clock():
    resolver = PeriodResolver(clock=lambda: datetime(2025, 3, 10, 9, 0))

    assert resolver.current_period().token == "02-2025"
    assert resolver.current_period().days_in_month == 28


@pytest.mark.parametrize("token", ["3-2025", "2025-03", "13-2025", "00-2025", "03-1999", ""])
def test_parse_rejects_bad_tokens(token):
    with pytest.raises(ValidationError):
        Period.parse(token)


def test_parse_round_trips_token():
    assert Period.parse("07-2025") == Period(year=2025, month=7)
    assert str(Period.parse("07-2025")) == "07-2025"
