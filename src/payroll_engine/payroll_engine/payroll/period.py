from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_month, require_year
from ..core.constants import PERIOD_TOKEN_FORMAT
from ..core.exceptions import ValidationError

_TOKEN_RE = re.compile(r"^(\d{2})-(\d{4})$")


@dataclass(frozen=True, order=True)
class Period:
    """The calendar month a payroll record financially covers."""

    year: int
    month: int

    @classmethod
    def of(cls, month, year) -> "Period":
        return cls(year=require_year(year), month=require_month(month))

    @classmethod
    def parse(cls, token: str) -> "Period":
        """Parse an ``MM-YYYY`` token, e.g. ``"03-2025"``."""
        m = _TOKEN_RE.match((token or "").strip())
        if not m:
            raise ValidationError(f"Invalid period {token!r} (expected MM-YYYY)")
        return cls.of(int(m.group(1)), int(m.group(2)))

    @property
    def token(self) -> str:
        return PERIOD_TOKEN_FORMAT.format(month=self.month, year=self.year)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(year=self.year - 1, month=12)
        return Period(year=self.year, month=self.month - 1)

    def next(self) -> "Period":
        if self.month == 12:
            return Period(year=self.year + 1, month=1)
        return Period(year=self.year, month=self.month + 1)

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range."""

    start: date
    end: date


@dataclass(frozen=True)
class DateTimeWindow:
    """Half-open datetime window: start <= t < end."""

    start: datetime
    end: datetime

    def __contains__(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class PeriodResolver:
    """Maps instants to payroll periods and back.

    Payroll for month M is created during month M+1, so the period of an
    instant is the month before it and the creation window of a period is the
    month after it. All callers go through this class for that rule.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or now_local

    def now(self) -> datetime:
        return self._clock()

    @staticmethod
    def period_for(instant: datetime | date) -> Period:
        return Period(year=instant.year, month=instant.month).previous()

    def current_period(self) -> Period:
        return self.period_for(self._clock())

    @staticmethod
    def attendance_range(period: Period) -> DateRange:
        return DateRange(start=period.first_day, end=period.last_day)

    @staticmethod
    def creation_window(period: Period) -> DateTimeWindow:
        creation_month = period.next()
        after = creation_month.next()
        return DateTimeWindow(
            start=datetime.combine(creation_month.first_day, time.min),
            end=datetime.combine(after.first_day, time.min),
        )

    @classmethod
    def creation_window_for_year(cls, year: int) -> DateTimeWindow:
        """Union of the creation windows of every period in ``year``."""
        first = cls.creation_window(Period(year=year, month=1))
        last = cls.creation_window(Period(year=year, month=12))
        return DateTimeWindow(start=first.start, end=last.end)
