from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str | date) -> date:
    """``YYYY-MM-DD`` (a trailing time part is ignored) -> date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat((value or "").strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")


def now_local() -> datetime:
    """Wall-clock now; the default clock of ``PeriodResolver``."""
    return datetime.now()
