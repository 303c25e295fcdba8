from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    """Round half away from zero to 2 decimals (same rule for money and hours)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any, field_name: str, *, default: Decimal | None = None) -> Decimal:
    """Coerce numbers and numeric strings to Decimal; None/"" falls back to default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return result


def parse_hours(value: Any, field_name: str = "workingHours") -> Decimal:
    """Accept 8, 8.5, "8.5" or "08:30" and return hours as Decimal."""
    if isinstance(value, str) and ":" in value:
        hours_s, _, minutes_s = value.strip().partition(":")
        try:
            hours = int(hours_s)
            minutes = int(minutes_s)
        except ValueError:
            raise ValidationError(f"{field_name} must be HH:MM or a number")
        if minutes < 0 or minutes >= 60:
            raise ValidationError(f"{field_name} must be HH:MM or a number")
        return Decimal(hours) + Decimal(minutes) / Decimal(60)
    return to_decimal(value, field_name, default=ZERO)
