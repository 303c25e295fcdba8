"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Daily working hours above which the remainder counts as overtime.
OVERTIME_THRESHOLD_HOURS = Decimal("10")
# Divisor turning a daily wage into an hourly overtime rate.
OVERTIME_RATE_DIVISOR = Decimal("10")
MAX_WORKING_HOURS = Decimal("24")

# Reported by the overtime fallback when no real month could be resolved.
FALLBACK_DAYS_IN_MONTH = 30

PERIOD_TOKEN_FORMAT = "{month:02d}-{year:04d}"
MIN_YEAR = 2000
MAX_YEAR = 2100

DEFAULT_PAGE_SIZE = 10
DEFAULT_RECENT_PAYROLLS = 10
