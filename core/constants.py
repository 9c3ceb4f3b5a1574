"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Defines the time and token-unit constants shared by the
estimator and its projections.

- Single source of truth for magic values
- All constants are immutable integers
- No business logic here

============================================================
"""

# ============================================================
# TIME CONSTANTS
# ============================================================

SECONDS_IN_MINUTE = 60
SECONDS_IN_HOUR = 3600
SECONDS_IN_DAY = 86400
SECONDS_IN_WEEK = 7 * SECONDS_IN_DAY

# Average month (365 days / 12), the convention used by streaming-payment
# dashboards when showing monthly flow rates.
SECONDS_IN_MONTH = 2628000

SECONDS_IN_YEAR = 365 * SECONDS_IN_DAY

# ============================================================
# TOKEN CONSTANTS
# ============================================================

DEFAULT_TOKEN_DECIMALS = 18
"""Smallest-unit exponent for ether-style tokens (wei)."""

DEFAULT_DISPLAY_DIGITS = 4
"""Fractional digits shown for live balances."""

DEFAULT_BUFFER_MONTHS = 3
"""Months of runway suggested when opening or raising a flow."""


__all__ = [
    "SECONDS_IN_MINUTE",
    "SECONDS_IN_HOUR",
    "SECONDS_IN_DAY",
    "SECONDS_IN_WEEK",
    "SECONDS_IN_MONTH",
    "SECONDS_IN_YEAR",
    "DEFAULT_TOKEN_DECIMALS",
    "DEFAULT_DISPLAY_DIGITS",
    "DEFAULT_BUFFER_MONTHS",
]
