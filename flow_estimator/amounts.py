"""
Flow Estimator - Amount & Time Utilities.

============================================================
PURPOSE
============================================================
Exact conversions between per-second rates, per-interval
amounts and human-readable decimal strings.

ROUNDING POLICY:
    Display strings are rounded with ROUND_FLOOR to at most N
    fractional digits. The shown value is never greater than
    the true value, so a balance is never overstated. For
    non-negative amounts this is plain truncation.

Only the final string is rounded. Every intermediate value
stays an exact integer in the token's smallest unit.

============================================================
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, localcontext
from enum import Enum
from typing import Union

from core.constants import (
    DEFAULT_TOKEN_DECIMALS,
    SECONDS_IN_DAY,
    SECONDS_IN_MONTH,
    SECONDS_IN_WEEK,
    SECONDS_IN_YEAR,
)


# ============================================================
# TIME INTERVALS
# ============================================================

class TimeInterval(Enum):
    """Intervals a user can express a flow amount in."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


INTERVAL_SECONDS = {
    TimeInterval.DAY: SECONDS_IN_DAY,
    TimeInterval.WEEK: SECONDS_IN_WEEK,
    TimeInterval.MONTH: SECONDS_IN_MONTH,
    TimeInterval.YEAR: SECONDS_IN_YEAR,
}


def from_time_units_to_seconds(units: int, interval: TimeInterval) -> int:
    """Length of `units` intervals in seconds."""
    return units * INTERVAL_SECONDS[TimeInterval(interval)]


# ============================================================
# RATE SCALING
# ============================================================

def scale_rate(rate_per_second: int, seconds: int) -> int:
    """Exact amount accrued at `rate_per_second` over `seconds`."""
    return rate_per_second * seconds


def _trunc_div(numerator: int, denominator: int) -> int:
    # Big-integer division semantics: truncate toward zero.
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def flow_rate_from_amount_per_interval(amount: int, interval: TimeInterval) -> int:
    """
    Per-second rate that streams `amount` (smallest units) over one interval.

    The remainder is dropped, so the resulting flow never sends more
    than the requested amount.
    """
    return _trunc_div(amount, from_time_units_to_seconds(1, interval))


# ============================================================
# PARSING & FORMATTING
# ============================================================

_PLAIN_DECIMAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)")


def _precision_for(value: int, decimals: int) -> int:
    return len(str(abs(value))) + decimals + 2


def parse_token_amount(text: str, decimals: int = DEFAULT_TOKEN_DECIMALS) -> int:
    """
    Parse a human decimal string ("1,234.5") into smallest units.

    Raises:
        ValueError: text is not a plain decimal or carries more
            fractional digits than the token supports
    """
    cleaned = text.replace(",", "").strip()
    if not cleaned:
        raise ValueError("Amount is empty")
    if not _PLAIN_DECIMAL.fullmatch(cleaned):
        raise ValueError(f"Invalid amount: {text!r}")

    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {text!r}") from e

    if not value.is_finite():
        raise ValueError(f"Invalid amount: {text!r}")

    exponent = value.as_tuple().exponent
    if exponent < -decimals:
        raise ValueError(
            f"Amount {text!r} has more than {decimals} fractional digits"
        )

    with localcontext() as ctx:
        ctx.prec = len(value.as_tuple().digits) + decimals + 2
        return int(value.scaleb(decimals))


def to_decimal(amount: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> Decimal:
    """Exact Decimal value of an amount in smallest units."""
    with localcontext() as ctx:
        ctx.prec = _precision_for(amount, decimals)
        return Decimal(amount).scaleb(-decimals)


def format_token_amount(amount: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> str:
    """Exact decimal string of an amount, trailing zeros removed."""
    value = to_decimal(amount, decimals)
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def round_token_amount(
    amount: int,
    digits: int,
    decimals: int = DEFAULT_TOKEN_DECIMALS,
) -> str:
    """
    Display string with at most `digits` fractional digits.

    Uses ROUND_FLOOR: the result is never above the true value.
    """
    # Digits past the token decimals are always zero.
    digits = min(digits, decimals)
    value = to_decimal(amount, decimals)
    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        ctx.prec = _precision_for(amount, decimals)
        rounded = value.quantize(quantum, rounding=ROUND_FLOOR)
    text = f"{rounded:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def format_number_with_commas(value: Union[str, int, Decimal]) -> str:
    """Insert thousands separators into the integer part of a decimal."""
    text = str(value)
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    whole, dot, fraction = text.partition(".")
    whole = f"{int(whole or '0'):,}"
    return f"{sign}{whole}{dot}{fraction}"


__all__ = [
    "TimeInterval",
    "INTERVAL_SECONDS",
    "from_time_units_to_seconds",
    "scale_rate",
    "flow_rate_from_amount_per_interval",
    "parse_token_amount",
    "to_decimal",
    "format_token_amount",
    "round_token_amount",
    "format_number_with_commas",
]
