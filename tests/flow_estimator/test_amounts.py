"""
Amount Utility Tests.

Rate scaling, interval conversion, parsing and the floor
rounding policy used for display strings.
"""

from decimal import Decimal

import pytest

from core.constants import SECONDS_IN_MONTH
from flow_estimator import (
    TimeInterval,
    flow_rate_from_amount_per_interval,
    format_number_with_commas,
    format_token_amount,
    from_time_units_to_seconds,
    parse_token_amount,
    round_token_amount,
    scale_rate,
)
from flow_estimator.amounts import to_decimal


class TestIntervals:
    """Tests for interval conversion."""

    @pytest.mark.parametrize("interval,seconds", [
        (TimeInterval.DAY, 86400),
        (TimeInterval.WEEK, 604800),
        (TimeInterval.MONTH, 2628000),
        (TimeInterval.YEAR, 31536000),
    ])
    def test_one_unit(self, interval, seconds):
        assert from_time_units_to_seconds(1, interval) == seconds

    def test_accepts_enum_value(self):
        assert from_time_units_to_seconds(2, "week") == 2 * 604800

    def test_month_constant(self):
        assert SECONDS_IN_MONTH == 2628000


class TestRates:
    """Tests for rate conversion."""

    def test_scale_rate(self):
        assert scale_rate(100000, 100) == 10000000

    def test_flow_rate_from_monthly_amount_truncates(self):
        one_token = 10 ** 18

        rate = flow_rate_from_amount_per_interval(one_token, TimeInterval.MONTH)

        assert rate == one_token // SECONDS_IN_MONTH
        assert rate * SECONDS_IN_MONTH <= one_token

    def test_flow_rate_negative_truncates_toward_zero(self):
        assert flow_rate_from_amount_per_interval(-86401, TimeInterval.DAY) == -1


class TestParseTokenAmount:
    """Tests for parse_token_amount()."""

    def test_parses_plain(self):
        assert parse_token_amount("1") == 10 ** 18

    def test_parses_commas_and_fraction(self):
        assert parse_token_amount("1,234.5") == 1234 * 10 ** 18 + 5 * 10 ** 17

    def test_parses_smallest_unit(self):
        assert parse_token_amount("0.000000000000000001") == 1

    def test_custom_decimals(self):
        assert parse_token_amount("12.34", decimals=6) == 12340000

    def test_rejects_excess_precision(self):
        with pytest.raises(ValueError):
            parse_token_amount("0.0000001", decimals=6)

    @pytest.mark.parametrize("text", ["", "  ", "abc", "1.2.3", "NaN", "Infinity", "1e3", "2E-5", "1_000"])
    def test_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_token_amount(text)


class TestFormatting:
    """Tests for exact formatting and floor rounding."""

    def test_to_decimal_is_exact(self):
        assert to_decimal(500000000010000000) == Decimal("0.50000000001")

    def test_format_token_amount(self):
        assert format_token_amount(1500000000000000000) == "1.5"
        assert format_token_amount(10 ** 18) == "1"
        assert format_token_amount(0) == "0"

    def test_round_truncates_never_rounds_up(self):
        almost_two = 2 * 10 ** 18 - 1

        assert round_token_amount(almost_two, 4) == "1.9999"

    def test_round_keeps_short_values(self):
        assert round_token_amount(1500000000000000000, 4) == "1.5"

    def test_round_zero_digits(self):
        assert round_token_amount(1999999999999999999, 0) == "1"

    def test_round_negative_floors(self):
        """Negative values round down too, never above the true value."""
        assert round_token_amount(-1005000000000000000, 2) == "-1.01"

    def test_round_tiny_value_is_zero(self):
        assert round_token_amount(1, 4) == "0"

    def test_round_end_to_end_balance(self):
        assert round_token_amount(500000000010000000, 4) == "0.5"

    def test_round_digits_beyond_token_decimals(self):
        assert round_token_amount(1, 60) == "0.000000000000000001"
        assert round_token_amount(12340000, 30, decimals=6) == "12.34"

    def test_commas(self):
        assert format_number_with_commas("1234567.891") == "1,234,567.891"
        assert format_number_with_commas(1000) == "1,000"
        assert format_number_with_commas("-9876.5") == "-9,876.5"
        assert format_number_with_commas(Decimal("12.5")) == "12.5"
