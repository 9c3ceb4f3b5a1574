"""
Flow Estimator - Configuration.
"""

from dataclasses import dataclass
from typing import List

from core.config import ensure_valid, env_float, env_int
from core.constants import (
    DEFAULT_BUFFER_MONTHS,
    DEFAULT_DISPLAY_DIGITS,
    DEFAULT_TOKEN_DECIMALS,
)


@dataclass
class FlowEstimatorConfig:
    """Display and refresh settings for live flowing amounts."""

    refresh_interval_seconds: float = 1.0
    """Cadence of FlowingAmountTicker re-evaluations."""

    display_digits: int = DEFAULT_DISPLAY_DIGITS
    """Fractional digits in display strings."""

    token_decimals: int = DEFAULT_TOKEN_DECIMALS
    """Smallest-unit exponent of the token."""

    buffer_months: int = DEFAULT_BUFFER_MONTHS
    """Runway used for suggested balances and top-ups."""

    @classmethod
    def from_env(cls) -> "FlowEstimatorConfig":
        """Load configuration from environment variables."""
        return cls(
            refresh_interval_seconds=env_float("FLOW_REFRESH_INTERVAL_SECONDS", 1.0),
            display_digits=env_int("FLOW_DISPLAY_DIGITS", DEFAULT_DISPLAY_DIGITS),
            token_decimals=env_int("FLOW_TOKEN_DECIMALS", DEFAULT_TOKEN_DECIMALS),
            buffer_months=env_int("FLOW_BUFFER_MONTHS", DEFAULT_BUFFER_MONTHS),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.refresh_interval_seconds <= 0:
            errors.append("refresh_interval_seconds must be positive")

        if self.display_digits < 0:
            errors.append("display_digits must be non-negative")

        if self.token_decimals < 0:
            errors.append("token_decimals must be non-negative")

        if self.buffer_months < 0:
            errors.append("buffer_months must be non-negative")

        return errors

    def ensure_valid(self) -> "FlowEstimatorConfig":
        ensure_valid(self.validate(), "flow estimator")
        return self


__all__ = ["FlowEstimatorConfig"]
