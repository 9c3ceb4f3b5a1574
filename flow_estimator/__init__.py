"""
Flow Estimator Package.

============================================================
PURPOSE
============================================================
Exact, server-free estimation of continuously accruing
token amounts ("flows").

CRITICAL PRINCIPLE:
    "The estimate is a pure function of (checkpoint, now)."
    Liveness is the caller re-reading on a schedule.

============================================================
MODULES
============================================================
- types: Checkpoint
- estimator: estimate()
- amounts: Rate scaling, parsing, floor-rounded display
- projections: Depletion time, runway suggestions
- tracker: FlowingAmount, FlowingAmountTicker
- config: FlowEstimatorConfig

============================================================
"""

from .types import Checkpoint, parse_exact_int
from .estimator import estimate, elapsed_seconds
from .amounts import (
    TimeInterval,
    from_time_units_to_seconds,
    scale_rate,
    flow_rate_from_amount_per_interval,
    parse_token_amount,
    format_token_amount,
    round_token_amount,
    format_number_with_commas,
)
from .projections import (
    amount_per_interval,
    seconds_until_depleted,
    estimate_depletion_timestamp,
    outflow_adjustment,
    suggested_balance,
    has_suggested_balance,
    needs_top_up,
    suggested_wrap_amount,
)
from .tracker import FlowingAmount, FlowingAmountTicker
from .config import FlowEstimatorConfig


__all__ = [
    # Types
    "Checkpoint",
    "parse_exact_int",
    # Estimation
    "estimate",
    "elapsed_seconds",
    # Amounts
    "TimeInterval",
    "from_time_units_to_seconds",
    "scale_rate",
    "flow_rate_from_amount_per_interval",
    "parse_token_amount",
    "format_token_amount",
    "round_token_amount",
    "format_number_with_commas",
    # Projections
    "amount_per_interval",
    "seconds_until_depleted",
    "estimate_depletion_timestamp",
    "outflow_adjustment",
    "suggested_balance",
    "has_suggested_balance",
    "needs_top_up",
    "suggested_wrap_amount",
    # Tracking
    "FlowingAmount",
    "FlowingAmountTicker",
    # Config
    "FlowEstimatorConfig",
]
