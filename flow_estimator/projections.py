"""
Flow Estimator - Projections.

Derived quantities built on checkpoints: per-interval amounts,
depletion time of a draining balance, and the runway buffer
suggested before opening or raising a flow.

All arithmetic is exact integer arithmetic. Durations are
floored to whole seconds, which can only make a depletion
estimate earlier than the true crossing, never later.
"""

from typing import Optional

from core.constants import DEFAULT_BUFFER_MONTHS, SECONDS_IN_MONTH

from .amounts import TimeInterval, from_time_units_to_seconds, scale_rate
from .estimator import estimate
from .types import Checkpoint


def amount_per_interval(rate_per_second: int, interval: TimeInterval) -> int:
    """Projected amount streamed over one interval at a constant rate."""
    return scale_rate(rate_per_second, from_time_units_to_seconds(1, interval))


def seconds_until_depleted(balance: int, net_outflow_rate: int) -> Optional[int]:
    """
    Whole seconds until `balance` reaches zero at `net_outflow_rate`.

    Returns None when nothing is draining the balance.
    """
    if net_outflow_rate <= 0:
        return None
    if balance <= 0:
        return 0
    return balance // net_outflow_rate


def estimate_depletion_timestamp(
    checkpoint: Checkpoint,
    extra_amount: int = 0,
    rate_adjustment: int = 0,
    now: Optional[int] = None,
) -> Optional[int]:
    """
    Epoch second at which a checkpointed balance runs dry.

    Args:
        checkpoint: Account balance checkpoint (net rate, negative when draining)
        extra_amount: Deposit to add on top of the checkpoint base (e.g. a wrap)
        rate_adjustment: Change applied to the net rate (e.g. the difference
            between a new outgoing flow and the current one, as a negative number)
        now: Start of the countdown when the checkpoint was never recorded
            (base_timestamp 0, e.g. a new account with no snapshot)

    Returns:
        Epoch seconds, or None when the adjusted net rate is not an outflow
    """
    net_outflow = -(checkpoint.rate_per_second + rate_adjustment)
    seconds = seconds_until_depleted(checkpoint.base_amount + extra_amount, net_outflow)
    if seconds is None:
        return None
    base_timestamp = checkpoint.base_timestamp
    if base_timestamp == 0 and now is not None:
        base_timestamp = now
    return base_timestamp + seconds


def outflow_adjustment(current_flow_rate: int, new_flow_rate: int) -> int:
    """
    Net-rate change caused by replacing an outgoing flow.

    Raising an outgoing flow makes the account's net rate more negative.
    """
    return current_flow_rate - new_flow_rate


def suggested_balance(flow_rate: int, months: int = DEFAULT_BUFFER_MONTHS) -> int:
    """Balance that keeps `flow_rate` funded for `months` average months."""
    return scale_rate(flow_rate, SECONDS_IN_MONTH * months)


def has_suggested_balance(
    checkpoint: Checkpoint,
    now: int,
    flow_rate: int,
    months: int = DEFAULT_BUFFER_MONTHS,
) -> bool:
    """Whether the live balance already covers the suggested runway."""
    return estimate(checkpoint, now) > suggested_balance(flow_rate, months)


def needs_top_up(
    depletion_timestamp: Optional[int],
    now: int,
    months: int = DEFAULT_BUFFER_MONTHS,
) -> bool:
    """Whether a projected depletion falls inside the runway window."""
    if depletion_timestamp is None:
        return False
    return depletion_timestamp < now + SECONDS_IN_MONTH * months


def suggested_wrap_amount(
    amount_per_interval_value: int,
    depletion_timestamp: Optional[int],
    now: int,
    months: int = DEFAULT_BUFFER_MONTHS,
) -> int:
    """
    Amount to deposit alongside a flow change.

    `months` times the per-interval amount when the balance would run
    dry inside the runway window, otherwise nothing.
    """
    if amount_per_interval_value <= 0:
        return 0
    if not needs_top_up(depletion_timestamp, now, months):
        return 0
    return amount_per_interval_value * months


__all__ = [
    "amount_per_interval",
    "seconds_until_depleted",
    "estimate_depletion_timestamp",
    "outflow_adjustment",
    "suggested_balance",
    "has_suggested_balance",
    "needs_top_up",
    "suggested_wrap_amount",
]
