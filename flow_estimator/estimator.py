"""
Flow Estimator - Estimation.

============================================================
PURPOSE
============================================================
Computes the current value of a flowing amount from its
latest checkpoint and a caller-supplied `now`.

PRINCIPLES:
- Pure: no clock reads, no logging, no state
- Exact: integer arithmetic only
- Total: safe to call on every refresh tick; elapsed time is
  clamped at zero so accrual never runs backwards

The result is recomputed from the checkpoint on every call
rather than accumulated, so a replaced checkpoint leaves no
residual offset behind.

============================================================
"""

from typing import Any

from core.exceptions import InvalidCheckpointError

from .types import Checkpoint, _is_exact_int


def elapsed_seconds(checkpoint: Checkpoint, now: int) -> int:
    """Seconds since the checkpoint, never negative."""
    return max(now - checkpoint.base_timestamp, 0)


def estimate(checkpoint: Any, now: Any) -> int:
    """
    Extrapolate a checkpoint to `now`.

    Args:
        checkpoint: Latest known checkpoint
        now: Read time in whole seconds since epoch

    Returns:
        base_amount + rate_per_second * max(now - base_timestamp, 0)

    Raises:
        InvalidCheckpointError: checkpoint or now is malformed
    """
    if not isinstance(checkpoint, Checkpoint):
        raise InvalidCheckpointError(
            f"Expected Checkpoint, got {type(checkpoint).__name__}",
            actual=checkpoint,
        )
    if not _is_exact_int(now):
        raise InvalidCheckpointError(
            f"now must be integer seconds, got {type(now).__name__}",
            field="now",
            actual=now,
        )

    return checkpoint.base_amount + checkpoint.rate_per_second * elapsed_seconds(checkpoint, now)


__all__ = ["estimate", "elapsed_seconds"]
