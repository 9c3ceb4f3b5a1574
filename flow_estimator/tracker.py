"""
Flow Estimator - Live Tracking.

============================================================
PURPOSE
============================================================
Keeps a flowing amount "live" for a display surface.

FlowingAmount holds the latest checkpoint and a clock and
re-runs the pure estimator on every read. FlowingAmountTicker
drives those reads on a fixed cadence and hands each value to
a callback.

LIFECYCLE:
- A replaced checkpoint is the sole basis from the next read on
- The ticker task exists only between start() and stop()
- Stopping is cancellation; nothing outlives its owner

============================================================
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.clock import ClockFactory, ClockProtocol
from core.exceptions import InvalidCheckpointError

from .amounts import round_token_amount
from .config import FlowEstimatorConfig
from .estimator import estimate
from .projections import (
    estimate_depletion_timestamp,
    has_suggested_balance,
    needs_top_up,
    suggested_wrap_amount,
)
from .types import Checkpoint


logger = logging.getLogger(__name__)


# ============================================================
# FLOWING AMOUNT
# ============================================================

class FlowingAmount:
    """
    Latest checkpoint plus a time source.

    Reads never mutate state; `update` swaps the checkpoint wholesale.
    """

    def __init__(
        self,
        checkpoint: Optional[Checkpoint] = None,
        clock: Optional[ClockProtocol] = None,
        config: Optional[FlowEstimatorConfig] = None,
    ):
        self._checkpoint = checkpoint or Checkpoint.zero()
        self._clock = clock
        self._config = config or FlowEstimatorConfig()

    @property
    def checkpoint(self) -> Checkpoint:
        return self._checkpoint

    @property
    def config(self) -> FlowEstimatorConfig:
        return self._config

    @property
    def clock(self) -> ClockProtocol:
        return self._clock or ClockFactory.get_clock()

    def update(self, checkpoint: Checkpoint) -> bool:
        """
        Replace the checkpoint.

        Returns True when the new checkpoint differs from the old one.
        """
        if not isinstance(checkpoint, Checkpoint):
            raise InvalidCheckpointError(
                f"Expected Checkpoint, got {type(checkpoint).__name__}",
                actual=checkpoint,
            )

        changed = checkpoint != self._checkpoint
        if changed:
            logger.debug(
                f"Checkpoint replaced: base={checkpoint.base_amount} "
                f"ts={checkpoint.base_timestamp} rate={checkpoint.rate_per_second}"
            )
        self._checkpoint = checkpoint
        return changed

    def current(self, now: Optional[int] = None) -> int:
        """Estimated amount at `now` (defaults to the clock)."""
        if now is None:
            now = self.clock.timestamp()
        return estimate(self._checkpoint, now)

    def display(self, now: Optional[int] = None, digits: Optional[int] = None) -> str:
        """Current amount as a floor-rounded decimal string."""
        return round_token_amount(
            self.current(now),
            self._config.display_digits if digits is None else digits,
            self._config.token_decimals,
        )

    # --------------------------------------------------------
    # Runway (buffer_months from config)
    # --------------------------------------------------------

    def depletion_timestamp(
        self,
        extra_amount: int = 0,
        rate_adjustment: int = 0,
        now: Optional[int] = None,
    ) -> Optional[int]:
        """Epoch second the balance runs dry, or None if not draining."""
        if now is None:
            now = self.clock.timestamp()
        return estimate_depletion_timestamp(
            self._checkpoint, extra_amount, rate_adjustment, now=now
        )

    def has_suggested_balance(self, flow_rate: int, now: Optional[int] = None) -> bool:
        if now is None:
            now = self.clock.timestamp()
        return has_suggested_balance(
            self._checkpoint, now, flow_rate, self._config.buffer_months
        )

    def needs_top_up(
        self,
        depletion_timestamp: Optional[int],
        now: Optional[int] = None,
    ) -> bool:
        if now is None:
            now = self.clock.timestamp()
        return needs_top_up(depletion_timestamp, now, self._config.buffer_months)

    def suggested_wrap_amount(
        self,
        amount_per_interval_value: int,
        depletion_timestamp: Optional[int],
        now: Optional[int] = None,
    ) -> int:
        """Deposit suggested alongside a flow change, sized by buffer_months."""
        if now is None:
            now = self.clock.timestamp()
        return suggested_wrap_amount(
            amount_per_interval_value,
            depletion_timestamp,
            now,
            self._config.buffer_months,
        )


# ============================================================
# TICKER
# ============================================================

class FlowingAmountTicker:
    """
    Periodically re-evaluates a FlowingAmount.

    The callback receives the fresh amount each tick. A failing
    callback is logged and the ticker keeps running.
    """

    def __init__(
        self,
        flowing_amount: FlowingAmount,
        on_update: Callable[[int], Awaitable[None]],
        interval_seconds: Optional[float] = None,
    ):
        self._flowing_amount = flowing_amount
        self._on_update = on_update
        self._interval = (
            interval_seconds
            if interval_seconds is not None
            else flowing_amount.config.refresh_interval_seconds
        )
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        return self._ticks

    async def start(self) -> None:
        """Start ticking. Emits one value immediately."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._tick_loop())
        logger.info(f"Flowing amount ticker started (interval={self._interval}s)")

    async def stop(self) -> None:
        """Stop ticking and wait for the task to finish."""
        if not self._running:
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(f"Flowing amount ticker stopped after {self._ticks} ticks")

    async def _tick_loop(self) -> None:
        while self._running:
            try:
                value = self._flowing_amount.current()
                self._ticks += 1
                await self._on_update(value)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Flowing amount update failed: {e}")

            try:
                await asyncio.sleep(self._interval)
            except asyncio.CancelledError:
                break


__all__ = ["FlowingAmount", "FlowingAmountTicker"]
