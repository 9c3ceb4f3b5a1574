"""
Live Tracking Tests.

FlowingAmount reads through an injected clock; the ticker
emits on a cadence and leaves nothing running after stop().
"""

import asyncio

import pytest

from core.clock import ClockFactory, MockClock
from core.constants import SECONDS_IN_MONTH
from flow_estimator import (
    Checkpoint,
    FlowEstimatorConfig,
    FlowingAmount,
    FlowingAmountTicker,
)


class TestFlowingAmount:
    """Tests for FlowingAmount."""

    def test_reads_injected_clock(self):
        clock = MockClock(1000)
        cp = Checkpoint(base_amount=500, base_timestamp=1000, rate_per_second=5)
        tracker = FlowingAmount(cp, clock=clock)

        assert tracker.current() == 500

        clock.advance(seconds=10)

        assert tracker.current() == 550

    def test_wall_clock_regression_is_clamped(self):
        clock = MockClock(2000)
        cp = Checkpoint(base_amount=500, base_timestamp=1500, rate_per_second=1)
        tracker = FlowingAmount(cp, clock=clock)
        assert tracker.current() == 1000

        clock.set_time(1000)

        assert tracker.current() == 500

    def test_explicit_now_overrides_clock(self):
        tracker = FlowingAmount(
            Checkpoint(base_amount=0, base_timestamp=0, rate_per_second=2),
            clock=MockClock(10),
        )

        assert tracker.current(now=100) == 200

    def test_global_clock_used_by_default(self):
        cp = Checkpoint(base_amount=0, base_timestamp=0, rate_per_second=3)

        with ClockFactory.use_mock(50):
            assert FlowingAmount(cp).current() == 150

    def test_display_uses_configured_digits(self):
        cp = Checkpoint(base_amount=1234567890000000000, base_timestamp=0, rate_per_second=0)
        tracker = FlowingAmount(cp, clock=MockClock(0), config=FlowEstimatorConfig(display_digits=2))

        assert tracker.display() == "1.23"
        assert tracker.display(digits=6) == "1.234567"

    def test_default_is_zero_checkpoint(self):
        assert FlowingAmount(clock=MockClock(99)).current() == 0


class TestFlowingAmountTicker:
    """Tests for FlowingAmountTicker."""

    @pytest.mark.asyncio
    async def test_emits_values_and_tracks_checkpoint_changes(self):
        clock = MockClock(0)
        tracker = FlowingAmount(
            Checkpoint(base_amount=0, base_timestamp=0, rate_per_second=1),
            clock=clock,
        )
        seen = []

        async def on_update(value):
            seen.append(value)
            clock.advance(seconds=1)
            if len(seen) == 2:
                tracker.update(Checkpoint(base_amount=1000, base_timestamp=0, rate_per_second=0))

        ticker = FlowingAmountTicker(tracker, on_update, interval_seconds=0.001)
        await ticker.start()
        while len(seen) < 4:
            await asyncio.sleep(0.001)
        await ticker.stop()

        assert seen[:4] == [0, 1, 1000, 1000]

    @pytest.mark.asyncio
    async def test_stop_cancels_task(self):
        tracker = FlowingAmount(clock=MockClock(0))
        seen = []

        async def on_update(value):
            seen.append(value)

        ticker = FlowingAmountTicker(tracker, on_update, interval_seconds=0.001)
        await ticker.start()
        await asyncio.sleep(0.01)
        await ticker.stop()
        count = len(seen)
        await asyncio.sleep(0.01)

        assert ticker.is_running is False
        assert count >= 1
        assert len(seen) == count

    @pytest.mark.asyncio
    async def test_callback_error_does_not_stop_ticker(self):
        tracker = FlowingAmount(clock=MockClock(0))
        calls = []

        async def on_update(value):
            calls.append(value)
            if len(calls) == 1:
                raise RuntimeError("render failed")

        ticker = FlowingAmountTicker(tracker, on_update, interval_seconds=0.001)
        await ticker.start()
        while len(calls) < 3:
            await asyncio.sleep(0.001)
        await ticker.stop()

        assert ticker.ticks >= 3

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self):
        async def on_update(value):
            pass

        ticker = FlowingAmountTicker(FlowingAmount(clock=MockClock(0)), on_update, interval_seconds=0.01)

        await ticker.stop()
        await ticker.start()
        await ticker.start()
        assert ticker.is_running is True
        await ticker.stop()
        await ticker.stop()
        assert ticker.is_running is False

    def test_interval_defaults_to_config(self):
        async def on_update(value):
            pass

        tracker = FlowingAmount(config=FlowEstimatorConfig(refresh_interval_seconds=2.5))
        ticker = FlowingAmountTicker(tracker, on_update)

        assert ticker.interval_seconds == 2.5


class TestFlowingAmountRunway:
    """Runway helpers sized by FlowEstimatorConfig.buffer_months."""

    def test_display_digits_beyond_token_decimals(self):
        tracker = FlowingAmount(
            Checkpoint(base_amount=1, base_timestamp=0, rate_per_second=0),
            clock=MockClock(0),
            config=FlowEstimatorConfig(display_digits=60),
        )

        assert tracker.display() == "0.000000000000000001"

    def test_buffer_months_from_env_changes_runway(self, monkeypatch):
        monkeypatch.setenv("FLOW_BUFFER_MONTHS", "1")
        now = 1_700_000_000
        tracker = FlowingAmount(clock=MockClock(now), config=FlowEstimatorConfig.from_env())
        depleted_at = now + 2 * SECONDS_IN_MONTH

        assert tracker.config.buffer_months == 1
        assert tracker.needs_top_up(depleted_at) is False
        assert tracker.suggested_wrap_amount(100, depleted_at) == 0
        assert FlowingAmount(clock=MockClock(now)).needs_top_up(depleted_at) is True

    def test_suggested_wrap_scales_with_buffer_months(self):
        now = 0
        tracker = FlowingAmount(clock=MockClock(now), config=FlowEstimatorConfig(buffer_months=6))

        assert tracker.suggested_wrap_amount(100, SECONDS_IN_MONTH) == 600

    def test_has_suggested_balance_uses_buffer_months(self):
        rate = 10
        cp = Checkpoint(base_amount=2 * SECONDS_IN_MONTH * rate + 1, base_timestamp=0, rate_per_second=0)

        short = FlowingAmount(cp, clock=MockClock(0), config=FlowEstimatorConfig(buffer_months=2))
        default = FlowingAmount(cp, clock=MockClock(0))

        assert short.has_suggested_balance(rate) is True
        assert default.has_suggested_balance(rate) is False

    def test_depletion_timestamp_for_new_account_uses_clock(self):
        now = 1_700_000_000
        tracker = FlowingAmount(clock=MockClock(now))

        assert tracker.depletion_timestamp(extra_amount=3000, rate_adjustment=-1) == now + 3000
