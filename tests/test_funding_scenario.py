"""
Funding Flow Scenario Tests.

============================================================
PURPOSE
============================================================
End-to-end: a live balance extrapolated from an account
snapshot, then a two-step checkout (wrap funds, start flow)
whose second transaction reverts.

============================================================
"""

import pytest

from core.clock import MockClock
from core.constants import SECONDS_IN_MONTH
from flow_estimator import (
    Checkpoint,
    FlowingAmount,
    TimeInterval,
    estimate,
    estimate_depletion_timestamp,
    flow_rate_from_amount_per_interval,
    outflow_adjustment,
    parse_token_amount,
    round_token_amount,
)
from transaction_queue import OperationStep, QueueResultCode, TransactionQueue


class Reverted(Exception):
    pass


class FakeChain:
    """Records submitted operations; optionally reverts one."""

    def __init__(self, revert_on=None):
        self.revert_on = revert_on
        self.submitted = []

    async def submit(self, operation):
        if operation == self.revert_on:
            raise Reverted("reverted")
        self.submitted.append(operation)


class TestFundingScenario:
    """Live balance plus checkout queue."""

    def test_live_balance(self):
        cp = Checkpoint(
            base_amount=500000000000000000,
            base_timestamp=1000,
            rate_per_second=100000,
        )

        assert estimate(cp, 1100) == 500000000010000000
        assert FlowingAmount(cp, clock=MockClock(1100)).current() == 500000000010000000

    @pytest.mark.asyncio
    async def test_checkout_with_reverting_flow_step(self):
        chain = FakeChain(revert_on="distribute_flow")
        queue = TransactionQueue()
        steps = [
            OperationStep(lambda: chain.submit("wrap"), name="wrap"),
            OperationStep(lambda: chain.submit("distribute_flow"), name="distribute_flow"),
        ]

        outcome = await queue.run(steps)

        assert outcome.result_code == QueueResultCode.STEP_FAILED
        assert outcome.completed_count == 1
        assert outcome.failed_index == 1
        assert str(outcome.cause) == "reverted"
        assert chain.submitted == ["wrap"]
        assert queue.is_running is False

        chain.revert_on = None
        retry = await queue.run(TransactionQueue.remaining(steps, outcome))

        assert retry.result_code == QueueResultCode.SUCCESS
        assert chain.submitted == ["wrap", "distribute_flow"]

    def test_checkout_preview(self):
        """Monthly amount to rate, then the resulting depletion date."""
        monthly = parse_token_amount("1,000")
        new_rate = flow_rate_from_amount_per_interval(monthly, TimeInterval.MONTH)
        account = Checkpoint.from_snapshot({
            "balanceUntilUpdatedAt": str(parse_token_amount("2500")),
            "updatedAtTimestamp": "1700000000",
            "totalNetFlowRate": "0",
        })

        depleted_at = estimate_depletion_timestamp(
            account,
            rate_adjustment=outflow_adjustment(0, new_rate),
        )

        assert round_token_amount(new_rate * SECONDS_IN_MONTH, 2) == "999.99"
        assert depleted_at > account.base_timestamp + 2 * SECONDS_IN_MONTH
        assert estimate(account.with_rate(-new_rate), depleted_at) >= 0
