"""
Transaction Queue - Sequential Runner.

============================================================
PURPOSE
============================================================
Executes an ordered list of dependent, irreversible async
steps (wrap funds, then start a flow, ...) one at a time.

============================================================
GUARANTEES
============================================================
- STRICT ORDER: step i+1 starts only after step i resolved
- AT MOST ONCE: each step is attempted at most once per run
- STOP ON FAILURE: the first failing step ends the run
- NO RETRY: a retry is a new run over a rebuilt step list
- ONE RUN: a second run() while busy raises QueueBusyError
  and leaves the active run untouched
- LIVE PROGRESS: completed_count is updated (and observers
  awaited) after each step, before the next one starts

============================================================
RUN WORKFLOW
============================================================
1. Reject if busy (synchronously, before any await)
2. Claim the queue and reset run state
3. For each step: execute, count, notify
4. On failure: record StepFailedError(index, cause), stop
5. Release the queue, notify, return QueueOutcome

============================================================
"""

import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Union

from core.clock import ClockFactory, ClockProtocol
from core.exceptions import QueueBusyError, StepFailedError, StepTimedOutError

from .config import QueueConfig
from .types import (
    OperationStep,
    QueueOutcome,
    QueueResultCode,
    QueueRunState,
    StepAction,
    as_steps,
)


logger = logging.getLogger(__name__)


ProgressObserver = Callable[[QueueRunState], Awaitable[None]]


# ============================================================
# TRANSACTION QUEUE
# ============================================================

class TransactionQueue:
    """
    Sequential executor for on-chain operation steps.

    Run state is owned by the queue and mutated only by its own
    execution loop; callers read it through properties or get
    snapshots via progress observers.
    """

    def __init__(
        self,
        config: Optional[QueueConfig] = None,
        on_progress: Optional[ProgressObserver] = None,
        clock: Optional[ClockProtocol] = None,
    ):
        """
        Initialize transaction queue.

        Args:
            config: Queue configuration
            on_progress: Observer called with a state snapshot on
                start, after each completed step and on finish
            clock: Time source for run timestamps
        """
        self._config = config or QueueConfig()
        self._clock = clock
        self._observers: List[ProgressObserver] = []
        if on_progress is not None:
            self._observers.append(on_progress)

        # Run state
        self._running = False
        self._run_id: Optional[str] = None
        self._total_steps = 0
        self._current_index: Optional[int] = None
        self._completed_count = 0
        self._error: Optional[StepFailedError] = None
        self._started_at = None
        self._finished_at = None

        # Statistics
        self._stats = {
            "runs_started": 0,
            "runs_succeeded": 0,
            "runs_failed": 0,
            "runs_rejected_busy": 0,
            "steps_completed": 0,
        }

    # --------------------------------------------------------
    # OBSERVABLE STATE
    # --------------------------------------------------------

    @property
    def is_running(self) -> bool:
        """True from run() invocation until success or failure."""
        return self._running

    @property
    def completed_count(self) -> int:
        """Steps completed in the current or most recent run."""
        return self._completed_count

    @property
    def error(self) -> Optional[StepFailedError]:
        """Terminal error of the most recent run, if it failed."""
        return self._error

    @property
    def state(self) -> QueueRunState:
        """Snapshot of the current or most recent run."""
        return QueueRunState(
            run_id=self._run_id,
            total_steps=self._total_steps,
            current_index=self._current_index,
            completed_count=self._completed_count,
            is_running=self._running,
            error=self._error,
            started_at=self._started_at,
            finished_at=self._finished_at,
        )

    def on_progress(self, observer: ProgressObserver) -> None:
        """Register a progress observer."""
        self._observers.append(observer)

    def get_stats(self) -> Dict[str, int]:
        """Get queue statistics."""
        return dict(self._stats)

    # --------------------------------------------------------
    # EXECUTION
    # --------------------------------------------------------

    async def run(
        self,
        steps: Iterable[Union[OperationStep, StepAction]],
    ) -> QueueOutcome:
        """
        Execute steps sequentially, stopping at the first failure.

        Args:
            steps: Ordered steps (OperationStep or zero-argument
                coroutine functions)

        Returns:
            QueueOutcome; a failed step is reported in it, not raised

        Raises:
            QueueBusyError: a run is already active (no work done)
            TypeError: a step is not callable (no work done)
        """
        # Everything up to the first await runs atomically on the loop.
        if self._running:
            self._stats["runs_rejected_busy"] += 1
            logger.warning(
                f"Run rejected: queue busy with run {self._run_id} "
                f"({self._completed_count}/{self._total_steps} completed)"
            )
            raise QueueBusyError(
                active_index=self._current_index,
                active_total=self._total_steps,
            )

        step_list = as_steps(steps)

        self._running = True
        self._run_id = str(uuid.uuid4())
        self._total_steps = len(step_list)
        self._current_index = None
        self._completed_count = 0
        self._error = None
        self._started_at = self._now()
        self._finished_at = None
        self._stats["runs_started"] += 1

        outcome = QueueOutcome(
            run_id=self._run_id,
            total_steps=self._total_steps,
            started_at=self._started_at,
        )

        try:
            if not step_list:
                logger.debug(f"Run {self._run_id}: no steps, nothing to do")
                outcome.result_code = QueueResultCode.EMPTY
            else:
                logger.info(f"Run {self._run_id}: executing {len(step_list)} steps")
                await self._notify()
                error = await self._execute_steps(step_list)
                if error is not None:
                    outcome.result_code = QueueResultCode.STEP_FAILED
                    outcome.error = error
        finally:
            self._running = False
            self._current_index = None
            self._finished_at = self._now()

        outcome.completed_count = self._completed_count
        outcome.completed_at = self._finished_at

        if outcome.is_success:
            self._stats["runs_succeeded"] += 1
            if step_list:
                logger.info(f"Run {self._run_id}: all {len(step_list)} steps completed")
        else:
            self._stats["runs_failed"] += 1

        if step_list:
            await self._notify()

        return outcome

    async def _execute_steps(self, step_list: Sequence[OperationStep]) -> Optional[StepFailedError]:
        """Run steps in order; return the terminal error, if any."""
        for index, step in enumerate(step_list):
            self._current_index = index
            logger.debug(f"Run {self._run_id}: step {index} '{step.name}' started")

            try:
                await self._execute_step(index, step)
            except asyncio.CancelledError:
                logger.warning(f"Run {self._run_id}: cancelled during step {index} '{step.name}'")
                raise
            except StepTimedOutError as e:
                return self._record_failure(e)
            except Exception as e:
                return self._record_failure(
                    StepFailedError(index, cause=e, step_name=step.name)
                )

            self._completed_count += 1
            self._stats["steps_completed"] += 1
            logger.info(
                f"Run {self._run_id}: step {index} '{step.name}' completed "
                f"({self._completed_count}/{self._total_steps})"
            )
            await self._notify()

        return None

    async def _execute_step(self, index: int, step: OperationStep) -> None:
        timeout = self._config.step_timeout_seconds
        if timeout is None:
            await step.execute()
            return

        try:
            await asyncio.wait_for(step.execute(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise StepTimedOutError(index, timeout, step_name=step.name) from e

    def _record_failure(self, error: StepFailedError) -> StepFailedError:
        self._error = error
        logger.warning(
            f"Run {self._run_id}: step {error.index} '{error.step_name}' failed "
            f"after {self._completed_count} completed: {error.message}"
        )
        return error

    # --------------------------------------------------------
    # RETRY SUPPORT
    # --------------------------------------------------------

    @staticmethod
    def remaining(
        steps: Sequence[Union[OperationStep, StepAction]],
        outcome: QueueOutcome,
    ) -> List[Union[OperationStep, StepAction]]:
        """
        Steps not yet completed by `outcome`, starting at the failed one.

        Completed steps already committed their side effects and must not
        be part of a retry run.
        """
        return list(steps[outcome.completed_count:])

    # --------------------------------------------------------
    # HELPERS
    # --------------------------------------------------------

    def _now(self):
        return (self._clock or ClockFactory.get_clock()).now()

    async def _notify(self) -> None:
        """Hand a state snapshot to every observer."""
        if not self._config.notify_observers or not self._observers:
            return

        snapshot = self.state
        for observer in self._observers:
            try:
                await observer(snapshot)
            except Exception as e:
                logger.error(f"Progress observer failed: {e}")


__all__ = ["TransactionQueue", "ProgressObserver"]
