"""
Transaction Queue Package.

============================================================
PURPOSE
============================================================
Runs ordered, dependent, irreversible on-chain operations
one at a time and reports progress and the first failure.

CRITICAL PRINCIPLE:
    "Sequential only. No retries. One run at a time."

AUTHORITY BOUNDARIES:
    CAN:
        - Execute caller-built steps in order
        - Report completed count and the failing step
    MUST NOT:
        - Reorder, batch or parallelize steps
        - Retry a failed step
        - Queue a second run behind an active one

============================================================
MODULES
============================================================
- types: OperationStep, QueueRunState, QueueOutcome
- config: QueueConfig
- queue: TransactionQueue

============================================================
"""

from core.exceptions import QueueBusyError, StepFailedError, StepTimedOutError

from .types import (
    StepAction,
    OperationStep,
    as_steps,
    QueueResultCode,
    QueueRunState,
    QueueOutcome,
)
from .config import QueueConfig
from .queue import TransactionQueue, ProgressObserver


__all__ = [
    # Types
    "StepAction",
    "OperationStep",
    "as_steps",
    "QueueResultCode",
    "QueueRunState",
    "QueueOutcome",
    # Config
    "QueueConfig",
    # Queue
    "TransactionQueue",
    "ProgressObserver",
    # Exceptions
    "QueueBusyError",
    "StepFailedError",
    "StepTimedOutError",
]
