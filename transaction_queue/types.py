"""
Transaction Queue - Types.

============================================================
PURPOSE
============================================================
Steps, run state snapshots and run outcomes.

A step is a named zero-argument coroutine function. Success
means it returned; failure means it raised. Whatever it
returns is ignored.

============================================================
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from core.exceptions import StepFailedError


StepAction = Callable[[], Awaitable[Any]]


# ============================================================
# OPERATION STEP
# ============================================================

@dataclass(frozen=True)
class OperationStep:
    """One irreversible, possibly slow, unit of on-chain work."""

    action: StepAction
    """Zero-argument coroutine function performing the side effect."""

    name: str = ""
    """Label for logs and progress displays."""

    def __post_init__(self) -> None:
        if not callable(self.action):
            raise TypeError(
                f"Step action must be callable, got {type(self.action).__name__}"
            )

    async def execute(self) -> None:
        await self.action()


def as_steps(steps: Iterable[Union[OperationStep, StepAction]]) -> List[OperationStep]:
    """
    Normalize a sequence of steps.

    Bare callables are wrapped and named `step-<index>`; order is kept.
    """
    result = []
    for index, step in enumerate(steps):
        if isinstance(step, OperationStep):
            result.append(step if step.name else OperationStep(step.action, f"step-{index}"))
        else:
            result.append(OperationStep(step, f"step-{index}"))
    return result


# ============================================================
# RESULT CODES
# ============================================================

class QueueResultCode(Enum):
    """How a run ended."""

    SUCCESS = "SUCCESS"
    """Every step resolved."""

    EMPTY = "EMPTY"
    """No steps were given; nothing ran."""

    STEP_FAILED = "STEP_FAILED"
    """A step raised; later steps never ran."""

    def is_success(self) -> bool:
        return self in (QueueResultCode.SUCCESS, QueueResultCode.EMPTY)


# ============================================================
# RUN STATE
# ============================================================

@dataclass(frozen=True)
class QueueRunState:
    """
    Read-only snapshot of a queue's run.

    Handed to progress observers and returned by
    TransactionQueue.state. Observers never see the live object.
    """

    run_id: Optional[str] = None
    total_steps: int = 0
    current_index: Optional[int] = None
    completed_count: int = 0
    is_running: bool = False
    error: Optional[StepFailedError] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def failed_index(self) -> Optional[int]:
        return self.error.index if self.error is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "total_steps": self.total_steps,
            "current_index": self.current_index,
            "completed_count": self.completed_count,
            "is_running": self.is_running,
            "error": self.error.to_dict() if self.error is not None else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


# ============================================================
# RUN OUTCOME
# ============================================================

@dataclass
class QueueOutcome:
    """
    Result of TransactionQueue.run.

    This is the OUTPUT of a finished run.
    """

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    """Unique run identifier."""

    result_code: QueueResultCode = QueueResultCode.SUCCESS
    """How the run ended."""

    total_steps: int = 0
    """Number of steps submitted."""

    completed_count: int = 0
    """Steps that resolved before the run ended."""

    error: Optional[StepFailedError] = None
    """Terminal error when result_code is STEP_FAILED."""

    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return self.result_code.is_success()

    @property
    def failed_index(self) -> Optional[int]:
        return self.error.index if self.error is not None else None

    @property
    def cause(self) -> Optional[BaseException]:
        """Whatever the failing step raised."""
        return self.error.cause if self.error is not None else None

    def raise_for_error(self) -> None:
        """Re-raise the step failure, if any."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "result_code": self.result_code.value,
            "total_steps": self.total_steps,
            "completed_count": self.completed_count,
            "failed_index": self.failed_index,
            "error": self.error.to_dict() if self.error is not None else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


__all__ = [
    "StepAction",
    "OperationStep",
    "as_steps",
    "QueueResultCode",
    "QueueRunState",
    "QueueOutcome",
]
