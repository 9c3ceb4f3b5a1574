"""
Transaction Queue - Configuration.

============================================================
PURPOSE
============================================================
Settings for the sequential step runner.

CRITICAL CONSTRAINTS:
- No retries: a failed step ends the run
- No parallelism: steps run one at a time
- No timeout unless explicitly configured

============================================================
"""

from dataclasses import dataclass
from typing import List, Optional

from core.config import ensure_valid, env_bool, env_float


@dataclass
class QueueConfig:
    """Transaction queue configuration."""

    step_timeout_seconds: Optional[float] = None
    """Per-step time limit. None lets a stuck step hang the run."""

    notify_observers: bool = True
    """Whether progress observers are called."""

    @classmethod
    def from_env(cls) -> "QueueConfig":
        """Load configuration from environment variables."""
        return cls(
            step_timeout_seconds=env_float("QUEUE_STEP_TIMEOUT_SECONDS", None),
            notify_observers=env_bool("QUEUE_NOTIFY_OBSERVERS", True),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.step_timeout_seconds is not None and self.step_timeout_seconds <= 0:
            errors.append("step_timeout_seconds must be positive when set")

        return errors

    def ensure_valid(self) -> "QueueConfig":
        ensure_valid(self.validate(), "transaction queue")
        return self


__all__ = ["QueueConfig"]
