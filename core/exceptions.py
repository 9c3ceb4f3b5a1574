"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the exception hierarchy for flow estimation and
transaction queue execution.

- Provides clear exception hierarchy
- Enables specific error handling
- Includes context for debugging

============================================================
EXCEPTION HIERARCHY
============================================================
FlowCoreError (base)
├── ConfigurationError
├── InvalidCheckpointError
├── QueueBusyError
└── StepFailedError
    └── StepTimedOutError

An empty queue is NOT an error: it completes as a no-op success.

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, caller must act."""

    CRITICAL = "critical"
    """Contract violation, should be unreachable."""


# ============================================================
# ERROR CLASSIFICATION
# ============================================================

class ErrorClassification(Enum):
    """Classification of error recoverability."""

    CALLER_ERROR = "caller_error"
    """Caller misuse; fix the call site."""

    USER_FACING = "user_facing"
    """Expected failure the user should see (rejected signature, revert)."""

    NON_RECOVERABLE = "non_recoverable"
    """Broken contract with an upstream collaborator."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class FlowCoreError(Exception):
    """
    Base exception for all flow core errors.

    All exceptions carry:
    - severity: for alerting
    - context: for debugging
    - classification: for error handling decisions
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_classification: ErrorClassification = ErrorClassification.CALLER_ERROR

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        classification: Optional[ErrorClassification] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.classification = classification or self.default_classification
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause is not None:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging/storage."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "classification": self.classification.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause is not None else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        line = f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        if ctx_str:
            line = f"{line} | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(FlowCoreError):
    """Error in configuration."""

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)


# ============================================================
# ESTIMATION ERRORS
# ============================================================

class InvalidCheckpointError(FlowCoreError):
    """Checkpoint is malformed (missing field, wrong type, negative base)."""

    default_severity = Severity.CRITICAL
    default_classification = ErrorClassification.NON_RECOVERABLE

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        actual: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if field:
            context["field"] = field
        if actual is not None:
            context["actual"] = repr(actual)[:100]

        super().__init__(message, context=context, **kwargs)
        self.field = field


# ============================================================
# QUEUE ERRORS
# ============================================================

class QueueBusyError(FlowCoreError):
    """A run was requested while another run is active. No work was done."""

    default_severity = Severity.LOW
    default_classification = ErrorClassification.CALLER_ERROR

    def __init__(
        self,
        message: str = "Transaction queue is already running",
        active_index: Optional[int] = None,
        active_total: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if active_index is not None:
            context["active_index"] = active_index
        if active_total is not None:
            context["active_total"] = active_total

        super().__init__(message, context=context, **kwargs)


class StepFailedError(FlowCoreError):
    """
    An operation step failed.

    `index` is the zero-based position of the failing step in the run;
    `cause` is whatever the step raised, opaque to the queue.
    """

    default_severity = Severity.HIGH
    default_classification = ErrorClassification.USER_FACING

    def __init__(
        self,
        index: int,
        cause: Optional[BaseException] = None,
        step_name: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        context["index"] = index
        if step_name:
            context["step_name"] = step_name

        if message is None:
            label = f"'{step_name}'" if step_name else f"#{index}"
            message = f"Step {label} failed: {cause}" if cause is not None \
                else f"Step {label} failed"

        super().__init__(message, context=context, cause=cause, **kwargs)
        self.index = index
        self.step_name = step_name


class StepTimedOutError(StepFailedError):
    """A step did not resolve within the configured per-step timeout."""

    def __init__(
        self,
        index: int,
        timeout_seconds: float,
        step_name: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})
        context["timeout_seconds"] = timeout_seconds
        label = f"'{step_name}'" if step_name else f"#{index}"

        super().__init__(
            index,
            step_name=step_name,
            message=f"Step {label} timed out after {timeout_seconds}s",
            context=context,
            **kwargs,
        )
        self.timeout_seconds = timeout_seconds


__all__ = [
    "Severity",
    "ErrorClassification",
    "FlowCoreError",
    "ConfigurationError",
    "InvalidCheckpointError",
    "QueueBusyError",
    "StepFailedError",
    "StepTimedOutError",
]
