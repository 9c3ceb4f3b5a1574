"""
Core Module Package.

Shared infrastructure for the flow estimator and the
transaction queue.

Components:
- clock: Injectable time source
- exceptions: Exception hierarchy
- constants: Time and token-unit constants
- config: Environment-driven configuration
- logging_setup: Root logger setup
"""

from .clock import ClockProtocol, SystemClock, MockClock, ClockFactory
from .exceptions import (
    Severity,
    ErrorClassification,
    FlowCoreError,
    ConfigurationError,
    InvalidCheckpointError,
    QueueBusyError,
    StepFailedError,
    StepTimedOutError,
)
from .constants import SECONDS_IN_MONTH, DEFAULT_TOKEN_DECIMALS
from .config import CoreConfig, load_env
from .logging_setup import setup_logging


__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
    "Severity",
    "ErrorClassification",
    "FlowCoreError",
    "ConfigurationError",
    "InvalidCheckpointError",
    "QueueBusyError",
    "StepFailedError",
    "StepTimedOutError",
    "SECONDS_IN_MONTH",
    "DEFAULT_TOKEN_DECIMALS",
    "CoreConfig",
    "load_env",
    "setup_logging",
]
