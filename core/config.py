"""
Core Module - Configuration.

============================================================
PURPOSE
============================================================
Environment-driven configuration shared by both packages.

Values come from process environment variables; a local
`.env` file is honoured through python-dotenv. Explicit
environment variables always win over the file.

============================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .logging_setup import LOG_FORMATS


logger = logging.getLogger(__name__)


# ============================================================
# ENVIRONMENT HELPERS
# ============================================================

def load_env(env_file: Optional[str] = None) -> bool:
    """
    Load a .env file into the process environment.

    Returns True when a file was found and read.
    """
    loaded = load_dotenv(env_file, override=False)
    if loaded:
        logger.debug(f"Loaded environment from {env_file or '.env'}")
    return loaded


def env_str(key: str, default: str) -> str:
    return os.getenv(key, default)


def env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"{key} must be an integer",
            config_key=key,
            actual_value=value,
            cause=e,
        ) from e


def env_float(key: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(
            f"{key} must be a number",
            config_key=key,
            actual_value=value,
            cause=e,
        ) from e


def ensure_valid(errors: List[str], section: str) -> None:
    """Raise ConfigurationError if a validate() call reported problems."""
    if errors:
        raise ConfigurationError(
            f"Invalid {section} configuration: {'; '.join(errors)}",
            context={"errors": errors, "section": section},
        )


# ============================================================
# CORE CONFIGURATION
# ============================================================

@dataclass
class CoreConfig:
    """Process-level settings."""

    log_level: str = "INFO"
    """Logging level."""

    log_format: str = "text"
    """Log output format (text or json)."""

    @classmethod
    def from_env(cls) -> "CoreConfig":
        """Load configuration from environment variables."""
        return cls(
            log_level=env_str("LOG_LEVEL", "INFO"),
            log_format=env_str("LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"log_level '{self.log_level}' is not a logging level")

        if self.log_format not in LOG_FORMATS:
            errors.append(f"log_format must be one of {', '.join(LOG_FORMATS)}")

        return errors

    def ensure_valid(self) -> "CoreConfig":
        ensure_valid(self.validate(), "core")
        return self


__all__ = [
    "load_env",
    "env_str",
    "env_bool",
    "env_int",
    "env_float",
    "ensure_valid",
    "CoreConfig",
]
