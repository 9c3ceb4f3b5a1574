"""
Core Module - Logging Setup.

Installs a single stdout handler on the root logger. Every module
logs through `logging.getLogger(__name__)`; this is the only place
that decides format and level.
"""

import json
import logging
import sys
from typing import Optional


LOG_FORMATS = ("text", "json")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    correlation_id: Optional[str] = None,
) -> logging.Logger:
    """
    Set up structured logging.

    Args:
        level: Log level name
        log_format: Output format (json or text)
        correlation_id: Correlation ID for tracing

    Returns:
        Logger for the flow core
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "logger": "%(name)s",
                "message": "%(message)s",
                "correlation_id": correlation_id or "",
            })
        )
    else:
        formatter = logging.Formatter(
            f"%(asctime)s | %(levelname)-8s | %(name)s | {correlation_id or ''} | %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    return logging.getLogger("flow_core")


__all__ = ["LOG_FORMATS", "setup_logging"]
