"""Configuration helpers for ddd-commons."""

from .logging_config import (
    LoggingConfig,
    LogVerbosity,
    LogFormat,
    setup_logging,
    get_logger,
)

__all__ = [
    "LoggingConfig",
    "LogVerbosity",
    "LogFormat",
    "setup_logging",
    "get_logger",
]
