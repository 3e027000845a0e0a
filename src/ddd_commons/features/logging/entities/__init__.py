"""Logging entities: settings models and protocols."""

from .config import (
    LogLevel,
    LoggerCallback,
    LEVEL_CALLBACKS,
    FileLogStreamSettings,
    PendingTasksSettings,
    LoggerCallbacks,
    LoggerSettings,
    build_settings,
)
from .protocols import (
    LogStream,
    LogStreamFactory,
    Terminator,
    FileLogService,
    DrainHandler,
    ErrorHandler,
)

__all__ = [
    "LogLevel",
    "LoggerCallback",
    "LEVEL_CALLBACKS",
    "FileLogStreamSettings",
    "PendingTasksSettings",
    "LoggerCallbacks",
    "LoggerSettings",
    "build_settings",
    "LogStream",
    "LogStreamFactory",
    "Terminator",
    "FileLogService",
    "DrainHandler",
    "ErrorHandler",
]
