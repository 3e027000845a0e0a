"""Logging feature for ddd-commons.

Feature-First architecture:
- entities/: log levels, settings models and protocols
- adapters/: append file stream and process terminator
- services/: file log stream, pending tasks and logger services
- utils/: log line formatting
"""

from .entities import (
    LogLevel,
    LoggerCallback,
    FileLogStreamSettings,
    PendingTasksSettings,
    LoggerCallbacks,
    LoggerSettings,
    LogStream,
    LogStreamFactory,
    Terminator,
    FileLogService,
)
from .adapters import AppendFileStream, ProcessTerminator
from .services import FileLogStreamService, PendingTasksService, LoggerService
from .utils import format_log_line

__all__ = [
    # Entities
    "LogLevel",
    "LoggerCallback",
    "FileLogStreamSettings",
    "PendingTasksSettings",
    "LoggerCallbacks",
    "LoggerSettings",
    "LogStream",
    "LogStreamFactory",
    "Terminator",
    "FileLogService",
    
    # Adapters
    "AppendFileStream",
    "ProcessTerminator",
    
    # Services
    "FileLogStreamService",
    "PendingTasksService",
    "LoggerService",
    
    # Utils
    "format_log_line",
]
