"""Logging services."""

from .file_log_stream_service import FileLogStreamService
from .pending_tasks_service import PendingTasksService
from .logger_service import LoggerService

__all__ = [
    "FileLogStreamService",
    "PendingTasksService",
    "LoggerService",
]
