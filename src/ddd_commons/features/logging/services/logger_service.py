"""Logger service for ddd-commons.

LoggerService is the entry point applications log through. Each entry is
written to the file log stream service (when configured) and dispatched to
the async callback registered for its level. Callbacks listed in
``tasks.track`` are tracked and awaited on cleanup; the others run in the
background.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional, Set, Union

from .file_log_stream_service import FileLogStreamService
from .pending_tasks_service import PendingTasksService
from ..entities.config import (
    LEVEL_CALLBACKS,
    LoggerCallback,
    LoggerSettings,
    LogLevel,
    PendingTasksSettings,
    build_settings,
)
from ..entities.protocols import FileLogService, Terminator
from ..utils.formatting import format_log_line
from ....core.exceptions import LoggerCallbackNotSetError

logger = logging.getLogger(__name__)

CONSOLE_LEVELS: Dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}


class LoggerService:
    """Fans log entries out to files and async callbacks."""

    def __init__(
        self,
        settings: Optional[Union[LoggerSettings, Dict[str, Any]]] = None,
        *,
        file_service: Optional[FileLogService] = None,
        terminator: Optional[Terminator] = None,
        **overrides: Any
    ):
        """
        Initialize the logger.

        Args:
            settings: Settings instance or mapping of settings values
            file_service: File log service to use instead of building one
                from ``settings.file``
            terminator: Termination strategy shared with owned services
            **overrides: Settings values taking precedence over ``settings``

        Raises:
            InvalidSettingsError: If the settings are invalid
        """
        self._settings = build_settings(LoggerSettings, settings, **overrides)
        self._tasks = PendingTasksService(self._settings.tasks, terminator=terminator)
        self._background: Set[asyncio.Future] = set()

        self._file: Optional[FileLogService] = file_service
        if self._file is None and self._settings.file is not None:
            self._file = FileLogStreamService(self._settings.file, terminator=terminator)

    @classmethod
    def silent(cls) -> "LoggerService":
        """Build a logger that drops every entry."""
        return cls(
            ignore_levels=list(LogLevel),
            ignore_unset=True,
            tasks=PendingTasksSettings(track=[]),
        )

    @property
    def settings(self) -> LoggerSettings:
        return self._settings

    @property
    def file(self) -> Optional[FileLogService]:
        return self._file

    @property
    def pending_tasks(self) -> int:
        return self._tasks.size

    def debug(self, message: Optional[str] = None, *args: Any) -> None:
        self._log(LogLevel.DEBUG, message, args)

    def info(self, message: Optional[str] = None, *args: Any) -> None:
        self._log(LogLevel.INFO, message, args)

    def warn(self, message: Optional[str] = None, *args: Any) -> None:
        self._log(LogLevel.WARN, message, args)

    def error(self, message: Optional[str] = None, *args: Any) -> None:
        self._log(LogLevel.ERROR, message, args)

    def fatal(self, message: Optional[str] = None, *args: Any) -> None:
        self._log(LogLevel.FATAL, message, args)

    def flush(self) -> None:
        """Fire the ``on_flush`` callback, if any."""
        if self._settings.on_flush is None:
            return

        self._schedule(LoggerCallback.ON_FLUSH, self._settings.on_flush())

    async def wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def cleanup(self) -> None:
        """Await tracked callbacks, then clean up the file log service."""
        logger.debug("Logger cleaning up")
        await self._tasks.cleanup()

        if self._file is not None:
            await self._file.cleanup()

        logger.debug("Logger cleaned up")

    def _log(self, level: LogLevel, message: Optional[str], args: tuple) -> None:
        if level in self._settings.ignore_levels:
            return

        if self._file is not None:
            self._file.log(level, format_log_line(level, message, args))

        self._dispatch(level, message, args)

    def _dispatch(self, level: LogLevel, message: Optional[str], args: tuple) -> None:
        callback = LEVEL_CALLBACKS[level]
        fn = getattr(self._settings.callbacks, callback.value)

        if fn is None:
            if self._settings.ignore_unset:
                return
            raise LoggerCallbackNotSetError(
                f"No logger function set for callback {callback.value}, "
                f"implement one or enable ignore_unset",
                details={"callback": callback.value},
            )

        if self._settings.always_on_console:
            text = message or ""
            if args:
                text = f"{text} {list(args)!r}"
            logger.log(CONSOLE_LEVELS[level], text)

        self._schedule(callback, fn(message, *args))

    def _schedule(self, callback: LoggerCallback, awaitable: Awaitable[Any]) -> None:
        guarded = self._guard(awaitable)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(guarded)
            return

        if callback in self._settings.tasks.track:
            self._tasks.register(guarded)
            return

        task = loop.create_task(guarded)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _guard(self, awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        except Exception as e:
            if self._settings.on_error is None:
                logger.error(f"Uncaught logger callback error: {e}", exc_info=e)
                return
            self._settings.on_error(e)
