"""File log stream service for ddd-commons.

Writes log messages to one append-only ``<level>.log`` file per configured
level. Messages a stream cannot take right away are kept in a bounded FIFO
queue per level and retried when the stream drains or after it is
recreated. Overflowing a queue, or accumulating too many stream errors,
escalates to process termination through an injectable Terminator.

All state is owned by the event loop thread; no locking is involved.
"""

import asyncio
import logging
from collections import deque
from functools import partial
from typing import Any, Deque, Dict, List, Optional, Set, Union

from ..adapters.file_stream import AppendFileStream
from ..adapters.terminator import ProcessTerminator
from ..entities.config import FileLogStreamSettings, LogLevel, build_settings
from ..entities.protocols import LogStream, LogStreamFactory, Terminator

logger = logging.getLogger(__name__)


class FileLogStreamService:
    """Buffered, backpressure-aware writer of per-level log files.

    Streams are opened for every configured level on construction. The
    service is a best-effort sink: stream failures are never raised to
    callers of ``log``; the process is the escalation path instead.
    """

    def __init__(
        self,
        settings: Optional[Union[FileLogStreamSettings, Dict[str, Any]]] = None,
        *,
        stream_factory: Optional[LogStreamFactory] = None,
        terminator: Optional[Terminator] = None,
        **overrides: Any
    ):
        """
        Initialize the service and open one stream per configured level.

        Args:
            settings: Settings instance or mapping of settings values
            stream_factory: Opens streams, defaults to AppendFileStream
            terminator: Termination strategy, defaults to ProcessTerminator
            **overrides: Settings values taking precedence over ``settings``

        Raises:
            InvalidSettingsError: If the settings are invalid
        """
        self._settings = build_settings(FileLogStreamSettings, settings, **overrides)
        self._stream_factory: LogStreamFactory = stream_factory or AppendFileStream
        self._terminator: Terminator = terminator or ProcessTerminator()

        self._levels: List[LogLevel] = list(self._settings.levels)
        self._streams: Dict[LogLevel, LogStream] = {}
        self._pending: Dict[LogLevel, Deque[str]] = {}
        self._flushing: Set[LogLevel] = set()
        self._error_count = 0
        self._terminated = False
        self._closed = False

        for level in self._levels:
            self.create_stream(level)

    @property
    def settings(self) -> FileLogStreamSettings:
        return self._settings

    @property
    def levels(self) -> List[LogLevel]:
        return list(self._levels)

    @property
    def error_count(self) -> int:
        """Stream errors seen over the lifetime of the service."""
        return self._error_count

    @property
    def terminated(self) -> bool:
        """Whether the termination strategy has been invoked."""
        return self._terminated

    @property
    def closed(self) -> bool:
        """Whether ``cleanup`` has run; later messages are dropped."""
        return self._closed

    def has_stream(self, level: LogLevel) -> bool:
        return level in self._streams

    def pending_count(self, level: LogLevel) -> int:
        """Messages waiting for the stream of ``level``."""
        pending = self._pending.get(level)
        return len(pending) if pending is not None else 0

    def has_backlog(self, level: LogLevel) -> bool:
        return level in self._pending

    def log(self, level: Union[LogLevel, str], message: str) -> None:
        """Write a message, or queue it while the level's stream is unavailable.

        Unknown or unconfigured levels are ignored. While a backlog exists
        new messages join the queue behind it, keeping FIFO order.
        """
        try:
            level = LogLevel(level)
        except ValueError:
            return

        if level not in self._levels or self._terminated or self._closed:
            return

        backlog = level in self._pending
        stream = self._streams.get(level)

        if stream is not None and not backlog and stream.write(message):
            return

        self._enqueue(level, message)

        if backlog:
            self.flush(level)

    def flush(self, level: Union[LogLevel, str]) -> None:
        """Move queued messages of ``level`` into its stream, oldest first.

        Stops at the first message the stream cannot take, keeping it at the
        head of the queue. An emptied queue is removed.
        """
        level = LogLevel(level)
        pending = self._pending.get(level)

        if pending is None or level in self._flushing:
            return

        self._flushing.add(level)
        try:
            while pending:
                message = pending.popleft()
                stream = self._streams.get(level)

                if stream is None or not stream.write(message):
                    pending.appendleft(message)
                    break
        finally:
            self._flushing.discard(level)

        if not pending and self._pending.get(level) is pending:
            del self._pending[level]

    async def cleanup(self) -> None:
        """Flush once per level, drop what is left and close every stream.

        Delivery of queued messages is not guaranteed. Messages logged after
        cleanup are dropped.
        """
        self._closed = True

        for level in self._levels:
            self.flush(level)
            dropped = self._pending.pop(level, None)
            if dropped:
                logger.warning(
                    f"Discarding {len(dropped)} pending log messages for level {level.value} on cleanup"
                )

        streams = list(self._streams.items())
        self._streams.clear()

        results = await asyncio.gather(
            *(stream.close() for _, stream in streams),
            return_exceptions=True
        )

        for (level, _), result in zip(streams, results):
            if isinstance(result, BaseException):
                logger.warning(f"Failed to close log stream for level {level.value}: {result}")
            else:
                logger.debug(f"Log stream for level {level.value} ended")

    def create_stream(self, level: LogLevel) -> None:
        """Open the stream of ``level`` unless one is already open."""
        if level in self._streams:
            return

        path = self._settings.abspath / f"{level.value}.log"
        self._streams[level] = self._stream_factory(
            path,
            on_drain=partial(self._handle_drain, level),
            on_error=partial(self._handle_error, level),
        )
        logger.debug(f"Log stream opened for level {level.value}: {path}")

    def _enqueue(self, level: LogLevel, message: str) -> None:
        pending = self._pending.get(level)

        if pending is None:
            self._pending[level] = deque([message])
            return

        if len(pending) >= self._settings.stream_limit:
            logger.warning(
                f"Stream limit reached for level {level.value}, message discarded"
            )
            if self._settings.kill_on_limit:
                self._terminate(
                    f"Stream limit of {self._settings.stream_limit} reached for level {level.value}"
                )
            return

        pending.append(message)

    def _handle_drain(self, level: LogLevel) -> None:
        logger.debug(f"Log stream drained for level {level.value}")
        self.flush(level)

    def _handle_error(self, level: LogLevel, error: BaseException) -> None:
        logger.error(f"Log stream error for level {level.value}: {error}")

        self._streams.pop(level, None)
        self._error_count += 1

        if self._terminated or self._closed:
            return

        if self._error_count >= self._settings.error_threshold:
            self._terminate(
                f"Log stream error threshold of {self._settings.error_threshold} reached"
            )
            return

        self.create_stream(level)
        self.flush(level)

    def _terminate(self, reason: str) -> None:
        self._terminated = True
        logger.critical(reason)
        self._terminator.terminate(reason)
