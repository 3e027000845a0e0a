"""Logging protocols for ddd-commons.

This module defines the protocol interfaces between the file log stream
service and its collaborators: the output streams it writes to, the factory
that opens them and the strategy used to terminate the process.
"""

from abc import abstractmethod
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

from .config import LogLevel

DrainHandler = Callable[[], None]
ErrorHandler = Callable[[BaseException], None]


@runtime_checkable
class LogStream(Protocol):
    """Appendable output stream with backpressure.
    
    ``write`` returns False when the chunk is refused because the stream is
    backpressured or no longer writable. A refusing stream later signals
    ``on_drain`` once it accepts writes again; I/O failures are signalled
    through ``on_error`` and leave the stream unusable.
    """
    
    @abstractmethod
    def write(self, chunk: str) -> bool:
        """Accept a chunk for writing, or refuse it."""
        ...
    
    @abstractmethod
    async def close(self) -> None:
        """Persist accepted chunks and release the underlying file."""
        ...


@runtime_checkable
class LogStreamFactory(Protocol):
    """Opens a log stream for a file path with its signal handlers."""
    
    def __call__(
        self,
        path: Path,
        on_drain: DrainHandler,
        on_error: ErrorHandler
    ) -> LogStream:
        ...


@runtime_checkable
class Terminator(Protocol):
    """Strategy invoked when a logging threshold makes the process fatal."""
    
    @abstractmethod
    def terminate(self, reason: str) -> None:
        """Terminate the process, or record that it would be terminated."""
        ...


@runtime_checkable
class FileLogService(Protocol):
    """Public surface of a file log service consumed by loggers."""
    
    def log(self, level: LogLevel, message: str) -> None:
        ...
    
    def flush(self, level: LogLevel) -> None:
        ...
    
    async def cleanup(self) -> None:
        ...
