"""Append-only file stream adapter for ddd-commons.

AppendFileStream buffers chunks in memory and persists them from a writer
task on the running event loop, handing the blocking file calls to a worker
thread. Callers never block: ``write`` either accepts a chunk or refuses it
while the buffer sits above its high-water mark, and ``on_drain`` tells them
when writes are accepted again. Without a running loop chunks are written
synchronously.
"""

import asyncio
import logging
from collections import deque
from pathlib import Path
from typing import BinaryIO, Deque, Optional

from ..entities.protocols import DrainHandler, ErrorHandler
from ....core.exceptions import LogStreamError

logger = logging.getLogger(__name__)

DEFAULT_HIGH_WATER_MARK = 16 * 1024


class AppendFileStream:
    """Buffered append stream over a single file."""
    
    def __init__(
        self,
        path: Path,
        on_drain: Optional[DrainHandler] = None,
        on_error: Optional[ErrorHandler] = None,
        high_water_mark: int = DEFAULT_HIGH_WATER_MARK,
        encoding: str = "utf-8"
    ):
        if high_water_mark < 1:
            raise ValueError("high_water_mark must be positive")
        
        self.path = Path(path)
        self._on_drain = on_drain
        self._on_error = on_error
        self._high_water_mark = high_water_mark
        self._encoding = encoding
        
        self._buffer: Deque[bytes] = deque()
        self._buffered_bytes = 0
        self._need_drain = False
        self._closing = False
        self._destroyed = False
        self._file: Optional[BinaryIO] = None
        self._writer: Optional[asyncio.Task] = None
    
    @property
    def writable(self) -> bool:
        """Whether the stream may still accept chunks."""
        return not (self._closing or self._destroyed)
    
    @property
    def destroyed(self) -> bool:
        return self._destroyed
    
    @property
    def need_drain(self) -> bool:
        """Whether writes are refused until the next drain signal."""
        return self._need_drain
    
    @property
    def buffered_bytes(self) -> int:
        """Bytes accepted but not yet persisted."""
        return self._buffered_bytes
    
    def write(self, chunk: str) -> bool:
        """Accept a chunk, or refuse it when backpressured or not writable.
        
        The chunk that crosses the high-water mark is still accepted; every
        write after it is refused until ``on_drain`` fires.
        """
        if not self.writable or self._need_drain:
            return False
        
        # Lone surrogates are escaped instead of failing the write.
        data = chunk.encode(self._encoding, errors="backslashreplace")
        
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self._write_sync(data)
        
        self._buffer.append(data)
        self._buffered_bytes += len(data)
        
        if self._buffered_bytes >= self._high_water_mark:
            self._need_drain = True
        
        if self._writer is None or self._writer.done():
            self._writer = loop.create_task(self._run_writer())
        
        return True
    
    async def close(self) -> None:
        """Stop accepting chunks, persist the buffer and close the file."""
        self._closing = True
        
        if self._writer is not None and not self._writer.done():
            await self._writer
        
        if self._file is not None:
            await asyncio.to_thread(self._close_file)
        
        logger.debug(f"Log stream closed: {self.path}")
    
    async def _run_writer(self) -> None:
        while not self._destroyed:
            if not self._buffer:
                if self._need_drain and not self._closing:
                    self._need_drain = False
                    logger.debug(f"Log stream drained: {self.path}")
                    if self._on_drain is not None:
                        self._on_drain()
                    continue
                break
            
            data = b"".join(self._buffer)
            self._buffer.clear()
            
            try:
                await asyncio.to_thread(self._append, data)
            except OSError as e:
                # Chunks accepted while the thread ran are lost as well.
                self._fail(e, dropped=self._buffered_bytes)
                return

            self._buffered_bytes = max(0, self._buffered_bytes - len(data))
    
    def _write_sync(self, data: bytes) -> bool:
        if self._buffer:
            data = b"".join(self._buffer) + data
            self._buffer.clear()
        
        try:
            self._append(data)
        except OSError as e:
            self._fail(e, dropped=len(data))
            return False
        
        self._buffered_bytes = 0
        return True
    
    def _append(self, data: bytes) -> None:
        if self._file is None:
            self._file = open(self.path, "ab")
        self._file.write(data)
        self._file.flush()
    
    def _close_file(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        finally:
            self._file = None
    
    def _fail(self, error: OSError, dropped: int = 0) -> None:
        self._destroyed = True
        self._need_drain = False
        self._buffer.clear()
        self._buffered_bytes = 0
        
        try:
            self._close_file()
        except OSError as close_error:
            logger.debug(f"Ignoring close failure on broken stream {self.path}: {close_error}")
        
        logger.error(f"Log stream failed for {self.path}, {dropped} bytes dropped: {error}")

        if self._on_error is not None:
            self._on_error(
                LogStreamError(
                    f"Failed to write log stream {self.path}: {error}",
                    details={"path": str(self.path), "errno": error.errno, "dropped_bytes": dropped},
                )
            )
