"""Pytest configuration and fixtures for ddd-commons tests."""

import pytest
from pathlib import Path
from typing import Callable, List, Optional

from ddd_commons.features.logging.entities.config import LogLevel
from ddd_commons.features.logging.services.file_log_stream_service import FileLogStreamService
from ddd_commons.features.repositories.adapters.memory_adapter import (
    InMemoryCollectionRepository,
    InMemoryDatabase,
    InMemoryDriver,
)
from ddd_commons.features.repositories.services.repository_provider import RepositoryProvider


class FakeLogStream:
    """Log stream whose acceptance, drain and failure are driven by the test."""
    
    def __init__(self, path: Path, on_drain: Callable[[], None], on_error: Callable[[BaseException], None]):
        self.path = path
        self.on_drain = on_drain
        self.on_error = on_error
        self.chunks: List[str] = []
        self.accepting = True
        self.closed = False
    
    def write(self, chunk: str) -> bool:
        if not self.accepting:
            return False
        self.chunks.append(chunk)
        return True
    
    def drain(self) -> None:
        self.accepting = True
        self.on_drain()
    
    def fail(self, error: Optional[BaseException] = None) -> None:
        self.accepting = False
        self.on_error(error or OSError("No space left on device"))
    
    async def close(self) -> None:
        self.closed = True


class FakeStreamFactory:
    """Records every stream the service opens."""
    
    def __init__(self):
        self.opened: List[FakeLogStream] = []
    
    def __call__(self, path, on_drain, on_error) -> FakeLogStream:
        stream = FakeLogStream(path, on_drain, on_error)
        self.opened.append(stream)
        return stream
    
    def latest(self, level: LogLevel) -> FakeLogStream:
        """Most recently opened stream for ``level``."""
        for stream in reversed(self.opened):
            if stream.path.name == f"{level.value}.log":
                return stream
        raise LookupError(f"No stream opened for {level.value}")


class RecordingTerminator:
    """Terminator that records reasons instead of ending the process."""
    
    def __init__(self):
        self.reasons: List[str] = []
    
    def terminate(self, reason: str) -> None:
        self.reasons.append(reason)


@pytest.fixture
def log_dir(tmp_path):
    """Writable directory for log files."""
    directory = tmp_path / "logs"
    directory.mkdir()
    return directory


@pytest.fixture
def stream_factory():
    return FakeStreamFactory()


@pytest.fixture
def terminator():
    return RecordingTerminator()


@pytest.fixture
def make_file_service(log_dir, stream_factory, terminator):
    """Build a FileLogStreamService on fake streams with test-sized limits."""
    def _make(**overrides) -> FileLogStreamService:
        settings = {
            "abspath": str(log_dir),
            "levels": ["info", "error"],
            "stream_limit": 3,
            "error_threshold": 3,
        }
        settings.update(overrides)
        return FileLogStreamService(
            settings,
            stream_factory=stream_factory,
            terminator=terminator,
        )
    return _make


@pytest.fixture
def memory_db():
    return InMemoryDatabase()


@pytest.fixture
def memory_driver(memory_db):
    return InMemoryDriver(memory_db)


@pytest.fixture
def provider(memory_driver):
    """Provider with ``users`` and ``orders`` sharing one in-memory database."""
    registry = RepositoryProvider()
    registry.register(InMemoryCollectionRepository("users", memory_driver))
    registry.register(InMemoryCollectionRepository("orders", memory_driver))
    return registry
