"""Repository adapters - in-memory and asyncpg implementations."""

from .memory_adapter import (
    MEMORY_ENGINE,
    InMemoryDatabase,
    InMemoryContext,
    InMemoryUnitOfWork,
    InMemoryDriver,
    VersionedRecord,
    InMemoryCollectionRepository,
)
from .asyncpg_adapter import (
    POSTGRES_ENGINE,
    AsyncpgContext,
    AsyncpgUnitOfWork,
    AsyncpgDriver,
    quote_identifier,
)

__all__ = [
    "MEMORY_ENGINE",
    "InMemoryDatabase",
    "InMemoryContext",
    "InMemoryUnitOfWork",
    "InMemoryDriver",
    "VersionedRecord",
    "InMemoryCollectionRepository",
    "POSTGRES_ENGINE",
    "AsyncpgContext",
    "AsyncpgUnitOfWork",
    "AsyncpgDriver",
    "quote_identifier",
]
