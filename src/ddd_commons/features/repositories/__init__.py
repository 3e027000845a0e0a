"""Repositories feature for ddd-commons.

Feature-First architecture for transactional repositories:
- entities/: unit of work, repository and driver protocols, transaction types
- repositories/: relational repository base and repository bundles
- services/: base unit of work, compatibility checks and the provider
- adapters/: in-memory and asyncpg implementations
"""

from .entities import (
    UnitOfWork,
    Repository,
    DatabaseDriver,
    IsolationLevel,
    UnitOfWorkState,
    TransactionOptions,
)
from .repositories import AbstractRelationalRepository, RepositoryBundle
from .services import (
    BaseUnitOfWork,
    ensure_compatible,
    ensure_engine_match,
    RepositoryProvider,
)
from .adapters import (
    InMemoryDatabase,
    InMemoryContext,
    InMemoryUnitOfWork,
    InMemoryDriver,
    VersionedRecord,
    InMemoryCollectionRepository,
    AsyncpgContext,
    AsyncpgUnitOfWork,
    AsyncpgDriver,
)

__all__ = [
    # Entities
    "UnitOfWork",
    "Repository",
    "DatabaseDriver",
    "IsolationLevel",
    "UnitOfWorkState",
    "TransactionOptions",
    
    # Repositories
    "AbstractRelationalRepository",
    "RepositoryBundle",
    
    # Services
    "BaseUnitOfWork",
    "ensure_compatible",
    "ensure_engine_match",
    "RepositoryProvider",
    
    # Adapters
    "InMemoryDatabase",
    "InMemoryContext",
    "InMemoryUnitOfWork",
    "InMemoryDriver",
    "VersionedRecord",
    "InMemoryCollectionRepository",
    "AsyncpgContext",
    "AsyncpgUnitOfWork",
    "AsyncpgDriver",
]
