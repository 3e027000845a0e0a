"""Repository protocols for ddd-commons.

This module defines the protocol interfaces shared by storage drivers,
repositories and units of work. A repository can only join a unit of work
built for the same engine and connection.
"""

from abc import abstractmethod
from typing import (
    Any,
    Awaitable,
    Callable,
    Optional,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from .transaction import TransactionOptions

ContextT = TypeVar("ContextT")
T = TypeVar("T")


@runtime_checkable
class UnitOfWork(Protocol[ContextT]):
    """Transactional scope over one storage engine.
    
    States: inactive -> active (begin) -> rollback-only (fail); end commits
    unless rollback-only, rolls back otherwise, and returns to inactive.
    """
    
    @property
    def engine(self) -> str:
        ...
    
    @abstractmethod
    async def begin(self, options: Optional[TransactionOptions] = None) -> None:
        ...
    
    @abstractmethod
    async def commit(self) -> None:
        ...
    
    @abstractmethod
    async def rollback(self) -> None:
        ...
    
    @abstractmethod
    async def end(self) -> None:
        """Commit, or roll back when marked rollback-only."""
        ...
    
    @abstractmethod
    def fail(self, reason: Any = None) -> bool:
        """Mark as rollback-only without raising."""
        ...
    
    @abstractmethod
    def is_active(self) -> bool:
        ...
    
    @abstractmethod
    def is_rollback_only(self) -> bool:
        ...
    
    @abstractmethod
    def get_context(self) -> Optional[ContextT]:
        """Engine context of the running transaction, if any."""
        ...
    
    @abstractmethod
    async def with_transaction(self, fn: Callable[[Any], Awaitable[T]]) -> T:
        ...
    
    @abstractmethod
    async def savepoint(self, name: str) -> None:
        ...
    
    @abstractmethod
    async def rollback_to(self, name: str) -> None:
        ...
    
    @abstractmethod
    async def release_savepoint(self, name: str) -> None:
        ...
    
    @abstractmethod
    async def dispose(self) -> None:
        ...


@runtime_checkable
class Repository(Protocol):
    """Data accessor bound to a driver and optionally to a unit of work."""
    
    @property
    def name(self) -> str:
        ...
    
    @property
    def engine(self) -> str:
        ...
    
    @property
    def connection_signature(self) -> str:
        ...
    
    @abstractmethod
    def clone(self, uow: Optional[UnitOfWork] = None) -> "Repository":
        """Copy of this repository scoped to ``uow``; never mutates self."""
        ...
    
    @abstractmethod
    def build_unit_of_work(self) -> UnitOfWork:
        ...
    
    @abstractmethod
    def is_compatible_with(self, repository: "Repository") -> bool:
        ...


@runtime_checkable
class DatabaseDriver(Protocol[ContextT]):
    """Storage driver building units of work for one engine."""
    
    @property
    def engine(self) -> str:
        ...
    
    @property
    def connection_signature(self) -> str:
        """Identifies the underlying connection target."""
        ...
    
    @abstractmethod
    def build_unit_of_work(self) -> UnitOfWork[ContextT]:
        ...
    
    @abstractmethod
    def is_compatible_with(self, repository: Repository) -> bool:
        ...
    
    @abstractmethod
    async def context(self, database: Optional[str] = None) -> ContextT:
        """Context for work done outside a unit of work."""
        ...
