"""Base unit of work for ddd-commons.

BaseUnitOfWork implements the transaction state machine and savepoint
bookkeeping once; engine adapters only provide the hooks that talk to the
storage engine.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from ..entities.protocols import ContextT
from ..entities.transaction import TransactionOptions, UnitOfWorkState
from ....core.exceptions import (
    RollbackOnlyError,
    SavepointError,
    TransactionAlreadyActiveError,
    TransactionNotActiveError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseUnitOfWork(ABC, Generic[ContextT]):
    """
    Transaction lifecycle shared by every engine.

    Subclasses implement:
    - _begin: start a transaction and return its context
    - _commit / _rollback: finish the transaction of a context
    - _savepoint / _rollback_to / _release_savepoint: optional savepoint support

    The unit of work is also an async context manager: the block runs inside
    a transaction that is rolled back when the block raises.
    """

    def __init__(self, engine: str):
        self._engine = engine
        self._state = UnitOfWorkState.INACTIVE
        self._context: Optional[ContextT] = None
        self._failure_reason: Any = None
        self._savepoints: List[str] = []

    @property
    def engine(self) -> str:
        return self._engine

    @property
    def state(self) -> UnitOfWorkState:
        return self._state

    @property
    def failure_reason(self) -> Any:
        """Reason given to the last ``fail`` call."""
        return self._failure_reason

    @property
    def savepoints(self) -> List[str]:
        return list(self._savepoints)

    def is_active(self) -> bool:
        return self._state is not UnitOfWorkState.INACTIVE

    def is_rollback_only(self) -> bool:
        return self._state is UnitOfWorkState.ROLLBACK_ONLY

    def get_context(self) -> Optional[ContextT]:
        return self._context

    async def begin(self, options: Optional[TransactionOptions] = None) -> None:
        """Start a transaction.

        Raises:
            TransactionAlreadyActiveError: If a transaction is already running
        """
        if self.is_active():
            raise TransactionAlreadyActiveError(
                f"Unit of work for engine {self._engine} is already active"
            )

        self._context = await self._begin(options or TransactionOptions())
        self._state = UnitOfWorkState.ACTIVE
        self._failure_reason = None
        logger.debug(f"Unit of work began on engine {self._engine}")

    async def commit(self) -> None:
        """Commit the running transaction.

        Raises:
            TransactionNotActiveError: If no transaction is running
            RollbackOnlyError: If the unit of work was marked with ``fail``
        """
        self._ensure_active("commit")

        if self.is_rollback_only():
            raise RollbackOnlyError(
                "Unit of work is marked as rollback-only",
                details={"reason": repr(self._failure_reason)},
            )

        try:
            await self._commit(self._context)
        finally:
            self._reset()

        logger.debug(f"Unit of work committed on engine {self._engine}")

    async def rollback(self) -> None:
        """Roll back the running transaction."""
        self._ensure_active("rollback")

        try:
            await self._rollback(self._context)
        finally:
            self._reset()

        logger.debug(f"Unit of work rolled back on engine {self._engine}")

    async def end(self) -> None:
        """Commit, or roll back when rollback-only. No-op when inactive."""
        if not self.is_active():
            return

        if self.is_rollback_only():
            await self.rollback()
        else:
            await self.commit()

    def fail(self, reason: Any = None) -> bool:
        """Mark the transaction as rollback-only.

        Never raises.

        Returns:
            False when there is no transaction to mark
        """
        if not self.is_active():
            logger.warning(f"Ignoring fail() on inactive unit of work: {reason!r}")
            return False

        self._state = UnitOfWorkState.ROLLBACK_ONLY
        self._failure_reason = reason
        logger.debug(f"Unit of work marked rollback-only: {reason!r}")
        return True

    async def with_transaction(self, fn: Callable[["BaseUnitOfWork[ContextT]"], Awaitable[T]]) -> T:
        """Run ``fn`` inside a transaction.

        Commits when ``fn`` returns, rolls back and re-raises when it raises.
        """
        await self.begin()

        try:
            result = await fn(self)
        except BaseException as e:
            self.fail(e)
            await self.end()
            raise

        await self.end()
        return result

    async def savepoint(self, name: str) -> None:
        self._ensure_active("create savepoint")

        if name in self._savepoints:
            raise SavepointError(f"Savepoint {name} already exists")

        await self._savepoint(self._context, name)
        self._savepoints.append(name)

    async def rollback_to(self, name: str) -> None:
        """Restore a savepoint, discarding the savepoints created after it."""
        self._ensure_active("rollback to savepoint")
        index = self._savepoint_index(name)

        await self._rollback_to(self._context, name)
        del self._savepoints[index + 1:]

    async def release_savepoint(self, name: str) -> None:
        """Release a savepoint along with the savepoints created after it."""
        self._ensure_active("release savepoint")
        index = self._savepoint_index(name)

        await self._release_savepoint(self._context, name)
        del self._savepoints[index:]

    async def dispose(self) -> None:
        """End the transaction if one is running."""
        if self.is_active():
            await self.end()
        self._savepoints.clear()

    async def __aenter__(self) -> "BaseUnitOfWork[ContextT]":
        await self.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            self.fail(exc)
        await self.end()
        return False

    @abstractmethod
    async def _begin(self, options: TransactionOptions) -> ContextT:
        pass

    @abstractmethod
    async def _commit(self, context: ContextT) -> None:
        pass

    @abstractmethod
    async def _rollback(self, context: ContextT) -> None:
        pass

    async def _savepoint(self, context: ContextT, name: str) -> None:
        raise SavepointError(f"Engine {self._engine} does not support savepoints")

    async def _rollback_to(self, context: ContextT, name: str) -> None:
        raise SavepointError(f"Engine {self._engine} does not support savepoints")

    async def _release_savepoint(self, context: ContextT, name: str) -> None:
        raise SavepointError(f"Engine {self._engine} does not support savepoints")

    def _ensure_active(self, operation: str) -> None:
        if not self.is_active():
            raise TransactionNotActiveError(f"No active transaction to {operation}")

    def _savepoint_index(self, name: str) -> int:
        try:
            return self._savepoints.index(name)
        except ValueError:
            raise SavepointError(f"Savepoint {name} not found") from None

    def _reset(self) -> None:
        self._state = UnitOfWorkState.INACTIVE
        self._context = None
        self._savepoints.clear()
