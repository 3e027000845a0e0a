"""Repository bundle for ddd-commons.

A bundle owns one unit of work and the repositories cloned into it. Lookups
are only allowed while the unit of work is active.
"""

import logging
from typing import Dict, Generic, List, Optional

from ..entities.protocols import ContextT, Repository, UnitOfWork
from ..entities.transaction import TransactionOptions
from ....core.exceptions import RepositoryNotFoundError, UnitOfWorkNotActiveError

logger = logging.getLogger(__name__)


class RepositoryBundle(Generic[ContextT]):
    """Repositories sharing a single unit of work.

    Usable as an async context manager: entering begins the unit of work if
    needed, leaving disposes the bundle and rolls back when the block raised.
    """

    def __init__(self, uow: UnitOfWork[ContextT]):
        self._uow = uow
        self._repositories: Dict[str, Repository] = {}

    @property
    def uow(self) -> UnitOfWork[ContextT]:
        return self._uow

    @property
    def names(self) -> List[str]:
        return list(self._repositories)

    def add(self, repository: Repository) -> "RepositoryBundle[ContextT]":
        """Bind a clone of ``repository`` to the bundle's unit of work."""
        self._repositories[repository.name] = repository.clone(self._uow)
        return self

    def get(self, name: str) -> Repository:
        """Get a bound repository.

        Raises:
            UnitOfWorkNotActiveError: If the unit of work has not begun
            RepositoryNotFoundError: If no repository has that name
        """
        if not self._uow.is_active():
            raise UnitOfWorkNotActiveError("Unit of work is not active. Call begin() first.")

        repository = self._repositories.get(name)

        if repository is None:
            raise RepositoryNotFoundError(
                f'Repository "{name}" not found.',
                details={"name": name, "available": self.names},
            )

        return repository

    async def begin(self, options: Optional[TransactionOptions] = None) -> None:
        await self._uow.begin(options)

    async def dispose(self) -> None:
        """End the unit of work and drop every bound repository."""
        try:
            await self._uow.end()
        finally:
            self._repositories.clear()
            logger.debug("Repository bundle disposed")

    async def __aenter__(self) -> "RepositoryBundle[ContextT]":
        if not self._uow.is_active():
            await self._uow.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            self._uow.fail(exc)
        await self.dispose()
        return False

    def __contains__(self, name: object) -> bool:
        return name in self._repositories

    def __len__(self) -> int:
        return len(self._repositories)
