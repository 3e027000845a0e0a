"""In-memory storage adapter for ddd-commons.

Snapshot-based database, driver and unit of work living in process memory,
plus a collection repository on top of them. Meant for tests and prototypes:
a transaction snapshots the whole database when it begins and restores it on
rollback.
"""

import copy
import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, List, Optional, Set

from ..entities.protocols import Repository, UnitOfWork
from ..entities.transaction import IsolationLevel, TransactionOptions
from ..repositories.relational_repository import AbstractRelationalRepository
from ..services.unit_of_work import BaseUnitOfWork
from ....core.exceptions import (
    OptimisticLockError,
    TransactionNotActiveError,
    UnitOfWorkNotActiveError,
)

logger = logging.getLogger(__name__)

MEMORY_ENGINE = "inmemory"

Snapshot = Dict[str, Dict[str, Any]]


class InMemoryDatabase:
    """Named collections of records keyed by id."""

    def __init__(self):
        self._data: Snapshot = {}
        self._snapshots: Dict[str, Snapshot] = {}
        self._transactions: Set[str] = set()
        self._counter = count(1)

    def collection(self, name: str) -> Dict[str, Any]:
        """Get a collection, creating it when missing."""
        return self._data.setdefault(name, {})

    def snapshot(self) -> Snapshot:
        return copy.deepcopy(self._data)

    def restore(self, snapshot: Snapshot) -> None:
        self._data = copy.deepcopy(snapshot)

    def begin_transaction(self) -> str:
        transaction_id = f"tx_{next(self._counter)}"
        self._transactions.add(transaction_id)
        self._snapshots[transaction_id] = self.snapshot()
        return transaction_id

    def commit_transaction(self, transaction_id: str) -> None:
        self._ensure_transaction(transaction_id)
        self._snapshots.pop(transaction_id, None)
        self._transactions.discard(transaction_id)

    def rollback_transaction(self, transaction_id: str) -> None:
        self._ensure_transaction(transaction_id)
        snapshot = self._snapshots.pop(transaction_id, None)
        if snapshot is not None:
            self._data = snapshot
        self._transactions.discard(transaction_id)
        logger.debug(f"In-memory transaction {transaction_id} rolled back")

    def is_transaction_active(self, transaction_id: str) -> bool:
        return transaction_id in self._transactions

    def clear(self) -> None:
        self._data.clear()
        self._snapshots.clear()
        self._transactions.clear()

    def _ensure_transaction(self, transaction_id: str) -> None:
        if transaction_id not in self._transactions:
            raise TransactionNotActiveError(f"Transaction {transaction_id} not found")


@dataclass
class InMemoryContext:
    """Context handed to repositories working on an in-memory database."""
    db: InMemoryDatabase
    transaction_id: Optional[str] = None
    isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    database: Optional[str] = None


class InMemoryUnitOfWork(BaseUnitOfWork[InMemoryContext]):
    """Unit of work over an InMemoryDatabase."""

    def __init__(self, db: InMemoryDatabase, engine: str = MEMORY_ENGINE):
        super().__init__(engine)
        self._db = db
        self._snapshots: Dict[str, Snapshot] = {}

    async def _begin(self, options: TransactionOptions) -> InMemoryContext:
        return InMemoryContext(
            db=self._db,
            transaction_id=self._db.begin_transaction(),
            isolation_level=options.isolation_level or IsolationLevel.READ_COMMITTED,
            database=options.database,
        )

    async def _commit(self, context: InMemoryContext) -> None:
        self._snapshots.clear()
        self._db.commit_transaction(context.transaction_id)

    async def _rollback(self, context: InMemoryContext) -> None:
        self._snapshots.clear()
        self._db.rollback_transaction(context.transaction_id)

    async def _savepoint(self, context: InMemoryContext, name: str) -> None:
        self._snapshots[name] = self._db.snapshot()

    async def _rollback_to(self, context: InMemoryContext, name: str) -> None:
        self._db.restore(self._snapshots[name])
        names = list(self._snapshots)
        for later in names[names.index(name) + 1:]:
            del self._snapshots[later]

    async def _release_savepoint(self, context: InMemoryContext, name: str) -> None:
        names = list(self._snapshots)
        for released in names[names.index(name):]:
            del self._snapshots[released]


class InMemoryDriver:
    """Driver for an InMemoryDatabase.

    Repositories are compatible when they share the engine and the database
    instance.
    """

    def __init__(self, db: Optional[InMemoryDatabase] = None, engine: str = MEMORY_ENGINE):
        self._db = db or InMemoryDatabase()
        self._engine = engine

    @property
    def db(self) -> InMemoryDatabase:
        return self._db

    @property
    def engine(self) -> str:
        return self._engine

    @property
    def connection_signature(self) -> str:
        return f"{self._engine}:{id(self._db)}"

    def build_unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self._db, self._engine)

    def is_compatible_with(self, repository: Repository) -> bool:
        return (
            repository.engine == self._engine
            and repository.connection_signature == self.connection_signature
        )

    async def context(self, database: Optional[str] = None) -> InMemoryContext:
        return InMemoryContext(db=self._db, database=database)


@dataclass
class VersionedRecord:
    """Record stored by InMemoryCollectionRepository."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    version: int = 0


class InMemoryCollectionRepository(AbstractRelationalRepository[InMemoryDriver, InMemoryContext]):
    """Repository over one collection with optimistic locking.

    Every operation requires an active unit of work.
    """

    def __init__(
        self,
        name: str,
        driver: InMemoryDriver,
        uow: Optional[UnitOfWork[InMemoryContext]] = None,
        collection: Optional[str] = None
    ):
        super().__init__(name, driver, uow)
        self.collection_name = collection or name

    def clone(self, uow: Optional[UnitOfWork[InMemoryContext]] = None) -> "InMemoryCollectionRepository":
        return type(self)(self._name, self._driver, uow, self.collection_name)

    async def find_by_id(self, record_id: str) -> Optional[VersionedRecord]:
        record = self._collection().get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def find_all(self) -> List[VersionedRecord]:
        return [copy.deepcopy(record) for record in self._collection().values()]

    async def exists(self, record_id: str) -> bool:
        return record_id in self._collection()

    async def count(self) -> int:
        return len(self._collection())

    async def save(self, record: VersionedRecord) -> VersionedRecord:
        """Insert or update a record, bumping its version.

        Raises:
            OptimisticLockError: If the stored version differs from the record's
        """
        collection = self._collection()
        existing = collection.get(record.id)

        if existing is not None and existing.version != record.version:
            raise OptimisticLockError(
                "Concurrent modification detected",
                details={"id": record.id, "expected": record.version, "actual": existing.version},
            )

        stored = VersionedRecord(id=record.id, data=copy.deepcopy(record.data), version=record.version + 1)
        collection[record.id] = stored
        return copy.deepcopy(stored)

    async def delete(self, record_id: str) -> bool:
        return self._collection().pop(record_id, None) is not None

    def _collection(self) -> Dict[str, VersionedRecord]:
        context = self.context()
        if context is None:
            raise UnitOfWorkNotActiveError(
                f'Repository "{self._name}" has no active unit of work context'
            )
        return context.db.collection(self.collection_name)
