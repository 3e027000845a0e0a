"""PostgreSQL storage adapter for ddd-commons using asyncpg.

AsyncpgDriver owns (or wraps) an asyncpg pool. Each AsyncpgUnitOfWork holds
one pooled connection for the lifetime of its transaction and gives it back
when the transaction ends, whichever way it ends.
"""

import asyncio
import hashlib
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import asyncpg
from asyncpg import Connection, Pool

from ..entities.protocols import Repository
from ..entities.transaction import IsolationLevel, TransactionOptions
from ..services.unit_of_work import BaseUnitOfWork
from ....core.exceptions import SavepointError, TransactionError

logger = logging.getLogger(__name__)

POSTGRES_ENGINE = "postgresql"

ISOLATION_LEVELS: Dict[IsolationLevel, str] = {
    IsolationLevel.READ_UNCOMMITTED: "read_uncommitted",
    IsolationLevel.READ_COMMITTED: "read_committed",
    IsolationLevel.REPEATABLE_READ: "repeatable_read",
    IsolationLevel.SERIALIZABLE: "serializable",
}

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


def quote_identifier(name: str) -> str:
    """Validate and double-quote a PostgreSQL identifier.

    Raises:
        ValueError: If the name is not a plain identifier
    """
    if not IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


@dataclass
class AsyncpgContext:
    """Executor a repository runs its queries on.

    Inside a unit of work this is the transaction's connection; outside it
    is the pool itself.
    """
    executor: Union[Connection, Pool]
    database: Optional[str] = None
    isolation_level: Optional[IsolationLevel] = None


class AsyncpgUnitOfWork(BaseUnitOfWork[AsyncpgContext]):
    """Unit of work over one pooled asyncpg connection."""

    def __init__(self, driver: "AsyncpgDriver"):
        super().__init__(driver.engine)
        self._driver = driver
        self._transaction: Optional[Any] = None

    async def _begin(self, options: TransactionOptions) -> AsyncpgContext:
        connection = await self._driver.acquire()
        isolation = ISOLATION_LEVELS.get(options.isolation_level) if options.isolation_level else None
        transaction = connection.transaction(isolation=isolation)

        try:
            await transaction.start()
        except Exception:
            await self._driver.release(connection)
            raise

        if options.database:
            try:
                await connection.execute(f"SET LOCAL search_path TO {quote_identifier(options.database)}")
            except Exception:
                await transaction.rollback()
                await self._driver.release(connection)
                raise

        self._transaction = transaction
        return AsyncpgContext(
            executor=connection,
            database=options.database,
            isolation_level=options.isolation_level,
        )

    async def _commit(self, context: AsyncpgContext) -> None:
        try:
            await self._transaction.commit()
        finally:
            await self._finish(context)

    async def _rollback(self, context: AsyncpgContext) -> None:
        try:
            await self._transaction.rollback()
        finally:
            await self._finish(context)

    async def _savepoint(self, context: AsyncpgContext, name: str) -> None:
        await context.executor.execute(f"SAVEPOINT {self._savepoint_identifier(name)}")

    async def _rollback_to(self, context: AsyncpgContext, name: str) -> None:
        await context.executor.execute(f"ROLLBACK TO SAVEPOINT {self._savepoint_identifier(name)}")

    async def _release_savepoint(self, context: AsyncpgContext, name: str) -> None:
        await context.executor.execute(f"RELEASE SAVEPOINT {self._savepoint_identifier(name)}")

    async def _finish(self, context: AsyncpgContext) -> None:
        self._transaction = None
        await self._driver.release(context.executor)

    @staticmethod
    def _savepoint_identifier(name: str) -> str:
        try:
            return quote_identifier(name)
        except ValueError as e:
            raise SavepointError(str(e)) from e


class AsyncpgDriver:
    """PostgreSQL driver on top of an asyncpg pool.

    Repositories are compatible when they use the same engine and the same
    connection target.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        pool: Optional[Pool] = None,
        **pool_config
    ):
        """
        Initialize the driver.

        Args:
            dsn: Database URL (defaults to DATABASE_URL env var)
            pool: Existing pool to use instead of creating one
            **pool_config: Additional pool configuration options
        """
        self.dsn = dsn or os.getenv("DATABASE_URL", "")
        if "+asyncpg" in self.dsn:
            self.dsn = self.dsn.replace("+asyncpg", "")

        self.pool_config = {
            "min_size": 1,
            "max_size": 10,
            "max_inactive_connection_lifetime": 300,
            "command_timeout": 60,
            **pool_config
        }

        self._pool: Optional[Pool] = pool
        self._owns_pool = pool is None
        self._lock = asyncio.Lock()

        if pool is not None:
            self._signature = f"pool:{id(pool)}"
        else:
            self._signature = hashlib.sha256(self.dsn.encode("utf-8")).hexdigest()[:16]

    @property
    def engine(self) -> str:
        return POSTGRES_ENGINE

    @property
    def connection_signature(self) -> str:
        return self._signature

    async def get_pool(self) -> Pool:
        """Get the pool, creating it on first use."""
        if self._pool is None:
            async with self._lock:
                if self._pool is None:
                    logger.info(f"Creating database pool with size {self.pool_config['max_size']}")
                    try:
                        self._pool = await asyncpg.create_pool(self.dsn, **self.pool_config)
                    except Exception as e:
                        logger.error(f"Failed to create database pool: {e}")
                        raise TransactionError(f"Failed to create connection pool: {e}") from e
        return self._pool

    async def acquire(self) -> Connection:
        pool = await self.get_pool()
        return await pool.acquire()

    async def release(self, connection: Connection) -> None:
        if self._pool is None:
            return
        try:
            await self._pool.release(connection)
        except Exception as e:
            logger.warning(f"Error releasing connection: {e}")

    async def close(self) -> None:
        """Close the pool if this driver created it."""
        if self._pool is not None and self._owns_pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    def build_unit_of_work(self) -> AsyncpgUnitOfWork:
        return AsyncpgUnitOfWork(self)

    def is_compatible_with(self, repository: Repository) -> bool:
        return (
            repository.engine == self.engine
            and repository.connection_signature == self.connection_signature
        )

    async def context(self, database: Optional[str] = None) -> AsyncpgContext:
        return AsyncpgContext(executor=await self.get_pool(), database=database)
