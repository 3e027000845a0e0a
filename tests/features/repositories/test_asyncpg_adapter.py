"""Tests for the asyncpg storage adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ddd_commons.core.exceptions import SavepointError, TransactionError
from ddd_commons.features.repositories.adapters.asyncpg_adapter import (
    AsyncpgDriver,
    quote_identifier,
)
from ddd_commons.features.repositories.entities.transaction import IsolationLevel, TransactionOptions


@pytest.fixture
def mock_transaction():
    transaction = MagicMock()
    transaction.start = AsyncMock()
    transaction.commit = AsyncMock()
    transaction.rollback = AsyncMock()
    return transaction


@pytest.fixture
def mock_connection(mock_transaction):
    connection = MagicMock()
    connection.transaction.return_value = mock_transaction
    connection.execute = AsyncMock()
    return connection


@pytest.fixture
def mock_pool(mock_connection):
    pool = MagicMock()
    pool.acquire = AsyncMock(return_value=mock_connection)
    pool.release = AsyncMock()
    pool.close = AsyncMock()
    return pool


@pytest.fixture
def driver(mock_pool):
    return AsyncpgDriver(pool=mock_pool)


class TestAsyncpgDriver:
    """Test driver identity, compatibility and pool handling."""
    
    def test_strips_sqlalchemy_driver_suffix(self):
        driver = AsyncpgDriver(dsn="postgresql+asyncpg://app@db:5432/main")
        
        assert driver.dsn == "postgresql://app@db:5432/main"
        assert driver.engine == "postgresql"
    
    def test_dsn_defaults_to_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://env@db/main")
        
        assert AsyncpgDriver().dsn == "postgresql://env@db/main"
    
    def test_compatibility_follows_connection_target(self):
        main = AsyncpgDriver(dsn="postgresql://app@db/main")
        same = AsyncpgDriver(dsn="postgresql://app@db/main")
        other = AsyncpgDriver(dsn="postgresql://app@db/analytics")
        
        assert main.is_compatible_with(same)
        assert not main.is_compatible_with(other)
        assert not main.is_compatible_with(MagicMock(engine="mysql", connection_signature=main.connection_signature))
    
    @pytest.mark.asyncio
    async def test_pool_is_created_once(self, mock_pool):
        driver = AsyncpgDriver(dsn="postgresql://app@db/main", max_size=5)
        
        with patch(
            "ddd_commons.features.repositories.adapters.asyncpg_adapter.asyncpg.create_pool",
            new=AsyncMock(return_value=mock_pool),
        ) as create_pool:
            assert await driver.get_pool() is mock_pool
            assert await driver.get_pool() is mock_pool
        
        create_pool.assert_awaited_once()
        assert create_pool.await_args.kwargs["max_size"] == 5
        
        await driver.close()
        mock_pool.close.assert_awaited_once()
    
    @pytest.mark.asyncio
    async def test_pool_creation_failure_is_wrapped(self):
        driver = AsyncpgDriver(dsn="postgresql://app@db/main")
        
        with patch(
            "ddd_commons.features.repositories.adapters.asyncpg_adapter.asyncpg.create_pool",
            new=AsyncMock(side_effect=OSError("connection refused")),
        ):
            with pytest.raises(TransactionError, match="connection refused"):
                await driver.get_pool()
    
    @pytest.mark.asyncio
    async def test_external_pool_is_not_closed(self, driver, mock_pool):
        await driver.close()
        
        mock_pool.close.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_context_outside_unit_of_work_uses_pool(self, driver, mock_pool):
        context = await driver.context("tenant_a")
        
        assert context.executor is mock_pool
        assert context.database == "tenant_a"


class TestAsyncpgUnitOfWork:
    """Test transaction statements issued through the acquired connection."""
    
    @pytest.mark.asyncio
    async def test_begin_and_commit(self, driver, mock_pool, mock_connection, mock_transaction):
        uow = driver.build_unit_of_work()
        
        await uow.begin(TransactionOptions(database="tenant_a", isolation_level=IsolationLevel.SERIALIZABLE))
        
        mock_connection.transaction.assert_called_once_with(isolation="serializable")
        mock_transaction.start.assert_awaited_once()
        mock_connection.execute.assert_awaited_once_with('SET LOCAL search_path TO "tenant_a"')
        assert uow.get_context().executor is mock_connection
        assert uow.engine == "postgresql"
        
        await uow.commit()
        
        mock_transaction.commit.assert_awaited_once()
        mock_pool.release.assert_awaited_once_with(mock_connection)
        assert not uow.is_active()
    
    @pytest.mark.asyncio
    async def test_rollback_only_end_rolls_back_and_releases(self, driver, mock_pool, mock_connection, mock_transaction):
        uow = driver.build_unit_of_work()
        await uow.begin()
        
        uow.fail(RuntimeError("abort"))
        await uow.end()
        
        mock_connection.transaction.assert_called_once_with(isolation=None)
        mock_transaction.rollback.assert_awaited_once()
        mock_transaction.commit.assert_not_called()
        mock_pool.release.assert_awaited_once_with(mock_connection)
    
    @pytest.mark.asyncio
    async def test_commit_failure_still_releases(self, driver, mock_pool, mock_connection, mock_transaction):
        mock_transaction.commit.side_effect = RuntimeError("serialization failure")
        uow = driver.build_unit_of_work()
        await uow.begin()
        
        with pytest.raises(RuntimeError):
            await uow.commit()
        
        mock_pool.release.assert_awaited_once_with(mock_connection)
        assert not uow.is_active()
    
    @pytest.mark.asyncio
    async def test_invalid_database_aborts_begin(self, driver, mock_pool, mock_connection, mock_transaction):
        uow = driver.build_unit_of_work()
        
        with pytest.raises(ValueError):
            await uow.begin(TransactionOptions(database="tenant; DROP TABLE users"))
        
        mock_transaction.rollback.assert_awaited_once()
        mock_pool.release.assert_awaited_once_with(mock_connection)
        assert not uow.is_active()
    
    @pytest.mark.asyncio
    async def test_failed_start_releases_connection(self, driver, mock_pool, mock_connection, mock_transaction):
        mock_transaction.start.side_effect = RuntimeError("connection lost")
        uow = driver.build_unit_of_work()
        
        with pytest.raises(RuntimeError):
            await uow.begin()
        
        mock_pool.release.assert_awaited_once_with(mock_connection)
        assert not uow.is_active()
    
    @pytest.mark.asyncio
    async def test_savepoint_statements(self, driver, mock_connection):
        uow = driver.build_unit_of_work()
        await uow.begin()
        
        await uow.savepoint("before_import")
        await uow.rollback_to("before_import")
        await uow.release_savepoint("before_import")
        
        statements = [c.args[0] for c in mock_connection.execute.await_args_list]
        assert statements == [
            'SAVEPOINT "before_import"',
            'ROLLBACK TO SAVEPOINT "before_import"',
            'RELEASE SAVEPOINT "before_import"',
        ]
        await uow.rollback()
    
    @pytest.mark.asyncio
    async def test_invalid_savepoint_name_fails(self, driver, mock_connection):
        uow = driver.build_unit_of_work()
        await uow.begin()
        
        with pytest.raises(SavepointError):
            await uow.savepoint("bad name")
        
        assert uow.savepoints == []
        await uow.rollback()


class TestQuoteIdentifier:
    """Test identifier validation."""
    
    def test_quotes_plain_identifiers(self):
        assert quote_identifier("tenant_42") == '"tenant_42"'
    
    @pytest.mark.parametrize("name", ["", "1tenant", "a-b", 'x"y', "a" * 64])
    def test_rejects_unsafe_identifiers(self, name):
        with pytest.raises(ValueError):
            quote_identifier(name)
