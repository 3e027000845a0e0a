"""DDD-Commons - Shared infrastructure for domain-driven applications.

This library provides buffered per-level file logging with backpressure,
async logger callback dispatch, and transactional repository bundles built
on a unit of work.
"""

from .core.exceptions import (
    # Base Exception
    DDDCommonsError,
    
    # Common Exceptions
    ConfigurationError,
    InvalidSettingsError,
    LoggerCallbackNotSetError,
    RepositoryError,
    RepositoryNotFoundError,
    IncompatibleRepositoriesError,
    UnitOfWorkEngineMismatchError,
    TransactionError,
    UnitOfWorkNotActiveError,
    ValidationError,
    LogStreamError,
    
    # Utility Functions
    create_error_response,
)

from .config import LoggingConfig, setup_logging, get_logger

# Logging feature
from .features.logging import (
    LogLevel,
    LoggerCallback,
    FileLogStreamSettings,
    PendingTasksSettings,
    LoggerCallbacks,
    LoggerSettings,
    AppendFileStream,
    ProcessTerminator,
    FileLogStreamService,
    PendingTasksService,
    LoggerService,
    format_log_line,
)

# Repositories feature
from .features.repositories import (
    UnitOfWork,
    Repository,
    DatabaseDriver,
    IsolationLevel,
    UnitOfWorkState,
    TransactionOptions,
    AbstractRelationalRepository,
    RepositoryBundle,
    BaseUnitOfWork,
    RepositoryProvider,
    InMemoryDatabase,
    InMemoryDriver,
    InMemoryUnitOfWork,
    InMemoryCollectionRepository,
    VersionedRecord,
    AsyncpgDriver,
    AsyncpgUnitOfWork,
)

from .__version__ import __version__

__all__ = [
    # Exceptions
    "DDDCommonsError",
    "ConfigurationError",
    "InvalidSettingsError",
    "LoggerCallbackNotSetError",
    "RepositoryError",
    "RepositoryNotFoundError",
    "IncompatibleRepositoriesError",
    "UnitOfWorkEngineMismatchError",
    "TransactionError",
    "UnitOfWorkNotActiveError",
    "ValidationError",
    "LogStreamError",
    "create_error_response",
    
    # Configuration
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    
    # Logging
    "LogLevel",
    "LoggerCallback",
    "FileLogStreamSettings",
    "PendingTasksSettings",
    "LoggerCallbacks",
    "LoggerSettings",
    "AppendFileStream",
    "ProcessTerminator",
    "FileLogStreamService",
    "PendingTasksService",
    "LoggerService",
    "format_log_line",
    
    # Repositories
    "UnitOfWork",
    "Repository",
    "DatabaseDriver",
    "IsolationLevel",
    "UnitOfWorkState",
    "TransactionOptions",
    "AbstractRelationalRepository",
    "RepositoryBundle",
    "BaseUnitOfWork",
    "RepositoryProvider",
    "InMemoryDatabase",
    "InMemoryDriver",
    "InMemoryUnitOfWork",
    "InMemoryCollectionRepository",
    "VersionedRecord",
    "AsyncpgDriver",
    "AsyncpgUnitOfWork",
    
    # Version
    "__version__",
]
