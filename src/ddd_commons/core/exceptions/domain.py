"""Domain-specific exceptions for ddd-commons.

This module defines exceptions raised by the repository and unit-of-work
machinery and by configuration checks done at call time.
"""

from .base import DDDCommonsError


# Configuration Errors
class ConfigurationError(DDDCommonsError):
    """Raised when there's a configuration issue."""
    pass


class RepositoryConfigurationError(ConfigurationError):
    """Raised when a repository bundle is requested with invalid arguments."""
    pass


class LoggerCallbackNotSetError(ConfigurationError):
    """Raised when a logger callback is missing and unset callbacks are not ignored."""
    pass


# Repository Errors
class RepositoryError(DDDCommonsError):
    """Base class for repository-related errors."""
    pass


class RepositoryNotFoundError(RepositoryError):
    """Raised when a repository name is not registered."""
    pass


class RepositoryAlreadyRegisteredError(RepositoryError):
    """Raised when a repository name is registered twice."""
    pass


class IncompatibleRepositoriesError(RepositoryError):
    """Raised when repositories cannot share one unit of work."""
    pass


class UnitOfWorkEngineMismatchError(RepositoryError):
    """Raised when a built unit of work targets another engine than a repository."""
    pass


class OptimisticLockError(RepositoryError):
    """Raised when a record changed since it was read."""
    pass


# Transaction Errors
class TransactionError(DDDCommonsError):
    """Base class for unit of work and transaction errors."""
    pass


class UnitOfWorkNotActiveError(TransactionError):
    """Raised when repositories are used outside an active unit of work."""
    pass


class TransactionNotActiveError(TransactionError):
    """Raised when commit, rollback or savepoints are used with no transaction."""
    pass


class TransactionAlreadyActiveError(TransactionError):
    """Raised when begin is called on an active unit of work."""
    pass


class RollbackOnlyError(TransactionError):
    """Raised when committing a unit of work marked as rollback-only."""
    pass


class SavepointError(TransactionError):
    """Raised when a savepoint is missing or duplicated."""
    pass
