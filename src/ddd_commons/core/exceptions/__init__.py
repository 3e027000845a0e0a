"""Exceptions module for ddd-commons.

This module provides the complete exception hierarchy for ddd-commons,
organized by domain concerns and infrastructure concerns.
"""

from .base import (
    DDDCommonsError,
    create_error_response,
)

from .domain import (
    # Configuration Errors
    ConfigurationError,
    RepositoryConfigurationError,
    LoggerCallbackNotSetError,
    
    # Repository Errors
    RepositoryError,
    RepositoryNotFoundError,
    RepositoryAlreadyRegisteredError,
    IncompatibleRepositoriesError,
    UnitOfWorkEngineMismatchError,
    OptimisticLockError,
    
    # Transaction Errors
    TransactionError,
    UnitOfWorkNotActiveError,
    TransactionNotActiveError,
    TransactionAlreadyActiveError,
    RollbackOnlyError,
    SavepointError,
)

from .infrastructure import (
    ValidationError,
    InvalidSettingsError,
    LogStreamError,
)

__all__ = [
    # Base Exception
    "DDDCommonsError",
    "create_error_response",
    
    # Configuration Errors
    "ConfigurationError",
    "RepositoryConfigurationError",
    "LoggerCallbackNotSetError",
    "InvalidSettingsError",
    "ValidationError",
    
    # Repository Errors
    "RepositoryError",
    "RepositoryNotFoundError",
    "RepositoryAlreadyRegisteredError",
    "IncompatibleRepositoriesError",
    "UnitOfWorkEngineMismatchError",
    "OptimisticLockError",
    
    # Transaction Errors
    "TransactionError",
    "UnitOfWorkNotActiveError",
    "TransactionNotActiveError",
    "TransactionAlreadyActiveError",
    "RollbackOnlyError",
    "SavepointError",
    
    # Infrastructure Errors
    "LogStreamError",
]
