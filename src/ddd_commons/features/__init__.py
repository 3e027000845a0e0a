"""Features module for ddd-commons.

Each feature is self-contained: logging for buffered per-level log files and
callback dispatch, repositories for transactional repository bundles.
"""

from .logging import LoggerService, FileLogStreamService, PendingTasksService
from .repositories import RepositoryProvider, RepositoryBundle, BaseUnitOfWork

__all__ = [
    # Logging
    "LoggerService",
    "FileLogStreamService",
    "PendingTasksService",
    
    # Repositories
    "RepositoryProvider",
    "RepositoryBundle",
    "BaseUnitOfWork",
]
