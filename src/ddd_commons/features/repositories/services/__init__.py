"""Repository services."""

from .unit_of_work import BaseUnitOfWork
from .compatibility import ensure_compatible, ensure_engine_match, find_incompatible_pair
from .repository_provider import RepositoryProvider

__all__ = [
    "BaseUnitOfWork",
    "ensure_compatible",
    "ensure_engine_match",
    "find_incompatible_pair",
    "RepositoryProvider",
]
