"""Repository base classes and bundles."""

from .relational_repository import AbstractRelationalRepository
from .bundle import RepositoryBundle

__all__ = [
    "AbstractRelationalRepository",
    "RepositoryBundle",
]
