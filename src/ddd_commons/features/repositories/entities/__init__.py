"""Repository entities: protocols and transaction types."""

from .protocols import UnitOfWork, Repository, DatabaseDriver
from .transaction import IsolationLevel, UnitOfWorkState, TransactionOptions

__all__ = [
    "UnitOfWork",
    "Repository",
    "DatabaseDriver",
    "IsolationLevel",
    "UnitOfWorkState",
    "TransactionOptions",
]
