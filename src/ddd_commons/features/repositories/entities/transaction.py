"""Transaction value types for ddd-commons repositories."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IsolationLevel(str, Enum):
    """SQL transaction isolation levels."""
    READ_UNCOMMITTED = "READ_UNCOMMITTED"
    READ_COMMITTED = "READ_COMMITTED"
    REPEATABLE_READ = "REPEATABLE_READ"
    SERIALIZABLE = "SERIALIZABLE"


class UnitOfWorkState(str, Enum):
    """Lifecycle states of a unit of work."""
    INACTIVE = "inactive"
    ACTIVE = "active"
    ROLLBACK_ONLY = "rollback_only"


@dataclass(frozen=True)
class TransactionOptions:
    """Options for beginning a transaction.
    
    ``database`` names the database (or schema, for engines that switch
    schemas inside one connection) the transaction runs against.
    """
    database: Optional[str] = None
    isolation_level: Optional[IsolationLevel] = None
