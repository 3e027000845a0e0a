"""Relational repository base for ddd-commons."""

from typing import Generic, Optional, TypeVar

from ..entities.protocols import ContextT, DatabaseDriver, Repository, UnitOfWork

DriverT = TypeVar("DriverT", bound=DatabaseDriver)


class AbstractRelationalRepository(Generic[DriverT, ContextT]):
    """
    Base repository bound to a driver and, optionally, to a unit of work.

    Without a unit of work, ``context()`` is None and subclasses decide how
    to reach the driver; with one, they operate inside its transaction.
    Subclasses taking extra constructor arguments override ``clone``.
    """

    def __init__(
        self,
        name: str,
        driver: DriverT,
        uow: Optional[UnitOfWork[ContextT]] = None
    ):
        """
        Initialize the repository.

        Args:
            name: Unique name of the repository
            driver: Storage driver
            uow: Unit of work this repository operates in
        """
        self._name = name
        self._driver = driver
        self._uow = uow

    @property
    def name(self) -> str:
        return self._name

    @property
    def engine(self) -> str:
        return self._driver.engine

    @property
    def connection_signature(self) -> str:
        return self._driver.connection_signature

    @property
    def driver(self) -> DriverT:
        return self._driver

    @property
    def uow(self) -> Optional[UnitOfWork[ContextT]]:
        return self._uow

    def build_unit_of_work(self) -> UnitOfWork[ContextT]:
        return self._driver.build_unit_of_work()

    def clone(self, uow: Optional[UnitOfWork[ContextT]] = None) -> "AbstractRelationalRepository[DriverT, ContextT]":
        return type(self)(self._name, self._driver, uow)

    def is_compatible_with(self, repository: Repository) -> bool:
        return self._driver.is_compatible_with(repository)

    def context(self) -> Optional[ContextT]:
        """Context of the bound unit of work's running transaction."""
        if self._uow is None:
            return None
        return self._uow.get_context()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, engine={self.engine!r})"
