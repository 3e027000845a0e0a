"""Repository provider for ddd-commons.

RepositoryProvider is an explicitly constructed registry of repositories.
Applications create one, register their repositories at startup and pass it
to the code that needs transactional bundles.
"""

import logging
from typing import Dict, List

from .compatibility import ensure_compatible, ensure_engine_match
from ..entities.protocols import Repository
from ..repositories.bundle import RepositoryBundle
from ....core.exceptions import (
    RepositoryAlreadyRegisteredError,
    RepositoryConfigurationError,
    RepositoryNotFoundError,
)

logger = logging.getLogger(__name__)


class RepositoryProvider:
    """Registry of named repositories and factory of repository bundles."""
    
    def __init__(self):
        self._repositories: Dict[str, Repository] = {}
    
    @property
    def names(self) -> List[str]:
        return list(self._repositories)
    
    def register(self, repository: Repository) -> None:
        """Register a repository under its name.
        
        Raises:
            RepositoryAlreadyRegisteredError: If the name is taken
        """
        if repository.name in self._repositories:
            raise RepositoryAlreadyRegisteredError(
                f'Repository "{repository.name}" already registered.',
                details={"name": repository.name},
            )
        
        self._repositories[repository.name] = repository
        logger.debug(f"Registered repository {repository.name} (engine {repository.engine})")
    
    def get(self, name: str) -> Repository:
        """Get a registered repository, unbound to any unit of work."""
        repository = self._repositories.get(name)
        
        if repository is None:
            raise RepositoryNotFoundError(
                f'Repository "{name}" not found.',
                details={"name": name},
            )
        
        return repository
    
    def has(self, name: str) -> bool:
        return name in self._repositories
    
    def unregister(self, name: str) -> bool:
        """Remove a repository; returns whether it was registered."""
        return self._repositories.pop(name, None) is not None
    
    def clear(self) -> None:
        self._repositories.clear()
    
    def bundle_transaction(self, *names: str) -> RepositoryBundle:
        """Bundle the named repositories around one new unit of work.
        
        The bundle is returned inactive; begin its unit of work (or enter it
        with ``async with``) before getting repositories from it.
        
        Args:
            *names: Names of registered repositories
            
        Returns:
            RepositoryBundle with every repository bound to the unit of work
            
        Raises:
            RepositoryConfigurationError: If no name, or a non-string name, is given
            RepositoryNotFoundError: If a name is not registered
            IncompatibleRepositoriesError: If two repositories are incompatible
            UnitOfWorkEngineMismatchError: If the unit of work runs on another engine
        """
        if not names:
            raise RepositoryConfigurationError("You must provide at least one repository name.")
        
        repositories = []
        
        for name in names:
            if not isinstance(name, str):
                raise RepositoryConfigurationError(
                    "Repository name must be a string.",
                    details={"name": repr(name)},
                )
            repositories.append(self.get(name))
        
        return self.unit_of_work_for(*repositories)
    
    def unit_of_work_for(self, *repositories: Repository) -> RepositoryBundle:
        """Bundle repositories around a unit of work built by the first one.
        
        Raises:
            RepositoryConfigurationError: If no repository is given
            IncompatibleRepositoriesError: If two repositories are incompatible
            UnitOfWorkEngineMismatchError: If the unit of work runs on another engine
        """
        if not repositories:
            raise RepositoryConfigurationError("You must provide at least one repository.")
        
        ensure_compatible(repositories)
        
        uow = repositories[0].build_unit_of_work()
        ensure_engine_match(uow, repositories)
        
        bundle = RepositoryBundle(uow)
        for repository in repositories:
            bundle.add(repository)
        
        logger.debug(
            f"Bundled repositories {[r.name for r in repositories]} on engine {uow.engine}"
        )
        return bundle
    
    def __contains__(self, name: object) -> bool:
        return name in self._repositories
    
    def __len__(self) -> int:
        return len(self._repositories)
