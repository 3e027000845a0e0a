"""Repository compatibility checks for ddd-commons.

Repositories may only share a unit of work when every pair of them is
compatible and the unit of work runs on their engine. Checks run before any
bundle state is created.
"""

from typing import Optional, Sequence, Tuple

from ..entities.protocols import Repository, UnitOfWork
from ....core.exceptions import IncompatibleRepositoriesError, UnitOfWorkEngineMismatchError


def find_incompatible_pair(
    repositories: Sequence[Repository]
) -> Optional[Tuple[Repository, Repository]]:
    """Return the first pair of repositories that cannot share a transaction."""
    for i, first in enumerate(repositories):
        for second in repositories[i + 1:]:
            if not first.is_compatible_with(second):
                return first, second
    return None


def ensure_compatible(repositories: Sequence[Repository]) -> None:
    """Require every pair of repositories to be compatible.
    
    Raises:
        IncompatibleRepositoriesError: Naming the first incompatible pair
    """
    pair = find_incompatible_pair(repositories)
    
    if pair is None:
        return
    
    first, second = pair
    raise IncompatibleRepositoriesError(
        f'Incompatible repositories: "{first.name}" (engine {first.engine}) x '
        f'"{second.name}" (engine {second.engine}).',
        details={
            "repositories": [first.name, second.name],
            "engines": [first.engine, second.engine],
        },
    )


def ensure_engine_match(uow: UnitOfWork, repositories: Sequence[Repository]) -> None:
    """Require the unit of work to run on the engine of every repository.
    
    Raises:
        UnitOfWorkEngineMismatchError: On the first repository of another engine
    """
    for repository in repositories:
        if uow.engine != repository.engine:
            raise UnitOfWorkEngineMismatchError(
                f'UnitOfWork engine mismatch: UoW={uow.engine} repo("{repository.name}")={repository.engine}',
                details={
                    "uow_engine": uow.engine,
                    "repository": repository.name,
                    "repository_engine": repository.engine,
                },
            )
