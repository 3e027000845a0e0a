"""Pending tasks service for ddd-commons.

Keeps a bounded set of in-flight asyncio tasks so they can be awaited before
shutdown. Tasks over the limit are discarded with a warning and, when
configured, the process is terminated.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Dict, Optional, Set, Union

from ..adapters.terminator import ProcessTerminator
from ..entities.config import PendingTasksSettings, build_settings
from ..entities.protocols import Terminator

logger = logging.getLogger(__name__)


class PendingTasksService:
    """Tracks in-flight tasks up to a configured limit."""

    def __init__(
        self,
        settings: Optional[Union[PendingTasksSettings, Dict[str, Any]]] = None,
        *,
        terminator: Optional[Terminator] = None,
        **overrides: Any
    ):
        self._settings = build_settings(PendingTasksSettings, settings, **overrides)
        self._terminator: Terminator = terminator or ProcessTerminator()
        self._tasks: Set[asyncio.Future] = set()

    @property
    def size(self) -> int:
        return len(self._tasks)

    @property
    def limit(self) -> int:
        return self._settings.limit

    def register(self, awaitable: Awaitable[Any]) -> Optional[asyncio.Future]:
        """Schedule and track an awaitable.

        Must be called with a running event loop.

        Args:
            awaitable: Coroutine, task or future to track

        Returns:
            The tracked future, or None when the limit discarded it
        """
        if len(self._tasks) >= self._settings.limit:
            logger.warning(
                f"Limit of {self._settings.limit} pending tasks reached, task discarded"
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            if self._settings.kill_on_limit:
                self._terminator.terminate(
                    f"Limit of {self._settings.limit} pending tasks reached"
                )
            return None

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._forget)
        logger.debug(f"Registered task; pool: {len(self._tasks)}")
        return task

    async def cleanup(self) -> None:
        """Wait for every tracked task to settle, ignoring their outcome."""
        logger.debug("Waiting for pending tasks")
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        logger.debug("Pending tasks settled")

    def _forget(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        logger.debug(f"Removed task; pool: {len(self._tasks)}")
