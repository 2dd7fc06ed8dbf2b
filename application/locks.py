"""
In-process scope locks.

Two cascade operations on overlapping subtrees (the same scope, or one scope
inside the other) must not interleave: a duplicate reading a week while a
delete removes its workouts would copy half a week. ScopeLockRegistry makes
the second operation wait until the first releases its hold.

The registry is per process. Separate processes writing to the same store
are not coordinated.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Tuple

from domain import paths

logger = logging.getLogger(__name__)


class ScopeLockRegistry:
    """
    Registry of subtrees currently being mutated.

    Usage:
        >>> locks = ScopeLockRegistry()
        >>> async with locks.hold(scope.document_path):
        ...     await use_case.execute(scope)
    """

    def __init__(self) -> None:
        self._holds: Dict[int, Tuple[str, "asyncio.Future[None]"]] = {}
        self._next_token = 0

    @property
    def active(self) -> List[str]:
        """Paths currently held."""
        return [path for path, _ in self._holds.values()]

    def is_held(self, path: str) -> bool:
        """True when ``path`` overlaps a held subtree."""
        return self._blocker(path) is not None

    def _blocker(self, path: str) -> Optional["asyncio.Future[None]"]:
        for held_path, released in self._holds.values():
            if paths.is_same_or_nested(path, held_path):
                return released
        return None

    @asynccontextmanager
    async def hold(self, path: str) -> AsyncIterator[None]:
        """Hold ``path`` for the duration of the block, waiting on overlaps."""
        while True:
            released = self._blocker(path)
            if released is None:
                break
            logger.debug("Waiting for overlapping operation to release %s", path)
            # asyncio.wait leaves the future alone if this waiter is cancelled
            await asyncio.wait({released})

        token = self._next_token
        self._next_token += 1
        self._holds[token] = (path, asyncio.get_running_loop().create_future())
        try:
            yield
        finally:
            _, released = self._holds.pop(token)
            released.set_result(None)
