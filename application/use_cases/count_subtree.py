"""
CascadeCount Use Case.

Counts what a cascade delete of a scope would remove, for confirmation
dialogs ("This will delete 3 workouts, 9 exercises, 27 sets").

Workouts and exercises are enumerated; sets, the largest level, are counted
with the store's server-side aggregate so they are never transferred.
"""

import logging
from collections import Counter
from typing import Optional, Union

from application.exceptions import InvalidScopeError, SourceNotFoundError
from application.ports import DocumentStore
from application.scope import ScopeRef, ScopeSelection
from application.traversal import TreeTraverser
from domain import paths
from domain.models import CascadeCounts, EntityKind

logger = logging.getLogger(__name__)

# How many levels below each scope kind the exercises sit
_EXERCISE_DEPTH = {
    EntityKind.WEEK: 2,
    EntityKind.WORKOUT: 1,
    EntityKind.EXERCISE: 0,
}


class CascadeCountUseCase:
    """
    Use case for previewing the size of a subtree.

    Never raises: an invalid selection, a missing scope document or a store
    error is logged and reported as zero counts, so a confirmation dialog
    can always be shown.

    Usage:
        >>> use_case = CascadeCountUseCase(store)
        >>> counts = await use_case.execute(ScopeRef.exercise("u1", "p1", "w1", "wo1", "e1"))
        >>> counts.sets
        5
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._traverser = TreeTraverser(store)

    async def execute(
        self, scope: Optional[Union[ScopeRef, ScopeSelection]]
    ) -> CascadeCounts:
        try:
            if scope is None:
                raise InvalidScopeError("No scope selected")
            ref = scope.resolve() if isinstance(scope, ScopeSelection) else scope
            return await self._count(ref)
        except Exception as e:
            logger.warning("Cascade count failed, reporting zero: %s", e)
            return CascadeCounts.zero()

    async def _count(self, scope: ScopeRef) -> CascadeCounts:
        root = await self._store.get(scope.document_path)
        if root is None:
            raise SourceNotFoundError(scope.document_path)

        tally: Counter = Counter()
        exercise_paths = [root.path] if scope.kind is EntityKind.EXERCISE else []
        async for node in self._traverser.walk(
            root, scope.kind, max_depth=_EXERCISE_DEPTH[scope.kind]
        ):
            tally[node.kind] += 1
            if node.kind is EntityKind.EXERCISE:
                exercise_paths.append(node.path)

        for exercise_path in exercise_paths:
            tally[EntityKind.SET] += await self._store.count(
                paths.child_collection(exercise_path, EntityKind.SET)
            )

        counts = CascadeCounts(
            workouts=tally[EntityKind.WORKOUT],
            exercises=tally[EntityKind.EXERCISE],
            sets=tally[EntityKind.SET],
        )
        logger.debug("Cascade counts for %s: %s", scope.document_path, counts.summary() or "empty")
        return counts
