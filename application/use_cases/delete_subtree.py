"""
CascadeDelete Use Case.

Removes a Week, Workout or Exercise and every descendant. Deletes are staged
leaf-first and the scope document last, so an interrupted delete never
leaves children whose parent is already gone.

Remaining siblings keep their ordering values; gaps are closed explicitly
with ReorderSiblingsUseCase.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from application.batching import DEFAULT_BATCH_LIMIT, BatchChunker, CommitOutcome
from application.exceptions import (
    CascadeAbortedError,
    OwnershipMismatchError,
    SourceNotFoundError,
)
from application.locks import ScopeLockRegistry
from application.ports import DocumentStore
from application.scope import ScopeRef
from application.traversal import TraversalOrder, TreeTraverser
from domain.models import CascadeCounts, EntityKind

logger = logging.getLogger(__name__)


@dataclass
class DeletionResult:
    """Result of the CascadeDelete use case execution."""

    scope_kind: EntityKind
    deleted_id: str
    counts: CascadeCounts = field(default_factory=CascadeCounts.zero)
    outcome: CommitOutcome = field(default_factory=CommitOutcome)

    @property
    def partially_completed(self) -> bool:
        return self.outcome.partially_completed


class CascadeDeleteUseCase:
    """
    Use case for deleting a subtree of a program.

    Unlike duplication, the source owner is not checked unless
    ``verify_owner`` is set: the scope path already sits under the caller's
    user document.

    Usage:
        >>> use_case = CascadeDeleteUseCase(store)
        >>> result = await use_case.execute(ScopeRef.workout("u1", "p1", "w1", "wo1"))
        >>> result.counts.summary()
        '3 exercises, 9 sets'
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        lock_registry: Optional[ScopeLockRegistry] = None,
        verify_owner: bool = False,
    ) -> None:
        self._store = store
        self._traverser = TreeTraverser(store)
        self._batch_limit = batch_limit
        self._locks = lock_registry
        self._verify_owner = verify_owner

    async def execute(self, scope: ScopeRef) -> DeletionResult:
        """
        Delete the subtree rooted at ``scope``.

        Raises:
            SourceNotFoundError: The scope document does not exist
            OwnershipMismatchError: verify_owner is set and the owner differs
            BatchCommitError: A write batch failed; earlier batches stay
            CascadeAbortedError: A read failed after some batches committed
        """
        if self._locks is None:
            return await self._delete(scope)
        async with self._locks.hold(scope.document_path):
            return await self._delete(scope)

    async def _delete(self, scope: ScopeRef) -> DeletionResult:
        kind = scope.kind
        logger.info(
            "Deleting %s %s (user %s, program %s)",
            kind.value,
            scope.entity_id,
            scope.user_id,
            scope.program_id,
        )

        source = await self._store.get(scope.document_path)
        if source is None:
            raise SourceNotFoundError(scope.document_path)

        if self._verify_owner:
            owner = source.get("userId")
            if owner is not None and owner != scope.user_id:
                raise OwnershipMismatchError(source.path, scope.user_id)

        deleted: Counter = Counter()
        chunker = BatchChunker(self._store, self._batch_limit)
        try:
            async for node in self._traverser.walk(source, kind, order=TraversalOrder.POST):
                chunker.stage_delete(node.path)
                deleted[node.kind] += 1
            chunker.stage_delete(source.path)
        except Exception as e:
            outcome = await chunker.discard()
            if not outcome.committed_batches:
                raise
            logger.error(
                "Delete of %s aborted after %d committed batches; "
                "descendants already removed are not restored",
                scope.document_path,
                outcome.committed_batches,
            )
            raise CascadeAbortedError(
                f"Delete of {scope.document_path} aborted after "
                f"{outcome.committed_batches} committed batches: {e}",
                outcome,
            ) from e

        outcome = await chunker.finish()
        counts = CascadeCounts(
            workouts=deleted[EntityKind.WORKOUT],
            exercises=deleted[EntityKind.EXERCISE],
            sets=deleted[EntityKind.SET],
        )
        logger.info(
            "Deleted %s %s and %d descendants (%d batches)",
            kind.value,
            source.id,
            counts.total_items,
            outcome.total_batches,
        )
        return DeletionResult(
            scope_kind=kind,
            deleted_id=source.id,
            counts=counts,
            outcome=outcome,
        )
