"""
ReorderSiblings Use Case.

Renumbers one sibling collection densely from 1: weeks by ``order``,
workouts and exercises by ``orderIndex``, sets by ``setNumber``. Used to
apply a drag-and-drop order, or to close the gaps a cascade delete leaves.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from application.batching import DEFAULT_BATCH_LIMIT, BatchChunker, CommitOutcome
from application.exceptions import InvalidScopeError
from application.locks import ScopeLockRegistry
from application.ports import Document, DocumentStore
from application.scope import sibling_collection
from domain.models import SERVER_TIMESTAMP, EntityKind

logger = logging.getLogger(__name__)


@dataclass
class ReorderResult:
    """Result of the ReorderSiblings use case execution."""

    level: EntityKind
    collection_path: str
    ordered_ids: List[str] = field(default_factory=list)
    updated_ids: List[str] = field(default_factory=list)
    outcome: CommitOutcome = field(default_factory=CommitOutcome)


class ReorderSiblingsUseCase:
    """
    Use case for renumbering siblings 1..n.

    Only documents whose ordering value actually changes are written.

    Usage:
        >>> use_case = ReorderSiblingsUseCase(store)
        >>> result = await use_case.execute(
        ...     "u1", "p1", EntityKind.WORKOUT, week_id="w1",
        ...     ordered_ids=["wo3", "wo1", "wo2"],
        ... )
        >>> result.updated_ids
        ['wo3', 'wo1', 'wo2']
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        lock_registry: Optional[ScopeLockRegistry] = None,
    ) -> None:
        self._store = store
        self._batch_limit = batch_limit
        self._locks = lock_registry

    async def execute(
        self,
        user_id: str,
        program_id: str,
        level: EntityKind,
        *,
        week_id: Optional[str] = None,
        workout_id: Optional[str] = None,
        exercise_id: Optional[str] = None,
        ordered_ids: Optional[Sequence[str]] = None,
    ) -> ReorderResult:
        """
        Renumber the ``level`` siblings under the given parent.

        Args:
            user_id: Owner of the program
            program_id: Program containing the siblings
            level: Kind being renumbered (week, workout, exercise or set)
            week_id, workout_id, exercise_id: Parent ids the level needs
            ordered_ids: New order; must name every current sibling exactly
                once. When omitted, the current order is kept and compacted.

        Raises:
            InvalidScopeError: Missing parent id, or ordered_ids that do not
                match the current siblings
            BatchCommitError: A write batch failed
        """
        collection = sibling_collection(
            level, user_id, program_id, week_id, workout_id, exercise_id
        )
        if self._locks is None:
            return await self._reorder(level, collection, ordered_ids)
        async with self._locks.hold(collection):
            return await self._reorder(level, collection, ordered_ids)

    async def _reorder(
        self,
        level: EntityKind,
        collection: str,
        ordered_ids: Optional[Sequence[str]],
    ) -> ReorderResult:
        order_field = level.order_field
        siblings = await self._store.query(collection, order_by=order_field)
        sequence = self._sequence(siblings, ordered_ids)

        chunker = BatchChunker(self._store, self._batch_limit)
        updated: List[str] = []
        for position, document in enumerate(sequence, start=1):
            if document.get(order_field) != position:
                chunker.stage_update(
                    document.path,
                    {order_field: position, "updatedAt": SERVER_TIMESTAMP},
                )
                updated.append(document.id)

        outcome = await chunker.finish()
        logger.info(
            "Reordered %d %s(s) in %s (%d changed)",
            len(sequence),
            level.value,
            collection,
            len(updated),
        )
        return ReorderResult(
            level=level,
            collection_path=collection,
            ordered_ids=[document.id for document in sequence],
            updated_ids=updated,
            outcome=outcome,
        )

    @staticmethod
    def _sequence(
        siblings: List[Document], ordered_ids: Optional[Sequence[str]]
    ) -> List[Document]:
        if ordered_ids is None:
            return siblings

        by_id = {document.id: document for document in siblings}
        if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(by_id):
            missing = sorted(set(by_id) - set(ordered_ids))
            unknown = sorted(set(ordered_ids) - set(by_id))
            raise InvalidScopeError(
                f"orderedIds must list every sibling exactly once "
                f"(missing: {missing}, unknown: {unknown})"
            )
        return [by_id[document_id] for document_id in ordered_ids]
