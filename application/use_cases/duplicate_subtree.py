"""
DuplicateSubtree Use Case.

Deep-copies a Week, Workout or Exercise together with every descendant down
to the Set level. The copy is placed beside the source (same parent
collection) under a collision-free "(Copy)" name, and every copied document
gets a fresh id.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import ValidationError

from application.batching import DEFAULT_BATCH_LIMIT, BatchChunker, CommitOutcome
from application.exceptions import (
    CascadeAbortedError,
    MalformedDocumentError,
    OwnershipMismatchError,
    SourceNotFoundError,
)
from application.locks import ScopeLockRegistry
from application.ports import Document, DocumentStore
from application.scope import ScopeRef
from application.traversal import TraversalOrder, TreeTraverser
from domain import paths
from domain.converters import copy_payload
from domain.models import (
    SERVER_TIMESTAMP,
    CascadeCounts,
    EntityKind,
    ExerciseType,
    MappingNode,
    set_for_type,
)
from domain.naming import disambiguate

logger = logging.getLogger(__name__)


@dataclass
class DuplicationResult:
    """Result of the DuplicateSubtree use case execution."""

    success: bool
    scope_kind: EntityKind
    new_name: str
    mapping: MappingNode
    outcome: CommitOutcome = field(default_factory=CommitOutcome)

    @property
    def old_root_id(self) -> str:
        return self.mapping.old_id

    @property
    def new_root_id(self) -> str:
        return self.mapping.new_id

    @property
    def partially_completed(self) -> bool:
        return self.outcome.partially_completed

    def copied_counts(self) -> CascadeCounts:
        """Number of descendants copied below the root, per level."""
        by_kind = self.mapping.count_by_kind()
        by_kind[self.scope_kind] -= 1
        return CascadeCounts(
            workouts=by_kind.get(EntityKind.WORKOUT, 0),
            exercises=by_kind.get(EntityKind.EXERCISE, 0),
            sets=by_kind.get(EntityKind.SET, 0),
        )


@dataclass
class _Copied:
    """Where a source document was copied to."""

    path: str
    links: Dict[str, str]
    mapping: MappingNode


class DuplicateSubtreeUseCase:
    """
    Use case for duplicating a subtree of a program.

    Orchestrates the following workflow:
    1. Load the scope document (SourceNotFoundError if missing)
    2. Verify the caller owns it (OwnershipMismatchError, nothing written)
    3. Compute a name no sibling uses
    4. Stage the root copy, then every descendant depth-first
    5. Commit all batches
    6. Write a best-effort audit log entry
    7. Return the old-id -> new-id mapping

    Usage:
        >>> use_case = DuplicateSubtreeUseCase(store)
        >>> result = await use_case.execute(ScopeRef.week("u1", "p1", "w1"))
        >>> result.new_name, result.new_root_id
        ('Week 1 (Copy)', '...')
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        batch_limit: int = DEFAULT_BATCH_LIMIT,
        lock_registry: Optional[ScopeLockRegistry] = None,
        audit_log_enabled: bool = True,
        require_owner_field: bool = False,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            store: Document store holding the program tree
            batch_limit: Operations per write batch
            lock_registry: Serialises overlapping operations when given
            audit_log_enabled: Write a duplicationLogs entry on success
            require_owner_field: Reject sources without a userId field
        """
        self._store = store
        self._traverser = TreeTraverser(store)
        self._batch_limit = batch_limit
        self._locks = lock_registry
        self._audit_log_enabled = audit_log_enabled
        self._require_owner_field = require_owner_field

    async def execute(self, scope: ScopeRef) -> DuplicationResult:
        """
        Duplicate the subtree rooted at ``scope``.

        Raises:
            SourceNotFoundError: The scope document does not exist
            OwnershipMismatchError: The scope belongs to another user
            MalformedDocumentError: A source document fails validation
            BatchCommitError: A write batch failed; earlier batches stay
            CascadeAbortedError: A read failed after some batches committed
        """
        if self._locks is None:
            return await self._duplicate(scope)
        async with self._locks.hold(scope.document_path):
            return await self._duplicate(scope)

    async def _duplicate(self, scope: ScopeRef) -> DuplicationResult:
        kind = scope.kind
        logger.info(
            "Duplicating %s %s (user %s, program %s)",
            kind.value,
            scope.entity_id,
            scope.user_id,
            scope.program_id,
        )

        # Step 1: Load source
        source = await self._store.get(scope.document_path)
        if source is None:
            raise SourceNotFoundError(scope.document_path)

        # Step 2: Verify ownership before any write
        self._verify_owner(source, scope)

        # Step 3: Collision-free name among the destination's siblings
        destination = scope.parent_collection_path
        siblings = await self._store.query(destination, order_by=kind.order_field)
        new_name = disambiguate(
            source.get("name"),
            [sibling.get("name") for sibling in siblings],
            default_name=kind.display_name,
        )

        # Step 4: Stage root copy and descendants
        new_root_id = self._store.new_document_id(destination)
        root = _Copied(
            path=paths.document_in(destination, new_root_id),
            links=scope.parent_links(),
            mapping=MappingNode(kind=kind, old_id=source.id, new_id=new_root_id),
        )

        chunker = BatchChunker(self._store, self._batch_limit)
        try:
            chunker.stage_set(
                root.path,
                self._payload(kind, source, links=root.links, name=new_name),
            )
            await self._stage_descendants(chunker, source, kind, root)
        except Exception as e:
            outcome = await chunker.discard()
            if not outcome.committed_batches:
                raise
            logger.error(
                "Duplication of %s aborted after %d committed batches; "
                "partial copy %s left in place",
                scope.document_path,
                outcome.committed_batches,
                root.path,
            )
            raise CascadeAbortedError(
                f"Duplication of {scope.document_path} aborted after "
                f"{outcome.committed_batches} committed batches: {e}",
                outcome,
            ) from e

        # Step 5: Commit (BatchCommitError propagates with its outcome)
        outcome = await chunker.finish()

        result = DuplicationResult(
            success=True,
            scope_kind=kind,
            new_name=new_name,
            mapping=root.mapping,
            outcome=outcome,
        )
        logger.info(
            "Duplicated %s %s -> %s as '%s' (%d documents, %d batches)",
            kind.value,
            source.id,
            new_root_id,
            new_name,
            outcome.staged_operations,
            outcome.total_batches,
        )

        # Step 6: Audit log
        if self._audit_log_enabled:
            await self._write_audit_log(scope, result)

        return result

    def _verify_owner(self, source: Document, scope: ScopeRef) -> None:
        owner = source.get("userId")
        if owner is None and not self._require_owner_field:
            return
        if owner != scope.user_id:
            logger.warning(
                "Ownership check failed for %s: owner %s, caller %s",
                source.path,
                owner,
                scope.user_id,
            )
            raise OwnershipMismatchError(source.path, scope.user_id)

    async def _stage_descendants(
        self,
        chunker: BatchChunker,
        source: Document,
        kind: EntityKind,
        root: _Copied,
    ) -> None:
        copies: Dict[str, _Copied] = {source.path: root}

        async for node in self._traverser.walk(source, kind, order=TraversalOrder.PRE):
            parent = copies[node.parent.path]
            collection = paths.child_collection(parent.path, node.kind)
            new_id = self._store.new_document_id(collection)

            links = dict(parent.links)
            links[node.parent.kind.link_field] = parent.mapping.new_id

            exercise_type = None
            if node.kind is EntityKind.SET:
                exercise_type = ExerciseType.parse(node.parent.document.get("exerciseType"))

            chunker.stage_set(
                paths.document_in(collection, new_id),
                self._payload(node.kind, node.document, links=links, exercise_type=exercise_type),
            )

            mapping = MappingNode(kind=node.kind, old_id=node.id, new_id=new_id)
            parent.mapping.children.append(mapping)
            if node.kind.child is not None:
                copies[node.path] = _Copied(
                    path=paths.document_in(collection, new_id),
                    links=links,
                    mapping=mapping,
                )

    def _payload(
        self,
        kind: EntityKind,
        document: Document,
        *,
        links: Dict[str, str],
        name: Optional[str] = None,
        exercise_type: Optional[ExerciseType] = None,
    ) -> Dict[str, Any]:
        try:
            if kind is EntityKind.SET:
                problems = set_for_type(document.data, exercise_type).metric_errors()
                if problems:
                    logger.warning(
                        "Copying inconsistent %s set %s: %s",
                        exercise_type.value,
                        document.path,
                        "; ".join(problems),
                    )
            return copy_payload(
                kind,
                document.data,
                links=links,
                exercise_type=exercise_type,
                name=name,
            )
        except ValidationError as e:
            raise MalformedDocumentError(document.path, str(e)) from e

    async def _write_audit_log(self, scope: ScopeRef, result: DuplicationResult) -> None:
        collection = paths.duplication_logs_collection(scope.user_id)
        entry = {
            "type": f"duplicate{scope.kind.display_name}",
            "scopeKind": scope.kind.value,
            "sourceId": result.old_root_id,
            "newId": result.new_root_id,
            "programId": scope.program_id,
            "userId": scope.user_id,
            "createdAt": SERVER_TIMESTAMP,
        }
        try:
            batch = self._store.batch()
            batch.set(paths.document_in(collection, self._store.new_document_id(collection)), entry)
            await batch.commit()
        except Exception as e:
            logger.warning("Duplication audit log failed (non-fatal): %s", e)
