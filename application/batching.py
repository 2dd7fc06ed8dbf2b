"""
Write-batch chunking.

Stores cap the number of operations in one atomic batch (500 for Firestore).
BatchChunker accumulates individual mutations and, whenever the current batch
reaches its limit, commits it in the background and opens a fresh one.
``finish()`` commits the remainder and waits for every commit.

Each batch is atomic; the batches are not atomic with respect to each other.
If batch 2 of 3 fails, batch 1 stays committed and nothing is rolled back.
The CommitOutcome returned (or attached to BatchCommitError) reports how far
the operation got.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from application.exceptions import BatchCommitError
from application.ports import DocumentStore, WriteBatch

logger = logging.getLogger(__name__)

# Hard per-batch ceiling of the store
MAX_BATCH_OPERATIONS = 500

# Commit threshold, 10% under the ceiling
DEFAULT_BATCH_LIMIT = 450


@dataclass
class CommitOutcome:
    """How many batches of an operation made it to the store."""

    total_batches: int = 0
    committed_batches: int = 0
    failed_batches: int = 0
    staged_operations: int = 0
    dropped_operations: int = 0
    errors: List[BaseException] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.failed_batches == 0 and self.dropped_operations == 0

    @property
    def partially_completed(self) -> bool:
        """Some writes landed and some did not."""
        return self.committed_batches > 0 and not self.succeeded

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBatches": self.total_batches,
            "committedBatches": self.committed_batches,
            "failedBatches": self.failed_batches,
            "stagedOperations": self.staged_operations,
            "droppedOperations": self.dropped_operations,
            "partiallyCompleted": self.partially_completed,
        }


class BatchChunker:
    """
    Splits a stream of mutations into store batches of at most ``limit``
    operations.

    Must be used from a running event loop: filled batches are committed as
    background tasks.

    Usage:
        >>> chunker = BatchChunker(store, limit=450)
        >>> for path, data in payloads:
        ...     chunker.stage_set(path, data)
        >>> outcome = await chunker.finish()
    """

    def __init__(self, store: DocumentStore, limit: int = DEFAULT_BATCH_LIMIT) -> None:
        if not 1 <= limit <= MAX_BATCH_OPERATIONS:
            raise ValueError(
                f"Batch limit must be between 1 and {MAX_BATCH_OPERATIONS}, got {limit}"
            )
        self._store = store
        self._limit = limit
        self._batch: Optional[WriteBatch] = store.batch()
        self._batch_size = 0
        self._pending: List["asyncio.Task[None]"] = []
        self._staged = 0
        self._closed = False

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def staged_operations(self) -> int:
        return self._staged

    @property
    def submitted_batches(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------------
    # Staging
    # -------------------------------------------------------------------------

    def stage_set(self, path: str, data: Dict[str, Any]) -> None:
        self._current().set(path, data)
        self._after_stage()

    def stage_update(self, path: str, data: Dict[str, Any]) -> None:
        self._current().update(path, data)
        self._after_stage()

    def stage_delete(self, path: str) -> None:
        self._current().delete(path)
        self._after_stage()

    def _current(self) -> WriteBatch:
        if self._closed or self._batch is None:
            raise RuntimeError("BatchChunker is closed")
        return self._batch

    def _after_stage(self) -> None:
        self._staged += 1
        self._batch_size += 1
        if self._batch_size >= self._limit:
            self._submit()

    def _submit(self) -> None:
        if self._batch is None or self._batch_size == 0:
            return
        number = len(self._pending) + 1
        task = asyncio.ensure_future(self._commit(self._batch, number, self._batch_size))
        self._pending.append(task)
        self._batch = self._store.batch()
        self._batch_size = 0

    @staticmethod
    async def _commit(batch: WriteBatch, number: int, size: int) -> None:
        logger.debug("Committing write batch %d (%d operations)", number, size)
        await batch.commit()
        logger.debug("Write batch %d committed", number)

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    async def finish(self) -> CommitOutcome:
        """
        Commit the last partial batch and wait for every commit.

        Returns:
            CommitOutcome for the whole operation

        Raises:
            BatchCommitError: If any batch failed. Batches that committed
                are left in place.
        """
        self._current()
        self._submit()
        self._closed = True
        self._batch = None

        outcome = await self._gather()
        if outcome.failed_batches:
            logger.error(
                "%d of %d write batches failed (%d committed)",
                outcome.failed_batches,
                outcome.total_batches,
                outcome.committed_batches,
            )
            raise BatchCommitError(
                f"{outcome.failed_batches} of {outcome.total_batches} write batches failed",
                outcome,
            ) from outcome.errors[0]
        return outcome

    async def discard(self) -> CommitOutcome:
        """
        Drop the unsubmitted batch and wait for commits already in flight.

        Used when an operation fails part-way; never raises for commit errors,
        they are reported in the outcome instead.
        """
        dropped = self._batch_size if not self._closed else 0
        self._closed = True
        self._batch = None
        self._batch_size = 0

        outcome = await self._gather()
        outcome.dropped_operations = dropped
        if dropped or outcome.failed_batches:
            logger.warning(
                "Discarded write batches: %d operations dropped, %d of %d batches committed",
                dropped,
                outcome.committed_batches,
                outcome.total_batches,
            )
        return outcome

    async def _gather(self) -> CommitOutcome:
        results = await asyncio.gather(*self._pending, return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        return CommitOutcome(
            total_batches=len(results),
            committed_batches=len(results) - len(errors),
            failed_batches=len(errors),
            staged_operations=self._staged,
            errors=errors,
        )
