"""
Pydantic models for the program subtree API.

Request and response models for the cascade operations:
- Duplicate a week, workout or exercise
- Delete a week, workout or exercise with everything below it
- Preview cascade counts for a confirmation dialog
- Reorder siblings

JSON uses camelCase keys, matching the stored documents.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from application.batching import CommitOutcome
from application.use_cases import DeletionResult, DuplicationResult, ReorderResult
from domain.models import CascadeCounts, MappingNode


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CountsBody(CamelModel):
    """Per-level counts with the summary a dialog shows"""
    workouts: int = 0
    exercises: int = 0
    sets: int = 0
    total_items: int = 0
    has_items: bool = False
    summary: str = ""

    @classmethod
    def from_counts(cls, counts: CascadeCounts) -> "CountsBody":
        return cls(
            workouts=counts.workouts,
            exercises=counts.exercises,
            sets=counts.sets,
            total_items=counts.total_items,
            has_items=counts.has_items,
            summary=counts.summary(),
        )


class BatchesBody(CamelModel):
    """How many write batches were committed"""
    total_batches: int = 0
    committed_batches: int = 0
    staged_operations: int = 0

    @classmethod
    def from_outcome(cls, outcome: CommitOutcome) -> "BatchesBody":
        return cls(
            total_batches=outcome.total_batches,
            committed_batches=outcome.committed_batches,
            staged_operations=outcome.staged_operations,
        )


class DuplicateResponse(CamelModel):
    """Response after duplicating a subtree"""
    success: bool = True
    scope_kind: str
    new_name: str
    old_root_id: str
    new_root_id: str
    mapping: MappingNode
    copied: CountsBody
    batches: BatchesBody
    partially_completed: bool = False

    @classmethod
    def from_result(cls, result: DuplicationResult) -> "DuplicateResponse":
        return cls(
            success=result.success,
            scope_kind=result.scope_kind.value,
            new_name=result.new_name,
            old_root_id=result.old_root_id,
            new_root_id=result.new_root_id,
            mapping=result.mapping,
            copied=CountsBody.from_counts(result.copied_counts()),
            batches=BatchesBody.from_outcome(result.outcome),
            partially_completed=result.partially_completed,
        )


class DeleteResponse(CamelModel):
    """Response after a cascade delete"""
    success: bool = True
    scope_kind: str
    deleted_id: str
    deleted: CountsBody
    batches: BatchesBody
    partially_completed: bool = False

    @classmethod
    def from_result(cls, result: DeletionResult) -> "DeleteResponse":
        return cls(
            scope_kind=result.scope_kind.value,
            deleted_id=result.deleted_id,
            deleted=CountsBody.from_counts(result.counts),
            batches=BatchesBody.from_outcome(result.outcome),
            partially_completed=result.partially_completed,
        )


class ReorderRequest(CamelModel):
    """Renumber one sibling collection"""
    level: Literal["week", "workout", "exercise", "set"]
    week_id: Optional[str] = None
    workout_id: Optional[str] = None
    exercise_id: Optional[str] = None
    ordered_ids: Optional[List[str]] = Field(
        default=None,
        description="New order; omit to compact the current order to 1..n",
    )


class ReorderResponse(CamelModel):
    """Response after reordering siblings"""
    success: bool = True
    level: str
    ordered_ids: List[str]
    updated_ids: List[str]

    @classmethod
    def from_result(cls, result: ReorderResult) -> "ReorderResponse":
        return cls(
            level=result.level.value,
            ordered_ids=result.ordered_ids,
            updated_ids=result.updated_ids,
        )
