"""
Program subtree router.

This router provides the cascade operations on a program's tree:
- Duplicate a week, workout or exercise beside the original
- Delete a week, workout or exercise with every descendant
- Preview how much a delete would remove (cascade counts)
- Reorder a sibling collection
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import (
    get_count_use_case,
    get_current_user,
    get_delete_use_case,
    get_duplicate_use_case,
    get_reorder_use_case,
)
from api.schemas import (
    CountsBody,
    DeleteResponse,
    DuplicateResponse,
    ReorderRequest,
    ReorderResponse,
)
from application.exceptions import (
    BatchCommitError,
    InvalidScopeError,
    MalformedDocumentError,
    OwnershipMismatchError,
    SourceNotFoundError,
)
from application.scope import ScopeRef, ScopeSelection
from application.use_cases import (
    CascadeCountUseCase,
    CascadeDeleteUseCase,
    DuplicateSubtreeUseCase,
    ReorderSiblingsUseCase,
)
from domain.models import EntityKind

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/programs",
    tags=["Program subtrees"],
)

WEEK_PATH = "/{program_id}/weeks/{week_id}"
WORKOUT_PATH = WEEK_PATH + "/workouts/{workout_id}"
EXERCISE_PATH = WORKOUT_PATH + "/exercises/{exercise_id}"


# =============================================================================
# Custom Exceptions
# =============================================================================


class ScopeNotFoundError(HTTPException):
    """
    Raised when the scope document is missing or owned by someone else.

    Returns 404 in both cases to prevent resource enumeration attacks.
    An attacker cannot distinguish between "not found" and "not authorized".
    """

    def __init__(self, kind: str, entity_id: str):
        super().__init__(
            status_code=404,
            detail=f"{kind.capitalize()} {entity_id} not found",
        )


class InvalidScopeRequestError(HTTPException):
    """Raised when the request does not identify a valid target."""

    def __init__(self, message: str):
        super().__init__(status_code=422, detail=message)


class CommitFailedError(HTTPException):
    """Raised when a write batch failed; earlier batches may have landed."""

    def __init__(self, error: BatchCommitError):
        super().__init__(
            status_code=500,
            detail={
                "message": "Write failed",
                "partiallyCompleted": error.partially_completed,
            },
        )


@contextmanager
def _cascade_errors(kind: str, entity_id: str) -> Iterator[None]:
    """Translate cascade errors into HTTP errors."""
    try:
        yield
    except (SourceNotFoundError, OwnershipMismatchError):
        raise ScopeNotFoundError(kind, entity_id)
    except (InvalidScopeError, MalformedDocumentError) as e:
        raise InvalidScopeRequestError(str(e))
    except BatchCommitError as e:
        logger.exception("Cascade %s %s failed to commit", kind, entity_id)
        raise CommitFailedError(e)


async def _duplicate(
    use_case: DuplicateSubtreeUseCase, kind: str, entity_id: str, **ids: str
) -> DuplicateResponse:
    with _cascade_errors(kind, entity_id):
        result = await use_case.execute(ScopeRef(**ids))
    return DuplicateResponse.from_result(result)


async def _delete(
    use_case: CascadeDeleteUseCase, kind: str, entity_id: str, **ids: str
) -> DeleteResponse:
    with _cascade_errors(kind, entity_id):
        result = await use_case.execute(ScopeRef(**ids))
    return DeleteResponse.from_result(result)


# =============================================================================
# Duplicate
# =============================================================================


@router.post(WEEK_PATH + "/duplicate", response_model=DuplicateResponse, status_code=201)
async def duplicate_week(
    program_id: str,
    week_id: str,
    user_id: str = Depends(get_current_user),
    use_case: DuplicateSubtreeUseCase = Depends(get_duplicate_use_case),
):
    """Duplicate a week with all its workouts, exercises and sets."""
    return await _duplicate(
        use_case, "week", week_id,
        user_id=user_id, program_id=program_id, week_id=week_id,
    )


@router.post(WORKOUT_PATH + "/duplicate", response_model=DuplicateResponse, status_code=201)
async def duplicate_workout(
    program_id: str,
    week_id: str,
    workout_id: str,
    user_id: str = Depends(get_current_user),
    use_case: DuplicateSubtreeUseCase = Depends(get_duplicate_use_case),
):
    """Duplicate a workout within its week."""
    return await _duplicate(
        use_case, "workout", workout_id,
        user_id=user_id, program_id=program_id, week_id=week_id,
        workout_id=workout_id,
    )


@router.post(EXERCISE_PATH + "/duplicate", response_model=DuplicateResponse, status_code=201)
async def duplicate_exercise(
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    user_id: str = Depends(get_current_user),
    use_case: DuplicateSubtreeUseCase = Depends(get_duplicate_use_case),
):
    """Duplicate an exercise and its sets within its workout."""
    return await _duplicate(
        use_case, "exercise", exercise_id,
        user_id=user_id, program_id=program_id, week_id=week_id,
        workout_id=workout_id, exercise_id=exercise_id,
    )


# =============================================================================
# Delete
# =============================================================================


@router.delete(WEEK_PATH, response_model=DeleteResponse)
async def delete_week(
    program_id: str,
    week_id: str,
    user_id: str = Depends(get_current_user),
    use_case: CascadeDeleteUseCase = Depends(get_delete_use_case),
):
    """Delete a week and everything below it."""
    return await _delete(
        use_case, "week", week_id,
        user_id=user_id, program_id=program_id, week_id=week_id,
    )


@router.delete(WORKOUT_PATH, response_model=DeleteResponse)
async def delete_workout(
    program_id: str,
    week_id: str,
    workout_id: str,
    user_id: str = Depends(get_current_user),
    use_case: CascadeDeleteUseCase = Depends(get_delete_use_case),
):
    """Delete a workout and everything below it."""
    return await _delete(
        use_case, "workout", workout_id,
        user_id=user_id, program_id=program_id, week_id=week_id,
        workout_id=workout_id,
    )


@router.delete(EXERCISE_PATH, response_model=DeleteResponse)
async def delete_exercise(
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    user_id: str = Depends(get_current_user),
    use_case: CascadeDeleteUseCase = Depends(get_delete_use_case),
):
    """Delete an exercise and its sets."""
    return await _delete(
        use_case, "exercise", exercise_id,
        user_id=user_id, program_id=program_id, week_id=week_id,
        workout_id=workout_id, exercise_id=exercise_id,
    )


# =============================================================================
# Cascade counts
# =============================================================================


@router.get("/{program_id}/cascade-counts", response_model=CountsBody)
async def get_cascade_counts(
    program_id: str,
    week_id: Optional[str] = Query(None, alias="weekId"),
    workout_id: Optional[str] = Query(None, alias="workoutId"),
    exercise_id: Optional[str] = Query(None, alias="exerciseId"),
    selected_week_id: Optional[str] = Query(None, alias="selectedWeekId"),
    selected_workout_id: Optional[str] = Query(None, alias="selectedWorkoutId"),
    user_id: str = Depends(get_current_user),
    use_case: CascadeCountUseCase = Depends(get_count_use_case),
):
    """
    Count what deleting the selected week, workout or exercise would remove.

    Always answers 200; an invalid or missing selection counts as empty.
    """
    selection = ScopeSelection(
        user_id=user_id,
        program_id=program_id,
        week_id=week_id,
        workout_id=workout_id,
        exercise_id=exercise_id,
        selected_week_id=selected_week_id,
        selected_workout_id=selected_workout_id,
    )
    counts = await use_case.execute(selection)
    return CountsBody.from_counts(counts)


# =============================================================================
# Reorder
# =============================================================================


@router.post("/{program_id}/reorder", response_model=ReorderResponse)
async def reorder_siblings(
    program_id: str,
    request: ReorderRequest,
    user_id: str = Depends(get_current_user),
    use_case: ReorderSiblingsUseCase = Depends(get_reorder_use_case),
):
    """Renumber weeks, workouts, exercises or sets 1..n."""
    parent_id = request.exercise_id or request.workout_id or request.week_id or program_id
    with _cascade_errors(request.level, parent_id):
        result = await use_case.execute(
            user_id,
            program_id,
            EntityKind(request.level),
            week_id=request.week_id,
            workout_id=request.workout_id,
            exercise_id=request.exercise_id,
            ordered_ids=request.ordered_ids,
        )
    return ReorderResponse.from_result(result)
