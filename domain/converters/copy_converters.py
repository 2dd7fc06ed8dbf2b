"""
Converters: stored document -> payload for its duplicate.

Pure functions used when copying a subtree. They decide, per entity kind and
(for sets) per exercise type, which fields are carried over, which are reset
and which are regenerated:

- Structural fields (name, notes, ordering, dayOfWeek, exerciseType) are
  carried over unchanged.
- Link fields (userId, programId, weekId, workoutId, exerciseId) point at
  the destination's ancestors.
- createdAt / updatedAt are regenerated by the store at write time.
- completedAt is never carried over.
- Sets are always unchecked and keep only the metrics their exercise type
  allows (see domain.models.exercise_set).

Raises pydantic.ValidationError when a source document does not match its
kind's model.
"""

from typing import Any, Dict, Mapping, Optional

from domain.models.entities import (
    SERVER_TIMESTAMP,
    STRUCTURAL_MODELS,
    EntityKind,
    ExerciseType,
)
from domain.models.exercise_set import set_for_type

_LINK_ATTRS = {"user_id", "program_id", "week_id", "workout_id", "exercise_id"}
_REGENERATED_ATTRS = {"created_at", "updated_at", "completed_at"}


def _stamp(payload: Dict[str, Any], links: Mapping[str, str]) -> Dict[str, Any]:
    payload.update(links)
    payload["createdAt"] = SERVER_TIMESTAMP
    payload["updatedAt"] = SERVER_TIMESTAMP
    return payload


def copy_structural(
    kind: EntityKind,
    source_data: Mapping[str, Any],
    *,
    links: Mapping[str, str],
    name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the payload for a copy of a week, workout or exercise.

    Args:
        kind: Kind of the source document (not SET)
        source_data: Stored fields of the source document
        links: Link fields for the destination, e.g.
            {"userId": "u1", "programId": "p1", "weekId": "<new week id>"}
        name: Replacement name (the disambiguated name of a copied root)

    Returns:
        Document payload ready to be staged

    Examples:
        >>> payload = copy_structural(
        ...     EntityKind.WORKOUT,
        ...     {"name": "Push", "orderIndex": 2, "completedAt": "2024-01-01"},
        ...     links={"userId": "u1", "programId": "p1", "weekId": "w2"},
        ... )
        >>> payload["orderIndex"], payload["weekId"], "completedAt" in payload
        (2, 'w2', False)
    """
    if kind not in STRUCTURAL_MODELS or kind is EntityKind.PROGRAM:
        raise ValueError(f"Cannot copy {kind.value} documents structurally")

    model = STRUCTURAL_MODELS[kind].model_validate(dict(source_data))
    payload = model.model_dump(
        by_alias=True,
        mode="json",
        exclude=_LINK_ATTRS | _REGENERATED_ATTRS,
    )
    if name is not None:
        payload["name"] = name
    return _stamp(payload, links)


def copy_set(
    source_data: Mapping[str, Any],
    exercise_type: ExerciseType,
    *,
    links: Mapping[str, str],
) -> Dict[str, Any]:
    """
    Build the payload for a copy of a set.

    Only the metrics allowed for ``exercise_type`` are kept, and only when
    populated on the source:

    | exercise type        | metrics copied                |
    |----------------------|-------------------------------|
    | strength             | reps, weight, restTime        |
    | cardio / time-based  | duration, distance            |
    | bodyweight           | reps, restTime                |
    | custom               | every populated metric        |

    Args:
        source_data: Stored fields of the source set
        exercise_type: Type of the exercise that owns the set
        links: Link fields for the destination, including the new exerciseId

    Returns:
        Document payload ready to be staged
    """
    source = set_for_type(dict(source_data), exercise_type)
    copied = source.model_copy(update={"checked": False, "completed_at": None})
    payload = copied.model_dump(
        by_alias=True,
        mode="json",
        exclude_none=True,
        exclude=_LINK_ATTRS | _REGENERATED_ATTRS,
    )
    return _stamp(payload, links)


def copy_payload(
    kind: EntityKind,
    source_data: Mapping[str, Any],
    *,
    links: Mapping[str, str],
    exercise_type: Optional[ExerciseType] = None,
    name: Optional[str] = None,
) -> Dict[str, Any]:
    """Dispatch to copy_set or copy_structural based on ``kind``."""
    if kind is EntityKind.SET:
        return copy_set(
            source_data,
            exercise_type or ExerciseType.CUSTOM,
            links=links,
        )
    return copy_structural(kind, source_data, links=links, name=name)
