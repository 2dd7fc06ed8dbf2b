"""
Document path helpers for the program tree.

Every document lives under its owner and its ancestors:

    users/{userId}/programs/{programId}
        /weeks/{weekId}
            /workouts/{workoutId}
                /exercises/{exerciseId}
                    /sets/{setId}

Paths are plain slash-separated strings so that they can be handed to any
DocumentStore implementation unchanged.
"""

from typing import Optional

from domain.models.entities import EntityKind

USERS_COLLECTION = "users"
DUPLICATION_LOGS_COLLECTION = "duplicationLogs"


def _check_id(segment: str) -> str:
    if not segment or "/" in segment:
        raise ValueError(f"Invalid path segment: {segment!r}")
    return segment


def join(parent: str, *segments: str) -> str:
    """Append id segments to a path, rejecting empty or slash-containing ids.

    ``parent`` may itself be a multi-segment path and is not re-checked.
    """
    if not parent:
        raise ValueError("Empty parent path")
    return "/".join([parent] + [_check_id(segment) for segment in segments])


def user_path(user_id: str) -> str:
    return join(USERS_COLLECTION, user_id)


def program_path(user_id: str, program_id: str) -> str:
    return join(USERS_COLLECTION, user_id, EntityKind.PROGRAM.collection, program_id)


def week_path(user_id: str, program_id: str, week_id: str) -> str:
    return join(program_path(user_id, program_id), EntityKind.WEEK.collection, week_id)


def workout_path(user_id: str, program_id: str, week_id: str, workout_id: str) -> str:
    return join(
        week_path(user_id, program_id, week_id),
        EntityKind.WORKOUT.collection,
        workout_id,
    )


def exercise_path(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
) -> str:
    return join(
        workout_path(user_id, program_id, week_id, workout_id),
        EntityKind.EXERCISE.collection,
        exercise_id,
    )


def child_collection(document_path: str, kind: EntityKind) -> str:
    """Collection path holding children of ``kind`` under a document."""
    return join(document_path, kind.collection)


def document_in(collection_path: str, document_id: str) -> str:
    return join(collection_path, document_id)


def parent_collection(document_path: str) -> str:
    """Collection that contains ``document_path``."""
    collection, _, _ = document_path.rpartition("/")
    if not collection:
        raise ValueError(f"Not a document path: {document_path!r}")
    return collection


def parent_document(document_path: str) -> Optional[str]:
    """Document that owns the collection containing ``document_path``.

    Returns None for top-level documents (``users/{id}``).
    """
    owner, _, _ = parent_collection(document_path).rpartition("/")
    return owner or None


def document_id(document_path: str) -> str:
    return document_path.rpartition("/")[2]


def duplication_logs_collection(user_id: str) -> str:
    return join(user_path(user_id), DUPLICATION_LOGS_COLLECTION)


def is_same_or_nested(path: str, other: str) -> bool:
    """True when one path equals the other or lies inside its subtree."""
    return path == other or path.startswith(other + "/") or other.startswith(path + "/")
