"""
Domain converters for duplicating documents of the program tree.

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import copy_set
    >>> from domain.models import ExerciseType

    >>> payload = copy_set(
    ...     {"setNumber": 1, "reps": 8, "weight": 80, "checked": True},
    ...     ExerciseType.STRENGTH,
    ...     links={"userId": "u1", "exerciseId": "e2"},
    ... )
    >>> payload["checked"], payload["reps"], payload["weight"]
    (False, 8, 80.0)
"""

from domain.converters.copy_converters import copy_payload, copy_set, copy_structural

__all__ = [
    "copy_payload",
    "copy_set",
    "copy_structural",
]
