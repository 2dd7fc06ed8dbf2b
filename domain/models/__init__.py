"""
Domain models for the program tree.

This package contains pure domain models that are independent of
infrastructure concerns (document store, API, external services).

These models represent the core business concepts:
- Program, Week, Workout, Exercise: structural entities of the tree
- ExerciseSet: tagged union of set variants keyed by exercise type
- MappingNode: old-id -> new-id tree returned after a duplication
- CascadeCounts: descendant counts previewed before a cascade delete

Usage:
    >>> from domain.models import ExerciseType, set_for_type

    >>> stored = {"setNumber": 1, "reps": 10, "weight": 60, "duration": 30}
    >>> strength = set_for_type(stored, ExerciseType.STRENGTH)
    >>> strength.metrics()
    {'reps': 10, 'weight': 60.0}
"""

from domain.models.entities import (
    SERVER_TIMESTAMP,
    STRUCTURAL_MODELS,
    EntityKind,
    Exercise,
    ExerciseType,
    Program,
    ServerTimestamp,
    TreeDocument,
    Week,
    Workout,
)
from domain.models.exercise_set import (
    SET_VARIANTS,
    BodyweightSet,
    CardioSet,
    CustomSet,
    ExerciseSet,
    SetBase,
    StrengthSet,
    TimeBasedSet,
    parse_set,
    set_for_type,
)
from domain.models.results import CascadeCounts, MappingNode

__all__ = [
    # Entities
    "EntityKind",
    "ExerciseType",
    "TreeDocument",
    "Program",
    "Week",
    "Workout",
    "Exercise",
    "STRUCTURAL_MODELS",
    # Timestamps
    "SERVER_TIMESTAMP",
    "ServerTimestamp",
    # Sets
    "ExerciseSet",
    "SetBase",
    "StrengthSet",
    "CardioSet",
    "TimeBasedSet",
    "BodyweightSet",
    "CustomSet",
    "SET_VARIANTS",
    "parse_set",
    "set_for_type",
    # Results
    "CascadeCounts",
    "MappingNode",
]
