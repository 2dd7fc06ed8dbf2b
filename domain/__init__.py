"""
Domain layer for the FitTrack cascade API.

This package contains pure domain models and functions that are independent
of infrastructure concerns (document store, API, external services).
"""

from domain.models import (
    CascadeCounts,
    EntityKind,
    ExerciseType,
    MappingNode,
)
from domain.naming import disambiguate

__all__ = [
    "CascadeCounts",
    "EntityKind",
    "ExerciseType",
    "MappingNode",
    "disambiguate",
]
