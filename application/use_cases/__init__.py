"""
Application Use Cases for the FitTrack cascade API.

This package contains application-level use cases that orchestrate domain logic
and coordinate between ports/adapters. Use cases are the entry points for
business operations and contain the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and the DocumentStore port
- Dependencies are injected via constructors for testability
- Use cases return result dataclasses, not API responses

Usage:
    from application.scope import ScopeRef
    from application.use_cases import (
        CascadeCountUseCase,
        CascadeDeleteUseCase,
        DuplicateSubtreeUseCase,
        ReorderSiblingsUseCase,
    )

    scope = ScopeRef.week("user-123", "program-1", "week-1")

    # Preview, then delete
    counts = await CascadeCountUseCase(store).execute(scope)
    result = await CascadeDeleteUseCase(store).execute(scope)

    # Duplicate a week beside the original
    result = await DuplicateSubtreeUseCase(store).execute(scope)

    # Close the gap the delete left
    await ReorderSiblingsUseCase(store).execute(
        "user-123", "program-1", EntityKind.WEEK
    )
"""

from application.use_cases.count_subtree import CascadeCountUseCase
from application.use_cases.delete_subtree import CascadeDeleteUseCase, DeletionResult
from application.use_cases.duplicate_subtree import (
    DuplicateSubtreeUseCase,
    DuplicationResult,
)
from application.use_cases.reorder_siblings import ReorderResult, ReorderSiblingsUseCase

__all__ = [
    # Duplicate
    "DuplicateSubtreeUseCase",
    "DuplicationResult",
    # Delete
    "CascadeDeleteUseCase",
    "DeletionResult",
    # Count
    "CascadeCountUseCase",
    # Reorder
    "ReorderSiblingsUseCase",
    "ReorderResult",
]
