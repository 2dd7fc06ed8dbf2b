"""
Fake Store Implementations for Testing.

This package provides an in-memory fake implementation of the DocumentStore
interface for fast, isolated testing. No Firestore, Supabase or network
required.

Features:
- Implements the same Protocol interface as the real stores
- Supports seeding whole program trees from nested dicts
- Supports reset() for test isolation
- Simulated commit and read failures

Usage:
    from tests.fakes import FakeDocumentStore, seed_tree

    store = FakeDocumentStore()
    seed_tree(store, "user1", "program1", [
        {"id": "w1", "name": "Week 1", "order": 1, "workouts": [...]},
    ])
"""

from tests.fakes.document_store import (
    MAX_OPERATIONS_PER_BATCH,
    FakeDocumentStore,
    FakeStoreError,
    FakeWriteBatch,
    seed_tree,
)

__all__ = [
    "FakeDocumentStore",
    "FakeWriteBatch",
    "FakeStoreError",
    "MAX_OPERATIONS_PER_BATCH",
    "seed_tree",
]
