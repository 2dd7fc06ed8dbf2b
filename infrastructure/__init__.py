"""
Infrastructure Layer for the FitTrack cascade API.

This package contains concrete implementations of the store interface:
- db/: Firestore and Supabase DocumentStore implementations
"""

# Re-export document stores for convenient access
from infrastructure.db import (
    FirestoreDocumentStore,
    SupabaseDocumentStore,
)

__all__ = [
    "FirestoreDocumentStore",
    "SupabaseDocumentStore",
]
