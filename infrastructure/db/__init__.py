"""
Infrastructure Database Layer.

This package provides DocumentStore implementations for the interface
defined in application.ports. Either can be injected into the use cases and
routers; backend.settings.document_store_backend picks one at runtime.

Usage:
    from google.cloud import firestore
    from supabase import create_client
    from infrastructure.db import FirestoreDocumentStore, SupabaseDocumentStore

    # Firestore (native home of the program tree)
    store = FirestoreDocumentStore(firestore.AsyncClient(project=PROJECT_ID))

    # Supabase (documents table + atomic batch-commit RPC)
    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    store = SupabaseDocumentStore(client, table="documents")
"""

from infrastructure.db.firestore_store import FirestoreDocumentStore, FirestoreWriteBatch
from infrastructure.db.supabase_store import (
    DocumentBatchCommitError,
    SupabaseDocumentStore,
    SupabaseWriteBatch,
)

__all__ = [
    # Firestore
    "FirestoreDocumentStore",
    "FirestoreWriteBatch",

    # Supabase
    "SupabaseDocumentStore",
    "SupabaseWriteBatch",
    "DocumentBatchCommitError",
]
