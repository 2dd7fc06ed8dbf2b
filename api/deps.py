"""
FastAPI Dependency Providers for the FitTrack cascade API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fakes.

Architecture:
- Settings, store clients and the scope lock registry are cached per-process
  (lru_cache)
- Use cases are created per-request around the shared store
- The caller's user id is forwarded by the upstream auth gateway

Usage in routers:
    from api.deps import get_current_user, get_duplicate_use_case

    @router.post("/programs/{program_id}/weeks/{week_id}/duplicate")
    async def duplicate_week(
        program_id: str,
        week_id: str,
        user_id: str = Depends(get_current_user),
        use_case: DuplicateSubtreeUseCase = Depends(get_duplicate_use_case),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_document_store] = lambda: FakeDocumentStore()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException
from google.cloud import firestore
from supabase import Client, create_client

from application.locks import ScopeLockRegistry
from application.ports import DocumentStore
from application.use_cases import (
    CascadeCountUseCase,
    CascadeDeleteUseCase,
    DuplicateSubtreeUseCase,
    ReorderSiblingsUseCase,
)
from backend.settings import Settings, get_settings as _get_settings
from infrastructure import FirestoreDocumentStore, SupabaseDocumentStore


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Store Client Providers
# =============================================================================


@lru_cache
def get_firestore_client() -> firestore.AsyncClient:
    """
    Get Firestore async client instance (cached).

    Uses ambient Google credentials; project and database fall back to the
    credentials' defaults when not configured.

    Returns:
        AsyncClient: Firestore client instance
    """
    settings = _get_settings()
    kwargs = {}
    if settings.firestore_project_id:
        kwargs["project"] = settings.firestore_project_id
    if settings.firestore_database:
        kwargs["database"] = settings.firestore_database
    return firestore.AsyncClient(**kwargs)


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_service_role_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_service_role_key)


def get_document_store(
    settings: Settings = Depends(get_settings),
) -> DocumentStore:
    """
    Get DocumentStore implementation for the configured backend.

    Returns:
        DocumentStore: Store holding the program tree

    Raises:
        HTTPException: 503 if the Supabase backend is selected but not configured
    """
    if settings.document_store_backend == "supabase":
        client = get_supabase_client()
        if client is None:
            raise HTTPException(
                status_code=503,
                detail="Database not available. Supabase credentials not configured.",
            )
        return SupabaseDocumentStore(
            client,
            table=settings.supabase_documents_table,
            commit_rpc=settings.supabase_commit_rpc,
        )
    return FirestoreDocumentStore(get_firestore_client())


@lru_cache
def get_lock_registry() -> ScopeLockRegistry:
    """
    Get the process-wide scope lock registry.

    Shared by every request so overlapping duplicate/delete/reorder calls in
    this process run one after another.
    """
    return ScopeLockRegistry()


# =============================================================================
# Use Case Providers
# =============================================================================


def get_duplicate_use_case(
    store: DocumentStore = Depends(get_document_store),
    locks: ScopeLockRegistry = Depends(get_lock_registry),
    settings: Settings = Depends(get_settings),
) -> DuplicateSubtreeUseCase:
    return DuplicateSubtreeUseCase(
        store,
        batch_limit=settings.write_batch_limit,
        lock_registry=locks,
        audit_log_enabled=settings.duplication_audit_log_enabled,
        require_owner_field=settings.require_owner_field,
    )


def get_delete_use_case(
    store: DocumentStore = Depends(get_document_store),
    locks: ScopeLockRegistry = Depends(get_lock_registry),
    settings: Settings = Depends(get_settings),
) -> CascadeDeleteUseCase:
    return CascadeDeleteUseCase(
        store,
        batch_limit=settings.write_batch_limit,
        lock_registry=locks,
        verify_owner=settings.verify_owner_on_delete,
    )


def get_count_use_case(
    store: DocumentStore = Depends(get_document_store),
) -> CascadeCountUseCase:
    return CascadeCountUseCase(store)


def get_reorder_use_case(
    store: DocumentStore = Depends(get_document_store),
    locks: ScopeLockRegistry = Depends(get_lock_registry),
    settings: Settings = Depends(get_settings),
) -> ReorderSiblingsUseCase:
    return ReorderSiblingsUseCase(
        store,
        batch_limit=settings.write_batch_limit,
        lock_registry=locks,
    )


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """
    Get the current authenticated user ID.

    The upstream auth gateway validates the caller's token and forwards the
    principal id in the X-User-Id header.

    Args:
        x_user_id: Principal id forwarded by the gateway

    Returns:
        str: User ID from authentication

    Raises:
        HTTPException: 401 if the header is missing
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=401,
            detail="Missing authentication",
        )
    return x_user_id.strip()
