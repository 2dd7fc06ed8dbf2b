"""
API package for the FitTrack cascade API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
- schemas/: request and response models
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_document_store,
    get_lock_registry,
    get_duplicate_use_case,
    get_delete_use_case,
    get_count_use_case,
    get_reorder_use_case,
    get_current_user,
)

__all__ = [
    # Settings
    "get_settings",
    # Storage
    "get_document_store",
    "get_lock_registry",
    # Use cases
    "get_duplicate_use_case",
    "get_delete_use_case",
    "get_count_use_case",
    "get_reorder_use_case",
    # Authentication
    "get_current_user",
]
