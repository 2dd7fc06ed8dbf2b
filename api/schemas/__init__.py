"""
Pydantic schemas for API requests and responses.

Organized by feature/domain:
- subtrees: Duplicate, delete, count and reorder models
"""

from api.schemas.subtrees import (
    BatchesBody,
    CountsBody,
    DeleteResponse,
    DuplicateResponse,
    ReorderRequest,
    ReorderResponse,
)

__all__ = [
    "BatchesBody",
    "CountsBody",
    "DeleteResponse",
    "DuplicateResponse",
    "ReorderRequest",
    "ReorderResponse",
]
