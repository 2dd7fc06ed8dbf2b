"""
Store Interfaces (Ports) for the FitTrack cascade API.

This package defines abstract interfaces that decouple the cascade engine
from the document store. Implementations are provided in the
infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import DocumentStore

    class CascadeService:
        def __init__(self, store: DocumentStore):
            self.store = store
"""

from application.ports.document_store import Document, DocumentStore, WriteBatch

__all__ = [
    "Document",
    "DocumentStore",
    "WriteBatch",
]
