"""
Document store port (interface).

This Protocol defines the contract the cascade engine needs from the
hierarchical document store. Infrastructure implementations (Firestore,
Supabase) must satisfy this interface; tests use an in-memory fake.

Paths are slash-separated strings (see domain.paths). Payload values may
contain domain.models.SERVER_TIMESTAMP, which implementations replace with
their own write time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class Document:
    """A stored document and its location."""

    id: str
    path: str
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class WriteBatch(Protocol):
    """
    A set of mutations committed as one atomic transaction.

    Stores cap the number of operations per batch (500 for Firestore);
    callers are responsible for staying under the cap.
    """

    def set(self, path: str, data: Dict[str, Any]) -> None:
        """Stage a full overwrite (or create) of the document at ``path``."""
        ...

    def update(self, path: str, data: Dict[str, Any]) -> None:
        """Stage a merge of ``data`` into the existing document at ``path``."""
        ...

    def delete(self, path: str) -> None:
        """Stage deletion of the document at ``path``."""
        ...

    def __len__(self) -> int:
        """Number of staged operations."""
        ...

    async def commit(self) -> None:
        """
        Apply every staged operation atomically.

        Raises:
            Exception: Any store error; nothing in the batch is applied
        """
        ...


class DocumentStore(Protocol):
    """
    Repository interface for the hierarchical document store.

    Reads are awaited one at a time by the engine; only batch commits may
    overlap.
    """

    async def get(self, path: str) -> Optional[Document]:
        """
        Get a single document.

        Args:
            path: Document path

        Returns:
            Document if found, None otherwise
        """
        ...

    async def query(self, collection_path: str, order_by: str) -> List[Document]:
        """
        Get every document in a collection.

        Args:
            collection_path: Collection path
            order_by: Field to sort ascending by

        Returns:
            Documents in ascending ``order_by`` order
        """
        ...

    async def count(self, collection_path: str) -> int:
        """
        Count documents in a collection server-side, without transferring them.

        Args:
            collection_path: Collection path

        Returns:
            Number of documents
        """
        ...

    def new_document_id(self, collection_path: str) -> str:
        """
        Allocate an id for a document that has not been written yet.

        Args:
            collection_path: Collection the document will be created in

        Returns:
            Fresh document id
        """
        ...

    def batch(self) -> WriteBatch:
        """Open a new, empty write batch."""
        ...
