"""
Firestore implementation of DocumentStore.

The program tree lives natively in Cloud Firestore as nested subcollections,
so paths map one-to-one onto document and collection references.
"""

import logging
from typing import Any, Dict, List, Optional

from google.cloud import firestore

from application.ports import Document
from domain.models import ServerTimestamp

logger = logging.getLogger(__name__)


def _to_firestore(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace the domain timestamp sentinel with Firestore's."""
    return {
        key: firestore.SERVER_TIMESTAMP if isinstance(value, ServerTimestamp) else value
        for key, value in data.items()
    }


def _to_document(snapshot: Any) -> Document:
    return Document(
        id=snapshot.id,
        path=snapshot.reference.path,
        data=snapshot.to_dict() or {},
    )


class FirestoreWriteBatch:
    """Wraps a Firestore AsyncWriteBatch, addressed by path."""

    def __init__(self, client: firestore.AsyncClient):
        self._client = client
        self._batch = client.batch()
        self._size = 0

    def set(self, path: str, data: Dict[str, Any]) -> None:
        self._batch.set(self._client.document(path), _to_firestore(data))
        self._size += 1

    def update(self, path: str, data: Dict[str, Any]) -> None:
        self._batch.update(self._client.document(path), _to_firestore(data))
        self._size += 1

    def delete(self, path: str) -> None:
        self._batch.delete(self._client.document(path))
        self._size += 1

    def __len__(self) -> int:
        return self._size

    async def commit(self) -> None:
        await self._batch.commit()


class FirestoreDocumentStore:
    """
    Firestore implementation of DocumentStore protocol.

    The client is injected via constructor for testability.
    """

    def __init__(self, client: firestore.AsyncClient):
        """
        Initialize with Firestore client.

        Args:
            client: Firestore AsyncClient instance (injected, not global)
        """
        self._client = client

    async def get(self, path: str) -> Optional[Document]:
        snapshot = await self._client.document(path).get()
        if not snapshot.exists:
            return None
        return _to_document(snapshot)

    async def query(self, collection_path: str, order_by: str) -> List[Document]:
        query = self._client.collection(collection_path).order_by(order_by)
        return [_to_document(snapshot) async for snapshot in query.stream()]

    async def count(self, collection_path: str) -> int:
        aggregation = self._client.collection(collection_path).count(alias="total")
        results = await aggregation.get()
        for result in results:
            for aggregate in result:
                if aggregate.alias == "total":
                    return int(aggregate.value)
        return 0

    def new_document_id(self, collection_path: str) -> str:
        # Ids are generated client-side; nothing is written
        return self._client.collection(collection_path).document().id

    def batch(self) -> FirestoreWriteBatch:
        return FirestoreWriteBatch(self._client)
