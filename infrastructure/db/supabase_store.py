"""
Supabase implementation of DocumentStore.

Stores the program tree as rows of a single documents table:

    path             text primary key   -- users/u1/programs/p1/weeks/w1
    collection_path  text not null      -- users/u1/programs/p1/weeks
    doc_id           text not null      -- w1
    data             jsonb not null

Reads go through the PostgREST table API. Write batches are sent to a
stored procedure that applies every operation in one transaction, so a batch
is atomic exactly as a Firestore batch is.

The supabase client is synchronous; calls run in the default executor so the
event loop is never blocked.
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from supabase import Client

from application.ports import Document
from domain import paths
from domain.models import ServerTimestamp

logger = logging.getLogger(__name__)


class DocumentBatchCommitError(Exception):
    """Raised when the batch-commit RPC fails."""

    pass


def _resolve_timestamps(data: Dict[str, Any], now: str) -> Dict[str, Any]:
    return {
        key: now if isinstance(value, ServerTimestamp) else value
        for key, value in data.items()
    }


def _sort_key(field: str) -> Callable[[Document], Any]:
    # Documents missing the field sort last
    def key(document: Document) -> Any:
        value = document.get(field)
        return (value is None, value if value is not None else 0)

    return key


class SupabaseWriteBatch:
    """Collects operations for one call of the batch-commit RPC."""

    def __init__(self, client: Client, commit_rpc: str):
        self._client = client
        self._commit_rpc = commit_rpc
        self._operations: List[Dict[str, Any]] = []

    def set(self, path: str, data: Dict[str, Any]) -> None:
        self._operations.append({"op": "set", "path": path, "data": data})

    def update(self, path: str, data: Dict[str, Any]) -> None:
        self._operations.append({"op": "update", "path": path, "data": data})

    def delete(self, path: str) -> None:
        self._operations.append({"op": "delete", "path": path})

    def __len__(self) -> int:
        return len(self._operations)

    def _payload(self) -> List[Dict[str, Any]]:
        now = datetime.now(timezone.utc).isoformat()
        payload = []
        for operation in self._operations:
            row = {
                "op": operation["op"],
                "path": operation["path"],
                "collection_path": paths.parent_collection(operation["path"]),
                "doc_id": paths.document_id(operation["path"]),
            }
            if "data" in operation:
                row["data"] = _resolve_timestamps(operation["data"], now)
            payload.append(row)
        return payload

    def _commit_sync(self) -> None:
        try:
            self._client.rpc(
                self._commit_rpc,
                {"p_operations": json.dumps(self._payload())},
            ).execute()
        except Exception as e:
            raise DocumentBatchCommitError(f"Atomic batch commit failed: {e}") from e

    async def commit(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._commit_sync)


class SupabaseDocumentStore:
    """
    Supabase implementation of DocumentStore protocol.

    All Supabase query logic for tree documents is encapsulated here.
    The client is injected via constructor for testability.
    """

    def __init__(
        self,
        client: Client,
        table: str = "documents",
        commit_rpc: str = "commit_document_batch",
    ):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            table: Name of the documents table
            commit_rpc: Stored procedure applying a batch atomically
        """
        self._client = client
        self._table = table
        self._commit_rpc = commit_rpc

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(fn, *args))

    @staticmethod
    def _to_document(row: Dict[str, Any]) -> Document:
        return Document(id=row["doc_id"], path=row["path"], data=row.get("data") or {})

    def _get_sync(self, path: str) -> Optional[Document]:
        result = self._client.table(self._table) \
            .select("*") \
            .eq("path", path) \
            .limit(1) \
            .execute()
        if result.data:
            return self._to_document(result.data[0])
        return None

    def _query_sync(self, collection_path: str) -> List[Document]:
        result = self._client.table(self._table) \
            .select("*") \
            .eq("collection_path", collection_path) \
            .execute()
        return [self._to_document(row) for row in result.data or []]

    def _count_sync(self, collection_path: str) -> int:
        result = self._client.table(self._table) \
            .select("path", count="exact") \
            .eq("collection_path", collection_path) \
            .execute()
        return result.count or 0

    async def get(self, path: str) -> Optional[Document]:
        return await self._run(self._get_sync, path)

    async def query(self, collection_path: str, order_by: str) -> List[Document]:
        documents = await self._run(self._query_sync, collection_path)
        # Ordering values live inside the jsonb column, sort here
        return sorted(documents, key=_sort_key(order_by))

    async def count(self, collection_path: str) -> int:
        return await self._run(self._count_sync, collection_path)

    def new_document_id(self, collection_path: str) -> str:
        return uuid.uuid4().hex

    def batch(self) -> SupabaseWriteBatch:
        return SupabaseWriteBatch(self._client, self._commit_rpc)
