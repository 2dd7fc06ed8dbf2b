"""
Unit tests for infrastructure/db/firestore_store.py

The Firestore client is mocked; these tests check how paths and payloads are
handed to it.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.cloud import firestore

from application.batching import BatchChunker
from domain.models import SERVER_TIMESTAMP
from infrastructure.db.firestore_store import FirestoreDocumentStore

WEEKS = "users/u1/programs/p1/weeks"


def _snapshot(doc_id, data, exists=True):
    snapshot = MagicMock()
    snapshot.exists = exists
    snapshot.id = doc_id
    snapshot.reference.path = f"{WEEKS}/{doc_id}"
    snapshot.to_dict.return_value = data
    return snapshot


async def _stream(*snapshots):
    for snapshot in snapshots:
        yield snapshot


@pytest.fixture
def client():
    return MagicMock()


@pytest.mark.unit
class TestFirestoreReads:
    @pytest.mark.asyncio
    async def test_get(self, client):
        client.document.return_value.get = AsyncMock(
            return_value=_snapshot("w1", {"name": "Week 1"})
        )

        document = await FirestoreDocumentStore(client).get(f"{WEEKS}/w1")

        client.document.assert_called_once_with(f"{WEEKS}/w1")
        assert document.id == "w1"
        assert document.path == f"{WEEKS}/w1"
        assert document.get("name") == "Week 1"

    @pytest.mark.asyncio
    async def test_get_missing(self, client):
        client.document.return_value.get = AsyncMock(
            return_value=_snapshot("w1", None, exists=False)
        )
        assert await FirestoreDocumentStore(client).get(f"{WEEKS}/w1") is None

    @pytest.mark.asyncio
    async def test_query_orders_server_side(self, client):
        ordered = client.collection.return_value.order_by.return_value
        ordered.stream.return_value = _stream(
            _snapshot("w1", {"order": 1}), _snapshot("w2", {"order": 2})
        )

        documents = await FirestoreDocumentStore(client).query(WEEKS, order_by="order")

        client.collection.assert_called_once_with(WEEKS)
        client.collection.return_value.order_by.assert_called_once_with("order")
        assert [d.id for d in documents] == ["w1", "w2"]

    @pytest.mark.asyncio
    async def test_count_uses_aggregation(self, client):
        aggregate = MagicMock(alias="total", value=7)
        client.collection.return_value.count.return_value.get = AsyncMock(
            return_value=[[aggregate]]
        )

        total = await FirestoreDocumentStore(client).count(f"{WEEKS}/w1/workouts")

        client.collection.return_value.count.assert_called_once_with(alias="total")
        assert total == 7

    @pytest.mark.asyncio
    async def test_count_empty_result(self, client):
        client.collection.return_value.count.return_value.get = AsyncMock(return_value=[])
        assert await FirestoreDocumentStore(client).count(WEEKS) == 0

    def test_new_document_id_writes_nothing(self, client):
        client.collection.return_value.document.return_value.id = "auto-id"

        assert FirestoreDocumentStore(client).new_document_id(WEEKS) == "auto-id"
        client.batch.assert_not_called()


@pytest.mark.unit
class TestFirestoreWriteBatch:
    def test_server_timestamp_replaced(self, client):
        batch = FirestoreDocumentStore(client).batch()

        batch.set(f"{WEEKS}/w1", {"name": "Week 1", "createdAt": SERVER_TIMESTAMP})

        _, data = client.batch.return_value.set.call_args.args
        assert data["createdAt"] is firestore.SERVER_TIMESTAMP
        assert data["name"] == "Week 1"

    def test_operations_addressed_by_path(self, client):
        batch = FirestoreDocumentStore(client).batch()

        batch.update(f"{WEEKS}/w1", {"order": 2})
        batch.delete(f"{WEEKS}/w2")

        assert [c.args[0] for c in client.document.call_args_list] == [
            f"{WEEKS}/w1",
            f"{WEEKS}/w2",
        ]
        assert len(batch) == 2

    @pytest.mark.asyncio
    async def test_chunked_commits(self, client):
        batches = []

        def new_batch():
            batch = MagicMock(commit=AsyncMock())
            batches.append(batch)
            return batch

        client.batch.side_effect = new_batch
        chunker = BatchChunker(FirestoreDocumentStore(client), limit=450)
        for n in range(1000):
            chunker.stage_set(f"{WEEKS}/w{n}", {"order": n})

        outcome = await chunker.finish()

        assert outcome.total_batches == 3
        committed = [b for b in batches if b.commit.await_count]
        assert [b.set.call_count for b in committed] == [450, 450, 100]
