"""Qdrant backend tests for GraphMem Lite.

Two layers:
- Call mapping onto a mocked AsyncQdrantClient
- Behavior against qdrant-client's in-process local mode (":memory:")
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointIdsList

from graphmem_lite.codec import encode_entity, encode_relation
from graphmem_lite.db.collection import CollectionManager, EnsureResult
from graphmem_lite.db.qdrant_backend import QdrantBackend
from graphmem_lite.db.store_protocol import Point, VectorStoreBackend
from graphmem_lite.identity import entity_id, relation_id


@pytest.fixture
def mock_client():
    """AsyncQdrantClient stand-in with every method awaitable."""
    return MagicMock(
        get_collections=AsyncMock(),
        create_collection=AsyncMock(),
        delete_collection=AsyncMock(),
        get_collection=AsyncMock(),
        upsert=AsyncMock(),
        query_points=AsyncMock(),
        delete=AsyncMock(),
        close=AsyncMock(),
    )


class TestQdrantCallMapping:
    """Test protocol methods map onto qdrant-client calls."""

    def test_implements_protocol(self, mock_client):
        backend = QdrantBackend(client=mock_client)
        assert isinstance(backend, VectorStoreBackend)
        assert backend.backend_name == "qdrant"

    @pytest.mark.asyncio
    async def test_list_collections(self, mock_client):
        mock_client.get_collections.return_value = SimpleNamespace(
            collections=[SimpleNamespace(name="a"), SimpleNamespace(name="b")]
        )
        assert await QdrantBackend(client=mock_client).list_collections() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_create_collection_uses_cosine(self, mock_client):
        await QdrantBackend(client=mock_client).create_collection("graph", 1536)

        kwargs = mock_client.create_collection.await_args.kwargs
        assert kwargs["collection_name"] == "graph"
        assert kwargs["vectors_config"].size == 1536
        assert kwargs["vectors_config"].distance == Distance.COSINE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "info, expected",
        [
            (SimpleNamespace(config=SimpleNamespace(params=SimpleNamespace(vectors=SimpleNamespace(size=1536)))), 1536),
            ({"config": {"params": {"vectors": {"size": 768}}}}, 768),
            (SimpleNamespace(config=None), None),
            (SimpleNamespace(config=SimpleNamespace(params=SimpleNamespace(vectors=None))), None),
            # Named vectors: no single size to compare against
            (SimpleNamespace(config=SimpleNamespace(params=SimpleNamespace(vectors={"dense": SimpleNamespace(size=4)}))), None),
            (SimpleNamespace(config=SimpleNamespace(params=SimpleNamespace(vectors=SimpleNamespace(size=0)))), None),
        ],
    )
    async def test_get_collection_dim(self, mock_client, info, expected):
        mock_client.get_collection.return_value = info
        assert await QdrantBackend(client=mock_client).get_collection_dim("graph") == expected

    @pytest.mark.asyncio
    async def test_upsert_builds_point_structs(self, mock_client):
        point = Point(id=42, vector=[0.1, 0.2], payload={"type": "entity"})

        await QdrantBackend(client=mock_client).upsert("graph", [point])

        kwargs = mock_client.upsert.await_args.kwargs
        assert kwargs["collection_name"] == "graph"
        [struct] = kwargs["points"]
        assert struct.id == 42
        assert struct.vector == [0.1, 0.2]
        assert struct.payload == {"type": "entity"}

    @pytest.mark.asyncio
    async def test_search_requests_payload(self, mock_client):
        mock_client.query_points.return_value = SimpleNamespace(points=[
            SimpleNamespace(id=1, score=0.9, payload={"type": "entity"}),
            SimpleNamespace(id=2, score=0.5, payload=None),
        ])

        hits = await QdrantBackend(client=mock_client).search("graph", [0.1, 0.2], 5)

        mock_client.query_points.assert_awaited_once_with(
            collection_name="graph", query=[0.1, 0.2], limit=5, with_payload=True,
        )
        assert [(h.id, h.score, h.payload) for h in hits] == [(1, 0.9, {"type": "entity"}), (2, 0.5, None)]

    @pytest.mark.asyncio
    async def test_delete_points_by_id(self, mock_client):
        await QdrantBackend(client=mock_client).delete_points("graph", [7])

        kwargs = mock_client.delete.await_args.kwargs
        assert kwargs["collection_name"] == "graph"
        assert kwargs["points_selector"] == PointIdsList(points=[7])

    @pytest.mark.asyncio
    async def test_close(self, mock_client):
        await QdrantBackend(client=mock_client).close()
        mock_client.close.assert_awaited_once()


class TestQdrantLocalMode:
    """Test against qdrant-client's in-memory local mode."""

    @pytest.mark.asyncio
    async def test_collection_lifecycle(self):
        backend = QdrantBackend(client=AsyncQdrantClient(location=":memory:"))
        manager = CollectionManager(backend, "graph")
        try:
            assert await manager.ensure_collection(4) is EnsureResult.CREATED
            assert await backend.get_collection_dim("graph") == 4
            assert await manager.ensure_collection(4) is EnsureResult.UNCHANGED
            assert await manager.ensure_collection(8) is EnsureResult.RECREATED
            assert await backend.get_collection_dim("graph") == 8
        finally:
            await backend.close()

    @pytest.mark.asyncio
    async def test_upsert_search_delete(self, sample_entity, sample_relation):
        backend = QdrantBackend(client=AsyncQdrantClient(location=":memory:"))
        try:
            await backend.create_collection("graph", 4)
            await backend.upsert("graph", [
                Point(id=entity_id(sample_entity), vector=[1.0, 0.0, 0.0, 0.0], payload=encode_entity(sample_entity)),
                Point(id=relation_id(sample_relation), vector=[0.0, 1.0, 0.0, 0.0], payload=encode_relation(sample_relation)),
            ])

            hits = await backend.search("graph", [0.9, 0.1, 0.0, 0.0], 10)
            assert [h.id for h in hits] == [entity_id(sample_entity), relation_id(sample_relation)]
            assert hits[0].payload == encode_entity(sample_entity)

            await backend.delete_points("graph", [entity_id(sample_entity)])
            # Deleting an absent ID is a no-op
            await backend.delete_points("graph", [entity_id("nobody")])

            hits = await backend.search("graph", [0.9, 0.1, 0.0, 0.0], 10)
            assert [h.id for h in hits] == [relation_id(sample_relation)]
        finally:
            await backend.close()
