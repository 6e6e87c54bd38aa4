"""Qdrant backend implementation for GraphMem Lite.

Wraps qdrant-client's AsyncQdrantClient to implement the VectorStoreBackend
protocol. Collections hold a single unnamed cosine vector per point.
"""

from typing import Any

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointIdsList, PointStruct, VectorParams

from graphmem_lite.db.store_protocol import Point, ScoredPayload
from graphmem_lite.log_config import get_logger

log = get_logger("db.qdrant")


class QdrantBackend:
    """Qdrant-based vector store backend."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: int = 60,
        client: AsyncQdrantClient | None = None,
    ):
        """Initialize the Qdrant client.

        No request is made here; connectivity is verified by the
        ConnectionManager's liveness check.

        Args:
            url: Qdrant endpoint (http:// or https://)
            api_key: Optional API key
            timeout: Request timeout in seconds
            client: Pre-built client (e.g., ``AsyncQdrantClient(location=":memory:")``)
        """
        if client is None:
            client = AsyncQdrantClient(
                url=url,
                api_key=api_key,
                timeout=timeout,
                check_compatibility=False,
            )
            log.info(f"QdrantClient configured with URL: {url}")
        self._client = client

    @property
    def backend_name(self) -> str:
        return "qdrant"

    @property
    def client(self) -> AsyncQdrantClient:
        """Underlying AsyncQdrantClient."""
        return self._client

    async def list_collections(self) -> list[str]:
        response = await self._client.get_collections()
        return [c.name for c in response.collections]

    async def create_collection(self, name: str, dim: int) -> None:
        await self._client.create_collection(
            collection_name=name,
            vectors_config=VectorParams(size=dim, distance=Distance.COSINE),
        )

    async def delete_collection(self, name: str) -> None:
        await self._client.delete_collection(collection_name=name)

    async def get_collection_dim(self, name: str) -> int | None:
        """Read the vector size from the collection config.

        Returns None when the config has no single unnamed vector
        (missing params, named vectors, or a non-positive size).
        """
        info = await self._client.get_collection(collection_name=name)
        vectors = _dig(info, "config", "params", "vectors")
        size = getattr(vectors, "size", None)
        if size is None and isinstance(vectors, dict):
            size = vectors.get("size")
        if isinstance(size, int) and not isinstance(size, bool) and size > 0:
            return size
        return None

    async def upsert(self, name: str, points: list[Point]) -> None:
        await self._client.upsert(
            collection_name=name,
            points=[PointStruct(id=p.id, vector=p.vector, payload=p.payload) for p in points],
        )

    async def search(self, name: str, vector: list[float], limit: int) -> list[ScoredPayload]:
        response = await self._client.query_points(
            collection_name=name,
            query=vector,
            limit=limit,
            with_payload=True,
        )
        return [
            ScoredPayload(id=hit.id, score=hit.score, payload=hit.payload)
            for hit in response.points
        ]

    async def delete_points(self, name: str, ids: list[int]) -> None:
        await self._client.delete(
            collection_name=name,
            points_selector=PointIdsList(points=ids),
        )

    async def close(self) -> None:
        await self._client.close()


def _dig(obj: Any, *attrs: str) -> Any:
    """Follow attributes (or dict keys) until one is missing."""
    for attr in attrs:
        if obj is None:
            return None
        if isinstance(obj, dict):
            obj = obj.get(attr)
        else:
            obj = getattr(obj, attr, None)
    return obj
