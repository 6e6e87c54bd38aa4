"""Shared pytest fixtures for GraphMem Lite tests."""

from __future__ import annotations

import hashlib
import math
from typing import Any

import pytest

from graphmem_lite.config import Config
from graphmem_lite.db.connection import ConnectionManager
from graphmem_lite.db.store_protocol import Point, ScoredPayload
from graphmem_lite.embeddings import entity_text, relation_text
from graphmem_lite.models import Entity, Relation
from graphmem_lite.persistence import GraphPersistence

TEST_DIM = 4
TEST_COLLECTION = "test_graph"


class FakeVectorStore:
    """In-memory VectorStoreBackend with call recording and failure injection.

    Attributes:
        calls: (method, args) tuples in call order
        fail_list_times: Number of upcoming list_collections calls that raise
        fail_on: Method names that always raise
    """

    MUTATING = {"create_collection", "delete_collection", "upsert", "delete_points"}

    def __init__(self):
        self.collections: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.fail_list_times = 0
        self.fail_on: set[str] = set()
        self.closed = False

    @property
    def backend_name(self) -> str:
        return "fake"

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.fail_on:
            raise RuntimeError(f"{method} exploded")

    def mutating_calls(self) -> list[tuple[str, tuple]]:
        return [c for c in self.calls if c[0] in self.MUTATING]

    async def list_collections(self) -> list[str]:
        self._record("list_collections")
        if self.fail_list_times > 0:
            self.fail_list_times -= 1
            raise OSError("connection refused")
        return list(self.collections)

    async def create_collection(self, name: str, dim: int) -> None:
        self._record("create_collection", name, dim)
        self.collections[name] = {"dim": dim, "points": {}}

    async def delete_collection(self, name: str) -> None:
        self._record("delete_collection", name)
        self.collections.pop(name, None)

    async def get_collection_dim(self, name: str) -> int | None:
        self._record("get_collection_dim", name)
        return self.collections[name]["dim"]

    async def upsert(self, name: str, points: list[Point]) -> None:
        self._record("upsert", name, points)
        for point in points:
            self.collections[name]["points"][point.id] = point

    async def search(self, name: str, vector: list[float], limit: int) -> list[ScoredPayload]:
        self._record("search", name, vector, limit)
        hits = [
            ScoredPayload(id=p.id, score=_cosine(vector, p.vector), payload=p.payload)
            for p in self.collections[name]["points"].values()
        ]
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]

    async def delete_points(self, name: str, ids: list[int]) -> None:
        self._record("delete_points", name, ids)
        for point_id in ids:
            self.collections[name]["points"].pop(point_id, None)

    async def close(self) -> None:
        self.closed = True

    def points(self, name: str = TEST_COLLECTION) -> dict[int, Point]:
        return self.collections[name]["points"]


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


def fake_vector(text: str, dim: int = TEST_DIM) -> list[float]:
    """Deterministic pseudo-embedding derived from a SHA-256 of the text."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [(digest[i] + 1) / 256 for i in range(dim)]


class FakeEmbedder:
    """Embedding client stand-in that records every embedded text."""

    def __init__(self, dim: int = TEST_DIM):
        self.dimension = dim
        self.texts: list[str] = []
        self.error: Exception | None = None

    async def embed(self, text: str) -> list[float]:
        self.texts.append(text)
        if self.error is not None:
            raise self.error
        return fake_vector(text, self.dimension)

    async def embed_entity(self, entity: Entity) -> list[float]:
        return await self.embed(entity_text(entity))

    async def embed_relation(self, relation: Relation) -> list[float]:
        return await self.embed(relation_text(relation))


@pytest.fixture
def config() -> Config:
    """Config pointing at a dummy endpoint with a tiny embedding dimension."""
    return Config(
        qdrant_url="http://localhost:6333",
        qdrant_api_key=None,
        collection_name=TEST_COLLECTION,
        openai_api_key="sk-test",
        embedding_model="text-embedding-ada-002",
        embedding_dim=TEST_DIM,
        connect_attempts=3,
        connect_retry_delay=0.0,
        unambiguous_relation_ids=False,
    )


@pytest.fixture
def vector_for():
    """The deterministic vector FakeEmbedder returns for a given text."""
    return fake_vector


@pytest.fixture
def store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def graph(config, store, embedder) -> GraphPersistence:
    """GraphPersistence wired to the in-memory store and fake embedder."""
    connection = ConnectionManager(store, attempts=3, initial_delay=0.0)
    return GraphPersistence(config, store, embedder, connection=connection)


@pytest.fixture
def sample_entity() -> Entity:
    return Entity(
        name="Ada Lovelace",
        entity_type="person",
        observations=["Wrote the first published algorithm", "Worked with Charles Babbage"],
    )


@pytest.fixture
def sample_relation() -> Relation:
    return Relation(from_entity="A", to_entity="B", relation_type="knows")
