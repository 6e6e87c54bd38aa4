"""Vector store protocol for GraphMem Lite.

Defines the narrow interface the persistence layer needs from a vector
store. QdrantBackend implements it; tests use an in-memory fake.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class Point:
    """One stored record: numeric ID, vector and payload."""
    id: int
    vector: list[float]
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScoredPayload:
    """A search hit.

    Attributes:
        id: Point ID
        score: Similarity score reported by the store (higher = closer)
        payload: Stored payload, None if the point has none
    """
    id: int | str
    score: float
    payload: dict[str, Any] | None = None


@runtime_checkable
class VectorStoreBackend(Protocol):
    """Protocol for vector store backends.

    All methods are coroutines. Implementations raise their native errors;
    wrapping into GraphMemError types happens in the callers.
    """

    @property
    def backend_name(self) -> str:
        """Return the backend name (e.g., 'qdrant')."""
        ...

    async def list_collections(self) -> list[str]:
        """Return the names of all collections. Used as the liveness check."""
        ...

    async def create_collection(self, name: str, dim: int) -> None:
        """Create a collection of cosine-distance vectors of size dim."""
        ...

    async def delete_collection(self, name: str) -> None:
        """Delete a collection and every point in it."""
        ...

    async def get_collection_dim(self, name: str) -> int | None:
        """Return the configured vector size, or None if unreadable."""
        ...

    async def upsert(self, name: str, points: list[Point]) -> None:
        """Insert or fully replace points by ID."""
        ...

    async def search(self, name: str, vector: list[float], limit: int) -> list[ScoredPayload]:
        """Return up to limit nearest points with payloads, best first."""
        ...

    async def delete_points(self, name: str, ids: list[int]) -> None:
        """Delete points by ID. Missing IDs are ignored."""
        ...

    async def close(self) -> None:
        """Release the underlying client."""
        ...
