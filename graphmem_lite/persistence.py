"""Knowledge graph persistence on top of a vector store.

GraphPersistence is the public entry point: it stores entities and
relations as embedded points, finds them again by semantic similarity and
deletes them by identity.

Every operation follows the same lifecycle:
1. ensure_connected() (the only recovery path after a dropped connection)
2. validate that a collection name is configured
3. derive the point ID and/or embed the text
4. issue exactly one request to the vector store

initialize() must be called once before use; per-request operations never
check whether the collection exists.
"""

from typing import Any, Awaitable, TypeVar

from graphmem_lite.codec import decode_payload, encode_entity, encode_relation
from graphmem_lite.config import Config
from graphmem_lite.db.collection import CollectionManager, EnsureResult
from graphmem_lite.db.connection import ConnectionManager
from graphmem_lite.db.qdrant_backend import QdrantBackend
from graphmem_lite.db.store_protocol import Point, VectorStoreBackend
from graphmem_lite.embeddings import EmbeddingClient
from graphmem_lite.errors import ConfigError, StoreOperationError
from graphmem_lite.identity import entity_id, relation_id
from graphmem_lite.log_config import get_logger, log_timing
from graphmem_lite.models import Entity, Relation

log = get_logger("persistence")

T = TypeVar("T")

DEFAULT_SEARCH_LIMIT = 10


class GraphPersistence:
    """Persist and search a knowledge graph in a vector store.

    Example:
        >>> config = Config()
        >>> async with GraphPersistence.from_config(config) as graph:
        ...     await graph.initialize()
        ...     await graph.persist_entity(Entity("Ada", "person", ["wrote the first program"]))
        ...     results = await graph.search_similar("early programmers")
    """

    def __init__(
        self,
        config: Config,
        backend: VectorStoreBackend,
        embedder: EmbeddingClient,
        connection: ConnectionManager | None = None,
    ):
        """Initialize with explicit collaborators.

        Args:
            config: Configuration (collection name, dimension, relation ID mode)
            backend: Vector store backend shared by all operations
            embedder: Embedding client shared by all operations
            connection: Shared connection manager (created from config if omitted)
        """
        self.config = config
        self.backend = backend
        self.embedder = embedder
        self.connection = connection or ConnectionManager(
            backend,
            attempts=config.connect_attempts,
            initial_delay=config.connect_retry_delay,
        )

    @classmethod
    def from_config(cls, config: Config) -> "GraphPersistence":
        """Build a GraphPersistence backed by Qdrant and LiteLLM embeddings."""
        embedder = EmbeddingClient(config)
        backend = QdrantBackend(
            url=config.qdrant_url,
            api_key=config.qdrant_api_key,
            timeout=config.request_timeout,
        )
        return cls(config, backend, embedder)

    async def __aenter__(self) -> "GraphPersistence":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    #  Lifecycle                                                           #
    # ------------------------------------------------------------------ #

    def _require_collection(self) -> str:
        name = self.config.collection_name
        if not name:
            raise ConfigError("COLLECTION_NAME environment variable is required")
        return name

    async def initialize(self) -> EnsureResult:
        """Connect, then ensure the collection matches the embedding dimension.

        May delete and recreate the collection (losing all points) when its
        vector size differs from the configured embedding dimension.
        """
        await self.connection.ensure_connected()
        name = self._require_collection()
        result = await CollectionManager(self.backend, name).ensure_collection(
            self.config.embedding_dim
        )
        log.info(f"Collection {name} initialization complete: {result.value}")
        return result

    async def close(self) -> None:
        """Close the underlying store client."""
        await self.backend.close()

    async def health_check(self) -> dict[str, Any]:
        """Report store reachability and collection presence. Never raises."""
        result: dict[str, Any] = {
            "store": {"backend": self.backend.backend_name, "healthy": False, "error": None},
            "collection": {"name": self.config.collection_name, "exists": False},
            "initialized": self.connection.initialized,
        }
        try:
            names = await self.backend.list_collections()
            result["store"]["healthy"] = True
            result["collection"]["exists"] = self.config.collection_name in names
        except Exception as e:
            result["store"]["error"] = str(e)
        return result

    async def _store_call(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except Exception as e:
            log.error(f"{operation} failed: {e}")
            raise StoreOperationError(f"{operation} failed: {e}", operation=operation) from e

    def _relation_id(self, relation: Relation) -> int:
        return relation_id(relation, unambiguous=self.config.unambiguous_relation_ids)

    # ------------------------------------------------------------------ #
    #  Writes                                                              #
    # ------------------------------------------------------------------ #

    async def persist_entity(self, entity: Entity) -> None:
        """Store an entity, replacing any previous point with the same name."""
        await self.connection.ensure_connected()
        name = self._require_collection()

        vector = await self.embedder.embed_entity(entity)
        point = Point(id=entity_id(entity), vector=vector, payload=encode_entity(entity))

        await self._store_call(
            f"persist_entity({entity.name!r})",
            self.backend.upsert(name, [point]),
        )
        log.debug(f"Persisted entity {entity.name!r} as point {point.id}")

    async def persist_relation(self, relation: Relation) -> None:
        """Store a relation, replacing any previous point for the same triple."""
        await self.connection.ensure_connected()
        name = self._require_collection()

        vector = await self.embedder.embed_relation(relation)
        point = Point(id=self._relation_id(relation), vector=vector, payload=encode_relation(relation))

        await self._store_call(
            f"persist_relation({relation.from_entity!r} {relation.relation_type} {relation.to_entity!r})",
            self.backend.upsert(name, [point]),
        )
        log.debug(f"Persisted relation as point {point.id}")

    # ------------------------------------------------------------------ #
    #  Search                                                              #
    # ------------------------------------------------------------------ #

    async def search_similar(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Entity | Relation]:
        """Find entities and relations semantically similar to query.

        Args:
            query: Free text, embedded as-is
            limit: Maximum number of nearest points requested from the store

        Returns:
            Decoded graph elements in store rank order. Points whose payload
            is not a valid entity or relation are skipped.
        """
        await self.connection.ensure_connected()
        name = self._require_collection()

        vector = await self.embedder.embed(query)
        with log_timing(f"Search {name} (limit={limit})", log):
            hits = await self._store_call(
                "search_similar",
                self.backend.search(name, vector, limit),
            )

        results: list[Entity | Relation] = []
        for hit in hits:
            decoded = decode_payload(hit.payload)
            if decoded is not None:
                results.append(decoded)

        log.debug(f"search_similar: {len(hits)} hits, {len(results)} graph elements")
        return results

    # ------------------------------------------------------------------ #
    #  Deletes                                                             #
    # ------------------------------------------------------------------ #

    async def delete_entity(self, name: str) -> None:
        """Delete an entity by name. Deleting a missing entity is a no-op."""
        await self.connection.ensure_connected()
        collection = self._require_collection()

        await self._store_call(
            f"delete_entity({name!r})",
            self.backend.delete_points(collection, [entity_id(name)]),
        )

    async def delete_relation(self, relation: Relation) -> None:
        """Delete a relation by its triple. Deleting a missing relation is a no-op."""
        await self.connection.ensure_connected()
        collection = self._require_collection()

        await self._store_call(
            "delete_relation",
            self.backend.delete_points(collection, [self._relation_id(relation)]),
        )
