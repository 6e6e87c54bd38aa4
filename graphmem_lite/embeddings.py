"""Embedding generation for GraphMem Lite.

Builds the text representation of graph elements and turns text into
vectors via LiteLLM. Each call reaches the provider exactly once; failures
surface as EmbeddingError and are never retried here.
"""

from graphmem_lite.config import Config
from graphmem_lite.errors import ConfigError, EmbeddingError
from graphmem_lite.log_config import get_logger, log_timing
from graphmem_lite.models import Entity, Relation

log = get_logger("embeddings")


def entity_text(entity: Entity) -> str:
    """Text embedded for an entity: ``name (type): obs1. obs2``."""
    return f"{entity.name} ({entity.entity_type}): {'. '.join(entity.observations)}"


def relation_text(relation: Relation) -> str:
    """Text embedded for a relation: ``from relationType to``."""
    return f"{relation.from_entity} {relation.relation_type} {relation.to_entity}"


class EmbeddingClient:
    """Async wrapper around the LiteLLM embedding endpoint.

    Stateless apart from its configuration, so one instance is shared by
    every operation for the life of the process.
    """

    def __init__(self, config: Config):
        if not config.openai_api_key:
            raise ConfigError("OPENAI_API_KEY environment variable is required")
        self.model = config.embedding_model
        self.dimension = config.embedding_dim
        self._api_key = config.openai_api_key
        log.debug(f"Embedding client ready: model={self.model}, dim={self.dimension}")

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding for text.

        Args:
            text: Text to embed, passed to the provider unmodified

        Returns:
            Embedding vector

        Raises:
            EmbeddingError: If the provider call fails or returns no vector
        """
        from litellm import aembedding

        log.trace(f"Embedding text: {len(text)} chars, model={self.model}")
        try:
            with log_timing(f"Embed {len(text)} chars", log):
                response = await aembedding(model=self.model, input=[text], api_key=self._api_key)
            vector = response.data[0]["embedding"]
        except Exception as e:
            log.error(f"Embedding provider error: {e}")
            raise EmbeddingError(
                f"Failed to generate embeddings with {self.model}: {e}",
                operation="embed",
            ) from e

        log.trace(f"Embedding complete: dim={len(vector)}")
        return list(vector)

    async def embed_entity(self, entity: Entity) -> list[float]:
        return await self.embed(entity_text(entity))

    async def embed_relation(self, relation: Relation) -> list[float]:
        return await self.embed(relation_text(relation))
