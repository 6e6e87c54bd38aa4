"""GraphMem Lite - knowledge graph persistence in a vector store.

Stores entities and relations as embedded points so a knowledge graph can
be searched semantically as well as addressed by identity:
- Qdrant for vector storage
- LiteLLM for embeddings
- Deterministic SHA-256 point IDs
"""

__version__ = "0.1.0"

from graphmem_lite.config import Config
from graphmem_lite.errors import (
    CollectionInitError,
    ConfigError,
    ConnectionError,
    EmbeddingError,
    GraphMemError,
    StoreOperationError,
    ValidationError,
)
from graphmem_lite.models import Entity, Relation
from graphmem_lite.persistence import GraphPersistence

__all__ = [
    "Config",
    "Entity",
    "Relation",
    "GraphPersistence",
    "GraphMemError",
    "ConfigError",
    "ConnectionError",
    "CollectionInitError",
    "EmbeddingError",
    "StoreOperationError",
    "ValidationError",
]
