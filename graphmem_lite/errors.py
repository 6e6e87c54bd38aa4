"""Error types for GraphMem Lite.

Every failure surfaced by the public API is a GraphMemError subclass.
Errors raised by collaborators (Qdrant, the embedding provider) are wrapped
with the failing operation's name and chained via ``raise ... from``.
"""


class GraphMemError(Exception):
    """Base class for all GraphMem Lite errors."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class ConfigError(GraphMemError):
    """A required setting is missing or malformed. Not retried."""
    pass


class ValidationError(GraphMemError, ValueError):
    """A graph element violates a model invariant (e.g., empty entity name)."""
    pass


class ConnectionError(GraphMemError):
    """Vector store unreachable after all connection attempts."""
    pass


class CollectionInitError(GraphMemError):
    """Collection could not be verified, created or recreated."""
    pass


class EmbeddingError(GraphMemError):
    """Embedding provider call failed."""
    pass


class StoreOperationError(GraphMemError):
    """Upsert, search or delete against the vector store failed."""
    pass


__all__ = [
    "GraphMemError",
    "ConfigError",
    "ValidationError",
    "ConnectionError",
    "CollectionInitError",
    "EmbeddingError",
    "StoreOperationError",
]
