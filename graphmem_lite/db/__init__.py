"""Vector store access for GraphMem Lite.

Module Structure:
- store_protocol.py: VectorStoreBackend protocol and Point/ScoredPayload types
- qdrant_backend.py: Qdrant implementation (AsyncQdrantClient)
- connection.py: ConnectionManager (bounded retry, single-flight)
- collection.py: CollectionManager (create / verify / destructive migration)

Example:
    from graphmem_lite.db import QdrantBackend, ConnectionManager

    backend = QdrantBackend(url="http://localhost:6333")
    await ConnectionManager(backend).ensure_connected()
"""

from graphmem_lite.db.collection import CollectionManager, EnsureResult
from graphmem_lite.db.connection import ConnectionManager
from graphmem_lite.db.qdrant_backend import QdrantBackend
from graphmem_lite.db.store_protocol import Point, ScoredPayload, VectorStoreBackend

__all__ = [
    "CollectionManager",
    "ConnectionManager",
    "EnsureResult",
    "Point",
    "QdrantBackend",
    "ScoredPayload",
    "VectorStoreBackend",
]
