"""Collection lifecycle management.

Ensures the target collection exists with the vector size required by the
current embedding model.

WARNING: a size mismatch (or an unreadable collection config) is repaired
by deleting and recreating the collection. Every stored point is lost.
Vectors of a different dimensionality cannot be searched against the new
model, and partial migration is not supported.
"""

from enum import Enum

from graphmem_lite.db.store_protocol import VectorStoreBackend
from graphmem_lite.errors import CollectionInitError
from graphmem_lite.log_config import get_logger

log = get_logger("db.collection")


class EnsureResult(str, Enum):
    """What ensure_collection did."""
    CREATED = "created"
    RECREATED = "recreated"
    UNCHANGED = "unchanged"


class CollectionManager:
    """Creates, verifies and (destructively) migrates one collection."""

    def __init__(self, backend: VectorStoreBackend, collection_name: str):
        self.backend = backend
        self.collection_name = collection_name

    async def ensure_collection(self, required_dim: int) -> EnsureResult:
        """Ensure the collection exists with vectors of size required_dim.

        Idempotent: when the collection already matches, no mutating call
        is made.

        Args:
            required_dim: Vector size of the embedding model in use

        Returns:
            EnsureResult describing the action taken

        Raises:
            CollectionInitError: On any store error. Not retried.
        """
        name = self.collection_name
        try:
            log.info(f"Checking if collection {name} exists...")
            existing = await self.backend.list_collections()

            if name not in existing:
                log.info(f"Creating new collection {name} with vector size {required_dim}")
                await self.backend.create_collection(name, required_dim)
                return EnsureResult.CREATED

            log.debug(f"Retrieving collection info for {name}...")
            current_dim = await self.backend.get_collection_dim(name)

            if current_dim is None:
                log.warning(f"Could not determine vector size of {name}, recreating collection")
                await self._recreate(required_dim)
                return EnsureResult.RECREATED

            if current_dim != required_dim:
                log.warning(
                    f"Vector size mismatch: collection={current_dim}, required={required_dim}"
                )
                await self._recreate(required_dim)
                return EnsureResult.RECREATED

        except CollectionInitError:
            raise
        except Exception as e:
            log.error(f"Failed to initialize collection {name}: {e}")
            raise CollectionInitError(
                f"Failed to initialize collection {name}: {e}",
                operation="ensure_collection",
            ) from e

        log.debug(f"Collection {name} ready (vector size {required_dim})")
        return EnsureResult.UNCHANGED

    async def _recreate(self, required_dim: int) -> None:
        name = self.collection_name
        try:
            log.warning(f"Deleting collection {name}; all stored points will be lost")
            await self.backend.delete_collection(name)
            log.info(f"Creating collection {name} with vector size {required_dim}...")
            await self.backend.create_collection(name, required_dim)
        except Exception as e:
            raise CollectionInitError(
                f"Failed to recreate collection {name}: {e}",
                operation="recreate_collection",
            ) from e
        log.info(f"Collection {name} recreated with vector size {required_dim}")
