"""Connection management for the vector store.

ConnectionManager verifies the store is reachable with a bounded retry loop
and exponential backoff, then remembers success for the rest of its life.
One manager is created per process and shared by reference.

Concurrent callers that arrive before the first successful check share a
single in-flight attempt instead of each running their own retry loop.
"""

import asyncio

from graphmem_lite.db.store_protocol import VectorStoreBackend
from graphmem_lite.errors import ConnectionError
from graphmem_lite.log_config import get_logger

log = get_logger("db.connection")

DEFAULT_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 2.0  # seconds, doubled after each failed attempt


class ConnectionManager:
    """Idempotent, single-flight connection check for a vector store backend."""

    def __init__(
        self,
        backend: VectorStoreBackend,
        attempts: int = DEFAULT_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
    ):
        """Initialize the manager.

        Args:
            backend: Store whose liveness check (list_collections) is probed
            attempts: Total liveness checks before giving up
            initial_delay: Wait before the second attempt; doubled thereafter
        """
        self.backend = backend
        self.attempts = attempts
        self.initial_delay = initial_delay
        self._initialized = False
        self._pending: asyncio.Task | None = None

    @property
    def initialized(self) -> bool:
        """True once a liveness check has succeeded. Never reset."""
        return self._initialized

    async def ensure_connected(self) -> None:
        """Make sure the store has been reached at least once.

        No-op when already initialized. Otherwise joins the in-flight
        connection attempt, starting one if none is running.

        Raises:
            ConnectionError: If every attempt failed. The manager stays
                uninitialized, so the next call starts over from attempt 1.
        """
        if self._initialized:
            return

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect_with_retry())
            self._pending.add_done_callback(self._clear_pending)
        # Shielded: one caller being cancelled must not cancel the shared attempt
        await asyncio.shield(self._pending)

    def _clear_pending(self, task: asyncio.Task) -> None:
        """Forget a finished attempt, even when every caller was cancelled."""
        if self._pending is task:
            self._pending = None
        if not task.cancelled():
            # Retrieve the outcome so an unawaited failure is not reported as lost
            task.exception()

    async def _connect_with_retry(self) -> None:
        delay = self.initial_delay
        last_error: Exception | None = None

        for attempt in range(1, self.attempts + 1):
            try:
                log.info(f"Attempting to connect to {self.backend.backend_name} (attempt {attempt}/{self.attempts})")
                await self.backend.list_collections()
            except Exception as e:
                last_error = e
                log.warning(f"Connection attempt {attempt} failed: {e}")
                if attempt == self.attempts:
                    break
                log.info(f"Retrying in {delay:g} seconds...")
                await asyncio.sleep(delay)
                delay *= 2
                continue

            self._initialized = True
            log.info(f"Successfully connected to {self.backend.backend_name}")
            return

        log.error(f"Giving up on {self.backend.backend_name} after {self.attempts} attempts")
        raise ConnectionError(
            f"Failed to connect to {self.backend.backend_name} after {self.attempts} attempts: {last_error}",
            operation="connect",
        ) from last_error
