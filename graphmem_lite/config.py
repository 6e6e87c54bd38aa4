"""Configuration for GraphMem Lite.

Simple dataclass-based configuration with sensible defaults.
Each setting is read from GRAPHMEM_LITE_<KEY>, falling back to the bare
<KEY> (e.g., QDRANT_URL, COLLECTION_NAME, OPENAI_API_KEY).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from graphmem_lite.errors import ConfigError
from graphmem_lite.log_config import get_logger

log = get_logger("config")

# Load .env file if present
try:
    from dotenv import load_dotenv
    _pkg_dir = Path(__file__).parent.parent
    _env_loaded = load_dotenv(_pkg_dir / ".env") or load_dotenv(Path.cwd() / ".env")
    log.debug(f"Loaded .env file: {_env_loaded}")
except ImportError:
    log.debug("python-dotenv not installed, using environment variables directly")

# Output dimension of known embedding models
MODEL_DIMENSIONS = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}
DEFAULT_EMBEDDING_DIM = 1536


def _get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable, preferring the GRAPHMEM_LITE_ prefix."""
    value = os.getenv(f"GRAPHMEM_LITE_{key}")
    if value is None:
        value = os.getenv(key)
    return default if value is None or value == "" else value


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    val = _get_env(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


def _get_env_number(key: str, default, cast):
    val = _get_env(key)
    if val is None:
        return default
    try:
        return cast(val)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {val!r}") from None


@dataclass
class Config:
    """GraphMem Lite configuration.

    Attributes:
        qdrant_url: Qdrant endpoint, must start with http:// or https://
        qdrant_api_key: Optional Qdrant API key
        collection_name: Target collection (checked when an operation runs)
        openai_api_key: Embedding provider key (required by EmbeddingClient)
        embedding_model: LiteLLM embedding model (default: text-embedding-ada-002)
        embedding_dim: Vector size; derived from the model when unset
        request_timeout: Qdrant request timeout in seconds (default: 60)
        connect_attempts: Liveness checks before giving up (default: 3)
        connect_retry_delay: Delay before the second attempt, doubled after (default: 2.0)
        unambiguous_relation_ids: Hash relations with the length-prefixed key (default: False)
    """

    qdrant_url: str | None = field(default_factory=lambda: _get_env("QDRANT_URL"))
    qdrant_api_key: str | None = field(default_factory=lambda: _get_env("QDRANT_API_KEY"))
    collection_name: str | None = field(default_factory=lambda: _get_env("COLLECTION_NAME"))
    openai_api_key: str | None = field(default_factory=lambda: _get_env("OPENAI_API_KEY"))
    embedding_model: str = field(
        default_factory=lambda: _get_env("EMBEDDING_MODEL", "text-embedding-ada-002")
    )
    embedding_dim: int | None = field(
        default_factory=lambda: _get_env_number("EMBEDDING_DIM", None, int)
    )
    request_timeout: int = field(
        default_factory=lambda: _get_env_number("REQUEST_TIMEOUT", 60, int)
    )
    connect_attempts: int = field(
        default_factory=lambda: _get_env_number("CONNECT_ATTEMPTS", 3, int)
    )
    connect_retry_delay: float = field(
        default_factory=lambda: _get_env_number("CONNECT_RETRY_DELAY", 2.0, float)
    )
    unambiguous_relation_ids: bool = field(
        default_factory=lambda: _get_env_bool("UNAMBIGUOUS_RELATION_IDS", False)
    )

    def __post_init__(self):
        """Validate the store endpoint and resolve the embedding dimension."""
        if not self.qdrant_url:
            raise ConfigError("QDRANT_URL environment variable is required")
        if not self.qdrant_url.startswith(("http://", "https://")):
            raise ConfigError("QDRANT_URL must start with http:// or https://")

        if self.embedding_dim is None:
            self.embedding_dim = MODEL_DIMENSIONS.get(self.embedding_model, DEFAULT_EMBEDDING_DIM)
        if self.embedding_dim <= 0:
            raise ConfigError(f"EMBEDDING_DIM must be positive, got {self.embedding_dim}")
        if self.connect_attempts < 1:
            raise ConfigError(f"CONNECT_ATTEMPTS must be at least 1, got {self.connect_attempts}")

        log.debug(f"qdrant_url={self.qdrant_url}, api_key_set={self.qdrant_api_key is not None}")
        log.debug(f"collection_name={self.collection_name}")
        log.debug(f"embedding_model={self.embedding_model}, embedding_dim={self.embedding_dim}")
        log.debug(f"request_timeout={self.request_timeout}, connect_attempts={self.connect_attempts}")
        log.debug(f"unambiguous_relation_ids={self.unambiguous_relation_ids}")
        log.info(f"Config initialized: qdrant={self.qdrant_url}, collection={self.collection_name}")
