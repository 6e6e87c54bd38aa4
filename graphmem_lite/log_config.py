"""Logging configuration for GraphMem Lite.

Loguru sinks for the persistence layer: a filtered stderr console and a
rotating DEBUG file under ~/.graphmem_lite/logs/ (10 MB files, kept 7 days,
zipped on rotation).

Loggers are bound to a component name (see get_logger); the console level
can be raised or lowered per component:
- GRAPHMEM_LITE_LOG_LEVEL: Level for everything else (default: INFO)
- GRAPHMEM_LITE_LOG_EMBEDDINGS: The "embeddings" logger
- GRAPHMEM_LITE_LOG_STORE: Every "db.*" logger (connection, collection, qdrant)
- GRAPHMEM_LITE_LOG_DIR: Directory for the file sink
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from time import perf_counter

from loguru import logger

_global_log_level = os.getenv("GRAPHMEM_LITE_LOG_LEVEL", "INFO").upper()

# Bound-name prefix -> level override
_component_log_levels: dict[str, str] = {
    "embeddings": os.getenv("GRAPHMEM_LITE_LOG_EMBEDDINGS", "").upper(),
    "db.": os.getenv("GRAPHMEM_LITE_LOG_STORE", "").upper(),
}


def _level_no(level: str) -> int | None:
    try:
        return logger.level(level).no
    except ValueError:
        return None


def _console_filter(record) -> bool:
    """Apply the first matching component override, else the global level."""
    name = record["extra"].get("name", "")

    for prefix, level in _component_log_levels.items():
        if level and name.startswith(prefix):
            threshold = _level_no(level)
            if threshold is not None:
                return record["level"].no >= threshold

    threshold = _level_no(_global_log_level)
    return threshold is None or record["level"].no >= threshold


logger.remove()

_log_dir = Path(os.getenv("GRAPHMEM_LITE_LOG_DIR", str(Path.home() / ".graphmem_lite" / "logs")))
_log_dir.mkdir(parents=True, exist_ok=True)

logger.add(
    sys.stderr,
    level=0,
    filter=_console_filter,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan> - <level>{message}</level>",
    colorize=True,
)

# Unfiltered: store retries and collection recreation are always on disk
logger.add(
    _log_dir / "graphmem_{time:YYYY-MM-DD}.log",
    level="DEBUG",
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]} | {name}:{function}:{line} | {message}",
    rotation="10 MB",
    retention="7 days",
    compression="zip",
    enqueue=True,
)

# Records from the bare logger still render
logger.configure(extra={"name": "graphmem_lite"})


def get_logger(name: str):
    """Return the shared logger bound to a component name (e.g. "db.qdrant")."""
    return logger.bind(name=name)


@contextmanager
def log_timing(operation: str, log_instance=None, level: str = "debug"):
    """Log how long the wrapped block took, in milliseconds.

    The yielded dict's "elapsed_ms" is filled in on exit, including when the
    block raises.
    """
    log_fn = log_instance or logger
    timing = {"elapsed_ms": 0.0}
    start = perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed_ms"] = (perf_counter() - start) * 1000
        getattr(log_fn, level)(f"{operation}: {timing['elapsed_ms']:.1f}ms")


__all__ = ["logger", "get_logger", "log_timing"]
