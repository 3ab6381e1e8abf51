"""Environment-driven settings."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger("posfmt.config")

MAX_ARGUMENT_INDEX_ENV = "POSFMT_MAX_ARGUMENT_INDEX"
HOST_ENV = "POSFMT_HOST"
PORT_ENV = "POSFMT_PORT"

DEFAULT_MAX_ARGUMENT_INDEX = 65535
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _int_from_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%d: below %d, using %d", name, value, minimum, default)
        return default
    return value


def resolve_max_argument_index() -> int:
    """Resolve the largest placeholder index the parser accepts."""
    return _int_from_env(MAX_ARGUMENT_INDEX_ENV, DEFAULT_MAX_ARGUMENT_INDEX)


def resolve_serve_host() -> str:
    return os.environ.get(HOST_ENV, "").strip() or DEFAULT_HOST


def resolve_serve_port() -> int:
    return _int_from_env(PORT_ENV, DEFAULT_PORT, minimum=1)
