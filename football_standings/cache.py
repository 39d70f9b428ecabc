"""Cache store adapters: Redis for deployments, an in-process map for local runs."""
from __future__ import annotations

import threading
import time
from typing import Dict, Optional, Protocol, Tuple

import redis

from .config import CACHE_TIMEOUT, setup_logger
from .errors import CacheStoreError
from .logging_utils import warn_once

logger = setup_logger(__name__)

MEMORY_URL_SCHEME = "memory://"


class CacheStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...


class RedisCacheStore:
    """``GET key`` / ``SET key value EX ttl`` over a shared redis-py client."""

    def __init__(self, client: "redis.Redis") -> None:
        self._client = client

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            raise CacheStoreError(f"cache read failed for {key}: {exc}") from exc
        except UnicodeDecodeError:
            logger.warning("Discarding undecodable cache entry for %s", key)
            return None
        if isinstance(value, bytes):
            try:
                value = value.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("Discarding undecodable cache entry for %s", key)
                return None
        return value

    def set(self, key: str, value: str, ttl: int) -> None:
        try:
            self._client.set(key, value, ex=ttl)
        except redis.RedisError as exc:
            raise CacheStoreError(f"cache write failed for {key}: {exc}") from exc


class MemoryCacheStore:
    """Thread-safe in-process TTL map with the same interface as Redis."""

    def __init__(self) -> None:
        self._d: Dict[str, Tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        now = time.time()
        with self._lock:
            entry = self._d.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if now >= expires_at:
                self._d.pop(key, None)
                return None
            return value

    def set(self, key: str, value: str, ttl: int) -> None:
        now = time.time()
        with self._lock:
            expired = [k for k, (expires_at, _) in self._d.items() if now >= expires_at]
            for k in expired:
                del self._d[k]
            self._d[key] = (now + ttl, value)

    def ttl(self, key: str) -> Optional[float]:
        """Seconds left before ``key`` expires, or None when absent."""
        with self._lock:
            entry = self._d.get(key)
        if entry is None:
            return None
        remaining = entry[0] - time.time()
        return remaining if remaining > 0 else None


def create_cache_store(url: str, timeout: float = CACHE_TIMEOUT) -> CacheStore:
    """Build a cache store from a connection URL.

    ``memory://`` selects :class:`MemoryCacheStore`; anything else goes to
    ``redis.Redis.from_url``. The Redis client connects lazily, so an
    unreachable server shows up on the first request rather than here.
    """
    if url.startswith(MEMORY_URL_SCHEME):
        warn_once(
            "memory_cache_store",
            "Using in-process memory cache store; entries are not shared between workers",
            logger=logger,
        )
        return MemoryCacheStore()

    client = redis.Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    logger.info("Using Redis cache store at %s", client.connection_pool.connection_kwargs.get("host", "?"))
    return RedisCacheStore(client)
