from __future__ import annotations

import json
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..cache import CacheStore
from ..config import STANDINGS_CACHE_TTL, setup_logger
from ..constants import CACHE_HIT, CACHE_MISS, STANDINGS_CACHE_PREFIX
from ..errors import CacheStoreError
from ..logging_utils import RateLimitedLogger
from ..ports.standings import StandingsDocument, StandingsPort

logger = setup_logger(__name__)
_throttled = RateLimitedLogger(logger, window_seconds=60.0)


def cache_key(competition_id: str) -> str:
    return f"{STANDINGS_CACHE_PREFIX}{competition_id}"


@dataclass(frozen=True)
class StandingsLookup:
    document: StandingsDocument
    source: str  # CACHE_HIT or CACHE_MISS

    @property
    def hit(self) -> bool:
        return self.source == CACHE_HIT


class InFlightRegistry:
    """
    Coalesces concurrent calls for the same key into one.
    The first caller (leader) runs the work; callers arriving while it is
    pending block on the leader's future and get its result or its exception.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def run(self, key: str, work: Callable[[], StandingsDocument]) -> StandingsDocument:
        with self._lock:
            future = self._pending.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._pending[key] = future

        if not leader:
            logger.debug("Joining in-flight fetch for %s", key)
            return future.result()

        try:
            result = work()
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._pending.pop(key, None)

    def pending(self) -> int:
        with self._lock:
            return len(self._pending)


class StandingsService:
    """
    Cache-aside proxy in front of the standings provider.

    Hit: the cached document is returned and the provider is not called.
    Miss: the provider is called once, the document is written under
    ``standings:<id>`` with a fixed TTL, then returned. Provider errors
    propagate untouched and nothing is written.

    Cache outages degrade to a direct provider passthrough when
    ``fail_open`` is set; otherwise :class:`CacheStoreError` propagates.
    """

    def __init__(
        self,
        cache: CacheStore,
        upstream: StandingsPort,
        *,
        ttl: int = STANDINGS_CACHE_TTL,
        fail_open: bool = True,
        single_flight: bool = True,
    ) -> None:
        self.cache = cache
        self.upstream = upstream
        self.ttl = ttl
        self.fail_open = fail_open
        self._inflight: Optional[InFlightRegistry] = InFlightRegistry() if single_flight else None

    cache_key = staticmethod(cache_key)

    def get_standings(self, competition_id: str) -> StandingsDocument:
        return self.lookup(competition_id).document

    def lookup(self, competition_id: str) -> StandingsLookup:
        key = cache_key(competition_id)

        cached = self._read_cache(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return StandingsLookup(cached, CACHE_HIT)

        logger.info("Cache miss for %s, fetching from upstream", key)
        if self._inflight is None:
            document = self._fetch_and_store(competition_id, key)
        else:
            document = self._inflight.run(key, lambda: self._recheck_then_fetch(competition_id, key))
        return StandingsLookup(document, CACHE_MISS)

    def _recheck_then_fetch(self, competition_id: str, key: str) -> StandingsDocument:
        # A leader that finished between our miss and taking leadership has already written the key.
        cached = self._read_cache(key)
        if cached is not None:
            logger.debug("Cache filled while waiting for %s", key)
            return cached
        return self._fetch_and_store(competition_id, key)

    def _read_cache(self, key: str) -> Optional[StandingsDocument]:
        try:
            raw = self.cache.get(key)
        except CacheStoreError as exc:
            if not self.fail_open:
                raise
            _throttled.warning(("cache_read",), "Cache read failed, treating as miss: %s", exc)
            return None

        if raw is None:
            return None

        try:
            document = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable cache entry for %s", key)
            return None
        if not isinstance(document, dict):
            logger.warning("Discarding non-object cache entry for %s", key)
            return None
        return document

    def _fetch_and_store(self, competition_id: str, key: str) -> StandingsDocument:
        document = self.upstream.fetch_standings(competition_id)
        payload = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
        try:
            self.cache.set(key, payload, self.ttl)
        except CacheStoreError as exc:
            if not self.fail_open:
                raise
            _throttled.warning(("cache_write",), "Cache write failed, serving uncached: %s", exc)
        return document
