from __future__ import annotations

from typing import Optional

from .. import settings
from ..cache import CacheStore, create_cache_store
from ..config import setup_logger
from ..errors import ConfigurationError
from ..football_data_api import FootballDataClient
from ..services.standings_service import StandingsService

logger = setup_logger(__name__)


def standings_client(api_key: Optional[str] = None) -> FootballDataClient:
    """Return the football-data.org client; the API key is mandatory."""
    key = api_key or settings.FOOTBALL_API_KEY
    if not key:
        raise ConfigurationError("FOOTBALL_API_KEY (or FOOTBALL_API_KEY_FILE) must be set")
    return FootballDataClient(key, settings.FOOTBALL_API_BASE)


def cache_store(url: Optional[str] = None) -> CacheStore:
    """Return the cache store for REDIS_URL; ``memory://`` keeps it in-process."""
    cache_url = url or settings.REDIS_URL
    if not cache_url:
        raise ConfigurationError("REDIS_URL must be set (use memory:// for an in-process cache)")
    return create_cache_store(cache_url)


def build_service(
    *,
    cache: Optional[CacheStore] = None,
    client: Optional[FootballDataClient] = None,
) -> StandingsService:
    service = StandingsService(
        cache if cache is not None else cache_store(),
        client if client is not None else standings_client(),
        fail_open=settings.CACHE_FAIL_OPEN,
        single_flight=settings.SINGLE_FLIGHT,
    )
    logger.info(
        "Standings service ready (ttl=%ss, fail_open=%s, single_flight=%s)",
        service.ttl,
        service.fail_open,
        settings.SINGLE_FLIGHT,
    )
    return service
