from __future__ import annotations

from flask import Blueprint, current_app

from ..app_utils import legacy_endpoint, make_error, make_ok
from ..config import setup_logger
from ..constants import DEFAULT_COMPETITIONS, STANDINGS_ERROR_MESSAGE
from ..errors import APIError, CacheStoreError
from ..net_retry import sanitize_error_message
from ..services.standings_service import StandingsLookup, StandingsService
from ..stats import summarize

logger = setup_logger(__name__)

bp = Blueprint("standings", __name__)

SERVICE_EXTENSION = "standings_service"


def _get_service() -> StandingsService:
    return current_app.extensions[SERVICE_EXTENSION]


def _lookup(competition_id: str) -> StandingsLookup:
    return _get_service().lookup(competition_id)


def _failure():
    return make_error(STANDINGS_ERROR_MESSAGE, message="", status_code=500)


def _with_cache_header(response, lookup: StandingsLookup):
    body, status = response
    body.headers["X-Cache"] = "HIT" if lookup.hit else "MISS"
    return body, status


@bp.get("/standings/<competition_id>")
@legacy_endpoint
def standings(competition_id: str):
    """Proxy one competition's standings document, cache first."""
    try:
        lookup = _lookup(competition_id)
    except APIError as exc:
        logger.warning("standings %s failed: %s", competition_id, sanitize_error_message(exc.to_dict()))
        return _failure()
    except CacheStoreError as exc:
        logger.error("standings %s failed, cache unavailable: %s", competition_id, exc)
        return _failure()
    except Exception:
        logger.exception("standings %s failed unexpectedly", competition_id)
        return _failure()
    return _with_cache_header(make_ok(lookup.document), lookup)


@bp.get("/standings/<competition_id>/stats")
@legacy_endpoint
def standings_stats(competition_id: str):
    """Zone-annotated table plus per-team stats built from the cached document."""
    try:
        lookup = _lookup(competition_id)
        summary = summarize(lookup.document)
    except APIError as exc:
        logger.warning("standings stats %s failed: %s", competition_id, sanitize_error_message(exc.to_dict()))
        return _failure()
    except Exception:
        logger.exception("standings stats %s failed", competition_id)
        return _failure()
    return _with_cache_header(make_ok(summary), lookup)


@bp.get("/competitions")
def competitions():
    return make_ok({"competitions": [dict(c) for c in DEFAULT_COMPETITIONS]})
