"""Client for the football-data.org v4 standings endpoint."""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import requests

from .config import API_BACKOFF_FACTOR, API_MAX_RETRIES, API_TIMEOUT, setup_logger
from .constants import FOOTBALL_DATA_AUTH_HEADER, FOOTBALL_DATA_BASE_URL, FOOTBALL_DATA_SOURCE
from .errors import APIError
from .net_retry import request_with_retries, sanitize_error_message

logger = setup_logger(__name__)


class FootballDataClient:
    """Thin wrapper around ``GET /competitions/{id}/standings``.

    The response body is returned as parsed JSON without any reshaping; the
    only check is that it is a JSON object. Every failure surfaces as
    :class:`APIError` so callers have a single exception to handle.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = FOOTBALL_DATA_BASE_URL,
        *,
        timeout: float = API_TIMEOUT,
        max_retries: int = API_MAX_RETRIES,
        backoff_factor: float = API_BACKOFF_FACTOR,
        session: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.session = session

    def standings_url(self, competition_id: str) -> str:
        return f"{self.base_url}/competitions/{quote(str(competition_id), safe='')}/standings"

    def fetch_standings(self, competition_id: str) -> dict:
        url = self.standings_url(competition_id)
        context = f"football-data standings {competition_id}"
        try:
            response = request_with_retries(
                "GET",
                url,
                retries=self.max_retries,
                backoff_factor=self.backoff_factor,
                timeout=self.timeout,
                logger=logger,
                context=context,
                session=self.session,
                headers={FOOTBALL_DATA_AUTH_HEADER: self.api_key},
            )
        except requests.exceptions.Timeout as exc:
            raise APIError(
                FOOTBALL_DATA_SOURCE,
                "TIMEOUT",
                f"football-data.org timed out after {self.timeout}s",
                sanitize_error_message(str(exc)),
            ) from exc
        except requests.exceptions.HTTPError as exc:
            status = getattr(exc.response, "status_code", None)
            raise APIError(
                FOOTBALL_DATA_SOURCE,
                f"HTTP_{status}",
                f"football-data.org returned HTTP {status}",
                "rate_limited" if status == 429 else None,
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise APIError(
                FOOTBALL_DATA_SOURCE,
                "CONNECTION",
                "football-data.org connection error",
                sanitize_error_message(str(exc)),
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise APIError(
                FOOTBALL_DATA_SOURCE,
                "BAD_JSON",
                "football-data.org returned a malformed body",
            ) from exc

        if not isinstance(payload, dict):
            raise APIError(
                FOOTBALL_DATA_SOURCE,
                "BAD_PAYLOAD",
                f"football-data.org returned {type(payload).__name__}, expected object",
            )

        logger.debug("Fetched standings for %s from football-data.org", competition_id)
        return payload
