"""Shared retry helper for outbound HTTP requests."""
from __future__ import annotations

import logging
import re
import time
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import setup_logger

_logger = setup_logger(__name__)

_DEFAULT_ALLOWED_METHODS: frozenset[str] = frozenset(["HEAD", "GET", "OPTIONS"])
_DEFAULT_STATUS_FORCELIST: tuple[int, ...] = (429, 500, 502, 503, 504)


def sanitize_error_message(message: Any) -> Any:
    """
    Remove API keys from error messages before they reach logs or callers.
    Handles patterns: apiKey=XXX, X-Auth-Token: XXX
    """
    if not message:
        return message

    sanitized = re.sub(r'apiKey=[A-Za-z0-9._-]+', 'apiKey=***', str(message))
    sanitized = re.sub(r'X-Auth-Token[\'":\s]+[A-Za-z0-9._-]+', 'X-Auth-Token: ***', sanitized)
    return sanitized


def _scrub_url(url: Optional[str]) -> str:
    if not url:
        return ""
    try:
        parts = urlsplit(url)
        # strip querystring for logs
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", parts.fragment))
    except ValueError:
        return url or ""


def _normalize_status_list(status_forcelist: Iterable[int] | None) -> Tuple[int, ...]:
    if not status_forcelist:
        return _DEFAULT_STATUS_FORCELIST
    return tuple(sorted(set(int(s) for s in status_forcelist)))


def create_retry_session(backoff_factor: float, status_forcelist: Iterable[int] | None = None) -> requests.Session:
    """Create a :class:`requests.Session` whose adapters never retry on their own.

    Retries are driven by :func:`request_with_retries` so every attempt is logged.
    """

    adapter = HTTPAdapter(
        max_retries=Retry(
            total=0,
            connect=0,
            read=0,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist or _DEFAULT_STATUS_FORCELIST,
            allowed_methods=_DEFAULT_ALLOWED_METHODS,
            raise_on_status=False,
        )
    )
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


@lru_cache(maxsize=16)
def _get_session(backoff_factor: float, status_forcelist: Tuple[int, ...]) -> requests.Session:
    return create_retry_session(backoff_factor, status_forcelist)


def request_with_retries(
    method: str,
    url: str,
    *,
    retries: int = 1,
    backoff_factor: float = 0.5,
    status_forcelist: Iterable[int] | None = _DEFAULT_STATUS_FORCELIST,
    timeout: float = 10.0,
    logger: Optional[logging.Logger] = None,
    context: Optional[str] = None,
    sanitize: Optional[Callable[[str], str]] = None,
    session: Optional[Any] = None,
    **kwargs: Any,
) -> requests.Response:
    """
    Perform an HTTP request, retrying timeouts, connection errors and
    retryable statuses up to ``retries`` total attempts.

    - ``session`` may be any object with ``.request(method, url, timeout=..., **kw)``.
    - Non-retryable HTTP errors raise immediately via ``raise_for_status``.
    - The last exception is re-raised once the attempt budget is spent.
    """
    attempts_allowed = max(int(retries), 1)
    statuses = _normalize_status_list(status_forcelist)
    session_obj = session or _get_session(backoff_factor, statuses)
    log = logger or _logger
    clean = sanitize or sanitize_error_message
    label = context or f"{method} {_scrub_url(url)}"

    retry_state = Retry(
        total=attempts_allowed,
        connect=attempts_allowed,
        read=attempts_allowed,
        backoff_factor=backoff_factor,
        status_forcelist=statuses,
        allowed_methods=_DEFAULT_ALLOWED_METHODS,
        raise_on_status=False,
    )

    last_exception: Optional[requests.exceptions.RequestException] = None
    for attempt in range(1, attempts_allowed + 1):
        response: Optional[requests.Response] = None
        try:
            response = session_obj.request(method, url, timeout=timeout, **kwargs)
            if response.status_code in statuses:
                raise requests.exceptions.HTTPError(
                    f"{response.status_code} Server Error: {response.reason}",
                    response=response,
                )
            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as exc:
            last_exception = exc
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            retryable = isinstance(
                exc, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)
            ) or status_code in statuses
            if attempt >= attempts_allowed or not retryable:
                break

            retry_state = retry_state.increment(
                method=method,
                url=url,
                response=None,
                error=exc,
            )
            backoff = retry_state.get_backoff_time()
            log.warning(
                "Retrying %s (%d/%d): %s",
                label,
                attempt,
                attempts_allowed,
                clean(str(exc)),
            )
            if backoff > 0:
                time.sleep(backoff)

    if last_exception is None:
        raise RuntimeError("request_with_retries exited without attempting a request")

    if attempt > 1:
        log.error("Failed %s after %d attempts: %s", label, attempt, clean(str(last_exception)))
    raise last_exception


__all__ = ["create_retry_session", "request_with_retries", "sanitize_error_message"]
