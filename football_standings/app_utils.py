from functools import wraps
from typing import Any, Dict, Optional

from flask import current_app, jsonify, request

from . import config
from .errors import APIError


def legacy_endpoint(func):
    """Mark a route as legacy: payloads go out unwrapped."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    setattr(func, "_legacy_endpoint", True)
    setattr(wrapper, "_legacy_endpoint", True)
    return wrapper


def _is_legacy_request() -> bool:
    """Determine if the current request should return unwrapped JSON."""
    if not getattr(config, "USE_LEGACY_RESPONSES", True):
        return False

    try:
        endpoint = request.endpoint
    except RuntimeError:
        # Outside of a request context default to wrapped responses.
        return False
    if not endpoint:
        return False

    view_func = current_app.view_functions.get(endpoint)
    return bool(view_func and getattr(view_func, "_legacy_endpoint", False))


def _build_success_payload(data: Optional[Any], message: str) -> Dict[str, Any] | Any:
    if _is_legacy_request():
        return data if data is not None else {}

    return {
        "status": "ok",
        "message": message,
        "data": data,
    }


def _build_error_payload(error: Any, message: str) -> Dict[str, Any] | Any:
    if _is_legacy_request():
        legacy_payload = {"error": error}
        if message:
            legacy_payload["message"] = message
        return legacy_payload

    return {
        "status": "error",
        "message": message,
        "error": error,
    }


def make_ok(data: Optional[Any] = None, message: str = "success", status_code: int = 200):
    """Return a standardized success response (legacy-aware)."""
    payload = _build_success_payload(data, message)
    return jsonify(payload), status_code


def make_error(error: Any, message: str = "An error occurred", status_code: int = 400):
    """Return a standardized error response (legacy-aware)."""
    if isinstance(error, APIError):
        error = error.to_dict()

    payload = _build_error_payload(error, message)
    return jsonify(payload), status_code
