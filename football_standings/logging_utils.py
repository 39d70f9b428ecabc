"""Logging helpers for throttled and one-shot warnings."""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Hashable, Iterable, Optional, Tuple


class RateLimitedLogger:
    """Emit at most one record per key per window.

    Used where a failure repeats on every request (a cache outage, say) and
    logging each occurrence would flood the output.
    """

    def __init__(self, logger: logging.Logger, window_seconds: float = 60.0) -> None:
        self._logger = logger
        self._window = float(max(window_seconds, 0))
        self._last_logged: Dict[Tuple[Any, ...], float] = {}
        self._suppressed: Dict[Tuple[Any, ...], int] = {}
        self._lock = threading.Lock()

    def _should_emit(self, key: Tuple[Any, ...]) -> Tuple[bool, int]:
        now = time.monotonic()
        with self._lock:
            last = self._last_logged.get(key)
            if last is not None and (now - last) < self._window:
                self._suppressed[key] = self._suppressed.get(key, 0) + 1
                return False, 0
            self._last_logged[key] = now
            return True, self._suppressed.pop(key, 0)

    def log(self, level: int, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        emit, suppressed = self._should_emit(tuple(key))
        if not emit:
            return False
        if suppressed:
            msg = f"{msg} (%d similar suppressed)"
            args = (*args, suppressed)
        self._logger.log(level, msg, *args, **kwargs)
        return True

    def warning(self, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        return self.log(logging.WARNING, key, msg, *args, **kwargs)

    def error(self, key: Iterable[Any], msg: str, *args: Any, **kwargs: Any) -> bool:
        return self.log(logging.ERROR, key, msg, *args, **kwargs)

    def reset(self) -> None:
        with self._lock:
            self._last_logged.clear()
            self._suppressed.clear()


_warn_once_lock = threading.Lock()
_warned_keys: set[Hashable] = set()


def warn_once(key: Hashable, msg: str, *args: Any, logger: Optional[logging.Logger] = None) -> bool:
    """Emit a warning once per key for the life of the process."""

    with _warn_once_lock:
        if key in _warned_keys:
            return False
        _warned_keys.add(key)

    (logger or logging.getLogger(__name__)).warning(msg, *args)
    return True


def reset_warn_once_cache() -> None:
    """Test helper to clear the warn-once registry."""

    with _warn_once_lock:
        _warned_keys.clear()
