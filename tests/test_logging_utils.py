import logging

from football_standings.logging_utils import RateLimitedLogger, reset_warn_once_cache, warn_once


def test_rate_limited_logger_suppresses_within_window(caplog):
    logger = logging.getLogger("football_standings.tests.throttle")
    throttled = RateLimitedLogger(logger, window_seconds=60)

    with caplog.at_level(logging.WARNING, logger=logger.name):
        assert throttled.warning(("cache_read",), "Cache read failed: %s", "down") is True
        assert throttled.warning(("cache_read",), "Cache read failed: %s", "down") is False
        assert throttled.warning(("cache_write",), "Cache write failed: %s", "down") is True

    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["Cache read failed: down", "Cache write failed: down"]


def test_rate_limited_logger_reports_suppressed_count(caplog):
    logger = logging.getLogger("football_standings.tests.throttle_count")
    throttled = RateLimitedLogger(logger, window_seconds=60)

    with caplog.at_level(logging.WARNING, logger=logger.name):
        throttled.warning(("k",), "first")
        throttled.warning(("k",), "second")
        throttled._last_logged[("k",)] -= 120
        throttled.warning(("k",), "third")

    assert [r.getMessage() for r in caplog.records] == ["first", "third (1 similar suppressed)"]


def test_warn_once(caplog):
    reset_warn_once_cache()
    logger = logging.getLogger("football_standings.tests.once")

    with caplog.at_level(logging.WARNING, logger=logger.name):
        assert warn_once("missing_key", "key %s missing", "X", logger=logger) is True
        assert warn_once("missing_key", "key %s missing", "X", logger=logger) is False

    assert [r.getMessage() for r in caplog.records] == ["key X missing"]
    reset_warn_once_cache()


def test_setup_logger_file_logging_is_opt_in(monkeypatch, tmp_path):
    from logging.handlers import RotatingFileHandler

    from football_standings.config import setup_logger

    package_logger = logging.getLogger("football_standings")
    log_file = tmp_path / "logs" / "standings.log"

    monkeypatch.delenv("LOG_FILE", raising=False)
    setup_logger("football_standings.tests.file_off")
    assert not any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_file)
        for h in package_logger.handlers
    )

    monkeypatch.setenv("LOG_FILE", str(log_file))
    logger = setup_logger("football_standings.tests.file_on")
    setup_logger("football_standings.tests.file_on_again")
    handlers = [
        h for h in package_logger.handlers
        if isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_file)
    ]
    try:
        assert len(handlers) == 1
        assert logger.propagate is True
        logger.warning("written to file")
        handlers[0].flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in handlers:
            package_logger.removeHandler(h)
            h.close()
