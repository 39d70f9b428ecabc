import logging

import pytest
import requests

from football_standings import net_retry
from football_standings.net_retry import request_with_retries, sanitize_error_message


class FakeSession:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = 0

    def request(self, method, url, timeout=None, **kwargs):
        self.calls += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_response(status_code):
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK" if status_code == 200 else "Error"
    response._content = b"{}"
    response.url = "https://example.test/api"
    return response


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    monkeypatch.setattr("football_standings.net_retry.time.sleep", lambda _duration: None)


def test_single_attempt_by_default():
    session = FakeSession([requests.exceptions.ConnectionError("down"), make_response(200)])

    with pytest.raises(requests.exceptions.ConnectionError):
        request_with_retries("GET", "https://example.test/api", session=session)

    assert session.calls == 1


def test_retries_timeouts_until_success(caplog):
    session = FakeSession(
        [
            requests.exceptions.Timeout("slow"),
            requests.exceptions.Timeout("slow"),
            make_response(200),
        ]
    )

    with caplog.at_level(logging.WARNING):
        response = request_with_retries("GET", "https://example.test/api", retries=3, session=session)

    assert response.status_code == 200
    assert session.calls == 3
    assert sum("Retrying" in r.getMessage() for r in caplog.records) == 2


def test_client_errors_are_not_retried():
    session = FakeSession([make_response(401), make_response(200)])

    with pytest.raises(requests.exceptions.HTTPError):
        request_with_retries("GET", "https://example.test/api", retries=3, session=session)

    assert session.calls == 1


def test_gives_up_after_budget(caplog):
    session = FakeSession([make_response(503), make_response(503)])

    with caplog.at_level(logging.ERROR):
        with pytest.raises(requests.exceptions.HTTPError):
            request_with_retries("GET", "https://example.test/api", retries=2, session=session)

    assert session.calls == 2
    assert any("after 2 attempts" in r.getMessage() for r in caplog.records)


def test_cached_session_reused():
    net_retry._get_session.cache_clear()
    first = net_retry._get_session(0.5, (429, 500))
    second = net_retry._get_session(0.5, (429, 500))
    assert first is second


def test_sanitize_error_message_masks_keys():
    assert sanitize_error_message("X-Auth-Token: abc123") == "X-Auth-Token: ***"
    assert sanitize_error_message("GET /x?apiKey=abc.123") == "GET /x?apiKey=***"
    assert sanitize_error_message("{'X-Auth-Token': 'abc123'}") == "{'X-Auth-Token: ***'}"
    assert sanitize_error_message("") == ""
