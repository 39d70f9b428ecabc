import pytest

from football_standings import settings
from football_standings.cache import MemoryCacheStore
from football_standings.composition import providers
from football_standings.errors import ConfigurationError
from football_standings.settings import _get_bool, _read_secret_file


def test_missing_api_key_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "FOOTBALL_API_KEY", None)
    with pytest.raises(ConfigurationError):
        providers.standings_client()


def test_missing_cache_url_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", None)
    with pytest.raises(ConfigurationError):
        providers.cache_store()


def test_build_service_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "FOOTBALL_API_KEY", "abc")
    monkeypatch.setattr(settings, "FOOTBALL_API_BASE", "https://upstream.test/v4")
    monkeypatch.setattr(settings, "REDIS_URL", "memory://")
    monkeypatch.setattr(settings, "CACHE_FAIL_OPEN", False)

    service = providers.build_service()

    assert isinstance(service.cache, MemoryCacheStore)
    assert service.upstream.api_key == "abc"
    assert service.upstream.standings_url("2021") == "https://upstream.test/v4/competitions/2021/standings"
    assert service.fail_open is False
    assert service.ttl == 900


def test_get_bool(monkeypatch):
    monkeypatch.setenv("SINGLE_FLIGHT", "off")
    assert _get_bool("SINGLE_FLIGHT", True) is False
    monkeypatch.setenv("SINGLE_FLIGHT", "Yes")
    assert _get_bool("SINGLE_FLIGHT", False) is True
    monkeypatch.delenv("SINGLE_FLIGHT")
    assert _get_bool("SINGLE_FLIGHT", True) is True


def test_read_secret_file(tmp_path):
    secret = tmp_path / "key.txt"
    secret.write_text("  s3cret\n", encoding="utf-8")
    assert _read_secret_file(str(secret)) == "s3cret"
    assert _read_secret_file(str(tmp_path / "missing.txt")) is None
    assert _read_secret_file(None) is None
