"""Tests for configuration adapter."""

import pytest

from sbb_departures.adapters.config import AppConfig
from sbb_departures.domain.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OJP_API_KEY", "PORT", "LOG_LEVEL", "QUICK_REFRESH_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def test_config_loads_defaults() -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    config = AppConfig(_env_file=None)

    assert config.host == "0.0.0.0"
    assert config.port == 8000
    assert config.quick_refresh_seconds == 30
    assert config.full_refresh_seconds == 180
    assert config.max_retries == 3
    assert config.max_cached_quick_cycles == 5
    assert config.timezone == "Europe/Zurich"
    assert config.ojp_api_key is None


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given environment variables, when loading config, then they are used."""
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("OJP_API_KEY", "token")
    monkeypatch.setenv("QUICK_REFRESH_SECONDS", "10")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = AppConfig(_env_file=None)

    assert config.port == 9000
    assert config.ojp_api_key == "token"
    assert config.quick_refresh_seconds == 10
    assert config.log_level == "DEBUG"


def test_config_rejects_non_positive_interval() -> None:
    """Given a zero refresh interval, when loading config, then validation fails."""
    with pytest.raises(ValueError, match="intervals must be positive"):
        AppConfig.for_testing(full_refresh_seconds=0)


def test_config_rejects_unknown_log_level() -> None:
    """Given an unknown log level, when loading config, then validation fails."""
    with pytest.raises(ValueError, match="log_level must be one of"):
        AppConfig.for_testing(log_level="chatty")


def test_config_rejects_zero_cache_bound() -> None:
    """Given a cache bound of zero, when loading config, then validation fails."""
    with pytest.raises(ValueError, match="max_cached_quick_cycles must be at least 1"):
        AppConfig.for_testing(max_cached_quick_cycles=0)


def test_for_testing_ignores_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given a key in the environment, when building a test config, then it is not picked up."""
    monkeypatch.setenv("OJP_API_KEY", "from-env")

    config = AppConfig.for_testing(port=8123)

    assert config.ojp_api_key is None
    assert config.port == 8123


def test_require_ojp_api_key_returns_key() -> None:
    """Given a configured key, when requiring it, then it is returned."""
    config = AppConfig.for_testing(ojp_api_key="secret")

    assert config.require_ojp_api_key() == "secret"


def test_require_ojp_api_key_raises_when_missing() -> None:
    """Given no key, when requiring it, then a configuration error is raised."""
    config = AppConfig.for_testing()

    with pytest.raises(ConfigurationError, match="OJP_API_KEY"):
        config.require_ojp_api_key()
