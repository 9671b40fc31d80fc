"""Tests for API request logger."""

import logging

import pytest

from sbb_departures.adapters.api_request_logger import log_api_request, should_log_requests


class TestShouldLogRequests:
    """Tests for should_log_requests function."""

    def test_when_env_not_set_then_returns_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given SBB_LOG_REQUESTS not set, when checking, then returns False."""
        monkeypatch.delenv("SBB_LOG_REQUESTS", raising=False)

        assert should_log_requests() is False

    def test_when_env_set_to_true_capitalized_then_returns_true(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Given SBB_LOG_REQUESTS=True, when checking, then returns True."""
        monkeypatch.setenv("SBB_LOG_REQUESTS", "True")

        assert should_log_requests() is True


class TestLogApiRequest:
    """Tests for log_api_request function."""

    def test_when_disabled_then_nothing_is_logged(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Given logging disabled, when logging a request, then no record is emitted."""
        monkeypatch.delenv("SBB_LOG_REQUESTS", raising=False)

        with caplog.at_level(logging.INFO):
            log_api_request("GET", "https://transport.opendata.ch/v1/stationboard")

        assert caplog.records == []

    def test_when_enabled_then_credentials_are_redacted(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Given a bearer header, when logging, then the token never appears in the log."""
        monkeypatch.setenv("SBB_LOG_REQUESTS", "true")

        with caplog.at_level(logging.INFO):
            log_api_request(
                "POST",
                "https://api.opentransportdata.swiss/ojp20",
                headers={"Authorization": "Bearer secret-token", "Content-Type": "application/xml"},
                body="<OJP/>",
            )

        assert "secret-token" not in caplog.text
        assert "***REDACTED***" in caplog.text
        assert "application/xml" in caplog.text
        assert "Body: <OJP/>" in caplog.text

    def test_when_enabled_then_repeated_params_are_rendered(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Given repeated via[] parameters, when logging, then each appears in the query."""
        monkeypatch.setenv("SBB_LOG_REQUESTS", "true")

        with caplog.at_level(logging.INFO):
            log_api_request(
                "GET",
                "https://transport.opendata.ch/v1/connections",
                params=[("from", "Zürich HB"), ("via[]", "Aarau"), ("via[]", "Suhr")],
            )

        assert "connections?from=Zürich HB&via[]=Aarau&via[]=Suhr" in caplog.text
