"""Tests for API request logger."""

from unittest.mock import MagicMock, patch

import pytest

from bus_livetimes.adapters.api_request_logger import (
    REDACTED,
    build_url_with_params,
    log_api_request,
    redact_headers,
    redact_params,
    should_log_requests,
)


class TestShouldLogRequests:
    """Tests for should_log_requests function."""

    def test_when_env_not_set_then_returns_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given BUS_LIVETIMES_LOG_REQUESTS not set, when checking, then returns False."""
        monkeypatch.delenv("BUS_LIVETIMES_LOG_REQUESTS", raising=False)

        assert should_log_requests() is False

    @pytest.mark.parametrize("value", ["true", "True", "TRUE"])
    def test_when_env_set_to_true_then_returns_true(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        """Given BUS_LIVETIMES_LOG_REQUESTS=true in any case, when checking, then returns True."""
        monkeypatch.setenv("BUS_LIVETIMES_LOG_REQUESTS", value)

        assert should_log_requests() is True

    def test_when_env_set_to_false_then_returns_false(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Given BUS_LIVETIMES_LOG_REQUESTS=false, when checking, then returns False."""
        monkeypatch.setenv("BUS_LIVETIMES_LOG_REQUESTS", "false")

        assert should_log_requests() is False


class TestRedaction:
    """Tests for redacting credentials."""

    def test_api_key_params_are_redacted(self) -> None:
        """Given a key parameter, when redacting, then its value is replaced."""
        params = {"key": "abc123", "function": "getBusTimes", "ApiKey": "x"}

        redacted = redact_params(params)

        assert redacted == {"key": REDACTED, "function": "getBusTimes", "ApiKey": REDACTED}
        assert params["key"] == "abc123"

    def test_authorization_header_is_redacted(self) -> None:
        """Given an Authorization header, when redacting, then its value is replaced."""
        headers = {"Authorization": "Bearer token", "Accept": "application/json"}

        assert redact_headers(headers) == {"Authorization": REDACTED, "Accept": "application/json"}

    def test_empty_inputs_give_empty_dicts(self) -> None:
        """Given no params or headers, when redacting, then empty dicts are returned."""
        assert redact_params(None) == {}
        assert redact_headers({}) == {}


class TestBuildUrlWithParams:
    """Tests for build_url_with_params function."""

    def test_params_are_sorted_and_appended(self) -> None:
        """Given params, when building the URL, then they are appended in sorted order."""
        url = build_url_with_params("https://example.com/ws.php", {"nb": 4, "module": "json"})

        assert url == "https://example.com/ws.php?module=json&nb=4"

    def test_existing_query_is_extended(self) -> None:
        """Given a URL with a query string, when building the URL, then & joins the params."""
        assert build_url_with_params("https://example.com/?a=1", {"b": 2}) == (
            "https://example.com/?a=1&b=2"
        )

    def test_no_params_returns_url(self) -> None:
        """Given no params, when building the URL, then it is unchanged."""
        assert build_url_with_params("https://example.com", None) == "https://example.com"


class TestLogApiRequest:
    """Tests for log_api_request function."""

    @patch("bus_livetimes.adapters.api_request_logger.should_log_requests")
    @patch("bus_livetimes.adapters.api_request_logger.logger")
    def test_when_logging_disabled_then_does_not_log(
        self, mock_logger: MagicMock, mock_should_log: MagicMock
    ) -> None:
        """Given logging disabled, when calling log_api_request, then does not log."""
        mock_should_log.return_value = False

        log_api_request("GET", "https://example.com/api")

        mock_logger.info.assert_not_called()

    @patch("bus_livetimes.adapters.api_request_logger.should_log_requests")
    @patch("bus_livetimes.adapters.api_request_logger.logger")
    def test_when_logging_enabled_then_logs_redacted_request(
        self, mock_logger: MagicMock, mock_should_log: MagicMock
    ) -> None:
        """Given logging enabled, when logging a keyed request, then the key is not logged."""
        mock_should_log.return_value = True

        log_api_request(
            "GET",
            "https://example.com/ws.php",
            params={"key": "secret", "stopId": "36232626"},
            headers={"Authorization": "Bearer secret"},
        )

        mock_logger.info.assert_called_once()
        message = mock_logger.info.call_args[0][0]
        assert "API Request:" in message
        assert "GET https://example.com/ws.php?" in message
        assert "stopId=36232626" in message
        assert "secret" not in message
        assert REDACTED in message
