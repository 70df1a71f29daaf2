"""Tests for the tracker error mapper."""

import asyncio
import json
import socket
from unittest.mock import MagicMock

import aiohttp
import pytest

from bus_livetimes.adapters.tracker.error_mapper import ErrorMapper
from bus_livetimes.domain.models import (
    AuthenticationError,
    NetworkError,
    NoConnectivityError,
    RequestCancelledError,
    RequestRejectedError,
    RequestTimeoutError,
    ServerError,
    UnknownHostError,
)


class TestMapHttpStatusCode:
    """Tests for map_http_status_code."""

    @pytest.mark.parametrize("code", [500, 502, 503, 504, 599])
    def test_5xx_maps_to_server_error(self, code: int) -> None:
        """Given a 5xx status, when mapping, then ServerError with that code is returned."""
        result = ErrorMapper.map_http_status_code(code)

        assert result == ServerError(code=code)
        assert result.retryable is True

    @pytest.mark.parametrize("code", [401, 403])
    def test_auth_statuses_map_to_authentication_error(self, code: int) -> None:
        """Given 401 or 403, when mapping, then AuthenticationError is returned."""
        assert ErrorMapper.map_http_status_code(code) == AuthenticationError(code=code)

    @pytest.mark.parametrize("code", [400, 404, 405, 410, 414, 422])
    def test_client_errors_map_to_rejected(self, code: int) -> None:
        """Given a request-level 4xx, when mapping, then RequestRejectedError is returned."""
        result = ErrorMapper.map_http_status_code(code)

        assert result == RequestRejectedError(code=code)
        assert result.retryable is False

    def test_408_maps_to_timeout(self) -> None:
        """Given 408, when mapping, then RequestTimeoutError is returned."""
        assert ErrorMapper.map_http_status_code(408) == RequestTimeoutError()

    def test_429_maps_to_retryable_server_error(self) -> None:
        """Given 429, when mapping, then a retryable ServerError is returned."""
        result = ErrorMapper.map_http_status_code(429)

        assert isinstance(result, ServerError)
        assert result.code == 429
        assert result.retryable is True

    @pytest.mark.parametrize("code", [0, 302, 418, 600, -1])
    def test_unexpected_codes_map_to_server_error(self, code: int) -> None:
        """Given any other code, when mapping, then ServerError is returned."""
        assert ErrorMapper.map_http_status_code(code) == ServerError(code=code)


class TestMapFaultCode:
    """Tests for map_fault_code."""

    def test_invalid_app_key_is_authentication(self) -> None:
        """Given INVALID_APP_KEY, when mapping, then AuthenticationError is returned."""
        assert ErrorMapper.map_fault_code("INVALID_APP_KEY") == AuthenticationError()

    def test_invalid_parameter_is_rejected(self) -> None:
        """Given INVALID_PARAMETER, when mapping, then RequestRejectedError is returned."""
        assert isinstance(ErrorMapper.map_fault_code("INVALID_PARAMETER"), RequestRejectedError)

    @pytest.mark.parametrize(
        "fault", ["PROCESSING_ERROR", "SYSTEM_MAINTENANCE", "SYSTEM_OVERLOADED", "SOMETHING_NEW"]
    )
    def test_other_faults_are_server_errors(self, fault: str) -> None:
        """Given a service-side fault, when mapping, then ServerError with a reason is returned."""
        result = ErrorMapper.map_fault_code(fault)

        assert isinstance(result, ServerError)
        assert result.code is None
        assert result.reason


class TestMapException:
    """Tests for map_exception."""

    def test_timeout_maps_to_request_timeout(self) -> None:
        """Given a timeout, when mapping, then RequestTimeoutError is returned."""
        assert ErrorMapper.map_exception(asyncio.TimeoutError()) == RequestTimeoutError()
        assert ErrorMapper.map_exception(aiohttp.ServerTimeoutError()) == RequestTimeoutError()

    def test_dns_failure_maps_to_unknown_host(self) -> None:
        """Given a connector error caused by name resolution, when mapping, then UnknownHost."""
        connection_key = MagicMock()
        connection_key.host = "tracker.example"
        connection_key.port = 80
        exc = aiohttp.ClientConnectorError(connection_key, socket.gaierror(-2, "Name unknown"))

        result = ErrorMapper.map_exception(exc)

        assert result == UnknownHostError(host="tracker.example")

    def test_connection_reset_maps_to_network_error(self) -> None:
        """Given another I/O failure, when mapping, then NetworkError carries the cause."""
        exc = ConnectionResetError("reset")

        result = ErrorMapper.map_exception(exc)

        assert isinstance(result, NetworkError)
        assert result.cause is exc

    def test_undecodable_payload_maps_to_network_error(self) -> None:
        """Given a JSON decode error, when mapping, then NetworkError is returned."""
        exc = json.JSONDecodeError("Expecting value", "<html>", 0)

        assert isinstance(ErrorMapper.map_exception(exc), NetworkError)


def test_cancelled_and_no_connectivity() -> None:
    """Given the dedicated constructors, when called, then their variants are returned."""
    assert ErrorMapper.cancelled() == RequestCancelledError()
    assert ErrorMapper.no_connectivity() == NoConnectivityError()
