"""Tests for httpx error classification."""

import httpx
import pytest

from farmos_client.api_clients.exceptions import (
    AuthenticationError,
    DNSResolutionError,
    HTTPError,
    NetworkConnectionError,
    NetworkTimeoutError,
    RateLimitError,
    ServerError,
    SSLCertificateError,
)
from farmos_client.api_clients.network_error_handler import NetworkErrorHandler

REQUEST = httpx.Request("GET", "https://farm.example.com/farm.json")


def status_error(status_code, **kwargs):
    response = httpx.Response(status_code, request=REQUEST, **kwargs)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=REQUEST, response=response)


@pytest.fixture
def handler():
    return NetworkErrorHandler()


@pytest.mark.parametrize(
    "error, expected",
    [
        (httpx.ConnectError("Name or service not known", request=REQUEST), DNSResolutionError),
        (
            httpx.ConnectError("[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed", request=REQUEST),
            SSLCertificateError,
        ),
        (httpx.ConnectError("Connection refused", request=REQUEST), NetworkConnectionError),
        (httpx.ReadTimeout("timed out", request=REQUEST), NetworkTimeoutError),
        (httpx.RemoteProtocolError("peer closed", request=REQUEST), NetworkConnectionError),
    ],
)
def test_transport_errors(handler, error, expected):
    with pytest.raises(expected) as exc_info:
        handler.classify_network_error(error)

    assert exc_info.value.__cause__ is error
    assert exc_info.value.user_guidance


def test_client_error_keeps_response(handler):
    error = status_error(422, json={"error": "Unprocessable", "error_description": "Bad field"})

    with pytest.raises(HTTPError) as exc_info:
        handler.classify_network_error(error)

    assert type(exc_info.value) is HTTPError
    assert exc_info.value.status_code == 422
    assert exc_info.value.response is error.response
    assert str(exc_info.value) == "Bad field"


def test_plain_text_error_body(handler):
    with pytest.raises(HTTPError, match="Access denied"):
        handler.classify_network_error(status_error(403, text="Access denied"))


def test_unauthorized_is_authentication_error(handler):
    error = status_error(401, json={"error": "invalid_token"})

    with pytest.raises(AuthenticationError) as exc_info:
        handler.classify_network_error(error)

    assert exc_info.value.status_code == 401
    assert exc_info.value.__cause__ is error


def test_server_error(handler):
    with pytest.raises(ServerError) as exc_info:
        handler.classify_network_error(status_error(503))
    assert exc_info.value.status_code == 503


def test_rate_limit_retry_after(handler):
    error = status_error(429, headers={"Retry-After": "12"})

    with pytest.raises(RateLimitError) as exc_info:
        handler.classify_network_error(error)

    assert exc_info.value.retry_after == 12


def test_raise_for_status_passes_success(handler):
    handler.raise_for_status(httpx.Response(200, request=REQUEST))
