"""Unit tests for shared HTTP client wrappers."""

from __future__ import annotations

import json

import httpx
import pytest

from packages.reconciler_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)


def test_http_client_decode_json_returns_decoded_payload() -> None:
    """HttpClient.decode_json should decode and return JSON content."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True}, request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        assert client.decode_json(client.request("GET", "/health")) == {"ok": True}
    finally:
        client.close()


def test_http_client_maps_status_failure_to_typed_error() -> None:
    """HttpClient should raise HttpStatusError on non-2xx status codes."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(HttpStatusError) as exc_info:
            client.request("GET", "/health")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "GET"
    assert error.status_code == 503
    assert error.retryable is True
    assert error.response_body == "unavailable"


def test_http_client_maps_transport_failure_to_typed_error() -> None:
    """HttpClient should raise HttpRequestError on transport failures."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection failed", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(HttpRequestError) as exc_info:
            client.request("GET", "/health")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "GET"
    assert error.url == "https://example.test/health"
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ConnectError)


def test_http_client_maps_json_decode_failure_to_typed_error() -> None:
    """HttpClient should raise HttpJsonDecodeError for invalid JSON payloads."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not-json", request=request)

    client = HttpClient(
        base_url="https://example.test",
        transport=httpx.MockTransport(handler),
    )
    try:
        with pytest.raises(HttpJsonDecodeError) as exc_info:
            client.decode_json(client.request("GET", "/health"))
    finally:
        client.close()

    error = exc_info.value
    assert error.status_code == 200
    assert error.method == "GET"
    assert error.response_body == "not-json"


def test_http_client_request_sends_json_body() -> None:
    """HttpClient.request should forward the JSON body and method."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204, request=request)

    with HttpClient(
        base_url="https://example.test",
        headers={"X-Vault-Request": "true"},
        transport=httpx.MockTransport(handler),
    ) as client:
        response = client.request(
            "PUT", "/v1/auth/approle/role/web", json={"token_ttl": 60}
        )

    assert response.status_code == 204
    assert seen[0].method == "PUT"
    assert seen[0].headers["X-Vault-Request"] == "true"
    assert json.loads(seen[0].read()) == {"token_ttl": 60}

