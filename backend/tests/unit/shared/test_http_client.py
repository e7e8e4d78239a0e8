"""Tests for the base HTTP client."""

import httpx
import pytest

from navfolio.services.shared.http_client import HTTPClient, HTTPClientError


def _client_with(handler, max_retries: int = 1) -> HTTPClient:
    client = HTTPClient(base_url="https://example.test", max_retries=max_retries)
    client._client = httpx.Client(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    )
    return client


class TestHTTPClient:
    def test_get_json_success(self):
        client = _client_with(lambda request: httpx.Response(200, json={"ok": True}))
        assert client.get_json("/ping") == {"ok": True}

    def test_status_error_is_wrapped(self):
        client = _client_with(lambda request: httpx.Response(404, text="not here"))

        with pytest.raises(HTTPClientError) as exc_info:
            client.get("/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.response_body == "not here"

    def test_invalid_json_is_wrapped(self):
        client = _client_with(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(HTTPClientError, match="Invalid JSON"):
            client.get_json("/page")

    def test_status_errors_are_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        client = _client_with(handler, max_retries=3)
        with pytest.raises(HTTPClientError):
            client.get("/boom")

        assert len(calls) == 1

    def test_connect_error_retried_up_to_max(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        client = _client_with(handler, max_retries=2)
        with pytest.raises(HTTPClientError, match="Connection failed"):
            client.get("/down")

        assert len(calls) == 2

    def test_single_attempt_means_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ReadTimeout("slow", request=request)

        client = _client_with(handler)
        with pytest.raises(HTTPClientError, match="timed out"):
            client.get("/slow")

        assert len(calls) == 1

    def test_context_manager_closes_client(self):
        with _client_with(lambda request: httpx.Response(200, json={})) as client:
            client.get_json("/")
        assert client._client is None

    def test_undecodable_body_is_wrapped(self):
        client = _client_with(
            lambda request: httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all"
            )
        )

        with pytest.raises(HTTPClientError, match="Bad response") as exc_info:
            client.get_json("/corrupt")

        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)
