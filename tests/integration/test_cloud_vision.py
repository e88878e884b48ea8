from __future__ import annotations

import json

import httpx
import pytest

from packages.contracts.errors import CredentialMissingError, OcrFormatError, OcrProviderError
from packages.perception.cloud_vision import VISION_ENDPOINT, CloudVisionProvider
from tests.fixtures.sample_data import block, vision_response, word


def _provider(handler, api_key: str | None = "secret") -> CloudVisionProvider:
    return CloudVisionProvider(api_key=lambda: api_key, transport=httpx.MockTransport(handler))


def test_posts_text_detection_request_with_key_header() -> None:
    seen: list[httpx.Request] = []
    body = vision_response([block([word("Hi")])])

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=body)

    assert _provider(handler).annotate("aGVsbG8=") == body

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == VISION_ENDPOINT
    assert request.headers["X-goog-api-key"] == "secret"
    assert json.loads(request.content) == {
        "requests": [{"image": {"content": "aGVsbG8="}, "features": {"type": "TEXT_DETECTION"}}]
    }


def test_non_success_status_carries_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text='{"error": "API key not valid"}')

    with pytest.raises(OcrProviderError) as excinfo:
        _provider(handler).annotate("aGVsbG8=")
    assert excinfo.value.status_code == 403
    assert "API key not valid" in excinfo.value.body


def test_transport_failure_is_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(OcrProviderError) as excinfo:
        _provider(handler).annotate("aGVsbG8=")
    assert excinfo.value.status_code is None


def test_missing_key_fails_before_any_request() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(CredentialMissingError):
        _provider(handler, api_key=None).annotate("aGVsbG8=")
    assert calls == []


def test_non_json_body_is_format_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(OcrFormatError):
        _provider(handler).annotate("aGVsbG8=")


def test_key_is_read_on_every_request() -> None:
    keys = iter(["first", "second"])
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["X-goog-api-key"])
        return httpx.Response(200, json={})

    provider = CloudVisionProvider(api_key=lambda: next(keys), transport=httpx.MockTransport(handler))
    provider.annotate("a")
    provider.annotate("b")
    assert seen == ["first", "second"]
