from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

import httpx

from packages.contracts.errors import CredentialMissingError, OcrFormatError, OcrProviderError

logger = logging.getLogger("freezer.ocr")

VISION_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"
API_KEY_SETTING = "google_cloud_api_key"


class OcrProvider(Protocol):
    def annotate(self, image_base64: str) -> dict[str, Any]:
        ...


def build_request(image_base64: str) -> dict[str, Any]:
    return {
        "requests": [
            {
                "image": {"content": image_base64},
                "features": {"type": "TEXT_DETECTION"},
            }
        ]
    }


class CloudVisionProvider(OcrProvider):
    """Text detection through the Google Cloud Vision REST API.

    The API key is looked up through ``api_key`` on every request so edits made from the
    settings surface apply without a restart.
    """

    def __init__(
        self,
        api_key: Callable[[], str | None],
        endpoint: str = VISION_ENDPOINT,
        timeout_seconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout_seconds
        self._transport = transport

    def annotate(self, image_base64: str) -> dict[str, Any]:
        key = (self._api_key() or "").strip()
        if not key:
            raise CredentialMissingError(API_KEY_SETTING)

        headers = {
            "X-goog-api-key": key,
            "Content-Type": "application/json; charset=utf-8",
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self._endpoint, json=build_request(image_base64), headers=headers)
        except httpx.HTTPError as exc:
            raise OcrProviderError(None, f"{exc.__class__.__name__}: {exc}") from exc

        if not response.is_success:
            logger.warning("OCR provider rejected request status=%s", response.status_code)
            raise OcrProviderError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise OcrFormatError(f"OCR response is not JSON: {exc}") from exc
