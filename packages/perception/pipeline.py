from __future__ import annotations

import logging

from packages.contracts.models import OcrResult

from .cache import OcrCache
from .cloud_vision import OcrProvider
from .image_utils import OCR_TARGET_HEIGHT, prepare_screenshot_for_ocr
from .ocr import parse_annotation

logger = logging.getLogger("freezer.ocr")


class OcrPipeline:
    def __init__(
        self,
        provider: OcrProvider,
        cache: OcrCache | None = None,
        target_height: int = OCR_TARGET_HEIGHT,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.target_height = target_height

    def run(self, capture_png: bytes) -> OcrResult:
        image_base64 = prepare_screenshot_for_ocr(capture_png, self.target_height)
        body = self.cache.get(image_base64) if self.cache else None
        if body is None:
            body = self.provider.annotate(image_base64)
            result = parse_annotation(body)
            if self.cache:
                self.cache.put(image_base64, body)
        else:
            result = parse_annotation(body)
        logger.info("OCR finished language=%s words=%s", result.detected_language, len(result.words))
        return result


def run_ocr(capture_png: bytes, provider: OcrProvider, cache: OcrCache | None = None) -> OcrResult:
    return OcrPipeline(provider=provider, cache=cache).run(capture_png)
