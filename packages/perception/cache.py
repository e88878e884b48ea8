from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from packages.contracts.utils import content_fingerprint

logger = logging.getLogger("freezer.ocr")


class OcrCache:
    """Raw provider responses keyed by the hash of the encoded image. Dev mode only."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, image_base64: str) -> Path:
        return self.directory / f"{content_fingerprint(image_base64)}.json"

    def get(self, image_base64: str) -> dict[str, Any] | None:
        path = self._path(image_base64)
        if not path.exists():
            return None
        logger.debug("OCR cache hit path=%s", path.name)
        return json.loads(path.read_text(encoding="utf-8"))

    def put(self, image_base64: str, body: dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(image_base64).write_text(json.dumps(body), encoding="utf-8")
