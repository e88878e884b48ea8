from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from packages.contracts.errors import OcrFormatError, OcrProviderError
from packages.contracts.models import OcrResult, Word

logger = logging.getLogger("freezer.ocr")

WORD_BLOCK_TYPES = {"TEXT", "TABLE"}


def _require(container: Any, key: str | int, path: str) -> Any:
    try:
        value = container[key]
    except (KeyError, IndexError, TypeError):
        raise OcrFormatError(f"OCR response is missing {path}") from None
    if value is None:
        raise OcrFormatError(f"OCR response is missing {path}")
    return value


def select_language(detected_languages: list[dict[str, Any]]) -> str:
    """Return the language code the provider lists first."""
    if not detected_languages:
        raise OcrFormatError("OCR response has an empty detectedLanguages list")
    return _require(detected_languages[0], "languageCode", "detectedLanguages[0].languageCode")


def parse_annotation(body: dict[str, Any]) -> OcrResult:
    """Convert an images:annotate response into an OcrResult."""
    first = _require(_require(body, "responses", "responses"), 0, "responses[0]")
    if isinstance(first, dict) and first.get("error"):
        error = first["error"]
        raise OcrProviderError(error.get("code"), error.get("message", str(error)))

    annotation = _require(first, "fullTextAnnotation", "responses[0].fullTextAnnotation")
    page = _require(_require(annotation, "pages", "fullTextAnnotation.pages"), 0, "pages[0]")
    languages = _require(
        _require(page, "property", "pages[0].property"),
        "detectedLanguages",
        "pages[0].property.detectedLanguages",
    )

    words: list[Word] = []
    for block in page.get("blocks") or []:
        if block.get("blockType") not in WORD_BLOCK_TYPES:
            continue
        for paragraph in block.get("paragraphs") or []:
            for raw_word in paragraph.get("words") or []:
                text = "".join(symbol.get("text", "") for symbol in raw_word.get("symbols") or [])
                vertices = _require(raw_word.get("boundingBox"), "vertices", "word.boundingBox.vertices")
                try:
                    words.append(Word(id=len(words), text=text, bounding_box=vertices))
                except ValidationError as exc:
                    raise OcrFormatError(f"malformed word bounding box: {exc}") from exc

    result = OcrResult(detected_language=select_language(languages), words=words)
    logger.debug("parsed OCR response language=%s words=%s", result.detected_language, len(words))
    return result
