"""OCR pipeline: preprocess a capture, recognize text remotely, parse words."""

from .cache import OcrCache
from .cloud_vision import CloudVisionProvider, OcrProvider
from .image_utils import OCR_TARGET_HEIGHT, prepare_screenshot_for_ocr
from .ocr import parse_annotation, select_language
from .pipeline import OcrPipeline, run_ocr

__all__ = [
    "CloudVisionProvider",
    "OCR_TARGET_HEIGHT",
    "OcrCache",
    "OcrPipeline",
    "OcrProvider",
    "parse_annotation",
    "prepare_screenshot_for_ocr",
    "run_ocr",
    "select_language",
]
