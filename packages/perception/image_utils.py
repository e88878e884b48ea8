from __future__ import annotations

import base64
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from packages.contracts.errors import OcrError

OCR_TARGET_HEIGHT = 1080


def decode_png(png: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(png))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise OcrError(f"capture is not a readable image: {exc}") from exc
    return image.convert("RGB")


def encode_image_to_base64(image: Image.Image, fmt: str = "PNG") -> str:
    buf = BytesIO()
    image.save(buf, format=fmt)
    return base64.b64encode(buf.getvalue()).decode("ascii")


def scaled_size(width: int, height: int, target_height: int) -> tuple[int, int]:
    return max(1, int(width * target_height / height)), target_height


def prepare_screenshot_for_ocr(png: bytes, target_height: int = OCR_TARGET_HEIGHT) -> str:
    """Resize a capture to ``target_height`` keeping its aspect ratio and return base64 JPEG."""
    if target_height <= 0:
        raise ValueError("target_height must be positive")
    image = decode_png(png)
    size = scaled_size(image.width, image.height, target_height)
    if size != image.size:
        image = image.resize(size, Image.Resampling.BICUBIC)
    return encode_image_to_base64(image, fmt="JPEG")
