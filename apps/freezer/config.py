from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from packages.perception.cloud_vision import VISION_ENDPOINT

DEFAULT_HOTKEY = "alt+p"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@dataclass(slots=True)
class AppConfig:
    hotkey: str = DEFAULT_HOTKEY
    dev_mode: bool = False
    fixture_image: Path | None = None
    settings_path: Path = Path(".freezer_settings.json")
    ocr_endpoint: str = VISION_ENDPOINT
    ocr_timeout_seconds: float = 20.0
    ocr_cache_dir: Path = Path(".freezer_ocr_cache")
    step_timeout_seconds: float | None = None
    api_port: int = 8002

    @classmethod
    def from_env(cls) -> "AppConfig":
        fixture = os.getenv("FREEZER_FIXTURE_IMAGE", "").strip()
        return cls(
            hotkey=os.getenv("FREEZER_HOTKEY", DEFAULT_HOTKEY).strip() or DEFAULT_HOTKEY,
            dev_mode=_env_bool("FREEZER_DEV_MODE"),
            fixture_image=Path(fixture) if fixture else None,
            settings_path=Path(os.getenv("FREEZER_SETTINGS_PATH", ".freezer_settings.json")),
            ocr_endpoint=os.getenv("FREEZER_OCR_ENDPOINT", VISION_ENDPOINT).strip() or VISION_ENDPOINT,
            ocr_timeout_seconds=_env_float("FREEZER_OCR_TIMEOUT") or 20.0,
            ocr_cache_dir=Path(os.getenv("FREEZER_OCR_CACHE_DIR", ".freezer_ocr_cache")),
            step_timeout_seconds=_env_float("FREEZER_STEP_TIMEOUT"),
            api_port=int(os.getenv("FREEZER_API_PORT", "8002")),
        )
