from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SessionPhase = Literal[
    "idle",
    "acquiring",
    "suspending",
    "capturing",
    "recognizing",
    "ready",
    "failed",
    "deactivating",
]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ProcessHandle(BaseModel):
    """A foreground process and one of its top-level windows at capture time.

    Accepts the native shape ``{pid, hwnd, scale_factor}``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    process_id: int = Field(alias="pid", ge=0)
    window_handle: int = Field(alias="hwnd")
    display_scale: float = Field(alias="scale_factor", gt=0)


class Vertex(WireModel):
    x: int = 0
    y: int = 0


class Word(WireModel):
    id: int = Field(ge=0)
    text: str
    bounding_box: tuple[Vertex, Vertex, Vertex, Vertex]


class OcrResult(WireModel):
    detected_language: str
    words: list[Word] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(word.text for word in self.words)


class SessionSnapshot(WireModel):
    active: bool = False
    phase: SessionPhase = "idle"
    suspended: bool = False
    process: ProcessHandle | None = None
    capture_url: str | None = None
    ocr_result: OcrResult | None = None
    loading_error: str | None = None


class SettingsPayload(WireModel):
    google_cloud_api_key: str | None = None
