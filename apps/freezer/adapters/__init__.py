from __future__ import annotations

from pathlib import Path

from .base import CaptureGateway, Gateways, ProcessGateway
from .fixtures import FixtureCaptureGateway, FixtureProcessGateway
from .screen import Win32CaptureGateway
from .window import Win32ProcessGateway

DEFAULT_FIXTURE_IMAGE = Path("tests/fixtures/frame.png")


def build_gateways(dev_mode: bool, fixture_image: Path | None = None) -> Gateways:
    if dev_mode:
        return Gateways(
            process=FixtureProcessGateway(),
            capture=FixtureCaptureGateway(fixture_image or DEFAULT_FIXTURE_IMAGE),
        )
    return Gateways(process=Win32ProcessGateway(), capture=Win32CaptureGateway())


__all__ = [
    "CaptureGateway",
    "FixtureCaptureGateway",
    "FixtureProcessGateway",
    "Gateways",
    "ProcessGateway",
    "Win32CaptureGateway",
    "Win32ProcessGateway",
    "build_gateways",
]
