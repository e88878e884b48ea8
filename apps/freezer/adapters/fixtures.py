from __future__ import annotations

import logging
from pathlib import Path

from packages.contracts.errors import GatewayError
from packages.contracts.models import ProcessHandle

from .base import CaptureGateway, ProcessGateway

logger = logging.getLogger("freezer.gateway")


class FixtureProcessGateway(ProcessGateway):
    """Stands in for the OS in dev mode: reports a fixed process and touches nothing."""

    def __init__(self, pid: int = 1, hwnd: int = 1, scale_factor: float = 1.0) -> None:
        self.handle = ProcessHandle(pid=pid, hwnd=hwnd, scale_factor=scale_factor)

    def find_foreground_process(self) -> ProcessHandle:
        return self.handle

    def suspend(self, pid: int) -> None:
        logger.info("dev-mode suspend pid=%s", pid)

    def resume(self, pid: int) -> None:
        logger.info("dev-mode resume pid=%s", pid)

    def bring_to_foreground(self, hwnd: int) -> None:
        logger.info("dev-mode bring to foreground hwnd=%s", hwnd)


class FixtureCaptureGateway(CaptureGateway):
    def __init__(self, image_path: Path) -> None:
        self.image_path = image_path

    def capture_window(self, hwnd: int) -> bytes:
        try:
            return self.image_path.read_bytes()
        except OSError as exc:
            raise GatewayError("capture window", f"cannot read fixture {self.image_path}: {exc}") from exc
