from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from packages.contracts.models import ProcessHandle


class ProcessGateway(Protocol):
    def find_foreground_process(self) -> ProcessHandle:
        ...

    def suspend(self, pid: int) -> None:
        ...

    def resume(self, pid: int) -> None:
        ...

    def bring_to_foreground(self, hwnd: int) -> None:
        ...


class CaptureGateway(Protocol):
    def capture_window(self, hwnd: int) -> bytes:
        ...


@dataclass(slots=True)
class Gateways:
    """The native capabilities one controller runs against, chosen once at startup."""

    process: ProcessGateway
    capture: CaptureGateway
