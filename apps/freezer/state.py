from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable
from uuid import uuid4

from packages.contracts.models import OcrResult, ProcessHandle, SessionPhase, SessionSnapshot

logger = logging.getLogger("freezer.state")

CAPTURE_URL_PREFIX = "/v1/captures/"

SessionObserver = Callable[[SessionSnapshot], None]


@dataclass(frozen=True, slots=True)
class Capture:
    png: bytes
    handle: str


class CaptureRegistry:
    """Issues display handles for capture bytes until they are released."""

    def __init__(self) -> None:
        self._images: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def create(self, png: bytes) -> str:
        capture_id = uuid4().hex
        with self._lock:
            self._images[capture_id] = png
        return f"{CAPTURE_URL_PREFIX}{capture_id}"

    def resolve(self, capture_id: str) -> bytes | None:
        with self._lock:
            return self._images.get(capture_id)

    def release(self, handle: str) -> bool:
        capture_id = handle.removeprefix(CAPTURE_URL_PREFIX)
        with self._lock:
            return self._images.pop(capture_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)


class SessionState:
    """The current capture session, written by the controller and observed by everyone else.

    ``clear()`` is the only way back to the inactive shape.
    """

    def __init__(self, captures: CaptureRegistry | None = None) -> None:
        self.captures = captures or CaptureRegistry()
        self._observers: list[SessionObserver] = []
        self._reset_fields()

    def _reset_fields(self) -> None:
        self.active = False
        self.phase: SessionPhase = "idle"
        self.suspended = False
        self.process: ProcessHandle | None = None
        self.capture: Capture | None = None
        self.ocr_result: OcrResult | None = None
        self.loading_error: str | None = None

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            active=self.active,
            phase=self.phase,
            suspended=self.suspended,
            process=self.process,
            capture_url=self.capture.handle if self.capture else None,
            ocr_result=self.ocr_result,
            loading_error=self.loading_error,
        )

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("session observer failed")

    def activate(self) -> None:
        self.active = True
        self.phase = "acquiring"
        self._notify()

    def set_phase(self, phase: SessionPhase) -> None:
        self.phase = phase
        self._notify()

    def set_process(self, process: ProcessHandle) -> None:
        self.process = process
        self.loading_error = None
        self._notify()

    def set_suspended(self, suspended: bool) -> None:
        self.suspended = suspended
        if suspended:
            self.loading_error = None
        self._notify()

    def set_capture(self, png: bytes) -> Capture:
        if self.capture:
            self.captures.release(self.capture.handle)
        self.capture = Capture(png=png, handle=self.captures.create(png))
        self.loading_error = None
        self._notify()
        return self.capture

    def set_ocr_result(self, result: OcrResult) -> None:
        self.ocr_result = result
        self.loading_error = None
        self.phase = "ready"
        self._notify()

    def set_loading_error(self, message: str) -> None:
        self.loading_error = message
        self.phase = "failed"
        self._notify()

    def clear(self) -> None:
        if self.capture:
            self.captures.release(self.capture.handle)
        self._reset_fields()
        self._notify()


_session_state: SessionState | None = None
_session_lock = threading.Lock()


def get_session_state() -> SessionState:
    """The process-wide session."""
    global _session_state
    with _session_lock:
        if _session_state is None:
            _session_state = SessionState()
        return _session_state
