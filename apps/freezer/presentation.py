from __future__ import annotations

import logging
from typing import Protocol

from packages.contracts.models import SessionPhase, SessionSnapshot

logger = logging.getLogger("freezer.presentation")

PHASE_MESSAGES: dict[SessionPhase, str] = {
    "acquiring": "Getting foreground process",
    "suspending": "Pausing application",
    "capturing": "Capturing window",
    "recognizing": "Recognizing text",
    "ready": "Text recognized",
    "deactivating": "Resuming application",
}
DISMISS_HINT = "Press the hotkey to close and resume the application."


class Presenter(Protocol):
    """What the controller needs from whatever shows the frozen frame."""

    def show(self) -> None:
        ...

    def hide(self) -> None:
        ...

    def alert(self, message: str) -> None:
        ...


def progress_message(snapshot: SessionSnapshot) -> str | None:
    if not snapshot.active:
        return None
    if snapshot.loading_error:
        return f"{snapshot.loading_error} {DISMISS_HINT}"
    return PHASE_MESSAGES.get(snapshot.phase)


class LoggingPresenter(Presenter):
    """Renders the session to the log; used when no window toolkit is attached."""

    def __init__(self) -> None:
        self.visible = False
        self._last_message: str | None = None

    def show(self) -> None:
        self.visible = True
        logger.debug("overlay shown")

    def hide(self) -> None:
        self.visible = False
        logger.debug("overlay hidden")

    def alert(self, message: str) -> None:
        logger.error("ALERT %s", message)

    def render(self, snapshot: SessionSnapshot) -> None:
        message = progress_message(snapshot)
        if message is None or message == self._last_message:
            self._last_message = message
            return
        self._last_message = message
        if snapshot.loading_error:
            logger.warning("%s", message)
        elif snapshot.phase == "ready" and snapshot.ocr_result is not None:
            logger.info("%s language=%s text=%r", message, snapshot.ocr_result.detected_language, snapshot.ocr_result.text)
        else:
            logger.info("%s", message)
