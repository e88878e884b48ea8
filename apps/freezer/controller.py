from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Any, Callable, Protocol, TypeVar

from apps.freezer.adapters.base import Gateways
from apps.freezer.logging_utils import TraceAdapter
from apps.freezer.presentation import Presenter
from apps.freezer.state import SessionState
from packages.contracts.errors import FreezerError, StepTimeoutError
from packages.contracts.models import OcrResult, ProcessHandle
from packages.contracts.utils import new_trace_id

logger = logging.getLogger("freezer.controller")

T = TypeVar("T")


class OcrRunner(Protocol):
    def run(self, capture_png: bytes) -> OcrResult:
        ...


class ControllerPhase(str, Enum):
    IDLE = "idle"
    ACTIVATING = "activating"
    ACTIVE = "active"
    DEACTIVATING = "deactivating"


class CaptureSessionController:
    """Pauses the foreground application on one hotkey press and resumes it on the next.

    Activation runs acquire -> suspend -> capture -> recognize and stops at the first failing
    step, leaving the session active with ``loading_error`` set so the user can read it and
    dismiss. The only undo is the compensating resume after a failed capture
    (:meth:`abort_activation`). Deactivation always ends with the session cleared.

    One sequence runs at a time; presses that arrive mid-sequence are dropped.
    """

    def __init__(
        self,
        gateways: Gateways,
        ocr: OcrRunner,
        state: SessionState,
        presenter: Presenter,
        step_timeout: float | None = None,
    ) -> None:
        self.gateways = gateways
        self.ocr = ocr
        self.state = state
        self.presenter = presenter
        self.step_timeout = step_timeout
        self.phase = ControllerPhase.IDLE
        self._sequence_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._log = TraceAdapter(logger, {"trace_id": "n/a"})

    @property
    def busy(self) -> bool:
        return self._sequence_lock.locked()

    def on_hotkey(self) -> bool:
        """Toggle the session. Returns False when the press was ignored."""
        return self._run_exclusive(self._toggle)

    def activate(self) -> bool:
        return self._run_exclusive(self._activate)

    def deactivate(self) -> bool:
        return self._run_exclusive(self._deactivate)

    def shutdown(self, timeout: float | None = None) -> None:
        """Wait for any in-flight sequence, then leave nothing suspended.

        If the sequence is still running after ``timeout`` seconds the target is resumed
        directly without waiting for it.
        """
        acquired = self._sequence_lock.acquire(timeout=-1 if timeout is None else timeout)
        if acquired:
            try:
                self._deactivate()
            finally:
                self._sequence_lock.release()
            return

        process = self.state.process
        self._log.warning("sequence still running at shutdown phase=%s", self.phase.value)
        if process is not None and self.state.suspended:
            try:
                self.gateways.process.resume(process.process_id)
            except Exception as exc:
                self._log.error("resume at shutdown failed pid=%s error=%s", process.process_id, exc)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _run_exclusive(self, sequence: Callable[[], None]) -> bool:
        if not self._sequence_lock.acquire(blocking=False):
            self._log.info("hotkey ignored, sequence in flight phase=%s", self.phase.value)
            return False
        try:
            sequence()
        finally:
            self._sequence_lock.release()
        return True

    def _toggle(self) -> None:
        if self.state.active:
            self._deactivate()
        else:
            self._activate()

    def _call(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        if self.step_timeout is None:
            return fn(*args)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="freezer-step")
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self.step_timeout)
        except FutureTimeoutError:
            future.cancel()
            raise StepTimeoutError(operation, self.step_timeout) from None

    def _fail(self, message: str, exc: Exception) -> None:
        if isinstance(exc, FreezerError):
            self._log.error("%s", message)
        else:
            self._log.exception("%s", message)
        self.state.set_loading_error(message)

    def _activate(self) -> None:
        if self.state.active:
            self._log.debug("activation skipped, session already active")
            return
        self.phase = ControllerPhase.ACTIVATING
        self._log = TraceAdapter(logger, {"trace_id": new_trace_id()})
        try:
            self._run_activation()
        finally:
            self.phase = ControllerPhase.ACTIVE

    def _run_activation(self) -> None:
        process_gateway = self.gateways.process
        self.state.activate()
        self.presenter.show()

        self._log.debug("getting foreground process")
        try:
            process = self._call("find foreground process", process_gateway.find_foreground_process)
        except Exception as exc:
            self._fail(f"Error getting foreground process: {exc}", exc)
            return
        self.state.set_process(process)

        pid = process.process_id
        self.state.set_phase("suspending")
        self._log.debug("suspending foreground process pid=%s", pid)
        try:
            self._call(f"suspend process {pid}", process_gateway.suspend, pid)
        except StepTimeoutError as exc:
            # The suspend may still land; keep it marked so dismissal resumes.
            self.state.set_suspended(True)
            self._fail(f"Error suspending process {pid}: {exc}", exc)
            return
        except Exception as exc:
            self._fail(f"Error suspending process {pid}: {exc}", exc)
            return
        self.state.set_suspended(True)

        self.state.set_phase("capturing")
        self._log.debug("capturing window hwnd=%s", process.window_handle)
        try:
            png = self._call("capture window", self.gateways.capture.capture_window, process.window_handle)
        except Exception as exc:
            self.abort_activation(process, exc)
            return
        self.state.set_capture(png)

        self.state.set_phase("recognizing")
        self._log.debug("recognizing text bytes=%s", len(png))
        try:
            result = self.ocr.run(png)
        except Exception as exc:
            self._fail(f"Error recognizing text: {exc}", exc)
            return
        self.state.set_ocr_result(result)
        self._log.info(
            "session ready pid=%s language=%s words=%s",
            pid,
            result.detected_language,
            len(result.words),
        )

    def abort_activation(self, process: ProcessHandle, error: Exception) -> bool:
        """Report a post-suspend failure and resume the target right away.

        Returns whether the compensating resume succeeded. If it did not, the session stays
        marked as suspended so dismissal tries again; the capture failure remains the error
        shown to the user.
        """
        pid = process.process_id
        self._fail(f"Error taking screenshot: {error}", error)
        try:
            self._call(f"resume process {pid}", self.gateways.process.resume, pid)
        except Exception as resume_exc:
            self._log.error(
                "compensating resume failed pid=%s error=%s original_error=%s",
                pid,
                resume_exc,
                error,
            )
            return False
        self.state.set_suspended(False)
        self._log.info("compensating resume done pid=%s", pid)
        return True

    def _deactivate(self) -> None:
        if not self.state.active:
            self._log.debug("deactivation skipped, session idle")
            return
        self.phase = ControllerPhase.DEACTIVATING
        try:
            self.presenter.hide()
            self.state.set_phase("deactivating")
            process = self.state.process
            if process is None:
                self._log.warning("session active without a process, resetting")
            elif not self.state.suspended:
                self._log.debug("process pid=%s is not suspended, resetting", process.process_id)
            elif self._resume_target(process):
                self._restore_focus(process)
        finally:
            self.state.clear()
            self.phase = ControllerPhase.IDLE

    def _resume_target(self, process: ProcessHandle) -> bool:
        pid = process.process_id
        self._log.debug("resuming foreground process pid=%s", pid)
        try:
            self._call(f"resume process {pid}", self.gateways.process.resume, pid)
        except Exception as exc:
            message = f"Error resuming process {pid}: {exc}"
            self._log.error("%s", message)
            self.presenter.alert(message)
            return False
        self.state.set_suspended(False)
        return True

    def _restore_focus(self, process: ProcessHandle) -> None:
        self._log.debug("restoring foreground window hwnd=%s", process.window_handle)
        try:
            self._call("bring window to foreground", self.gateways.process.bring_to_foreground, process.window_handle)
        except Exception as exc:
            message = f"Error restoring foreground window: {exc}"
            self._log.error("%s", message)
            self.presenter.alert(message)
