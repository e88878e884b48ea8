from __future__ import annotations

from apps.freezer.state import CaptureRegistry, SessionState, get_session_state
from packages.contracts.models import OcrResult, ProcessHandle
from tests.fixtures.sample_data import SAMPLE_PNG, make_png


def _handle() -> ProcessHandle:
    return ProcessHandle(pid=100, hwnd=200, scale_factor=1.0)


def test_clear_restores_empty_shape_and_releases_capture() -> None:
    state = SessionState()
    state.activate()
    state.set_process(_handle())
    state.set_suspended(True)
    capture = state.set_capture(SAMPLE_PNG)
    state.set_ocr_result(OcrResult(detected_language="en"))
    state.set_loading_error("boom")

    state.clear()

    snapshot = state.snapshot()
    assert snapshot.active is False
    assert snapshot.phase == "idle"
    assert snapshot.suspended is False
    assert snapshot.process is None
    assert snapshot.capture_url is None
    assert snapshot.ocr_result is None
    assert snapshot.loading_error is None
    assert state.captures.resolve(capture.handle.rsplit("/", 1)[-1]) is None
    assert len(state.captures) == 0


def test_new_capture_releases_previous_handle() -> None:
    state = SessionState()
    state.activate()
    first = state.set_capture(SAMPLE_PNG)
    second = state.set_capture(make_png(4, 4))
    assert first.handle != second.handle
    assert len(state.captures) == 1
    assert state.captures.resolve(second.handle.rsplit("/", 1)[-1]) == second.png


def test_successful_steps_clear_stale_error() -> None:
    state = SessionState()
    state.activate()
    state.set_loading_error("previous failure")
    state.set_process(_handle())
    assert state.loading_error is None


def test_observers_receive_snapshots_until_unsubscribed() -> None:
    state = SessionState()
    seen = []
    unsubscribe = state.subscribe(seen.append)
    state.activate()
    state.set_loading_error("nope")
    unsubscribe()
    state.clear()
    assert [s.phase for s in seen] == ["acquiring", "failed"]
    assert seen[-1].loading_error == "nope"
    assert seen[-1].active is True


def test_failing_observer_does_not_break_mutation() -> None:
    state = SessionState()

    def broken(_snapshot) -> None:
        raise RuntimeError("render failed")

    state.subscribe(broken)
    state.activate()
    assert state.active is True


def test_registry_release_is_idempotent() -> None:
    registry = CaptureRegistry()
    handle = registry.create(SAMPLE_PNG)
    assert handle.startswith("/v1/captures/")
    assert registry.release(handle) is True
    assert registry.release(handle) is False


def test_session_state_is_process_wide() -> None:
    assert get_session_state() is get_session_state()
