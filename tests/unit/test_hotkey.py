from __future__ import annotations

import threading

import pytest

from apps.freezer.hotkey import HotkeyListener, trigger_key


def test_trigger_key_is_last_part() -> None:
    assert trigger_key("alt+p") == "p"
    assert trigger_key("ctrl + shift + f12") == "f12"
    with pytest.raises(ValueError):
        trigger_key("")


def test_auto_repeat_fires_once_until_release() -> None:
    fired = []
    done = threading.Event()

    def callback() -> None:
        fired.append(1)
        done.set()

    listener = HotkeyListener("alt+p", callback)
    listener._on_press()
    assert done.wait(2)
    listener._on_press()
    listener._on_press()
    listener._on_release()
    done.clear()
    listener._on_press()
    assert done.wait(2)
    assert len(fired) == 2


def test_start_and_stop_register_with_keyboard() -> None:
    calls = []

    class FakeKeyboard:
        def add_hotkey(self, combo, fn, trigger_on_release):
            calls.append(("add", combo, trigger_on_release))
            return "h1"

        def on_release_key(self, key, fn):
            calls.append(("release", key))
            return "h2"

        def remove_hotkey(self, handle):
            calls.append(("remove", handle))

        def unhook(self, handle):
            calls.append(("unhook", handle))

    listener = HotkeyListener("alt+p", lambda: None, backend=FakeKeyboard())
    listener.start()
    listener.start()
    listener.stop()
    assert calls == [("add", "alt+p", False), ("release", "p"), ("remove", "h1"), ("unhook", "h2")]
