from __future__ import annotations

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger("freezer.hotkey")


def trigger_key(hotkey: str) -> str:
    """The non-modifier key that completes ``hotkey`` (``"alt+p"`` -> ``"p"``)."""
    parts = [part.strip() for part in hotkey.split("+") if part.strip()]
    if not parts:
        raise ValueError(f"invalid hotkey: {hotkey!r}")
    return parts[-1]


class HotkeyListener:
    """Global hotkey that fires once per key-down.

    Auto-repeat is swallowed until the trigger key is released, and the callback runs on a
    worker thread so the OS keyboard hook is never blocked by a capture sequence.
    """

    def __init__(self, hotkey: str, callback: Callable[[], Any], backend: Any = None) -> None:
        self.hotkey = hotkey
        self.callback = callback
        self._keyboard = backend
        self._armed = threading.Event()
        self._armed.set()
        self._hotkey_handle: Any = None
        self._release_handle: Any = None

    def _backend(self) -> Any:
        if self._keyboard is None:
            try:
                import keyboard
            except ImportError as exc:
                raise RuntimeError("keyboard required for the global hotkey") from exc
            self._keyboard = keyboard
        return self._keyboard

    def start(self) -> None:
        if self._hotkey_handle is not None:
            return
        keyboard = self._backend()
        self._hotkey_handle = keyboard.add_hotkey(self.hotkey, self._on_press, trigger_on_release=False)
        self._release_handle = keyboard.on_release_key(trigger_key(self.hotkey), self._on_release)
        logger.info("global hotkey registered hotkey=%s", self.hotkey)

    def stop(self) -> None:
        keyboard = self._backend()
        if self._hotkey_handle is not None:
            keyboard.remove_hotkey(self._hotkey_handle)
            self._hotkey_handle = None
        if self._release_handle is not None:
            keyboard.unhook(self._release_handle)
            self._release_handle = None
        logger.info("global hotkey unregistered hotkey=%s", self.hotkey)

    def _on_press(self) -> None:
        if not self._armed.is_set():
            return
        self._armed.clear()
        logger.debug("hotkey pressed hotkey=%s", self.hotkey)
        threading.Thread(target=self._dispatch, name="freezer-hotkey", daemon=True).start()

    def _on_release(self, _event: Any = None) -> None:
        self._armed.set()

    def _dispatch(self) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("hotkey handler failed hotkey=%s", self.hotkey)
