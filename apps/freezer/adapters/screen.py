from __future__ import annotations

import ctypes
from ctypes import wintypes
from io import BytesIO

from PIL import ImageGrab

from packages.contracts.errors import GatewayError

from .base import CaptureGateway
from .window import _windll


def client_area(hwnd: int) -> tuple[int, int, int, int]:
    """Screen-space (left, top, right, bottom) of the window's client area."""
    user32 = _windll().user32
    handle = wintypes.HWND(hwnd)
    if not user32.IsWindow(handle):
        raise GatewayError("capture window", f"window {hwnd} no longer exists")

    rect = wintypes.RECT()
    if not user32.GetClientRect(handle, ctypes.byref(rect)):
        raise GatewayError("capture window", f"cannot read client rect of {hwnd}")
    origin = wintypes.POINT(0, 0)
    user32.ClientToScreen(handle, ctypes.byref(origin))
    width = rect.right - rect.left
    height = rect.bottom - rect.top
    if width <= 0 or height <= 0:
        raise GatewayError("capture window", f"window {hwnd} has an empty client area")
    return origin.x, origin.y, origin.x + width, origin.y + height


class Win32CaptureGateway(CaptureGateway):
    def capture_window(self, hwnd: int) -> bytes:
        bbox = client_area(hwnd)
        try:
            image = ImageGrab.grab(bbox=bbox, all_screens=True)
        except OSError as exc:
            raise GatewayError("capture window", str(exc)) from exc
        buf = BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()
