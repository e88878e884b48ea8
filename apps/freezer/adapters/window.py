from __future__ import annotations

import ctypes
import logging
import sys
from ctypes import wintypes

import psutil

from packages.contracts.errors import GatewayError
from packages.contracts.models import ProcessHandle

from .base import ProcessGateway

logger = logging.getLogger("freezer.gateway")

MONITOR_DEFAULTTONULL = 0
MDT_EFFECTIVE_DPI = 0
BASE_DPI = 96.0


def _windll():
    if sys.platform != "win32":
        raise GatewayError("native call", "only supported on Windows")
    return ctypes.windll


def get_display_scale(hwnd: int) -> float:
    """DPI of the monitor showing ``hwnd`` relative to 96."""
    windll = _windll()
    hmonitor = windll.user32.MonitorFromWindow(wintypes.HWND(hwnd), MONITOR_DEFAULTTONULL)
    if not hmonitor:
        raise GatewayError("get display scale", "window is not on any monitor")

    dpi_x = wintypes.UINT()
    dpi_y = wintypes.UINT()
    hresult = windll.shcore.GetDpiForMonitor(
        hmonitor, MDT_EFFECTIVE_DPI, ctypes.byref(dpi_x), ctypes.byref(dpi_y)
    )
    if hresult != 0:
        raise GatewayError("get display scale", f"GetDpiForMonitor hresult={hresult:#x}")
    return dpi_y.value / BASE_DPI


class Win32ProcessGateway(ProcessGateway):
    def find_foreground_process(self) -> ProcessHandle:
        user32 = _windll().user32
        hwnd = user32.GetForegroundWindow()
        if not hwnd:
            raise GatewayError("find foreground process", "no window has focus")

        pid = wintypes.DWORD()
        user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
        if pid.value == 0:
            raise GatewayError("find foreground process", f"no process owns window {hwnd}")

        return ProcessHandle(pid=pid.value, hwnd=hwnd, scale_factor=get_display_scale(hwnd))

    def suspend(self, pid: int) -> None:
        try:
            psutil.Process(pid).suspend()
        except psutil.Error as exc:
            raise GatewayError(f"suspend process {pid}", str(exc) or exc.__class__.__name__) from exc
        logger.debug("suspended pid=%s", pid)

    def resume(self, pid: int) -> None:
        try:
            psutil.Process(pid).resume()
        except psutil.Error as exc:
            raise GatewayError(f"resume process {pid}", str(exc) or exc.__class__.__name__) from exc
        logger.debug("resumed pid=%s", pid)

    def bring_to_foreground(self, hwnd: int) -> None:
        if not _windll().user32.SetForegroundWindow(wintypes.HWND(hwnd)):
            raise GatewayError("bring window to foreground", f"SetForegroundWindow refused hwnd={hwnd}")
