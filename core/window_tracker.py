# core/window_tracker.py

import ctypes
import logging
from typing import Optional, Tuple

import win32gui

logger = logging.getLogger(__name__)


class WindowTracker:
    def __init__(self, window_title: str):
        self.window_title = window_title
        self.hwnd = None
        self._set_dpi_aware()

    def _set_dpi_aware(self):
        """
        Keep window rectangles in physical pixels under DPI scaling.
        """
        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(2)  # PER_MONITOR_AWARE
        except (AttributeError, OSError):
            try:
                ctypes.windll.user32.SetProcessDPIAware()
            except (AttributeError, OSError) as e:
                logger.debug(f"[Capture] DPI awareness unavailable: {e}")

    def find_window(self) -> Optional[int]:
        hwnd = win32gui.FindWindow(None, self.window_title)
        if hwnd == 0:
            return None
        self.hwnd = hwnd
        return hwnd

    def is_window_valid(self) -> bool:
        if self.hwnd is None:
            return False
        return bool(win32gui.IsWindow(self.hwnd))

    def is_running(self) -> bool:
        return self.is_window_valid() or self.find_window() is not None

    def is_focused(self) -> bool:
        """
        True only if the game window exists and owns the foreground.
        """
        if not self.is_running():
            return False
        return win32gui.GetForegroundWindow() == self.hwnd

    def get_window_rect(self) -> Optional[Tuple[int, int, int, int]]:
        """
        Returns (x, y, width, height)
        """
        if not self.is_running():
            return None

        # minimized windows have no usable surface
        if win32gui.IsIconic(self.hwnd):
            return None

        x1, y1, x2, y2 = win32gui.GetWindowRect(self.hwnd)
        width = x2 - x1
        height = y2 - y1

        if width <= 0 or height <= 0:
            return None

        return x1, y1, width, height
