# core/screen_capture.py

import ctypes

import numpy as np
import win32gui
import win32ui

from core.errors import CaptureUnavailable
from core.frame import Frame

PW_RENDERFULLCONTENT = 3  # PrintWindow flag that also works for DirectX surfaces


def capture_window(hwnd: int, width: int, height: int) -> Frame:
    """
    hwnd: game window handle
    Raises CaptureUnavailable when the window surface cannot be copied.
    """
    hwnd_dc = win32gui.GetWindowDC(hwnd)
    mfc_dc = win32ui.CreateDCFromHandle(hwnd_dc)
    save_dc = mfc_dc.CreateCompatibleDC()
    save_bitmap = win32ui.CreateBitmap()

    try:
        save_bitmap.CreateCompatibleBitmap(mfc_dc, width, height)
        save_dc.SelectObject(save_bitmap)

        result = ctypes.windll.user32.PrintWindow(hwnd, save_dc.GetSafeHdc(), PW_RENDERFULLCONTENT)
        if result != 1:
            raise CaptureUnavailable("PrintWindow failed")

        bmp_info = save_bitmap.GetInfo()
        bmp_str = save_bitmap.GetBitmapBits(True)
    finally:
        win32gui.DeleteObject(save_bitmap.GetHandle())
        save_dc.DeleteDC()
        mfc_dc.DeleteDC()
        win32gui.ReleaseDC(hwnd, hwnd_dc)

    img = np.frombuffer(bmp_str, dtype=np.uint8)
    img = img.reshape((bmp_info["bmHeight"], bmp_info["bmWidth"], 4))
    rgb = np.ascontiguousarray(img[:, :, :3][:, :, ::-1])  # BGRA -> RGB

    return Frame(pixels=rgb)
