from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Optional, Protocol, Tuple

from core.errors import CaptureUnavailable
from core.frame import Frame

logger = logging.getLogger(__name__)


class GameWindow(Protocol):
    hwnd: Optional[int]

    def is_focused(self) -> bool: ...

    def get_window_rect(self) -> Optional[Tuple[int, int, int, int]]: ...


CaptureFn = Callable[[int, int, int], Frame]


class WindowFrameSource:
    """
    Live frames from the game window.

    capture() gives None when the game is not running, not focused, or the
    focus query does not answer within focus_timeout_sec. At most one focus
    query is in flight; cycles give None until a hung query returns.
    """

    def __init__(self, window: GameWindow, capture_fn: CaptureFn, focus_timeout_sec: float = 0.5):
        self.window = window
        self.capture_fn = capture_fn
        self.focus_timeout_sec = focus_timeout_sec
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="focus-query")
        self._pending: Optional[Future] = None

    def _is_focused(self) -> bool:
        pending = self._pending
        if pending is not None and not pending.done():
            logger.debug("[Capture] previous focus query still running, skipping")
            return False

        fut = self._executor.submit(self.window.is_focused)
        self._pending = fut
        try:
            return bool(fut.result(timeout=self.focus_timeout_sec))
        except FutureTimeout:
            logger.debug(f"[Capture] focus query took longer than {self.focus_timeout_sec}s, skipping")
            return False

    def capture(self) -> Optional[Frame]:
        if not self._is_focused():
            return None

        rect = self.window.get_window_rect()
        if rect is None or not self.window.hwnd:
            return None

        _, _, w, h = rect
        try:
            return self.capture_fn(self.window.hwnd, w, h)
        except CaptureUnavailable as e:
            logger.warning(f"[Capture] {e}")
            return None

    def close(self) -> None:
        self._executor.shutdown(wait=False)
