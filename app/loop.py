from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from app.frame_types import CycleReport
from app.state_estimator import StateEstimator
from core.frame import FrameSource

logger = logging.getLogger(__name__)


class PollLoop:
    """
    Single-flight cycle runner.

    A tick that finds the previous cycle still running, or comes earlier than
    min_interval_sec after the last started cycle, is dropped, not queued.
    """

    def __init__(
        self,
        estimator: StateEstimator,
        source: FrameSource,
        min_interval_sec: float = 0.8,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.estimator = estimator
        self.source = source
        self.min_interval_sec = min_interval_sec
        self.clock = clock

        self._busy = threading.Lock()
        self._last_start: Optional[float] = None
        self._stopped = False

        self.cycles = 0
        self.skipped = 0
        self.failed = 0

    def tick(self) -> Optional[CycleReport]:
        if not self._busy.acquire(blocking=False):
            self.skipped += 1
            logger.debug("[Loop] previous cycle still running, skipping")
            return None

        try:
            if self._stopped:
                return None
            now = self.clock()
            if self._last_start is not None and now - self._last_start < self.min_interval_sec:
                self.skipped += 1
                return None
            self._last_start = now

            self.cycles += 1
            return self.estimator.estimate(self.source)
        except Exception:
            self.failed += 1
            logger.exception("[Loop] cycle failed")
            return None
        finally:
            self._busy.release()

    def stop(self) -> None:
        """Wait for a running cycle to finish, then refuse further ticks."""
        with self._busy:
            self._stopped = True


def run_loop(loop: PollLoop, interval_sec: float, stop_event: threading.Event) -> None:
    """Start a tick every interval_sec until stop_event is set."""
    logger.info(f"[Loop] polling every {interval_sec:.2f}s")
    while not stop_event.is_set():
        threading.Thread(target=loop.tick, name="poll-cycle", daemon=True).start()
        stop_event.wait(interval_sec)
    logger.info("[Loop] stop_event set -> exit loop")
