# core/worker_pool.py
from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

MIN_WORKERS = 2
MAX_WORKERS = 3


def default_worker_count(cpu_count: Optional[int] = None) -> int:
    cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 4)
    return max(MIN_WORKERS, min(MAX_WORKERS, cpus - 1))


class RecognitionPool:
    """
    Bounded pool for text-recognition jobs.
    Idle workers pick queued jobs in submission order; every job gets its own Future.
    """

    def __init__(self, size: Optional[int] = None):
        self.size = size if size is not None else default_worker_count()
        self._executor = ThreadPoolExecutor(max_workers=self.size, thread_name_prefix="ocr-worker")
        logger.debug(f"[OCR] worker pool started with {self.size} workers")

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        return self._executor.submit(fn, *args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        logger.debug("[OCR] worker pool stopped")

    def __enter__(self) -> "RecognitionPool":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()
