# core/event_bus.py
from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

Handler = Callable[[Any], None]


class EventBus:
    """Small synchronous publish/subscribe bus. Handlers run on the emitting thread."""

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event: str, handler: Handler) -> Callable[[], None]:
        with self._lock:
            self._listeners[event].append(handler)
        return lambda: self.off(event, handler)

    def once(self, event: str, handler: Handler) -> None:
        def wrap(payload: Any) -> None:
            self.off(event, wrap)
            handler(payload)

        self.on(event, wrap)

    def off(self, event: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._listeners.get(event)
            if not handlers or handler not in handlers:
                return
            handlers.remove(handler)
            if not handlers:
                del self._listeners[event]

    def emit(self, event: str, payload: Any) -> None:
        # copy so handlers may unsubscribe while being called
        with self._lock:
            handlers = list(self._listeners.get(event, ()))
        for handler in handlers:
            handler(payload)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()
