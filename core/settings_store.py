# core/settings_store.py
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_VALUES: Dict[str, Any] = {
    "smart_features_enabled": False,
    "map_detection_enabled": True,
    "killer_detection_enabled": True,
    "auto_detect_enabled": True,
    "selected_map": None,
    "selected_map_realm": None,
}


@dataclass(frozen=True)
class FeatureToggles:
    smart_features_enabled: bool = False
    map_detection_enabled: bool = True
    killer_detection_enabled: bool = True
    auto_detect_enabled: bool = True


class SettingsStore:
    """
    Flat key-value settings persisted as a single JSON object.
    path=None keeps everything in memory.
    """

    def __init__(self, path: Optional[Path] = None, defaults: Optional[Dict[str, Any]] = None):
        self.path = Path(path) if path is not None else None
        self._defaults = dict(DEFAULT_VALUES if defaults is None else defaults)
        self._values = self._load()
        self._subscribers: List[Callable[[FeatureToggles], None]] = []
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        values = dict(self._defaults)
        if self.path is None or not self.path.exists():
            return values

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[Settings] could not read {self.path}, using defaults: {e}")
            return values

        if isinstance(stored, dict):
            values.update(stored)
        else:
            logger.warning(f"[Settings] {self.path} is not a flat object, using defaults")
        return values

    def _save(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._values, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"[Settings] could not write {self.path}: {e}")

    def get(self) -> FeatureToggles:
        with self._lock:
            v = self._values
            return FeatureToggles(
                smart_features_enabled=bool(v.get("smart_features_enabled")),
                map_detection_enabled=bool(v.get("map_detection_enabled")),
                killer_detection_enabled=bool(v.get("killer_detection_enabled")),
                auto_detect_enabled=bool(v.get("auto_detect_enabled")),
            )

    def get_value(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def update(self, **partial: Any) -> None:
        with self._lock:
            changed = any(self._values.get(k) != v for k, v in partial.items())
            self._values.update(partial)
            if changed:
                self._save()
            subscribers = list(self._subscribers)

        if not changed:
            return
        toggles = self.get()
        for cb in subscribers:
            cb(toggles)

    def subscribe(self, cb: Callable[[FeatureToggles], None]) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(cb)

        def unsubscribe() -> None:
            with self._lock:
                if cb in self._subscribers:
                    self._subscribers.remove(cb)

        return unsubscribe
