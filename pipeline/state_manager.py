from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Callable, Optional

from core.event_bus import EventBus
from core.settings_store import FeatureToggles, SettingsStore
from pipeline.game_state import GameState, GameStateType, sanitize

logger = logging.getLogger(__name__)

GAME_STATE_EVENT = "game_state"


class GameStateManager:
    """
    Single writer of the current GameState.
    Every candidate goes through push(); subscribers hear about real changes only.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        clock: Callable[[], float] = time.monotonic,
        bus: Optional[EventBus] = None,
    ):
        self.settings_store = settings_store
        self.clock = clock
        self.bus = bus if bus is not None else EventBus()

        self.current_state = GameState()
        self.last_change_time = clock()
        self._lock = threading.RLock()

        self._unsubscribe_settings = settings_store.subscribe(self._on_settings_changed)

    def push(self, candidate: GameState) -> bool:
        """Returns True if the state changed and was broadcast."""
        with self._lock:
            prev = self.current_state

            # a non-MATCH screen keeps the last known map unless we are leaving a match
            if (
                candidate.type != GameStateType.MATCH
                and prev.type != GameStateType.MATCH
                and candidate.map is None
                and prev.map is not None
            ):
                candidate = replace(candidate, map=prev.map)

            candidate = sanitize(candidate, self.settings_store.get())

            if candidate == prev:
                return False

            self.current_state = candidate
            self.last_change_time = self.clock()

        logger.info(
            f"[State] {prev.type.value} -> {candidate.type.value}"
            f" map={candidate.map.name if candidate.map else None}"
            f" killer={candidate.killer.name if candidate.killer else None}"
        )
        self.bus.emit(GAME_STATE_EVENT, candidate)
        return True

    def _on_settings_changed(self, toggles: FeatureToggles) -> None:
        self.push(self.current_state)

    def close(self) -> None:
        self._unsubscribe_settings()
