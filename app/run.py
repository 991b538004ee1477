from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from app.loop import run_loop
from app.settings import AppSettings
from app.wiring import AppDeps, build_deps
from core.settings_store import SettingsStore
from pipeline.game_state import GameState
from pipeline.state_manager import GAME_STATE_EVENT

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def follow_detected_map(store: SettingsStore) -> Callable[[GameState], None]:
    """Keep the selected map in sync with detection while auto-detect is on."""

    def on_state(state: GameState) -> None:
        if state.map is None or not store.get().auto_detect_enabled:
            return
        store.update(selected_map=state.map.file_name, selected_map_realm=state.map.realm)

    return on_state


def run_main(settings: AppSettings, stop_event: Optional[threading.Event] = None) -> None:
    configure_logging(settings.log_level)

    deps: AppDeps = build_deps(settings)
    stop = stop_event if stop_event is not None else threading.Event()

    deps.state_manager.bus.on(GAME_STATE_EVENT, follow_detected_map(deps.settings_store))

    logger.info(
        f"[Loop] watching '{settings.window_title}' with {deps.pool.size} OCR workers, "
        f"{len(deps.catalog.entries)} maps"
    )

    try:
        run_loop(deps.poll_loop, settings.poll_interval_sec, stop)
    except KeyboardInterrupt:
        logger.info("[Loop] interrupted")
        stop.set()
    finally:
        deps.close()


def main() -> None:
    run_main(AppSettings.from_env())
