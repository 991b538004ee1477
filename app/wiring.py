from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from app.capture import WindowFrameSource
from app.loop import PollLoop
from app.settings import AppSettings
from app.state_estimator import StateEstimator
from catalog.map_catalog import MapCatalog
from catalog.providers import BundledProvider, CustomFolderProvider
from config.killers import DETECTABLE_KILLERS
from config.path import PATHS
from config.roi import DEFAULT_SCAN_BATCHES
from core.frame import FrameSource
from core.ocr_engine import TesseractEngine
from core.settings_store import SettingsStore
from core.worker_pool import RecognitionPool
from pipeline.classifier import StateClassifier
from pipeline.region_classifier import RegionClassifier
from pipeline.state_manager import GameStateManager


@dataclass
class AppDeps:
    settings_store: SettingsStore
    catalog: MapCatalog
    pool: RecognitionPool
    state_manager: GameStateManager
    classifier: StateClassifier
    estimator: StateEstimator
    source: FrameSource
    poll_loop: PollLoop

    def close(self) -> None:
        self.poll_loop.stop()
        self.state_manager.close()
        self.state_manager.bus.clear()
        self.pool.shutdown(wait=True)
        close_source = getattr(self.source, "close", None)
        if close_source is not None:
            close_source()


def build_window_source(settings: AppSettings) -> WindowFrameSource:
    # pywin32 is only needed for live capture
    from core.screen_capture import capture_window
    from core.window_tracker import WindowTracker

    return WindowFrameSource(
        window=WindowTracker(settings.window_title),
        capture_fn=capture_window,
        focus_timeout_sec=settings.focus_timeout_sec,
    )


def build_deps(
    settings: AppSettings,
    source: Optional[FrameSource] = None,
    settings_store: Optional[SettingsStore] = None,
) -> AppDeps:
    clock = time.monotonic

    store = settings_store if settings_store is not None else SettingsStore(settings.settings_file)

    catalog = MapCatalog(
        providers=[
            CustomFolderProvider(settings.custom_maps_dir),
            BundledProvider(manifest_path=PATHS.MAP_DIRECTORY_JSON),
        ],
        match_threshold=settings.map_match_threshold,
    )
    catalog.reload()

    engine = TesseractEngine(
        lang=settings.tesseract_lang,
        timeout_sec=settings.ocr_timeout_sec,
        tesseract_cmd=settings.tesseract_cmd,
    )
    pool = RecognitionPool(size=settings.ocr_workers)

    state_manager = GameStateManager(store, clock=clock)
    classifier = StateClassifier(
        catalog=catalog,
        state_manager=state_manager,
        settings_store=store,
        killers=DETECTABLE_KILLERS,
        hysteresis_sec=settings.map_hysteresis_sec,
        idle_timeout_sec=settings.idle_match_timeout_sec,
        clock=clock,
    )
    estimator = StateEstimator(
        region_classifier=RegionClassifier(engine, pool),
        classifier=classifier,
        batches=DEFAULT_SCAN_BATCHES,
        debug_frame_path=PATHS.FRAME_CAPTURE_PNG if settings.debug_save else None,
    )

    if source is None:
        source = build_window_source(settings)

    poll_loop = PollLoop(
        estimator=estimator,
        source=source,
        min_interval_sec=settings.min_cycle_interval_sec,
        clock=clock,
    )

    return AppDeps(
        settings_store=store,
        catalog=catalog,
        pool=pool,
        state_manager=state_manager,
        classifier=classifier,
        estimator=estimator,
        source=source,
        poll_loop=poll_loop,
    )
