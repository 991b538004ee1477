from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence

from app.frame_types import CycleReport
from config.roi import DEFAULT_SCAN_BATCHES
from core.frame import Frame, FrameSource
from pipeline.classifier import StateClassifier
from pipeline.region_classifier import RegionClassifier
from pipeline.scan_types import RegionResult, ScanBatch

logger = logging.getLogger(__name__)


@dataclass
class StateEstimator:
    region_classifier: RegionClassifier
    classifier: StateClassifier
    batches: Sequence[ScanBatch] = DEFAULT_SCAN_BATCHES
    debug_frame_path: Optional[Path] = None

    def estimate(self, source: FrameSource) -> Optional[CycleReport]:
        """
        One capture-classify-decide cycle.
        Returns None when no frame was available.
        """
        frame = source.capture()
        if frame is None:
            return None
        return self.estimate_frame(frame)

    def estimate_frame(self, frame: Frame) -> CycleReport:
        if self.debug_frame_path is not None:
            self._save_debug(frame)

        results: Dict[str, RegionResult] = {}
        fired: Optional[str] = None

        # later batches may reuse earlier results (the back button shares the map area)
        for batch in self.batches:
            results.update(self.region_classifier.classify_frame(frame, batch.areas))
            fired = self.classifier.evaluate(results, batch.checks)
            if fired is not None:
                break

        state = self.classifier.state
        logger.debug(f"[Loop] cycle fired={fired} state={state.type.value}")
        return CycleReport(fired=fired, state=state, results=results)

    def _save_debug(self, frame: Frame) -> None:
        try:
            self.debug_frame_path.parent.mkdir(parents=True, exist_ok=True)
            frame.to_image().save(self.debug_frame_path)
        except OSError as e:
            logger.warning(f"[Capture] could not save debug frame: {e}")
