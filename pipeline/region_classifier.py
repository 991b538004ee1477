# pipeline/region_classifier.py
from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from core.frame import Frame, FrameSource
from core.ocr_engine import TextRecognizer
from core.worker_pool import RecognitionPool
from pipeline.scan_types import RegionResult, ScanArea, TextScanArea, UniformColorScanArea
from pipeline.text_detector import recognize_text_area
from pipeline.uniform_color_detector import detect_uniform_color

logger = logging.getLogger(__name__)


class RegionClassifier:
    """
    Turns one frame and a list of scan areas into per-area results.

    Uniform-color areas are cheap and run inline; text areas fan out to the
    recognition pool and are awaited together.
    """

    def __init__(self, engine: TextRecognizer, pool: RecognitionPool):
        self.engine = engine
        self.pool = pool

    def classify(self, source: FrameSource, areas: Sequence[ScanArea]) -> Optional[Dict[str, RegionResult]]:
        frame = source.capture()
        if frame is None:
            logger.debug("[Capture] no frame, skipping batch")
            return None
        return self.classify_frame(frame, areas)

    def classify_frame(self, frame: Frame, areas: Sequence[ScanArea]) -> Dict[str, RegionResult]:
        results: Dict[str, RegionResult] = {}
        pending = {}

        for area in areas:
            if isinstance(area, UniformColorScanArea):
                results[area.id] = detect_uniform_color(frame, area)
            elif isinstance(area, TextScanArea):
                pending[area.id] = self.pool.submit(recognize_text_area, self.engine, frame, area)
            else:
                raise TypeError(f"unsupported scan area: {area!r}")

        for area_id, fut in pending.items():
            results[area_id] = fut.result()

        # keep caller's area order
        return {a.id: results[a.id] for a in areas}
