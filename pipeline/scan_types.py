# pipeline/scan_types.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from core.ocr_engine import PSM, STATIC_WHITELIST
from core.roi_manager import Rect

# ======================
# Detector defaults
# ======================
DEFAULT_LUM_MIN = 200
DEFAULT_CHROMA_MAX = 18
MID_GRAY_LUM_MIN = 150
MID_GRAY_CHROMA_MAX = 10

DEFAULT_BLACK_MAX = 12
DEFAULT_SAMPLE_STRIDE = 2
DEFAULT_MIN_MATCH_RATIO = 0.98
DEFAULT_COLOR_DELTA_MAX = 8


# ======================
# Scan areas
# ======================
@dataclass(frozen=True)
class TextScanArea:
    id: str
    rect: Rect
    psm: int = PSM.SPARSE_TEXT
    whitelist: str = STATIC_WHITELIST
    numeric_mode: bool = False

    # binarization gate
    lum_min: int = DEFAULT_LUM_MIN
    chroma_max: int = DEFAULT_CHROMA_MAX
    mid_gray_lum_min: int = MID_GRAY_LUM_MIN
    mid_gray_chroma_max: int = MID_GRAY_CHROMA_MAX

    # integer upscale of the binarized bitmap before recognition
    scale: int = 1


@dataclass(frozen=True)
class UniformColorScanArea:
    id: str
    rects: Tuple[Rect, ...]
    black_max: int = DEFAULT_BLACK_MAX
    sample_stride: int = DEFAULT_SAMPLE_STRIDE
    min_match_ratio: float = DEFAULT_MIN_MATCH_RATIO
    color_delta_max: int = DEFAULT_COLOR_DELTA_MAX


ScanArea = Union[TextScanArea, UniformColorScanArea]


# ======================
# Results
# ======================
@dataclass(frozen=True)
class TextResult:
    text: Tuple[str, ...]
    confidence: float

    @classmethod
    def empty(cls) -> "TextResult":
        return cls(text=(), confidence=0.0)


@dataclass(frozen=True)
class FailedPixel:
    x: int
    y: int
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class UniformColorResult:
    passed: bool
    ratio: float
    tested: int
    matched: int
    dominant_color: Optional[Tuple[int, int, int]] = None
    first_fail: Optional[FailedPixel] = None


RegionResult = Union[TextResult, UniformColorResult]


@dataclass(frozen=True)
class ScanBatch:
    """Areas recognized together, followed by the state checks that may run on them."""

    areas: Tuple[ScanArea, ...]
    checks: Tuple[str, ...]
