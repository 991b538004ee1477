# pipeline/uniform_color_detector.py
from __future__ import annotations

from typing import Optional

from core.frame import Frame
from core.roi_manager import normalized_to_pixels
from pipeline.scan_types import FailedPixel, UniformColorResult, UniformColorScanArea


def _round_half_up(v: float) -> int:
    return int(v + 0.5)


def detect_uniform_color(frame: Frame, area: UniformColorScanArea) -> UniformColorResult:
    """
    Letterbox / loading-border check.

    Pixels are sampled every `sample_stride` pixels over all rects, in order.
    A sample matches if it is black (every channel <= black_max) or if it stays
    within color_delta_max of the running mean color, which tolerates uniform
    non-black overlays.
    """
    stride = max(1, int(area.sample_stride))
    black_max = area.black_max
    delta_max = area.color_delta_max

    tested = matched = 0
    mean_r = mean_g = mean_b = 0.0
    first_fail: Optional[FailedPixel] = None

    for rect in area.rects:
        sx, sy, sw, sh = normalized_to_pixels(rect, frame.width, frame.height)
        region = frame.crop(sx, sy, sw, sh)[::stride, ::stride, :3]

        for row_idx, row in enumerate(region.tolist()):
            y = sy + row_idx * stride
            for col_idx, (r, g, b) in enumerate(row):
                tested += 1

                # online mean, no stored history
                mean_r += (r - mean_r) / tested
                mean_g += (g - mean_g) / tested
                mean_b += (b - mean_b) / tested

                is_black = r <= black_max and g <= black_max and b <= black_max
                is_uniform = (
                    abs(r - mean_r) <= delta_max
                    and abs(g - mean_g) <= delta_max
                    and abs(b - mean_b) <= delta_max
                )

                if is_black or is_uniform:
                    matched += 1
                elif first_fail is None:
                    x = min(sx + col_idx * stride, frame.width - 1)
                    first_fail = FailedPixel(x=x, y=min(y, frame.height - 1), color=(r, g, b))

    ratio = matched / tested if tested > 0 else 0.0

    return UniformColorResult(
        passed=ratio >= area.min_match_ratio,
        ratio=ratio,
        tested=tested,
        matched=matched,
        dominant_color=(_round_half_up(mean_r), _round_half_up(mean_g), _round_half_up(mean_b)),
        first_fail=first_fail,
    )
