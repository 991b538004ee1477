import math
from typing import Tuple

import numpy as np

from core.frame import Frame

# x, y, w, h in 0..1 frame coordinates
Rect = Tuple[float, float, float, float]


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def normalized_to_pixels(rect: Rect, img_w: int, img_h: int) -> Tuple[int, int, int, int]:
    """
    rect: relative (x, y, w, h)
    img_w, img_h: full frame size
    Returns (sx, sy, sw, sh), always at least 1x1 and inside the frame.
    """
    r_x, r_y, r_w, r_h = rect
    sx = _clamp(_round_half_up(r_x * img_w), 0, img_w - 1)
    sy = _clamp(_round_half_up(r_y * img_h), 0, img_h - 1)
    sw = _clamp(_round_half_up(r_w * img_w), 1, img_w - sx)
    sh = _clamp(_round_half_up(r_h * img_h), 1, img_h - sy)
    return sx, sy, sw, sh


def crop_roi_relative_xy(frame: Frame, roi: Rect) -> np.ndarray:
    """
    frame: full captured frame
    roi: relative position in the frame (x, y, w, h)
    """
    sx, sy, sw, sh = normalized_to_pixels(roi, frame.width, frame.height)
    return frame.crop(sx, sy, sw, sh)
