# pipeline/text_detector.py
from __future__ import annotations

import logging

import cv2
import numpy as np
from PIL import Image

from core.frame import Frame
from core.ocr_engine import RecognitionOptions, TextRecognizer
from core.roi_manager import crop_roi_relative_xy
from pipeline.scan_types import TextResult, TextScanArea

logger = logging.getLogger(__name__)


def binarize_for_ocr(rgb: np.ndarray, area: TextScanArea) -> np.ndarray:
    """
    Light, grayish UI text -> black on white.

    Bright pixels pass on luminance alone; dimmer ones pass only if they are
    almost gray. Colorful backgrounds are rejected by the chroma ceiling.
    """
    px = rgb[..., :3].astype(np.float32)
    r, g, b = px[..., 0], px[..., 1], px[..., 2]

    lum = 0.2126 * r + 0.7152 * g + 0.0722 * b
    chroma = px.max(axis=-1) - px.min(axis=-1)

    bright = lum >= area.lum_min
    mid_gray = (chroma <= area.mid_gray_chroma_max) & (lum >= area.mid_gray_lum_min)
    fg = (chroma <= area.chroma_max) & (bright | mid_gray)

    return np.where(fg, 0, 255).astype(np.uint8)


def prepare_bitmap(frame: Frame, area: TextScanArea) -> Image.Image:
    crop = crop_roi_relative_xy(frame, area.rect)
    bw = binarize_for_ocr(crop, area)

    if area.scale > 1:
        h, w = bw.shape[:2]
        bw = cv2.resize(bw, (w * area.scale, h * area.scale), interpolation=cv2.INTER_NEAREST)

    return Image.fromarray(bw)


def recognize_text_area(engine: TextRecognizer, frame: Frame, area: TextScanArea) -> TextResult:
    """Recognize one area. Any engine error degrades to an empty result for this area only."""
    try:
        bitmap = prepare_bitmap(frame, area)
        out = engine.recognize(
            bitmap,
            RecognitionOptions(
                segmentation_mode=area.psm,
                char_whitelist=area.whitelist,
                numeric_mode=area.numeric_mode,
            ),
        )
    except Exception as e:
        logger.warning(f"[OCR] area '{area.id}' failed: {e}")
        return TextResult.empty()

    lines = tuple(line.strip() for line in (out.text or "").splitlines() if line.strip())
    return TextResult(text=lines, confidence=float(out.confidence))
