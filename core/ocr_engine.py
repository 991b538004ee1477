# core/ocr_engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Protocol, Tuple

import pytesseract
from PIL import Image

from core.errors import RecognitionFailure

logger = logging.getLogger(__name__)

STATIC_WHITELIST = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_/() .,|"


class PSM(IntEnum):
    """Tesseract page segmentation modes used by the scan areas."""

    AUTO = 3
    SINGLE_BLOCK = 6
    SINGLE_LINE = 7
    SINGLE_WORD = 8
    SPARSE_TEXT = 11
    SPARSE_TEXT_OSD = 12


@dataclass(frozen=True)
class RecognitionOptions:
    segmentation_mode: int = PSM.SPARSE_TEXT
    char_whitelist: str = STATIC_WHITELIST
    numeric_mode: bool = False


@dataclass(frozen=True)
class RecognitionOutput:
    text: str
    confidence: float  # 0..100


class TextRecognizer(Protocol):
    def recognize(self, bitmap: Image.Image, options: RecognitionOptions) -> RecognitionOutput: ...


def build_tesseract_config(options: RecognitionOptions) -> str:
    parts = [
        f"--psm {int(options.segmentation_mode)}",
        "-c tessedit_do_invert=0",
        "-c preserve_interword_spaces=1",
    ]
    # spaces are never recognized as glyphs; keeping them would break argument splitting
    whitelist = "".join(options.char_whitelist.split())
    if whitelist:
        parts.append(f"-c tessedit_char_whitelist={whitelist}")
    if options.numeric_mode:
        parts.append("-c classify_bln_numeric_mode=1")
    return " ".join(parts)


def _lines_from_data(data: Dict[str, list]) -> Tuple[List[str], float]:
    """Rebuild text lines and the mean word confidence from image_to_data output."""
    lines: Dict[Tuple[int, int, int], List[str]] = {}
    confs: List[float] = []

    for i, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        if not word:
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append(word)

        conf = float(data["conf"][i])
        if conf >= 0:
            confs.append(conf)

    text_lines = [" ".join(words) for _, words in sorted(lines.items())]
    confidence = sum(confs) / len(confs) if confs else 0.0
    return text_lines, confidence


class TesseractEngine:
    """Stateless pytesseract wrapper; safe to call from several pool workers at once."""

    def __init__(self, lang: str = "eng", timeout_sec: float = 5.0, tesseract_cmd: Optional[str] = None):
        self.lang = lang
        self.timeout_sec = timeout_sec
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, bitmap: Image.Image, options: RecognitionOptions) -> RecognitionOutput:
        try:
            data = pytesseract.image_to_data(
                bitmap,
                lang=self.lang,
                config=build_tesseract_config(options),
                output_type=pytesseract.Output.DICT,
                timeout=self.timeout_sec,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as e:
            # pytesseract signals its own timeout with a bare RuntimeError
            raise RecognitionFailure(f"tesseract failed: {e}") from e

        lines, confidence = _lines_from_data(data)
        return RecognitionOutput(text="\n".join(lines), confidence=confidence)
