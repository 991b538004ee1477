# core/frame.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Protocol, Tuple, Union

import numpy as np
from PIL import Image


@dataclass(frozen=True, eq=False)
class Frame:
    """
    One captured screenshot.
    pixels: (H, W, 3) uint8 RGB array
    """

    pixels: np.ndarray

    @classmethod
    def from_image(cls, img: Image.Image) -> "Frame":
        if img.mode != "RGB":
            img = img.convert("RGB")
        return cls(pixels=np.asarray(img, dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self.pixels[y, x][:3]
        return int(r), int(g), int(b)

    def crop(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        return self.pixels[y : y + h, x : x + w]

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)


class FrameSource(Protocol):
    def capture(self) -> Optional[Frame]:
        """Return the current frame, or None when the target is not running or not focused."""
        ...


class ImageSequenceFrameSource:
    """
    Replays still images as if they were live captures (offline runs, tests).
    capture() returns None once the sequence is used up.
    """

    def __init__(self, images: Iterable[Union[Image.Image, Path, str]]):
        self._images: Iterator[Union[Image.Image, Path, str]] = iter(images)
        self.exhausted = False

    def capture(self) -> Optional[Frame]:
        try:
            item = next(self._images)
        except StopIteration:
            self.exhausted = True
            return None

        if isinstance(item, Image.Image):
            return Frame.from_image(item)

        with Image.open(item) as img:
            return Frame.from_image(img)
