"""Shared fakes for the detection pipeline tests. No Tesseract, no game window."""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pytest

from catalog.map_catalog import MapCatalog
from catalog.types import MapEntry
from core.frame import Frame
from core.ocr_engine import RecognitionOptions, RecognitionOutput
from core.settings_store import SettingsStore
from pipeline.classifier import StateClassifier
from pipeline.state_manager import GameStateManager


def solid_frame(width: int = 200, height: int = 100, color=(0, 0, 0)) -> Frame:
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = color
    return Frame(pixels=pixels)


class RecordingEngine:
    """Answers by segmentation mode and remembers every call."""

    def __init__(self, texts_by_psm: Optional[Mapping[int, str]] = None, default: str = "", fail_psm=()):
        self.texts_by_psm = dict(texts_by_psm or {})
        self.default = default
        self.fail_psm = set(fail_psm)
        self.calls: List[RecognitionOptions] = []
        self.bitmaps = []

    def recognize(self, bitmap, options: RecognitionOptions) -> RecognitionOutput:
        self.calls.append(options)
        self.bitmaps.append(bitmap)
        if int(options.segmentation_mode) in self.fail_psm:
            raise RuntimeError("engine exploded")
        text = self.texts_by_psm.get(int(options.segmentation_mode), self.default)
        return RecognitionOutput(text=text, confidence=87.5)


class StaticFrameSource:
    def __init__(self, frame: Frame):
        self.frame = frame
        self.captures = 0

    def capture(self) -> Optional[Frame]:
        self.captures += 1
        return self.frame


class NotFocusedSource:
    def __init__(self):
        self.captures = 0

    def capture(self) -> Optional[Frame]:
        self.captures += 1
        return None


class ManualClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryProvider:
    def __init__(
        self,
        id: str,
        maps: Dict[str, Sequence[str]],
        builtin: bool = False,
        credit: Optional[str] = None,
        fail: bool = False,
    ):
        self.id = id
        self.builtin = builtin
        self.credit = credit
        self.maps = maps
        self.fail = fail
        self.list_calls = 0
        self.cleared = 0

    def list(self) -> List[MapEntry]:
        self.list_calls += 1
        if self.fail:
            raise OSError("disk on fire")
        return [
            MapEntry(
                source_id=self.id,
                realm=realm,
                file_name=name,
                full_path=f"{self.id}/{realm}/{name}",
                image_ref=f"mem://{self.id}/{realm}/{name}",
            )
            for realm, names in self.maps.items()
            for name in names
        ]

    def clear_cache(self) -> None:
        self.cleared += 1


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def settings_store() -> SettingsStore:
    store = SettingsStore(path=None)
    store.update(smart_features_enabled=True)
    return store


@pytest.fixture
def builtin_provider() -> InMemoryProvider:
    return InMemoryProvider(
        "builtin",
        {
            "The MacMillan Estate": ["Coal Tower.webp", "Shelter Woods.webp", "Suffocation Pit.webp"],
            "Coldwind Farm": ["Rotten Fields.webp", "The Thompson House.webp"],
            "Red Forest": ["Mother's Dwelling.webp", "The Temple of Purgation.webp"],
        },
        builtin=True,
        credit="hens333.com",
    )


@pytest.fixture
def catalog(builtin_provider) -> MapCatalog:
    cat = MapCatalog(providers=[builtin_provider])
    cat.reload()
    return cat


@pytest.fixture
def state_manager(settings_store, clock) -> GameStateManager:
    return GameStateManager(settings_store, clock=clock)


@pytest.fixture
def state_classifier(catalog, state_manager, settings_store, clock) -> StateClassifier:
    return StateClassifier(
        catalog=catalog,
        state_manager=state_manager,
        settings_store=settings_store,
        clock=clock,
    )
