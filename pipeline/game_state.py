# pipeline/game_state.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from catalog.types import MapIdentity
from core.settings_store import FeatureToggles


class GameStateType(str, Enum):
    UNKNOWN = "UNKNOWN"
    MENU = "MENU"
    LOADING = "LOADING"
    MATCH = "MATCH"


@dataclass(frozen=True)
class StartTrigger:
    """Which raw input starts the killer's power timer."""

    m1: bool = False
    m2: bool = False
    label: str = ""


@dataclass(frozen=True)
class KillerIdentity:
    name: str
    start: StartTrigger
    power_keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GameState:
    type: GameStateType = GameStateType.UNKNOWN
    map: Optional[MapIdentity] = None
    killer: Optional[KillerIdentity] = None


def sanitize(candidate: GameState, toggles: FeatureToggles) -> GameState:
    if not toggles.smart_features_enabled:
        return GameState(type=GameStateType.UNKNOWN)

    out = candidate
    if not toggles.map_detection_enabled and out.map is not None:
        out = replace(out, map=None)
    if not toggles.killer_detection_enabled and out.killer is not None:
        out = replace(out, killer=None)
    return out
