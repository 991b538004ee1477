from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from pipeline.game_state import GameState
from pipeline.scan_types import RegionResult


@dataclass(frozen=True)
class CycleReport:
    fired: Optional[str]  # name of the check that decided the cycle
    state: GameState
    results: Dict[str, RegionResult] = field(default_factory=dict)
