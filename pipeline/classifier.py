from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from catalog.map_catalog import MapCatalog
from catalog.types import MapIdentity
from config.killers import DETECTABLE_KILLERS
from config.roi import (
    BLOODPOINTS_AREA,
    KILLER_POWER_AREA,
    LOADING_SCREEN_AREA,
    LOADING_TEXT_AREA,
    MAIN_MENU_AREA,
    MAP_AREA,
    MENU_BUTTON_AREA,
    SETTINGS_AREA,
    SETTINGS_BACK_AREA,
)
from core.settings_store import SettingsStore
from pipeline.game_state import GameState, GameStateType, KillerIdentity
from pipeline.normalizer import TextNormalizer
from pipeline.scan_types import RegionResult, TextResult, UniformColorResult
from pipeline.state_manager import GameStateManager

logger = logging.getLogger(__name__)

CHECK_ORDER = ("map", "killer", "settings", "loading", "menu", "idle")

BLOODPOINTS_RE = re.compile(r"\d{3,}")


@dataclass
class _AcceptedGuess:
    key: str
    score: float
    time: float


class MapGuessHysteresis:
    """
    Keeps a confident map guess from being replaced by a weaker one for a
    different map that shows up shortly after.
    """

    def __init__(self, window_sec: float = 3.0):
        self.window_sec = window_sec
        self._last: Optional[_AcceptedGuess] = None

    def accept(self, key: str, score: float, now: float) -> bool:
        last = self._last
        if (
            last is not None
            and key != last.key
            and now - last.time <= self.window_sec
            and score < last.score
        ):
            logger.debug(
                f"[State] map guess {key!r} ({score:.2f}) held off by {last.key!r} ({last.score:.2f})"
            )
            return False

        self._last = _AcceptedGuess(key=key, score=score, time=now)
        return True

    def reset(self) -> None:
        self._last = None


def _text(results: Mapping[str, RegionResult], area_id: str) -> Optional[TextResult]:
    res = results.get(area_id)
    return res if isinstance(res, TextResult) else None


class StateClassifier:
    def __init__(
        self,
        catalog: MapCatalog,
        state_manager: GameStateManager,
        settings_store: SettingsStore,
        killers: Sequence[KillerIdentity] = DETECTABLE_KILLERS,
        hysteresis_sec: float = 3.0,
        idle_timeout_sec: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog = catalog
        self.state_manager = state_manager
        self.settings_store = settings_store
        self.killers = tuple(killers)
        self.idle_timeout_sec = idle_timeout_sec
        self.clock = clock

        self.normalizer = TextNormalizer()
        self.hysteresis = MapGuessHysteresis(hysteresis_sec)

        self.rules = {
            "SETTINGS_BACK": ["back", "esc", "apply", "changes"],
            "SETTINGS_CATEGORIES": [
                "general", "accessibility", "beta", "online", "graphics", "audio",
                "controls", "input", "binding", "support", "match", "details",
            ],
            "LOADING_PHRASE": ["connecting", "to", "other", "players"],
            "MENU_HOME": ["play", "rift", "pass", "quests", "store"],
            "MENU_BUTTONS": ["play", "continue", "cancel"],
        }
        self.settings_categories_min = 5
        self.menu_home_min = 3
        self.bloodpoints_min = 3

        self._checks: Dict[str, Callable[[Mapping[str, RegionResult]], bool]] = {
            "map": self.check_map,
            "killer": self.check_killer,
            "settings": self.check_settings,
            "loading": self.check_loading,
            "menu": self.check_menu,
            "idle": self.check_idle,
        }

    @property
    def state(self) -> GameState:
        return self.state_manager.current_state

    # ---------- resolution ----------

    def guess_map(self, guess: str) -> Optional[MapIdentity]:
        if not self.settings_store.get().map_detection_enabled:
            return None

        match = self.catalog.best_match(guess)
        if match is None:
            return None

        if not self.hysteresis.accept(match.key, match.score, self.clock()):
            return None

        identity = self.catalog.make_map_by_name(match.entry.file_name)
        if identity is None:
            return None

        self.state_manager.push(GameState(type=GameStateType.MATCH, map=identity))
        return identity

    # ---------- checks ----------

    def check_map(self, results: Mapping[str, RegionResult]) -> bool:
        res = _text(results, MAP_AREA)
        if res is None:
            return False
        return any(self.guess_map(line) is not None for line in res.text)

    def check_killer(self, results: Mapping[str, RegionResult]) -> bool:
        if not self.settings_store.get().killer_detection_enabled:
            return False
        if self.state.type != GameStateType.MATCH:
            return False

        res = _text(results, KILLER_POWER_AREA)
        if res is None:
            return False

        words = set(self.normalizer.words(res.text))
        for killer in self.killers:
            if any(kw.lower() in words for kw in killer.power_keywords):
                self.state_manager.push(replace(self.state, killer=killer))
                return True
        return False

    def check_settings(self, results: Mapping[str, RegionResult]) -> bool:
        if self.state.type == GameStateType.UNKNOWN:
            return False

        back = _text(results, SETTINGS_BACK_AREA)
        categories = _text(results, SETTINGS_AREA)

        back_hit = back is not None and any(
            w in self.rules["SETTINGS_BACK"] for w in self.normalizer.words(back.text, strip_symbols=True)
        )
        category_hit = categories is not None and (
            len([w for w in self.normalizer.words(categories.text) if w in self.rules["SETTINGS_CATEGORIES"]])
            >= self.settings_categories_min
        )

        if back_hit or category_hit:
            # hold the current state while the settings menu covers the screen
            self.state_manager.push(self.state)
            return True
        return False

    def check_loading(self, results: Mapping[str, RegionResult]) -> bool:
        if self.state.type in (GameStateType.UNKNOWN, GameStateType.MATCH):
            return False

        border = results.get(LOADING_SCREEN_AREA)
        hit = isinstance(border, UniformColorResult) and border.passed

        text = _text(results, LOADING_TEXT_AREA)
        if not hit and text is not None:
            words = set(self.normalizer.words(text.text))
            hit = all(w in words for w in self.rules["LOADING_PHRASE"])

        if hit:
            self.state_manager.push(GameState(type=GameStateType.LOADING))
        return hit

    def check_menu(self, results: Mapping[str, RegionResult]) -> bool:
        hit = False

        home = _text(results, MAIN_MENU_AREA)
        if home is not None:
            labels = set(self.normalizer.words(home.text)) & set(self.rules["MENU_HOME"])
            hit = len(labels) >= self.menu_home_min

        buttons = _text(results, MENU_BUTTON_AREA)
        if not hit and buttons is not None:
            hit = any(w in self.rules["MENU_BUTTONS"] for w in self.normalizer.words(buttons.text))

        bloodpoints = _text(results, BLOODPOINTS_AREA)
        if not hit and bloodpoints is not None:
            counters = {w for w in self.normalizer.words(bloodpoints.text) if BLOODPOINTS_RE.search(w)}
            hit = len(counters) >= self.bloodpoints_min

        if hit:
            self.state_manager.push(GameState(type=GameStateType.MENU))
        return hit

    def check_idle(self, results: Mapping[str, RegionResult]) -> bool:
        if self.state.type in (GameStateType.UNKNOWN, GameStateType.MATCH):
            return False
        if self.clock() - self.state_manager.last_change_time <= self.idle_timeout_sec:
            return False

        logger.info(f"[State] nothing detected for {self.idle_timeout_sec:.0f}s, assuming a match started")
        return self.state_manager.push(GameState(type=GameStateType.MATCH))

    # ---------- cycle ----------

    def evaluate(self, results: Mapping[str, RegionResult], checks: Optional[Sequence[str]] = None) -> Optional[str]:
        """
        Run the requested checks in priority order.
        Returns the name of the first check that fired, or None.
        """
        wanted = CHECK_ORDER if checks is None else checks
        unknown: List[str] = [c for c in wanted if c not in self._checks]
        if unknown:
            raise ValueError(f"unknown checks: {unknown}")

        for name in CHECK_ORDER:
            if name in wanted and self._checks[name](results):
                return name
        return None
