from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from config.path import PATHS

logger = logging.getLogger(__name__)

ENV_PREFIX = "FOG_"


@dataclass(frozen=True)
class AppSettings:
    poll_interval_sec: float = 1.0
    min_cycle_interval_sec: float = 0.8
    focus_timeout_sec: float = 0.5

    ocr_timeout_sec: float = 5.0
    ocr_workers: Optional[int] = None  # None -> max(2, min(3, cpu_count - 1))
    tesseract_lang: str = "eng"
    tesseract_cmd: Optional[str] = None

    map_match_threshold: float = 0.85
    map_hysteresis_sec: float = 3.0
    idle_match_timeout_sec: float = 10.0

    window_title: str = "DeadByDaylight"
    custom_maps_dir: Path = PATHS.CUSTOM_MAPS_DIR
    settings_file: Path = PATHS.SETTINGS_FILE

    debug_save: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AppSettings":
        """
        Defaults overridden by FOG_* environment variables (and a .env file, if any).
        e.g. FOG_MAP_MATCH_THRESHOLD=0.9, FOG_CUSTOM_MAPS_DIR=D:/maps
        """
        load_dotenv(env_file)

        defaults = cls()
        overrides: Dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            value = _parse(f.name, raw.strip(), getattr(defaults, f.name))
            if value is not None:
                overrides[f.name] = value

        return replace(defaults, **overrides)


def _parse(name: str, raw: str, default: Any) -> Any:
    try:
        if isinstance(default, bool):
            return raw.lower() in ("1", "true", "yes", "on")
        if isinstance(default, float):
            return float(raw)
        if isinstance(default, Path):
            return Path(raw).expanduser()
        if name == "ocr_workers":
            return int(raw)
        return raw
    except ValueError:
        logger.warning(f"[Settings] ignoring {ENV_PREFIX}{name.upper()}={raw!r}, keeping {default!r}")
        return None
