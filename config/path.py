# config/path.py
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
USER_DATA_DIR = Path.home() / "Fog Companion"


@dataclass(frozen=True)
class Paths:
    CAPTURE_DIR: Path = PROJECT_ROOT / "captured_images"
    FRAME_CAPTURE_PNG: Path = CAPTURE_DIR / "frame_capture.png"

    MAP_DIRECTORY_JSON: Path = PROJECT_ROOT / "catalog" / "data" / "map_directory.json"

    CUSTOM_MAPS_DIR: Path = USER_DATA_DIR / "CustomMaps"
    SETTINGS_FILE: Path = USER_DATA_DIR / "settings.json"


PATHS = Paths()
