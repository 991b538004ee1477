from core.ocr_engine import PSM
from pipeline.scan_types import ScanBatch, TextScanArea, UniformColorScanArea

# x, y, w, h
# relative to the captured game window: top-left x, top-left y, width, height

# area ids, referenced by the state checks
MAP_AREA = "map"
MAIN_MENU_AREA = "main-menu"
MENU_BUTTON_AREA = "menu-btn"
BLOODPOINTS_AREA = "bloodpoints"
LOADING_SCREEN_AREA = "loading-screen"
LOADING_TEXT_AREA = "loading-text"
SETTINGS_AREA = "settings"
KILLER_POWER_AREA = "killer-power"

# the settings back button sits where the map name is shown in a match
SETTINGS_BACK_AREA = MAP_AREA

# four thin strips along the window edges
EDGE = 0.02
LOADING_BORDER_RECTS = (
    (0.00, 0.00, 1.00, EDGE),
    (0.00, 1 - EDGE, 1.00, EDGE),
    (0.00, EDGE, EDGE, 1 - 2 * EDGE),
    (1 - EDGE, EDGE, EDGE, 1 - 2 * EDGE),
)

MAP_NAME = TextScanArea(id=MAP_AREA, rect=(0.00, 0.70, 0.50, 0.30), psm=PSM.SPARSE_TEXT)
MAIN_MENU = TextScanArea(id=MAIN_MENU_AREA, rect=(0.05, 0.05, 0.30, 0.40), psm=PSM.SPARSE_TEXT_OSD)
MENU_BUTTON = TextScanArea(id=MENU_BUTTON_AREA, rect=(0.80, 0.85, 0.20, 0.15), psm=PSM.SPARSE_TEXT)
BLOODPOINTS = TextScanArea(
    id=BLOODPOINTS_AREA,
    rect=(0.70, 0.00, 0.30, 0.15),
    psm=PSM.SPARSE_TEXT_OSD,
    numeric_mode=True,
    scale=2,
)
LOADING_SCREEN = UniformColorScanArea(
    id=LOADING_SCREEN_AREA,
    rects=LOADING_BORDER_RECTS,
    black_max=10,
    color_delta_max=3,
    min_match_ratio=0.97,
)
LOADING_TEXT = TextScanArea(id=LOADING_TEXT_AREA, rect=(0.25, 0.30, 0.50, 0.40), psm=PSM.SPARSE_TEXT)
SETTINGS = TextScanArea(id=SETTINGS_AREA, rect=(0.00, 0.00, 1.00, 0.20), psm=PSM.SPARSE_TEXT)
KILLER_POWER = TextScanArea(id=KILLER_POWER_AREA, rect=(0.75, 0.80, 0.25, 0.20), psm=PSM.SPARSE_TEXT)

DEFAULT_SCAN_AREAS = (
    MAP_NAME,
    MAIN_MENU,
    MENU_BUTTON,
    BLOODPOINTS,
    LOADING_SCREEN,
    LOADING_TEXT,
    SETTINGS,
    KILLER_POWER,
)

# a map hit ends the cycle before the remaining areas are recognized
DEFAULT_SCAN_BATCHES = (
    ScanBatch(areas=(MAP_NAME,), checks=("map",)),
    ScanBatch(
        areas=(KILLER_POWER, SETTINGS, LOADING_SCREEN, LOADING_TEXT, MAIN_MENU, MENU_BUTTON, BLOODPOINTS),
        checks=("killer", "settings", "loading", "menu", "idle"),
    ),
)
