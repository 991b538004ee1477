import pytest

from config.roi import LOADING_SCREEN
from core.ocr_engine import PSM
from core.worker_pool import RecognitionPool, default_worker_count
from pipeline.region_classifier import RegionClassifier
from pipeline.scan_types import TextResult, TextScanArea, UniformColorResult

from conftest import NotFocusedSource, RecordingEngine, StaticFrameSource, solid_frame

MAP = TextScanArea(id="map", rect=(0.0, 0.7, 0.5, 0.3), psm=PSM.SPARSE_TEXT)
MENU = TextScanArea(id="main-menu", rect=(0.05, 0.05, 0.3, 0.4), psm=PSM.SPARSE_TEXT_OSD)


@pytest.fixture
def pool():
    with RecognitionPool(size=2) as p:
        yield p


def test_no_frame_aborts_without_recognition(pool):
    engine = RecordingEngine(default="PLAY")
    source = NotFocusedSource()

    assert RegionClassifier(engine, pool).classify(source, [MAP, MENU, LOADING_SCREEN]) is None
    assert source.captures == 1
    assert engine.calls == []


def test_mixed_areas(pool):
    engine = RecordingEngine({PSM.SPARSE_TEXT: "SHELTER WOODS", PSM.SPARSE_TEXT_OSD: "PLAY\nSTORE"})

    res = RegionClassifier(engine, pool).classify(StaticFrameSource(solid_frame()), [MAP, LOADING_SCREEN, MENU])

    assert list(res) == ["map", "loading-screen", "main-menu"]
    assert res["map"].text == ("SHELTER WOODS",)
    assert res["main-menu"].text == ("PLAY", "STORE")
    assert isinstance(res["loading-screen"], UniformColorResult)
    assert res["loading-screen"].passed
    assert len(engine.calls) == 2


def test_one_failing_area_does_not_affect_siblings(pool):
    engine = RecordingEngine({PSM.SPARSE_TEXT: "SHELTER WOODS"}, fail_psm={PSM.SPARSE_TEXT_OSD})

    res = RegionClassifier(engine, pool).classify_frame(solid_frame(), [MAP, MENU])

    assert res["main-menu"] == TextResult.empty()
    assert res["map"].text == ("SHELTER WOODS",)


@pytest.mark.parametrize("cpus, expected", [(1, 2), (2, 2), (3, 2), (4, 3), (32, 3)])
def test_default_worker_count(cpus, expected):
    assert default_worker_count(cpus) == expected
