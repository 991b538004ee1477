import numpy as np

from config.roi import LOADING_SCREEN
from core.frame import Frame
from pipeline.scan_types import UniformColorScanArea
from pipeline.uniform_color_detector import detect_uniform_color

from conftest import solid_frame

FULL = UniformColorScanArea(id="full", rects=((0.0, 0.0, 1.0, 1.0),), sample_stride=1)


def test_black_borders_pass():
    res = detect_uniform_color(solid_frame(200, 100, (0, 0, 0)), LOADING_SCREEN)
    assert res.passed
    assert res.ratio == 1.0
    assert res.first_fail is None
    assert res.dominant_color == (0, 0, 0)


def test_uniform_non_black_overlay_passes():
    res = detect_uniform_color(solid_frame(200, 100, (90, 40, 120)), LOADING_SCREEN)
    assert res.passed
    assert res.dominant_color == (90, 40, 120)


def test_stride_controls_sample_count():
    res = detect_uniform_color(solid_frame(10, 10), UniformColorScanArea(id="s", rects=((0, 0, 1, 1),), sample_stride=2))
    assert res.tested == 25
    assert res.matched == 25


def test_single_outlier_is_reported_but_tolerated():
    frame = solid_frame(10, 10)
    frame.pixels[0, 5] = (255, 255, 255)

    res = detect_uniform_color(frame, FULL)

    assert res.tested == 100
    assert res.matched == 99
    assert res.passed  # 0.99 >= 0.98
    assert (res.first_fail.x, res.first_fail.y) == (5, 0)
    assert res.first_fail.color == (255, 255, 255)


def test_noisy_screen_fails():
    rng = np.random.default_rng(7)
    frame = Frame(pixels=rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8))

    res = detect_uniform_color(frame, LOADING_SCREEN)

    assert not res.passed
    assert res.ratio < LOADING_SCREEN.min_match_ratio
    assert 0 <= res.first_fail.x < 80
    assert 0 <= res.first_fail.y < 60


def test_no_samples_means_no_pass():
    res = detect_uniform_color(solid_frame(), UniformColorScanArea(id="none", rects=()))
    assert res.tested == 0
    assert res.ratio == 0.0
    assert not res.passed
