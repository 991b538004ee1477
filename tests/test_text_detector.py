import numpy as np

from core.ocr_engine import PSM, RecognitionOptions, build_tesseract_config, _lines_from_data
from pipeline.scan_types import TextResult, TextScanArea
from pipeline.text_detector import binarize_for_ocr, recognize_text_area

from conftest import RecordingEngine, solid_frame

AREA = TextScanArea(id="map", rect=(0.0, 0.5, 0.5, 0.5))


def test_binarize_two_tier_gate():
    px = np.array(
        [
            [
                (255, 255, 255),  # bright -> text
                (30, 30, 30),  # dark -> background
                (255, 0, 0),  # saturated -> background
                (170, 170, 170),  # mid gray -> text
                (170, 160, 170),  # almost gray, dim -> text
                (180, 165, 180),  # tinted, dim -> background
            ]
        ],
        dtype=np.uint8,
    )

    out = binarize_for_ocr(px, AREA)

    assert out.dtype == np.uint8
    assert out.tolist() == [[0, 255, 255, 0, 0, 255]]


def test_recognize_splits_and_trims_lines():
    engine = RecordingEngine(default="  SHELTER WOODS \n\n  THE MACMILLAN ESTATE  ")

    res = recognize_text_area(engine, solid_frame(), AREA)

    assert res.text == ("SHELTER WOODS", "THE MACMILLAN ESTATE")
    assert res.confidence == 87.5
    [opts] = engine.calls
    assert opts.segmentation_mode == PSM.SPARSE_TEXT
    assert opts.numeric_mode is False


def test_engine_error_gives_empty_result():
    engine = RecordingEngine(fail_psm={PSM.SPARSE_TEXT})
    assert recognize_text_area(engine, solid_frame(), AREA) == TextResult.empty()


def test_scaled_area_upscales_bitmap():
    engine = RecordingEngine()
    area = TextScanArea(id="bp", rect=(0.0, 0.0, 0.5, 0.5), numeric_mode=True, scale=2)

    recognize_text_area(engine, solid_frame(200, 100), area)

    assert engine.bitmaps[0].size == (200, 100)
    assert engine.calls[0].numeric_mode is True


def test_tesseract_config_flags():
    cfg = build_tesseract_config(RecognitionOptions(segmentation_mode=PSM.SPARSE_TEXT_OSD, numeric_mode=True))
    assert cfg.startswith("--psm 12 ")
    assert "-c tessedit_do_invert=0" in cfg
    assert "-c preserve_interword_spaces=1" in cfg
    assert "-c classify_bln_numeric_mode=1" in cfg
    assert " .," not in cfg  # whitelist is passed without spaces


def test_lines_from_image_to_data():
    data = {
        "text": ["", "SHELTER", "WOODS", "MACMILLAN", " "],
        "block_num": [1, 1, 1, 2, 2],
        "par_num": [1, 1, 1, 1, 1],
        "line_num": [1, 1, 1, 1, 1],
        "conf": [-1, 90, 80, 70, -1],
    }
    lines, conf = _lines_from_data(data)
    assert lines == ["SHELTER WOODS", "MACMILLAN"]
    assert conf == 80.0
