from __future__ import annotations

# ======================
# Standard library
# ======================
import argparse
import time
from pathlib import Path
from typing import List

# ======================
# Local modules
# ======================
from app.run import configure_logging
from app.settings import AppSettings
from app.wiring import build_deps
from core.frame import ImageSequenceFrameSource
from core.settings_store import SettingsStore


# ======================
# Helpers
# ======================
def list_images(folder: Path) -> List[Path]:
    exts = {".png", ".jpg", ".jpeg", ".webp", ".bmp"}
    paths = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in exts]
    return sorted(paths, key=lambda p: p.name)


# ======================
# Main
# ======================
def main() -> None:
    defaults = AppSettings.from_env()

    parser = argparse.ArgumentParser(description="Replay a folder of screenshots through the detection pipeline.")
    parser.add_argument("--frames", required=True, help="folder of screenshots, replayed in name order")
    parser.add_argument("--sleep", type=float, default=0.0, help="pause between frames (seconds)")
    parser.add_argument("--limit", type=int, default=0)
    parser.add_argument("--threshold", type=float, default=defaults.map_match_threshold)
    parser.add_argument("--log_level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)

    frame_dir = Path(args.frames)
    if not frame_dir.exists():
        raise FileNotFoundError(f"frame folder not found: {frame_dir}")

    img_paths = list_images(frame_dir)
    if args.limit:
        img_paths = img_paths[: args.limit]
    if not img_paths:
        raise FileNotFoundError(f"no images in: {frame_dir}")

    settings = AppSettings(
        map_match_threshold=args.threshold,
        custom_maps_dir=defaults.custom_maps_dir,
        tesseract_cmd=defaults.tesseract_cmd,
        tesseract_lang=defaults.tesseract_lang,
        ocr_workers=defaults.ocr_workers,
    )

    # offline runs always have smart features on and never touch the user's settings file
    store = SettingsStore(path=None)
    store.update(smart_features_enabled=True)

    source = ImageSequenceFrameSource(img_paths)
    deps = build_deps(settings, source=source, settings_store=store)

    print(f"OFFLINE frames: {frame_dir} ({len(img_paths)})")
    print("====================================")

    processed = 0
    try:
        for path in img_paths:
            report = deps.estimator.estimate(source)
            if report is None:
                break

            state = report.state
            print(
                f"#[{processed + 1:04d}] {path.name}"
                f" | fired={report.fired}"
                f" | state={state.type.value}"
                f" | map={state.map.name if state.map else '-'}"
                f" | killer={state.killer.name if state.killer else '-'}"
            )
            processed += 1
            if args.sleep:
                time.sleep(args.sleep)
    finally:
        deps.close()

    print("====================================")
    print(f"OFFLINE DONE. processed={processed} / total={len(img_paths)}")


if __name__ == "__main__":
    main()
