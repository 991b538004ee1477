from __future__ import annotations

# ======================
# Standard library
# ======================
import argparse
import json
from pathlib import Path
from typing import Dict, List

# ======================
# Local modules
# ======================
from catalog.providers import ALLOWED_FILE_EXTENSIONS
from config.path import PATHS


# ======================
# Helpers
# ======================
def build_directory(root: Path) -> Dict[str, List[str]]:
    """<root>/<realm>/<file> -> {realm: [file, ...]}"""
    directory: Dict[str, List[str]] = {}
    for realm_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        files = sorted(
            p.name
            for p in realm_dir.iterdir()
            if p.is_file() and p.suffix[1:].lower() in ALLOWED_FILE_EXTENSIONS
        )
        directory[realm_dir.name] = files
    return directory


# ======================
# Main
# ======================
def main() -> None:
    parser = argparse.ArgumentParser(description="Write the bundled map manifest from an image folder.")
    parser.add_argument("--root", required=True, help="folder holding one subfolder per realm")
    parser.add_argument("--out", default=str(PATHS.MAP_DIRECTORY_JSON))
    args = parser.parse_args()

    root = Path(args.root)
    if not root.is_dir():
        raise FileNotFoundError(f"map folder not found: {root}")

    directory = build_directory(root)

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(directory, f, indent=2, ensure_ascii=False)
        f.write("\n")

    total = sum(len(v) for v in directory.values())
    print(f"wrote {len(directory)} realms / {total} maps -> {out}")


if __name__ == "__main__":
    main()
