# catalog/providers.py
from __future__ import annotations

import base64
import io
import json
import logging
from pathlib import Path
from typing import List, Mapping, Optional, Protocol, Sequence

from PIL import Image, UnidentifiedImageError

from catalog.types import MapEntry
from core.errors import ProviderIOFailure

logger = logging.getLogger(__name__)

ALLOWED_FILE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
CUSTOM_REALM = "Custom"


class MapFileProvider(Protocol):
    id: str
    builtin: bool
    credit: Optional[str]

    def list(self) -> List[MapEntry]: ...

    def clear_cache(self) -> None: ...


class BundledProvider:
    """
    Maps shipped with the app, described by a realm -> [file names] manifest.
    Image refs are relative asset URIs (img/maps/<realm>/<file>).
    """

    id = "builtin"
    builtin = True
    credit: Optional[str] = "hens333.com"

    def __init__(
        self,
        manifest: Optional[Mapping[str, Sequence[str]]] = None,
        manifest_path: Optional[Path] = None,
        asset_root: str = "img/maps",
    ):
        if manifest is None and manifest_path is None:
            raise ValueError("BundledProvider needs a manifest or a manifest_path")
        self._manifest = manifest
        self.manifest_path = manifest_path
        self.asset_root = asset_root.rstrip("/")
        self._cache: Optional[List[MapEntry]] = None

    def clear_cache(self) -> None:
        self._cache = None

    def _read_manifest(self) -> Mapping[str, Sequence[str]]:
        if self._manifest is not None:
            return self._manifest
        try:
            with open(self.manifest_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ProviderIOFailure(f"cannot read manifest {self.manifest_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ProviderIOFailure(f"malformed manifest {self.manifest_path}: {e}") from e

        if not isinstance(data, dict):
            raise ProviderIOFailure(f"manifest {self.manifest_path} must map realms to file lists")
        return data

    def list(self) -> List[MapEntry]:
        if self._cache is not None:
            return self._cache

        entries: List[MapEntry] = []
        for realm, files in self._read_manifest().items():
            for file_name in files or []:
                rel = f"{self.asset_root}/{realm}/{file_name}"
                entries.append(
                    MapEntry(
                        source_id=self.id,
                        realm=realm,
                        file_name=file_name,
                        full_path=rel,
                        image_ref=rel,
                    )
                )

        self._cache = entries
        return self._cache


def _is_allowed(path: Path) -> bool:
    return path.suffix[1:].lower() in ALLOWED_FILE_EXTENSIONS


def read_image_data_url(path: Path) -> str:
    """
    Read an image file fully into memory and return it as a data: URL.
    Raises UnidentifiedImageError for files Pillow cannot identify and OSError
    or SyntaxError for broken or truncated ones.
    """
    raw = path.read_bytes()
    with Image.open(io.BytesIO(raw)) as img:
        img.verify()
        mime = Image.MIME.get(img.format or "", "application/octet-stream")
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"


class CustomFolderProvider:
    """
    User maps from a folder on disk.
    Files directly in base_path go to the "Custom" realm; each direct subfolder is used as a realm.
    """

    id = "custom"
    builtin = False
    credit: Optional[str] = None

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self._cache: Optional[List[MapEntry]] = None

    def clear_cache(self) -> None:
        self._cache = None

    def folder_exists(self) -> bool:
        return self.base_path.is_dir()

    def _add(self, entries: List[MapEntry], path: Path, realm: str) -> None:
        if not path.is_file() or not _is_allowed(path):
            return
        try:
            image_ref = read_image_data_url(path)
        except (UnidentifiedImageError, Image.DecompressionBombError, SyntaxError, OSError) as e:
            logger.warning(f"[Catalog] skipping undecodable image {path}: {e}")
            return

        entries.append(
            MapEntry(
                source_id=self.id,
                realm=realm or CUSTOM_REALM,
                file_name=path.name,
                full_path=str(path),
                image_ref=image_ref,
            )
        )

    def list(self) -> List[MapEntry]:
        if self._cache is not None:
            return self._cache

        if not self.folder_exists():
            logger.info(f"[Catalog] custom maps folder does not exist: {self.base_path}")
            self._cache = []
            return self._cache

        entries: List[MapEntry] = []
        try:
            first_level = sorted(self.base_path.iterdir())
            for p in first_level:
                if p.is_file():
                    self._add(entries, p, CUSTOM_REALM)

            for d in first_level:
                if not d.is_dir():
                    continue
                for p in sorted(d.iterdir()):
                    self._add(entries, p, d.name)
        except OSError as e:
            raise ProviderIOFailure(f"cannot list custom maps in {self.base_path}: {e}") from e

        self._cache = entries
        return self._cache
