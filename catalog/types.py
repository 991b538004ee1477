# catalog/types.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class MapEntry:
    """One physical map image as seen by one provider."""

    source_id: str
    realm: str
    file_name: str
    full_path: str
    image_ref: str  # relative asset URI for bundled maps, data: URL for user maps


@dataclass(frozen=True)
class MapIdentity:
    name: str
    main: MapEntry
    variants: Tuple[MapEntry, ...] = ()
    credit: Optional[str] = None

    @property
    def realm(self) -> str:
        return self.main.realm

    @property
    def file_name(self) -> str:
        return self.main.file_name

    @property
    def full_path(self) -> str:
        return self.main.full_path

    @property
    def image_ref(self) -> str:
        return self.main.image_ref

    def next_variant(self) -> "MapIdentity":
        """Promote the first variant to main; the old main goes to the back of the list."""
        if not self.variants:
            return self
        return replace(self, main=self.variants[0], variants=self.variants[1:] + (self.main,))


@dataclass(frozen=True)
class MapGroup:
    base_name: str
    realm: str
    main: MapEntry
    variants: Tuple[MapEntry, ...]


@dataclass(frozen=True)
class MapMatch:
    key: str  # normalized base name
    score: float
    entry: MapEntry
