# catalog/map_catalog.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from catalog.normalizer import base_name, normalize_for_match, similarity_normalized, variation_number
from catalog.providers import CUSTOM_REALM, MapFileProvider
from catalog.types import MapEntry, MapGroup, MapIdentity, MapMatch

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.85
DEFAULT_PROVIDER_PRIORITY = ("custom", "builtin")


@dataclass(frozen=True)
class _Snapshot:
    entries: Tuple[MapEntry, ...] = ()
    keys: Tuple[str, ...] = ()  # normalize_for_match(entry.file_name), same order as entries


def _variation_key(entry: MapEntry) -> Tuple[int, int]:
    # no suffix first, then _1_, _2_, ...
    v = variation_number(entry.file_name)
    return (0, 0) if v == 0 else (1, v)


class MapCatalog:
    """
    Aggregates map entries from a prioritized list of providers and resolves
    names (exact or fuzzy) into MapIdentity objects.

    The entry cache is only ever replaced as a whole by reload(); readers keep
    working on whichever snapshot they picked up.
    """

    def __init__(
        self,
        providers: Optional[Iterable[MapFileProvider]] = None,
        provider_priority: Optional[Sequence[str]] = None,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    ):
        self.providers: List[MapFileProvider] = list(providers or [])
        self.provider_priority: List[str] = list(
            provider_priority if provider_priority is not None else DEFAULT_PROVIDER_PRIORITY
        )
        self.match_threshold = match_threshold
        self._snapshot = _Snapshot()

    # ---------- providers ----------

    def register_provider(self, provider: MapFileProvider, priority_higher_than: Optional[str] = None) -> None:
        if provider.id in self.provider_priority:
            self.provider_priority.remove(provider.id)

        if priority_higher_than is not None and priority_higher_than in self.provider_priority:
            self.provider_priority.insert(self.provider_priority.index(priority_higher_than), provider.id)
        else:
            self.provider_priority.append(provider.id)

        for i, existing in enumerate(self.providers):
            if existing.id == provider.id:
                self.providers[i] = provider
                return
        self.providers.insert(0, provider)

    def _provider(self, source_id: str) -> Optional[MapFileProvider]:
        for p in self.providers:
            if p.id == source_id:
                return p
        return None

    def _is_builtin(self, entry: MapEntry) -> bool:
        p = self._provider(entry.source_id)
        return bool(p is not None and p.builtin)

    def _priority_index(self, entry: MapEntry) -> int:
        try:
            return self.provider_priority.index(entry.source_id)
        except ValueError:
            return len(self.provider_priority)

    # ---------- cache ----------

    def reload(self) -> None:
        lists: List[List[MapEntry]] = []
        for provider in self.providers:
            provider.clear_cache()
            try:
                lists.append(list(provider.list()))
            except Exception:
                logger.exception(f"[Catalog] provider '{provider.id}' failed, using an empty listing")
                lists.append([])

        entries = tuple(e for listing in lists for e in listing)
        self._snapshot = _Snapshot(entries=entries, keys=tuple(normalize_for_match(e.file_name) for e in entries))
        logger.info(f"[Catalog] loaded {len(entries)} map entries from {len(self.providers)} providers")

    @property
    def entries(self) -> Tuple[MapEntry, ...]:
        return self._snapshot.entries

    def _candidates(self, name: str) -> List[MapEntry]:
        snap = self._snapshot
        key = normalize_for_match(name)
        return [e for e, k in zip(snap.entries, snap.keys) if k == key]

    # ---------- ordering ----------

    def _default_order(self, entry: MapEntry):
        return (self._priority_index(entry), _variation_key(entry), entry.file_name.casefold(), entry.file_name)

    def _realm_order(self, seed_realm: Optional[str], pool: Sequence[MapEntry]) -> Callable[[MapEntry], tuple]:
        """
        If the seed realm has a built-in entry, built-in entries of that realm
        come first, then other built-ins, then user entries. Otherwise user
        entries anchored to the seed realm lead.
        """
        builtin_first = bool(seed_realm) and any(
            self._is_builtin(e) and e.realm == seed_realm for e in pool
        )

        def rank(e: MapEntry) -> int:
            preferred = self._is_builtin(e) if builtin_first else not self._is_builtin(e)
            if preferred and seed_realm and e.realm == seed_realm:
                return 0
            if preferred:
                return 1
            return 2

        def key(e: MapEntry) -> tuple:
            same_realm = 0 if (seed_realm and e.realm == seed_realm) else 1
            return (
                rank(e),
                same_realm,
                _variation_key(e),
                self._priority_index(e),
                e.file_name.casefold(),
                e.file_name,
            )

        return key

    def _identity(self, ordered: Sequence[MapEntry]) -> MapIdentity:
        main = ordered[0]
        provider = self._provider(main.source_id)
        return MapIdentity(
            name=base_name(main.file_name),
            main=main,
            variants=tuple(ordered[1:]),
            credit=provider.credit if provider is not None else None,
        )

    # ---------- resolution ----------

    def make_map(self, realm: str, file_name: str) -> Optional[MapIdentity]:
        """Resolve an explicit realm/file seed, ordering entries for that realm."""
        candidates = self._candidates(base_name(file_name))
        if not candidates:
            return None
        return self._identity(sorted(candidates, key=self._realm_order(realm, candidates)))

    def make_map_by_name(self, name: str, prefer_realm: Optional[str] = None) -> Optional[MapIdentity]:
        candidates = self._candidates(name)
        if not candidates:
            return None
        if prefer_realm is not None:
            return self._identity(sorted(candidates, key=self._realm_order(prefer_realm, candidates)))
        return self._identity(sorted(candidates, key=self._default_order))

    def best_match(self, guess: str) -> Optional[MapMatch]:
        """
        Highest-scoring catalog name for a free-text guess, or None below the threshold.
        Linear scan over the distinct names of the current snapshot.
        """
        snap = self._snapshot
        target = normalize_for_match(guess)

        best: Optional[MapMatch] = None
        seen: Dict[str, float] = {}
        for entry, key in zip(snap.entries, snap.keys):
            if key in seen:
                continue
            score = similarity_normalized(key, target)
            seen[key] = score
            if best is None or score > best.score:
                best = MapMatch(key=key, score=score, entry=entry)

        if best is None or best.score < self.match_threshold:
            logger.debug(f"[Catalog] no match for {guess!r} (best={best.score if best else 0.0:.2f})")
            return None
        return best

    def resolve_guess(self, guess: str) -> Optional[Tuple[MapIdentity, float]]:
        match = self.best_match(guess)
        if match is None:
            return None
        identity = self.make_map_by_name(match.entry.file_name)
        if identity is None:
            return None
        return identity, match.score

    # ---------- browsing ----------

    def list_groups(self) -> List[MapGroup]:
        snap = self._snapshot
        by_key: Dict[str, List[MapEntry]] = {}
        for entry, key in zip(snap.entries, snap.keys):
            by_key.setdefault(key, []).append(entry)

        groups: List[MapGroup] = []
        for entries in by_key.values():
            realms = list(dict.fromkeys(e.realm for e in entries))
            for realm in realms:
                ordered = sorted(entries, key=self._realm_order(realm, entries))
                groups.append(
                    MapGroup(
                        base_name=base_name(ordered[0].file_name),
                        realm=realm,
                        main=ordered[0],
                        variants=tuple(ordered[1:]),
                    )
                )

        def group_order(g: MapGroup):
            is_custom = g.realm.lower() == CUSTOM_REALM.lower()
            return (0 if is_custom else 1, g.base_name.casefold(), g.realm.casefold())

        return sorted(groups, key=group_order)

    def counts_by_realm(self) -> Dict[str, Dict[str, int]]:
        """realm -> base name -> variant count (main excluded)"""
        out: Dict[str, Dict[str, int]] = {}
        for g in self.list_groups():
            out.setdefault(g.realm, {})[g.base_name] = len(g.variants)
        return out
