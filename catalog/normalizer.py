# catalog/normalizer.py
from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

_QUOTES_RE = re.compile(r"[\"'`´^]")
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]+$")
_VARIANT_SUFFIX_RE = re.compile(r"\s*_+\s*(\d+)\s*_+\s*$")
_CONFUSABLES_RE = re.compile(r"[L1|]")
_WHITESPACE_RE = re.compile(r"\s+")


def _normalize_once(word: str) -> str:
    t = word.strip().upper()
    t = _QUOTES_RE.sub("", t)
    t = _EXTENSION_RE.sub("", t)
    # the variant suffix is digits, so it must go before 1 -> I
    t = _VARIANT_SUFFIX_RE.sub("", t)
    t = _CONFUSABLES_RE.sub("I", t)
    return _WHITESPACE_RE.sub(" ", t).strip()


def normalize_for_match(word: str) -> str:
    """
    Matching key for map names, shared by catalog grouping and OCR guesses.
    Applied until stable, so normalize_for_match(normalize_for_match(x)) == normalize_for_match(x).
    """
    current = _normalize_once(word)
    while True:
        nxt = _normalize_once(current)
        if nxt == current:
            return current
        current = nxt


def base_name(raw: str) -> str:
    """Display name of a map file: no extension, no _N_ suffix, single spaces."""
    no_ext = _EXTENSION_RE.sub("", raw)
    no_var = _VARIANT_SUFFIX_RE.sub("", no_ext)
    return _WHITESPACE_RE.sub(" ", no_var).strip()


def variation_number(raw: str) -> int:
    m = _VARIANT_SUFFIX_RE.search(_EXTENSION_RE.sub("", raw))
    return int(m.group(1)) if m else 0


def similarity_normalized(a: str, b: str) -> float:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    sim = 1.0 - Levenshtein.distance(a, b) / max_len
    return max(0.0, min(1.0, sim))


def map_name_similarity(a: str, b: str) -> float:
    return similarity_normalized(normalize_for_match(a), normalize_for_match(b))
