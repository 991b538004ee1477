import re
from typing import Iterable, List


class TextNormalizer:
    def __init__(self):
        # characters OCR tends to glue onto button labels, e.g. "(ESC)" or "|BACK"
        self.strip_pattern = re.compile(r"[()|\[\]\\/]")

    def words(self, lines: Iterable[str], strip_symbols: bool = False) -> List[str]:
        if not lines:
            return []

        out: List[str] = []
        for line in lines:
            t = line.lower()
            if strip_symbols:
                t = self.strip_pattern.sub("", t)
            out.extend(w for w in t.split(" ") if w)

        return out
