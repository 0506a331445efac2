# regionalise/textutils.py

from __future__ import annotations

import regex as re
from typing import List, Tuple


URL_RE = re.compile(r"(?i)(?:https?://|www\.)\S+")
EMAIL_RE = re.compile(r"\b[^\s@]+@[^\s@]+\.[^\s@]+\b")

SMART_QUOTES = {
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
    "–": "-",
    "—": "-",
}
_SMART_QUOTES_TABLE = str.maketrans(SMART_QUOTES)

CONTEXT_WINDOW = 50


def normalise_smart_quotes(text: str) -> str:
    # one char in, one char out: offsets survive normalisation
    return text.translate(_SMART_QUOTES_TABLE)


def preserve_case(replacement: str, original: str) -> str:
    """
    Re-apply the casing of `original` to `replacement`:
    - ALL CAPS stays all caps
    - Capitalised gets a leading capital
    - anything else is lower-cased
    """
    if not original or not replacement:
        return replacement

    letters = [c for c in original if c.isalpha()]
    if len(letters) > 1 and all(c.isupper() for c in letters):
        return replacement.upper()
    if original[0].isupper():
        return replacement[0].upper() + replacement[1:].lower()
    return replacement.lower()


def context_window(text: str, start: int, end: int, size: int = CONTEXT_WINDOW) -> Tuple[str, int]:
    """Return the +/- `size` char window around [start, end) and its offset in `text`."""
    lo = max(0, start - size)
    hi = min(len(text), end + size)
    return text[lo:hi], lo


def protected_ranges(text: str) -> List[Tuple[int, int]]:
    ranges = [(m.start(), m.end()) for m in URL_RE.finditer(text)]
    ranges += [(m.start(), m.end()) for m in EMAIL_RE.finditer(text)]
    return sorted(ranges)


def is_url(token: str) -> bool:
    return bool(URL_RE.match(token)) or bool(EMAIL_RE.search(token))
