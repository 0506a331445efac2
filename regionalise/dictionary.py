# regionalise/dictionary.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import regex as re
import yaml
from breame.spelling import get_british_spelling

from regionalise.models import Span
from regionalise.textutils import is_url, preserve_case
from regionalise.transform import splice


logger = logging.getLogger(__name__)

BUILTIN_PATH = Path(__file__).with_name("data") / "american_spellings.yaml"

TOKEN_RE = re.compile(r"\S+")
QUOTE_CHARS = "\"'‘’“”"
OUTER_QUOTED_RE = re.compile(
    r"^(?P<lead>[\"'‘“]*)(?P<word>[A-Za-z][A-Za-z'-]*?)(?P<comma>,?)(?P<trail>[\"'’”]*)(?P<rest>[,.;:!?)]*)$"
)
EMBEDDED_QUOTED_RE = re.compile(r"[\"'‘“](?P<word>[A-Za-z][A-Za-z-]*),?[\"'’”]")
PUNCT_STRIP_RE = re.compile(r"^(?P<lead>\W*)(?P<word>\w(?:.*\w)?)(?P<trail>\W*)$")

# (offset in token, length, replacement)
Hit = Tuple[int, int, str]

# American spellings that are also everyday words with another meaning
# ("tire" out, "check" a box)
AMBIGUOUS_WORDS = frozenset(
    {
        "check", "checks", "checked", "checking",
        "curb", "curbs", "curbed", "curbing",
        "draft", "drafts", "drafted", "drafting",
        "meter", "meters",
        "program", "programs", "programmed", "programming",
        "tire", "tires", "tired", "tiring",
        "story", "stories",
        "disk", "disks",
        "inquiry", "inquiries",
        "license", "licensed", "licenses", "licensing",
        "practice", "practiced", "practices", "practicing",
    }
)


def load_builtin_table() -> Dict[str, str]:
    with open(BUILTIN_PATH, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return {str(k).lower(): str(v) for k, v in data.get("words", {}).items()}


def breame_spelling(word: str) -> Optional[str]:
    """British spelling of a lower-case American `word` from breame, or None."""
    if word in AMBIGUOUS_WORDS:
        return None
    british = get_british_spelling(word)
    if not british or british == word:
        return None
    return british


class DictionaryLookup:
    """
    Case-preserving American-to-British table lookup over whitespace tokens.

    A user table overrides the built-in one, which is backed by breame when
    `use_breame` is set. `excluded` words are left to the contextual detector.
    """

    def __init__(
        self,
        table: Optional[Mapping[str, str]] = None,
        user_table: Optional[Mapping[str, str]] = None,
        excluded: Iterable[str] = (),
        use_breame: bool = True,
    ):
        merged = dict(load_builtin_table() if table is None else table)
        merged.update({k.lower(): v for k, v in (user_table or {}).items()})
        self._excluded = frozenset(word.lower() for word in excluded)
        for word in self._excluded:
            merged.pop(word, None)
        self._table: Dict[str, str] = {k.lower(): v for k, v in merged.items()}
        self.use_breame = use_breame

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, word: str) -> bool:
        return self.lookup(word) is not None

    def lookup(self, word: str) -> Optional[str]:
        """British spelling for `word` with its case restored, or None."""
        lowered = word.lower()
        british = self._table.get(lowered)
        if british is None and self.use_breame and lowered not in self._excluded:
            british = breame_spelling(lowered)
        if british is None:
            return None
        return preserve_case(british, word)

    def inverse(self) -> "DictionaryLookup":
        """The British-to-American lookup; the first American spelling wins on collisions."""
        flipped: Dict[str, str] = {}
        for american, british in sorted(self._table.items()):
            flipped.setdefault(british.lower(), american)
        return DictionaryLookup(table=flipped, use_breame=False)

    # --- token fallbacks ---

    def _bare(self, token: str, offset: int = 0) -> List[Hit]:
        british = self.lookup(token)
        if british is None or british == token:
            return []
        return [(offset, len(token), british)]

    def _possessive(self, token: str) -> List[Hit]:
        if len(token) > 2 and token[-2] in "'’" and token[-1] in "sS":
            return self._bare(token[:-2])
        return []

    def _quoted(self, token: str) -> List[Hit]:
        m = OUTER_QUOTED_RE.match(token)
        if m and (m.group("lead") or m.group("trail")):
            hits = self._bare(m.group("word"), m.start("word"))
            if hits:
                return hits

        hits: List[Hit] = []
        for m in EMBEDDED_QUOTED_RE.finditer(token):
            hits += self._bare(m.group("word"), m.start("word"))
        return hits

    def _punctuation(self, token: str, offset: int = 0) -> List[Hit]:
        m = PUNCT_STRIP_RE.match(token)
        if not m or m.group("word") == token:
            return []
        word = m.group("word")
        hits = self._bare(word, offset + m.start("word"))
        if hits:
            return hits
        return self._possessive_at(word, offset + m.start("word"))

    def _possessive_at(self, word: str, offset: int) -> List[Hit]:
        return [(offset + o, n, r) for o, n, r in self._possessive(word)]

    def _hyphenated(self, token: str) -> List[Hit]:
        if "-" not in token:
            return []
        hits: List[Hit] = []
        offset = 0
        for part in token.split("-"):
            if part:
                hits += self._bare(part, offset) or self._punctuation(part, offset)
            offset += len(part) + 1
        return hits

    def match_token(self, token: str) -> List[Hit]:
        """
        Try, in order: the bare token, its possessive stem, quote-stripped
        forms, the punctuation-stripped word and finally each hyphen segment.
        """
        if is_url(token):
            return []
        for attempt in (self._bare, self._possessive, self._quoted, self._punctuation, self._hyphenated):
            hits = attempt(token)
            if hits:
                return hits
        return []

    def find_spans(self, text: str) -> List[Span]:
        spans: List[Span] = []
        for line_match in re.finditer(r"[^\n]+", text):
            base = line_match.start()
            for m in TOKEN_RE.finditer(line_match.group(0)):
                for offset, length, replacement in self.match_token(m.group(0)):
                    start = base + m.start() + offset
                    spans.append(
                        Span(
                            start=start,
                            end=start + length,
                            conf=1.0,
                            source="dictionary",
                            replacement=replacement,
                        )
                    )
        return spans

    def convert(self, text: str) -> str:
        return splice(text, self.find_spans(text))
