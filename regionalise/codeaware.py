# regionalise/codeaware.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import regex as re
from pygments.lexers import guess_lexer
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from regionalise.comments import find_comments


logger = logging.getLogger(__name__)

# lowest lexer analyse_text score at which unfenced input counts as code
RAW_CODE_MIN_SCORE = 0.3


FENCE_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})(?P<lang>[\w+#.-]*)[^\n]*\n(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
INLINE_CODE_RE = re.compile(r"(?<!`)`([^`\n]+)`(?!`)")


class SegmentKind(str, Enum):
    TEXT = "text"
    CODE = "code"
    COMMENT = "comment"


@dataclass(frozen=True)
class Segment:
    start: int
    end: int
    kind: SegmentKind
    language: Optional[str] = None


def has_code_markers(text: str) -> bool:
    return "`" in text or "~~~" in text


def _text_segments(text: str, start: int, end: int) -> List[Segment]:
    """Split prose between fences at inline code spans."""
    segments: List[Segment] = []
    cursor = start
    for m in INLINE_CODE_RE.finditer(text, start, end):
        if m.start() > cursor:
            segments.append(Segment(cursor, m.start(), SegmentKind.TEXT))
        segments.append(Segment(m.start(), m.end(), SegmentKind.CODE))
        cursor = m.end()
    if cursor < end:
        segments.append(Segment(cursor, end, SegmentKind.TEXT))
    return segments


def _code_segments(text: str, start: int, end: int, lang: Optional[str]) -> List[Segment]:
    """Code between `start` and `end` is opaque; comments inside it convert."""
    segments: List[Segment] = []
    cursor = start
    for comment in find_comments(text[start:end]):
        c_start, c_end = start + comment.start, start + comment.end
        if c_start > cursor:
            segments.append(Segment(cursor, c_start, SegmentKind.CODE, lang))
        segments.append(Segment(c_start, c_end, SegmentKind.COMMENT, lang))
        cursor = c_end
    if cursor < end:
        segments.append(Segment(cursor, end, SegmentKind.CODE, lang))
    return segments


def _fence_segments(text: str, m) -> List[Segment]:
    """Fence lines are opaque; the body is code with convertible comments."""
    lang = m.group("lang") or None
    body_start, body_end = m.span("body")
    return (
        [Segment(m.start(), body_start, SegmentKind.CODE, lang)]
        + _code_segments(text, body_start, body_end, lang)
        + [Segment(body_end, m.end(), SegmentKind.CODE, lang)]
    )


def sniff_language(text: str) -> Optional[str]:
    """Lower-cased language name when the whole of `text` reads as source code."""
    try:
        lexer = guess_lexer(text)
    except ClassNotFound:
        return None
    if isinstance(lexer, TextLexer) or lexer.analyse_text(text) < RAW_CODE_MIN_SCORE:
        return None
    return lexer.name.lower()


def segment(text: str, detect_raw_code: bool = False) -> List[Segment]:
    """
    Partition `text` into prose, opaque code and convertible code comments.

    Segments are contiguous and cover the whole input. Without any backtick
    or tilde fence marker the whole input is a single prose segment, unless
    `detect_raw_code` is set and the text is recognised as source code, in
    which case it is handled like the body of a fenced block.
    """
    if not text:
        return []
    if not has_code_markers(text):
        lang = sniff_language(text) if detect_raw_code else None
        if lang is None:
            return [Segment(0, len(text), SegmentKind.TEXT)]
        logger.debug("Unfenced input looks like %s; converting comments only", lang)
        return [s for s in _code_segments(text, 0, len(text), lang) if s.end > s.start]

    segments: List[Segment] = []
    cursor = 0
    for m in FENCE_RE.finditer(text):
        if m.start() > cursor:
            segments += _text_segments(text, cursor, m.start())
        segments += _fence_segments(text, m)
        cursor = m.end()
    if cursor < len(text):
        segments += _text_segments(text, cursor, len(text))

    return [s for s in segments if s.end > s.start]
