# regionalise/ignore.py

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

import regex as re

from regionalise.comments import find_comments
from regionalise.models import IgnoreDirective, IgnoreKind


MARKER_RE = re.compile(r"(?i)(?<![\w-])m2e-ignore(?:-(?P<kind>line|next|file))?(?![\w-])")


@dataclass(frozen=True)
class IgnoreScan:
    directives: Tuple[IgnoreDirective, ...]
    file_ignored: bool
    skipped_lines: FrozenSet[int]

    def is_skipped(self, line_number: int) -> bool:
        return line_number in self.skipped_lines

    def stats(self) -> Dict[str, int]:
        """Directive count per kind, e.g. {"next": 2, "line": 1}."""
        return dict(Counter(d.kind.value for d in self.directives))


def line_starts(text: str) -> List[int]:
    starts = [0]
    for m in re.finditer(r"\n", text):
        starts.append(m.end())
    return starts


def _stands_alone(text: str, comment_start: int, comment_end: int) -> bool:
    line_start = text.rfind("\n", 0, comment_start) + 1
    line_end = text.find("\n", comment_start)
    if line_end == -1:
        line_end = len(text)
    before = text[line_start:comment_start]
    after = text[comment_end:line_end] if comment_end <= line_end else ""
    return not before.strip() and not after.strip()


def find_directives(text: str) -> List[IgnoreDirective]:
    """
    Ignore markers that sit inside a recognised comment, in text order.

    `line_number` is the line the directive applies to:
    - m2e-ignore-file: the marker's line (the whole text is ignored anyway)
    - m2e-ignore-line: the marker's own line
    - m2e-ignore-next: the following line
    - m2e-ignore: the following line when the comment stands alone on its
      line, otherwise the marker's own line
    """
    directives: List[IgnoreDirective] = []
    for comment in find_comments(text):
        body = text[comment.start:comment.end]
        for m in MARKER_RE.finditer(body):
            marker_line = text.count("\n", 0, comment.start + m.start())
            kind = (m.group("kind") or "").lower()

            if kind == "file":
                directives.append(IgnoreDirective(marker_line, IgnoreKind.FILE, marker_line))
            elif kind == "next":
                directives.append(IgnoreDirective(marker_line + 1, IgnoreKind.NEXT, marker_line))
            elif kind == "line" or not _stands_alone(text, comment.start, comment.end):
                directives.append(IgnoreDirective(marker_line, IgnoreKind.LINE, marker_line))
            else:
                directives.append(IgnoreDirective(marker_line + 1, IgnoreKind.NEXT, marker_line))
    return directives


def scan_ignores(text: str) -> IgnoreScan:
    """Work out which lines of `text` must be left untouched."""
    directives = tuple(find_directives(text))
    return IgnoreScan(
        directives=directives,
        file_ignored=any(d.kind == IgnoreKind.FILE for d in directives),
        skipped_lines=frozenset(d.line_number for d in directives if d.kind != IgnoreKind.FILE),
    )
