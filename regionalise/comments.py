# regionalise/comments.py

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import regex as re


@dataclass(frozen=True)
class Comment:
    start: int
    end: int
    syntax: str

    def overlaps(self, other: "Comment") -> bool:
        return not (self.end <= other.start or other.end <= self.start)


# (syntax family, pattern)
COMMENT_SYNTAXES = (
    ("c_block", re.compile(r"/\*.*?\*/", re.DOTALL)),
    ("html", re.compile(r"<!--.*?-->", re.DOTALL)),
    ("python_double", re.compile(r'""".*?"""', re.DOTALL)),
    ("python_single", re.compile(r"'''.*?'''", re.DOTALL)),
    ("haskell_block", re.compile(r"\{-\s.*?-\}", re.DOTALL)),
    ("ml_block", re.compile(r"\(\*\s.*?\*\)", re.DOTALL)),
    ("c_line", re.compile(r"(?<![:\w/])//[^\n]*")),
    ("hash", re.compile(r"(?m)(?:^|(?<=\s))#(?=[ \t!]|$)[^\n]*")),
    ("sql", re.compile(r"(?m)(?:^|(?<=\s))--(?=[ \t]|$)[^\n]*")),
    ("lisp", re.compile(r"(?m)(?:^|(?<=\s));+(?=[ \t])[^\n]*")),
    ("tex", re.compile(r"(?m)^[ \t]*\K%(?=[ \t])[^\n]*")),
    ("batch", re.compile(r"(?mi)^[ \t]*\Krem(?=[ \t])[^\n]*")),
)


def find_comments(text: str) -> List[Comment]:
    """
    Locate comments of every known syntax in `text`.

    Overlapping hits are resolved in favour of the one starting first, then
    the longer one, so "//" inside a block comment is not reported twice.
    """
    found = [
        Comment(m.start(), m.end(), syntax)
        for syntax, pattern in COMMENT_SYNTAXES
        for m in pattern.finditer(text)
        if m.end() > m.start()
    ]
    found.sort(key=lambda c: (c.start, -c.end))

    result: List[Comment] = []
    for comment in found:
        if result and result[-1].overlaps(comment):
            continue
        result.append(comment)
    return result
