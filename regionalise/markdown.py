# regionalise/markdown.py

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import regex as re


BOLD_STAR_RE = re.compile(r"\*\*([^*\n]+)\*\*")
BOLD_UNDERSCORE_RE = re.compile(r"__([^_\n]+)__")
ITALIC_STAR_RE = re.compile(r"(?<=\s|^)\*([^\s*][^*\n]*?)\*(?=\s|$|[,.!?;:])")
ITALIC_UNDERSCORE_RE = re.compile(r"(?<=\s|^)_([^\s_][^_\n]*?)_(?=\s|$|[,.!?;:])")
LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")

# (pattern, opening, closing); bold before italic so ** is not read as two *
FORMATS: Tuple[Tuple[re.Pattern, str, str], ...] = (
    (BOLD_STAR_RE, "**", "**"),
    (BOLD_UNDERSCORE_RE, "__", "__"),
    (ITALIC_STAR_RE, "*", "*"),
    (ITALIC_UNDERSCORE_RE, "_", "_"),
)


def has_markdown(text: str) -> bool:
    return (
        "**" in text
        or "__" in text
        or "](" in text
        or text.count("*") >= 2
        or text.count("_") >= 2
    )


def _sentinel(text: str) -> Optional[str]:
    """First private-use character that does not already occur in `text`."""
    for code in range(0xE000, 0xF900):
        char = chr(code)
        if char not in text:
            return char
    return None


def _restore(text: str, pattern: re.Pattern, pieces: List[str], limit: int) -> str:
    """
    Put stashed pieces back in one pass.

    A piece can only refer to pieces stashed before it, so nested pieces are
    resolved with a lower `limit`; indices at or past `limit` are left as is.
    """

    def put_back(m) -> str:
        index = int(m.group(1))
        if index >= limit:
            return m.group(0)
        return _restore(pieces[index], pattern, pieces, index)

    return pattern.sub(put_back, text)


def convert_markdown(text: str, convert: Callable[[str], str]) -> str:
    """
    Convert prose without breaking one level of markdown formatting.

    Bold, italic and link spans are swapped for placeholders, the remaining
    text is converted, each inner text is converted on its own and the
    markup is put back. Link targets are never converted.
    """
    if not has_markdown(text):
        return convert(text)

    mark = _sentinel(text)
    if mark is None:
        return convert(text)
    placeholder = re.compile(re.escape(mark) + r"(\d+)" + re.escape(mark))
    pieces: List[str] = []

    def stash(rendered: str) -> str:
        pieces.append(rendered)
        return f"{mark}{len(pieces) - 1}{mark}"

    def link(m) -> str:
        return stash(f"[{convert(m.group(1))}]({m.group(2)})")

    masked = LINK_RE.sub(link, text)
    for pattern, opening, closing in FORMATS:
        masked = pattern.sub(
            lambda m, o=opening, c=closing: stash(f"{o}{convert(m.group(1))}{c}"),
            masked,
        )

    return _restore(convert(masked), placeholder, pieces, len(pieces))
