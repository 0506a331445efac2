# regionalise/transform.py

from __future__ import annotations

from typing import List
from regionalise.models import Span


def splice(text: str, spans: List[Span]) -> str:
    """
    Apply span replacements to `text` and return the new string.

    Spans are applied from the highest start offset down, so every offset
    still refers to the untouched input. Spans without a replacement are
    left as they are. Overlapping spans are rejected.
    """
    ordered = sorted(spans, key=lambda s: s.start, reverse=True)

    out_parts: List[str] = []
    cursor = len(text)

    for span in ordered:
        if span.end > cursor:
            raise ValueError(
                f"Overlapping spans at [{span.start}, {span.end}) cannot be spliced"
            )
        out_parts.append(text[span.end:cursor])
        if span.replacement is None:
            out_parts.append(text[span.start:span.end])
        else:
            out_parts.append(span.replacement)
        cursor = span.start

    out_parts.append(text[:cursor])
    return "".join(reversed(out_parts))
