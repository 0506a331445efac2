# regionalise/resolve.py

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple
from regionalise.models import Span


def merge_spans(primary: List[Span], extra: List[Span] | None = None) -> List[Span]:
    """
    Merge two span lists and resolve overlaps by:
    - preferring higher confidence
    - breaking ties by preferring longer spans
    - then by the earlier registered rule (lower priority)
    - then by the earlier start

    Candidates are taken strongest first, so raising a confidence threshold
    before merging can only shrink the result.
    """

    spans = list(primary)
    if extra:
        spans.extend(extra)

    if not spans:
        return []

    ranked = sorted(
        spans,
        key=lambda s: (-round(s.conf, 6), -s.length(), s.priority, s.start),
    )

    kept: List[Span] = []
    for span in ranked:
        if any(span.overlaps(k) for k in kept):
            continue
        kept.append(span)

    kept.sort(key=lambda s: s.start)
    return kept


def combine_layers(*layers: Sequence[Span]) -> List[Span]:
    """
    Combine already-resolved span lists from several detectors.

    Earlier layers take precedence: a span overlapping anything kept from a
    previous layer is dropped.
    """
    kept: List[Span] = []
    for layer in layers:
        accepted = [s for s in layer if not any(s.overlaps(k) for k in kept)]
        kept.extend(accepted)

    kept.sort(key=lambda s: s.start)
    return kept


def drop_protected(spans: Iterable[Span], ranges: Sequence[Tuple[int, int]]) -> List[Span]:
    """Remove spans touching any protected [start, end) range (URLs, e-mails)."""
    if not ranges:
        return list(spans)
    return [
        s
        for s in spans
        if not any(s.start < hi and lo < s.end for lo, hi in ranges)
    ]
