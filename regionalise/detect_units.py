# regionalise/detect_units.py

from __future__ import annotations

import logging
from typing import List

from regionalise.errors import ParseError
from regionalise.models import UnitMatch, UnitType
from regionalise.numerals import parse_numeral
from regionalise.resolve import merge_spans
from regionalise.scoring import score
from regionalise.textutils import context_window
from regionalise.unit_patterns import (
    IDIOM_PHRASES,
    MEASUREMENT_WORDS,
    NO_SPACE_RE,
    PLAUSIBLE_RANGES,
    UnitRule,
    UnitRuleSet,
)


logger = logging.getLogger(__name__)


def unit_features(value: float, unit_type: UnitType, matched: str, context: str) -> List[str]:
    features = []
    if MEASUREMENT_WORDS.search(context):
        features.append("measurement_context")
    if NO_SPACE_RE.search(matched):
        features.append("no_space")
    if value > 10000 or value < 0.001:
        # below-zero temperatures are ordinary
        if not (unit_type == UnitType.TEMPERATURE and value <= 0):
            features.append("out_of_range")
    lo, hi = PLAUSIBLE_RANGES[unit_type]
    if lo <= value <= hi:
        features.append("plausible_range")
    lowered = context.lower()
    if any(phrase in lowered for phrase in IDIOM_PHRASES[unit_type]):
        features.append("idiomatic_context")
    return features


def _candidate(text: str, rule: UnitRule, m, rules: UnitRuleSet) -> UnitMatch | None:
    start, end = m.start(), m.end()
    try:
        value = parse_numeral(m.group("value"))
        if m.groupdict().get("inches"):
            value += parse_numeral(m.group("inches")) / 12
    except ParseError as e:
        logger.debug("Dropping %r: %s", m.group(0), e)
        return None

    unit = rule.canonical_unit(m.group("unit"))
    if unit is None:
        logger.debug("No canonical unit for %r", m.group("unit"))
        return None

    context, offset = context_window(text, start, end)
    if rules.is_excluded(context, start - offset, end - offset):
        logger.debug("Excluded idiomatic use %r", m.group(0))
        return None

    conf = score(rule.conf, unit_features(value, rule.unit_type, m.group(0), context))
    if conf < rules.min_confidence:
        return None

    return UnitMatch(
        start=start,
        end=end,
        conf=conf,
        source="units",
        priority=rule.order,
        value=value,
        unit=unit,
        unit_type=rule.unit_type,
        is_compound=rule.compound,
        context=context,
    )


def find_unit_spans(text: str, rules: UnitRuleSet) -> List[UnitMatch]:
    """
    Find imperial measurements in `text`.

    Returns non-overlapping matches ordered by start offset. Replacements are
    left empty; the converter fills them in.
    """
    spans: List[UnitMatch] = []
    if not text or not rules.rules:
        return spans

    for rule in rules.rules:
        for m in rule.pattern.finditer(text):
            candidate = _candidate(text, rule, m, rules)
            if candidate is not None:
                spans.append(candidate)

    return merge_spans(spans)
