# regionalise/detect_words.py

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from regionalise.errors import UnsupportedWordError
from regionalise.models import WordMatch, WordType
from regionalise.resolve import merge_spans
from regionalise.scoring import score
from regionalise.textutils import context_window, preserve_case
from regionalise.word_patterns import QUOTED_LITERAL_RE, WordRule, WordRuleSet


logger = logging.getLogger(__name__)


def word_features(rule: WordRule, context: str) -> List[str]:
    lowered = context.lower()
    word = rule.base_word.lower()
    features = []
    if rule.word_type == WordType.VERB and f"to {word}" in lowered:
        features.append("infinitive_cue")
    if rule.word_type == WordType.NOUN and f"the {word}" in lowered:
        features.append("definite_article")
    if f"software {word}" in lowered:
        features.append("technical_cooccurrence")
    return features


def _quoted_ranges(text: str) -> List[Tuple[int, int]]:
    return [(m.start(), m.end()) for m in QUOTED_LITERAL_RE.finditer(text)]


def _warn_ambiguous(text: str, candidates: List[WordMatch]) -> None:
    by_span: Dict[Tuple[int, int], Dict[WordType, float]] = {}
    for c in candidates:
        roles = by_span.setdefault((c.start, c.end), {})
        roles[c.word_type] = max(roles.get(c.word_type, 0.0), c.conf)
    for (start, end), roles in by_span.items():
        noun, verb = roles.get(WordType.NOUN), roles.get(WordType.VERB)
        if noun is not None and verb is not None and abs(noun - verb) < 0.1:
            logger.warning(
                "Ambiguous use of %r at %d (noun %.2f, verb %.2f)",
                text[start:end],
                start,
                noun,
                verb,
            )


def find_word_spans(text: str, rules: WordRuleSet) -> List[WordMatch]:
    """
    Find words whose British spelling depends on their grammatical role.

    Every rule runs over the whole text; vetoed, quoted and low-confidence
    candidates are dropped and overlaps resolved. Semantic variants beat any
    grammatical reading of the same word.
    """
    if not text or not rules.rules:
        return []

    quoted = [] if rules.convert_quoted_text else _quoted_ranges(text)
    semantic: List[WordMatch] = []
    grammatical: List[WordMatch] = []

    for rule in rules.rules:
        # user-supplied variants may have no capture group
        group = 1 if rule.pattern.groups else 0
        for m in rule.pattern.finditer(text):
            start, end = m.span(group)
            if start == end:
                continue
            if any(lo < end and start < hi for lo, hi in quoted):
                continue

            context, offset = context_window(text, start, end)
            if rules.is_excluded(context, start - offset, end - offset):
                logger.debug("Excluded %r by context", m.group(group))
                continue

            original = m.group(group)
            replacement = rule.replacement
            if rule.semantic and original.lower().endswith("s") and not replacement.lower().endswith("s"):
                replacement += "s"

            conf = score(rule.conf, word_features(rule, context))
            if conf < rules.min_confidence:
                continue

            match = WordMatch(
                start=start,
                end=end,
                conf=conf,
                source="words",
                replacement=preserve_case(replacement, original),
                priority=rule.order,
                original_word=original,
                word_type=rule.word_type,
                base_word=rule.base_word,
            )
            (semantic if rule.semantic else grammatical).append(match)

    grammatical = [g for g in grammatical if not any(g.overlaps(s) for s in semantic)]
    if rules.show_ambiguity_warnings:
        _warn_ambiguous(text, grammatical)

    return merge_spans(semantic, grammatical)


def detect_word(text: str, word: str, rules: WordRuleSet) -> List[WordMatch]:
    """Like find_word_spans, restricted to a single configured base word."""
    if word.lower() not in (w.lower() for w in rules.words()):
        raise UnsupportedWordError(word)
    return [m for m in find_word_spans(text, rules) if m.base_word.lower() == word.lower()]
