# regionalise/word_patterns.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Tuple

import regex as re

from regionalise.config import WordConfig, WordPair
from regionalise.models import WordType


logger = logging.getLogger(__name__)

SEMANTIC_CONFIDENCE = 0.99

DETERMINERS = r"a|an|the|this|that|my|your|his|her|our|their|its|each|every|any|some|no|one"
ADJECTIVES = (
    r"valid|invalid|expired|new|old|current|full|temporary|permanent|provisional|"
    r"driving|driver's|drivers|business|medical|professional|commercial|personal|"
    r"special|standard|general|private|public|legal|clinical|common|best|good|"
    r"bad|regular|daily|weekly|private|dental|nursing|teaching|legal|sound|expert|"
    r"free|paid|annual|proper|official|open|closed|local|national|international"
)
NOUN_FOLLOWERS = (
    r"holder|holders|number|numbers|renewal|renewals|application|applications|fee|fees|"
    r"agreement|agreements|terms|requirement|requirements|plate|key|keys|file|files|"
    r"type|types|server|manager|period|session|sessions|room|area|areas|test|tests|"
    r"exam|exams|hours|column|letter|note|notes|centre|center|group|partner|partners"
)
PREPOSITIONS = r"with|without|by|under|for|against|on|in|of|from|about|regarding|concerning|into|after|before|during|through|via"
OBJECT_TAKERS = (
    r"need|needs|needed|have|has|had|get|gets|got|obtain|obtained|renew|renewed|"
    r"issue|issued|hold|holds|held|revoke|revoked|lose|lost|show|showed|require|"
    r"requires|required|apply\s+for|applied\s+for|give|gave|seek|sought|take|took|follow|followed"
)
SUBJECT_VERBS = (
    r"is|was|are|were|has|had|allows|allowed|lets|covers|covered|includes|included|"
    r"requires|required|expires|expired|grants|granted|permits|permitted|applies|"
    r"makes|made|helps|helped|will|can|must|should"
)
MODALS = r"will|shall|must|can|cannot|could|should|would|may|might|won't|can't|wouldn't|shouldn't|couldn't"
MODAL_ADVERBS = r"not|also|never|always|then|still|only|just|now|soon|easily|legally|freely|gladly"
SUBJECT_PRONOUNS = r"I|you|we|they|who"
FREQUENCY_ADVERBS = (
    r"also|often|always|never|sometimes|usually|currently|actively|regularly|routinely|"
    r"frequently|rarely|typically|generally|still|now"
)
THIRD_PERSON_SUBJECTS = (
    r"he|she|it|company|firm|organisation|organization|authority|government|council|"
    r"team|doctor|lawyer|vendor|publisher|studio|agency|who"
)
OBJECTS = (
    r"the|a|an|our|their|its|his|her|your|my|this|that|these|those|them|it|us|him|"
    r"software|technology|content|users|products|music|images|code|data|patents|"
    r"law|medicine|dentistry|piano|guitar|caution|restraint|patience|yoga|meditation"
)
QUANTIFIERS = r"the|their|our|his|her|my|your|some|many|few|several|multiple|these|those|all|no|two|three|four|five|\d+"

# (name, template, role, base confidence, plural)
# `{WORD}` is the base word; the first group of each template is the word.
GRAMMAR_TEMPLATES: Tuple[Tuple[str, str, WordType, float, bool], ...] = (
    # noun contexts
    ("determiner_adjective", rf"\b(?:{DETERMINERS})\s+(?:(?:{ADJECTIVES})\s+)+['\"]?({{WORD}})['\"]?\b", WordType.NOUN, 0.9, False),
    ("determiner", rf"\b(?:{DETERMINERS})\s+['\"]?({{WORD}})['\"]?\b", WordType.NOUN, 0.8, False),
    ("noun_compound", rf"\b({{WORD}})\s+(?:{NOUN_FOLLOWERS})\b", WordType.NOUN, 0.95, False),
    ("preposition", rf"\b(?:{PREPOSITIONS})\s+(?:\w+\s+){{0,2}}?['\"]?({{WORD}})['\"]?(?=\s|$|[.,;:!?)])", WordType.NOUN, 0.85, False),
    ("possessive", r"\b({WORD})['’]s\b", WordType.NOUN, 0.95, False),
    ("sentence_final", r"\b['\"]?({WORD})['\"]?(?=\s*(?:[.!?;,]|$))", WordType.NOUN, 0.7, False),
    ("object_of_verb", rf"\b(?:{OBJECT_TAKERS})\s+(?:(?:{DETERMINERS})\s+)?(?:(?:{ADJECTIVES})\s+)?({{WORD}})\b", WordType.NOUN, 0.85, False),
    ("subject_position", rf"\b({{WORD}})\s+(?:{SUBJECT_VERBS})\b", WordType.NOUN, 0.8, False),
    ("of_complement", r"\b({WORD})\s+of\b", WordType.NOUN, 0.8, False),
    ("plural_quantifier", rf"\b(?:{QUANTIFIERS})\s+(?:(?:{ADJECTIVES})\s+)?({{WORD}}s)\b", WordType.NOUN, 0.8, True),
    ("plural_subject", r"\b({WORD}s)\s+(?:are|were|have|expire|expired|cost|include|vary|differ)\b", WordType.NOUN, 0.8, True),
    # verb contexts
    ("infinitive", r"\bto\s+({WORD})\b", WordType.VERB, 0.95, False),
    ("modal", rf"\b(?:{MODALS})\s+(?:(?:{MODAL_ADVERBS})\s+)?({{WORD}})\b", WordType.VERB, 0.95, False),
    ("do_support", r"\b(?:do|does|did|don't|doesn't|didn't)\s+(?:not\s+)?({WORD})\b", WordType.VERB, 0.9, False),
    ("subject_pronoun", rf"\b(?:{SUBJECT_PRONOUNS})\s+(?:(?:{FREQUENCY_ADVERBS})\s+)?({{WORD}})\b", WordType.VERB, 0.85, False),
    ("third_person", rf"\b(?:{THIRD_PERSON_SUBJECTS})\s+(?:(?:{FREQUENCY_ADVERBS})\s+)?({{WORD}}s)\b", WordType.VERB, 0.85, True),
    ("adverb", rf"\b(?:{FREQUENCY_ADVERBS})\s+({{WORD}})\s+(?:{OBJECTS})\b", WordType.VERB, 0.8, False),
    ("imperative", r"(?:^|[.!?]\s+)({WORD})\s+(?:the|your|a|an|this|these|all|it|them)\b", WordType.VERB, 0.75, False),
    ("request", r"\b(?:please|let's|let\s+us|let\s+me)\s+({WORD})\b", WordType.VERB, 0.9, False),
    ("direct_object", rf"\b({{WORD}})\s+(?:{OBJECTS})\b", WordType.VERB, 0.75, False),
)

QUOTED_LITERAL_RE = re.compile(r'"[^"\n]*"')


@dataclass(frozen=True)
class WordRule:
    name: str
    base_word: str
    pattern: re.Pattern
    word_type: WordType
    replacement: str
    conf: float
    order: int
    semantic: bool = False


@dataclass(frozen=True)
class WordRuleSet:
    rules: Tuple[WordRule, ...]
    exclusions: Tuple[re.Pattern, ...]
    min_confidence: float
    convert_quoted_text: bool = False
    show_ambiguity_warnings: bool = False

    def is_excluded(self, context: str, start: int, end: int) -> bool:
        for pattern in self.exclusions:
            for m in pattern.finditer(context):
                if m.start() < end and start < m.end():
                    return True
        return False

    def words(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(r.base_word for r in self.rules))


def _role_order(word_type: WordType, prefer_noun: bool) -> int:
    if word_type == WordType.NOUN:
        return 0 if prefer_noun else 1
    return 1 if prefer_noun else 0


def _grammar_rules(word: str, pair: WordPair, flags: int, prefer_noun: bool):
    escaped = re.escape(word)
    templates = sorted(
        GRAMMAR_TEMPLATES, key=lambda t: _role_order(t[2], prefer_noun)
    )
    for name, template, word_type, conf, plural in templates:
        target = pair.noun if word_type == WordType.NOUN else pair.verb
        yield WordRule(
            name=name,
            base_word=word,
            pattern=re.compile(template.replace("{WORD}", escaped), flags),
            word_type=word_type,
            replacement=target + "s" if plural else target,
            conf=conf,
            order=0,
        )


def compile_word_rules(config: WordConfig) -> WordRuleSet:
    """
    Build the immutable rule set for every enabled word in `config`.

    Semantic variants are registered first, then noun/verb templates in
    preference order; registration order breaks equal-confidence ties.
    """
    prefs = config.preferences
    flags = 0 if prefs.case_sensitive else re.IGNORECASE

    rules = []
    for word, pair in config.enabled_words().items():
        for pattern, replacement in pair.semantic_variants.items():
            rules.append(
                WordRule(
                    name="semantic_variant",
                    base_word=word,
                    pattern=re.compile(pattern, flags),
                    word_type=WordType.UNKNOWN,
                    replacement=replacement,
                    conf=SEMANTIC_CONFIDENCE,
                    order=0,
                    semantic=True,
                )
            )
        if pair.noun.lower() == pair.verb.lower():
            # nothing to disambiguate
            continue
        rules.extend(_grammar_rules(word, pair, flags, prefs.prefer_noun_on_ambiguity))

    ordered = tuple(replace(rule, order=i) for i, rule in enumerate(rules))
    exclusions = tuple(re.compile(p) for p in config.exclude_patterns)
    logger.debug("Compiled %d contextual word rules", len(ordered))
    return WordRuleSet(
        rules=ordered,
        exclusions=exclusions,
        min_confidence=config.min_confidence,
        convert_quoted_text=prefs.convert_quoted_text,
        show_ambiguity_warnings=prefs.show_ambiguity_warnings,
    )
