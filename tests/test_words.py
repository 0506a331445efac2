# tests/test_words.py

import logging

import pytest

from regionalise.config import WordConfig, word_config_from_dict
from regionalise.detect_words import detect_word, find_word_spans
from regionalise.errors import UnsupportedWordError
from regionalise.models import WordType
from regionalise.transform import splice
from regionalise.word_patterns import compile_word_rules


RULES = compile_word_rules(WordConfig())


def _convert(text, rules=RULES):
    return splice(text, find_word_spans(text, rules))


def test_noun_after_determiner():
    text = "I need a license to drive"
    spans = find_word_spans(text, RULES)
    assert len(spans) == 1
    assert spans[0].word_type == WordType.NOUN
    assert spans[0].conf >= 0.8
    assert _convert(text) == "I need a licence to drive"


def test_verb_after_modal_is_kept():
    text = "We will license our software"
    spans = find_word_spans(text, RULES)
    assert spans[0].word_type == WordType.VERB
    assert _convert(text) == text


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Her medical license allows her to practice", "Her medical licence allows her to practise"),
        ("The license allows us to license the software", "The licence allows us to license the software"),
        ("The 'license' document is here", "The 'licence' document is here"),
        ("SHOW YOUR LICENSE", "SHOW YOUR LICENCE"),
        ("We License our technology globally", "We License our technology globally"),
        ("She practices law in Leeds", "She practises law in Leeds"),
        ("Regular practice makes perfect", "Regular practice makes perfect"),
        ("Please advice the team", "Please advise the team"),
    ],
)
def test_contextual_conversions(text, expected):
    assert _convert(text) == expected


def test_licence_exclusions():
    for text in (
        "This is under MIT license",
        "Released under the Apache 2.0 license",
        "Check the license plate",
        "See license.txt for details",
        "const license = getLicense()",
    ):
        assert _convert(text) == text, text


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Follow the principal of least privilege", "Follow the principle of least privilege"),
        ("Security principals regularly review access", "Security principles regularly review access"),
        ("Follow SOLID principals", "Follow SOLID principles"),
        ("Attach the policy to the AWS IAM principle", "Attach the policy to the AWS IAM principal"),
        ("Service principles have minimal permissions", "Service principals have minimal permissions"),
        ("THE AWS IAM PRINCIPLE HAS ACCESS.", "THE AWS IAM PRINCIPAL HAS ACCESS."),
        ("Check the principle ARN before deploying", "Check the principal ARN before deploying"),
    ],
)
def test_semantic_variants(text, expected):
    assert _convert(text) == expected


def test_semantic_variants_leave_other_uses():
    for text in (
        "The school principal called my parents",
        "My principal concern is cost",
        "As a general principle, keep it simple",
    ):
        assert _convert(text) == text, text


def test_quoted_literals_skipped_by_default():
    text = 'Set mode to "a license" here'
    assert _convert(text) == text

    rules = compile_word_rules(word_config_from_dict({"preferences": {"convert_quoted_text": True}}))
    assert _convert(text, rules) == 'Set mode to "a licence" here'


def test_disabled_word():
    rules = compile_word_rules(word_config_from_dict({"words": {"license": {"enabled": False}}}))
    assert find_word_spans("I need a license", rules) == []


def test_detect_single_word():
    spans = detect_word("I need a license to practice", "license", RULES)
    assert [s.base_word for s in spans] == ["license"]
    with pytest.raises(UnsupportedWordError):
        detect_word("anything", "colour", RULES)


def test_raising_min_confidence_never_adds_spans():
    text = "The license allows us to license software. In practice we practice daily."
    counts = [
        len(find_word_spans(text, compile_word_rules(word_config_from_dict({"min_confidence": t}))))
        for t in (0.0, 0.5, 0.7, 0.8, 0.9, 1.0)
    ]
    assert counts == sorted(counts, reverse=True)


def test_case_sensitive_matching():
    rules = compile_word_rules(word_config_from_dict({"preferences": {"case_sensitive": True}}))
    assert find_word_spans("I need a LICENSE.", rules) == []
    assert _convert("I need a license.", rules) == "I need a licence."
    assert _convert("I need a LICENSE.") == "I need a LICENCE."


def test_role_preference_breaks_equal_confidence_ties():
    # preposition (noun) and subject pronoun (verb) readings both score 0.85
    text = "Time for they practice daily"
    spans = find_word_spans(text, RULES)
    assert [(s.word_type, s.replacement) for s in spans] == [(WordType.NOUN, "practice")]

    verbs_first = compile_word_rules(
        word_config_from_dict({"preferences": {"prefer_noun_on_ambiguity": False}})
    )
    spans = find_word_spans(text, verbs_first)
    assert [(s.word_type, s.replacement) for s in spans] == [(WordType.VERB, "practise")]


def test_ambiguity_warning_is_logged(caplog, monkeypatch):
    monkeypatch.setattr(logging.getLogger("regionalise"), "propagate", True)
    rules = compile_word_rules(word_config_from_dict({"preferences": {"show_ambiguity_warnings": True}}))
    with caplog.at_level(logging.WARNING, logger="regionalise.detect_words"):
        find_word_spans("Time for they practice daily", rules)
    assert "Ambiguous use of 'practice'" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="regionalise.detect_words"):
        find_word_spans("Time for they practice daily", RULES)
    assert "Ambiguous" not in caplog.text
