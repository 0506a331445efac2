# tests/test_config.py

import pytest

from regionalise.config import (
    UnitConfig,
    WordConfig,
    deep_merge,
    load_unit_config,
    load_user_dictionary,
    load_word_config,
    merge_unit_configs,
    unit_config_from_dict,
    word_config_from_dict,
)
from regionalise.errors import ConfigValidationError
from regionalise.models import UnitType


def test_unit_defaults():
    config = UnitConfig()
    assert config.enabled
    assert set(config.enabled_unit_types) == set(UnitType)
    assert config.precision_for(UnitType.TEMPERATURE) == 0
    assert config.preferences.temperature_format == "°C"
    assert config.detection.min_confidence == 0.5


def test_word_defaults():
    config = WordConfig()
    assert config.min_confidence == 0.7
    assert config.words["license"].noun == "licence"
    assert config.words["practice"].verb == "practise"
    assert config.words["principal"].semantic_variants


def test_deep_merge_keeps_untouched_keys():
    base = {"a": {"b": 1, "c": 2}, "d": [1, 2]}
    merged = deep_merge(base, {"a": {"b": 5}, "d": [3]})
    assert merged == {"a": {"b": 5, "c": 2}, "d": [3]}
    assert base["a"]["b"] == 1


def test_overrides_merge_onto_defaults():
    config = unit_config_from_dict({"precision": {"length": 3}, "preferences": {"max_decimal_places": 4}})
    assert config.precision_for(UnitType.LENGTH) == 3
    assert config.precision_for(UnitType.MASS) == 1
    assert config.preferences.max_decimal_places == 4
    assert config.preferences.prefer_whole_numbers


@pytest.mark.parametrize(
    "overrides",
    [
        {"precision": {"length": 11}},
        {"preferences": {"max_decimal_places": -1}},
        {"preferences": {"temperature_format": "kelvin"}},
        {"preferences": {"rounding_threshold": 1.5}},
        {"detection": {"min_confidence": 2}},
        {"exclude_patterns": ["(unclosed"]},
        {"unknown_key": True},
    ],
)
def test_invalid_unit_config(overrides):
    with pytest.raises(ConfigValidationError):
        unit_config_from_dict(overrides)


def test_invalid_word_config():
    with pytest.raises(ConfigValidationError):
        word_config_from_dict({"min_confidence": -0.1})
    with pytest.raises(ConfigValidationError):
        word_config_from_dict({"words": {"color": {"noun": "colour", "verb": "colour", "semantic_variants": {"[": "x"}}}})


def test_merge_unit_configs_other_wins():
    base = unit_config_from_dict({"precision": {"length": 2}})
    other = unit_config_from_dict({"precision": {"mass": 3}, "enabled_unit_types": ["mass"]})
    merged = merge_unit_configs(base, other)
    assert merged.enabled_unit_types == (UnitType.MASS,)
    assert merged.precision_for(UnitType.MASS) == 3


def test_load_yaml_files():
    assert load_unit_config("configs/unit_config.yaml") == UnitConfig()
    words = load_word_config("configs/word_config.yaml")
    assert "principal" in words.words
    assert load_user_dictionary("configs/user_dictionary.yaml")["tidbit"] == "titbit"


def test_load_rejects_non_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        load_unit_config(str(path))
