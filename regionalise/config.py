# regionalise/config.py

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Literal, Tuple

import regex as re
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from regionalise.errors import ConfigValidationError
from regionalise.models import UnitType


logger = logging.getLogger(__name__)


DEFAULT_UNIT_EXCLUSIONS: Tuple[str, ...] = (
    r"(?i)\bmiles?\s+(?:away\s+from\s+home|apart|ahead\s+of|behind)\b",
    r"(?i)\bgo(?:es|ing)?\s+the\s+extra\s+mile\b",
    r"(?i)\bmiles?\s+from\s+nowhere\b",
    r"(?i)\bmiles?\s+and\s+miles?\b",
    r"(?i)\binch\s+by\s+inch\b",
    r"(?i)\bevery\s+inch\b",
    r"(?i)\bgive\s+(?:an\s+)?inch\b",
    r"(?i)\binch\s+(?:closer|further|away)\b",
    r"(?i)\b(?:get|getting|got|have|having)\s+cold\s+feet\b",
    r"(?i)\b(?:put|set)\s+foot\s+(?:in|on)\b",
    r"(?i)\bfoot\s+in\s+(?:the\s+)?door\b",
    r"(?i)\bfoot\s+the\s+bill\b",
    r"(?i)\bpounds?\s+of\s+(?:fun|pressure|force|flesh)\b",
    r"(?i)\bpound\s+(?:the\s+pavement|sand|table)\b",
    r"(?i)\btons?\s+of\s+(?:fun|work|stuff|things|people)\b",
    r"(?i)\bfahrenheit\s+(?:scale|thermometer)\b",
    r"(?i)\b\d+\s*pt\s+(?:font|type|text|size)\b",
)

DEFAULT_PRECISION: Dict[str, int] = {
    UnitType.LENGTH.value: 1,
    UnitType.MASS.value: 1,
    UnitType.VOLUME.value: 1,
    UnitType.TEMPERATURE.value: 0,
    UnitType.AREA.value: 1,
}


def _check_patterns(patterns):
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"invalid pattern {pattern!r}: {e}") from e
    return patterns


class ConversionPreferences(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    prefer_whole_numbers: bool = True
    max_decimal_places: int = Field(2, ge=0, le=10)
    temperature_format: Literal["°C", "degrees Celsius", "C", "celsius"] = "°C"
    use_space_between_value_and_unit: bool = True
    rounding_threshold: float = Field(0.1, ge=0.0, le=1.0)


class DetectionSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min_confidence: float = Field(0.5, ge=0.0, le=1.0)
    detect_compound_units: bool = True
    detect_written_numbers: bool = True


class UnitConfig(BaseModel):
    """Imperial-to-metric conversion settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    enabled_unit_types: Tuple[UnitType, ...] = tuple(UnitType)
    precision: Dict[UnitType, int] = Field(
        default_factory=lambda: {UnitType(k): v for k, v in DEFAULT_PRECISION.items()}
    )
    exclude_patterns: Tuple[str, ...] = DEFAULT_UNIT_EXCLUSIONS
    preferences: ConversionPreferences = Field(default_factory=ConversionPreferences)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)

    @field_validator("precision")
    @classmethod
    def _precision_range(cls, value):
        for unit_type, digits in value.items():
            if not 0 <= digits <= 10:
                raise ValueError(f"precision for {unit_type.value} must be between 0 and 10")
        return value

    @field_validator("exclude_patterns")
    @classmethod
    def _patterns_compile(cls, value):
        return _check_patterns(value)

    def precision_for(self, unit_type: UnitType) -> int:
        return self.precision.get(unit_type, DEFAULT_PRECISION[unit_type.value])

    def is_enabled(self, unit_type: UnitType) -> bool:
        return self.enabled and unit_type in self.enabled_unit_types


DEFAULT_WORDS: Dict[str, Dict[str, Any]] = {
    "license": {"noun": "licence", "verb": "license"},
    "practice": {"noun": "practice", "verb": "practise"},
    "advice": {"noun": "advice", "verb": "advise"},
    "principal": {
        "noun": "principal",
        "verb": "principal",
        "semantic_variants": {
            r"(?i)\b(principal)\s+of\s+least\s+privile?ge?d?\b": "principle",
            r"(?i)\bsecurity\s+(principals?)\b": "principle",
            r"(?i)\bdesign\s+(principals?)\b": "principle",
            r"(?i)\b(?:fundamental|core|engineering|guiding|basic|key|first|moral|ethical)\s+(principals?)\b": "principle",
            r"\b(?:SOLID|DRY|KISS|YAGNI)\s+(principals?)\b": "principle",
        },
    },
    "principle": {
        "noun": "principle",
        "verb": "principle",
        "semantic_variants": {
            r"(?i)\b(?:AWS\s+)?IAM\s+(principles?)\b": "principal",
            r"(?i)\bservice\s+(principles?)\b": "principal",
            r"(?i)\b(principles?)\s+ARN\b": "principal",
            r"(?i)\b(?:user|database|authentication|loan)\s+(principles?)\b": "principal",
            r"(?i)\b(principles?)\s+(?:name|ID|identifier|amount|balance|payment)\b": "principal",
        },
    },
}

DEFAULT_WORD_EXCLUSIONS: Tuple[str, ...] = (
    r"(?i)\b(?:MIT|BSD|GPL|LGPL|AGPL|Apache|Creative\s+Commons|GNU|Mozilla|ISC|MPL)(?:[\s-]+[\w.]+)?\s+license\b",
    r"(?i)\bsoftware\s+license\s+(?:agreement|terms)\b",
    r"(?i)\blicense\s+plate\b",
    r"(?i)\blicense\.(?:txt|md|rst)\b",
    r"(?m)^\s*LICENSE\s*$",
    r"(?i)[\w./-]*/[\w./-]*\b(?:license|practice|advice)\b[\w./-]*",
    r"(?i)\b(?:var|const|let|def|function|class|interface|struct|type)\s+\w*(?:license|practice|advice|principal|principle)\w*",
    r"(?i)\b\w*(?:license|practice|advice)\w*\s*(?:==|!=|=|:=|\+=|-=)",
    r"(?i)(?:=|:)\s*[\"']\s*\w*(?:license|practice|advice)\w*\s*[\"']",
    r"(?i)\b\w+_(?:license|practice|advice)\w*|\b(?:license|practice|advice)_\w+",
)


class WordPair(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    noun: str
    verb: str
    enabled: bool = True
    semantic_variants: Dict[str, str] = Field(default_factory=dict)

    @field_validator("semantic_variants")
    @classmethod
    def _variants_compile(cls, value):
        _check_patterns(value.keys())
        return value


class WordPreferences(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    prefer_noun_on_ambiguity: bool = True
    show_ambiguity_warnings: bool = False
    case_sensitive: bool = False
    convert_quoted_text: bool = False


class WordConfig(BaseModel):
    """Contextual (noun/verb) spelling settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    words: Dict[str, WordPair] = Field(
        default_factory=lambda: {k: WordPair(**v) for k, v in DEFAULT_WORDS.items()}
    )
    min_confidence: float = Field(0.7, ge=0.0, le=1.0)
    exclude_patterns: Tuple[str, ...] = DEFAULT_WORD_EXCLUSIONS
    preferences: WordPreferences = Field(default_factory=WordPreferences)

    @field_validator("exclude_patterns")
    @classmethod
    def _patterns_compile(cls, value):
        return _check_patterns(value)

    def enabled_words(self) -> Dict[str, WordPair]:
        if not self.enabled:
            return {}
        return {w: pair for w, pair in self.words.items() if pair.enabled}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any] | None) -> Dict[str, Any]:
    """
    Return `base` updated with `override`.

    Nested mappings merge key by key; lists and scalars from `override`
    replace the base value. Neither input is modified.
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _validated(model_cls, data: Dict[str, Any]):
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        messages = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigValidationError(
            f"Invalid {model_cls.__name__}: " + "; ".join(messages), messages
        ) from e


def unit_config_from_dict(overrides: Dict[str, Any] | None = None) -> UnitConfig:
    if overrides is not None and not isinstance(overrides, dict):
        raise ConfigValidationError("Unit configuration must be a mapping")
    data = deep_merge(UnitConfig().model_dump(mode="json"), overrides)
    return _validated(UnitConfig, data)


def word_config_from_dict(overrides: Dict[str, Any] | None = None) -> WordConfig:
    if overrides is not None and not isinstance(overrides, dict):
        raise ConfigValidationError("Word configuration must be a mapping")
    data = deep_merge(WordConfig().model_dump(mode="json"), overrides)
    return _validated(WordConfig, data)


def merge_unit_configs(base: UnitConfig, other: UnitConfig) -> UnitConfig:
    """
    Combine two unit configs, `other` winning.

    Type lists and exclusion lists are taken from `other` only when non-empty;
    precision merges per unit type.
    """
    data = base.model_dump(mode="json")
    theirs = other.model_dump(mode="json")
    data["enabled"] = theirs["enabled"]
    if theirs["enabled_unit_types"]:
        data["enabled_unit_types"] = theirs["enabled_unit_types"]
    if theirs["exclude_patterns"]:
        data["exclude_patterns"] = theirs["exclude_patterns"]
    data["precision"].update(theirs["precision"])
    data["preferences"] = theirs["preferences"]
    data["detection"] = theirs["detection"]
    return _validated(UnitConfig, data)


def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigValidationError(f"{path}: top level must be a mapping")
    return cfg


def load_unit_config(path: str) -> UnitConfig:
    cfg = _load_yaml(path)
    logger.debug("Loaded unit config overrides from %s", path)
    return unit_config_from_dict(cfg.get("units", cfg))


def load_word_config(path: str) -> WordConfig:
    cfg = _load_yaml(path)
    logger.debug("Loaded contextual word config overrides from %s", path)
    return word_config_from_dict(cfg.get("contextual_words", cfg))


def load_user_dictionary(path: str) -> Dict[str, str]:
    cfg = _load_yaml(path)
    table = cfg.get("words", cfg)
    if not isinstance(table, dict):
        raise ConfigValidationError(f"{path}: 'words' must be a mapping")
    return {str(k).lower(): str(v) for k, v in table.items()}
