# regionalise/unit_patterns.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

import regex as re

from regionalise.config import UnitConfig
from regionalise.models import UnitType
from regionalise.numerals import NUMBER_PATTERN, WRITTEN_ALTERNATION, WRITTEN_NUMBER_PATTERN


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnitRule:
    name: str
    pattern: re.Pattern
    unit_type: UnitType
    conf: float
    aliases: Dict[str, str]
    order: int
    compound: bool = False
    written: bool = False

    def canonical_unit(self, token: str) -> str | None:
        key = re.sub(r"\s+", " ", token.strip().lower())
        return self.aliases.get(key)


@dataclass(frozen=True)
class UnitRuleSet:
    rules: Tuple[UnitRule, ...]
    exclusions: Tuple[re.Pattern, ...]
    min_confidence: float

    def is_excluded(self, context: str, start: int, end: int) -> bool:
        """True when an exclusion match in `context` overlaps [start, end) of it."""
        for pattern in self.exclusions:
            for m in pattern.finditer(context):
                if m.start() < end and start < m.end():
                    return True
        return False


FEET = {"feet": "feet", "foot": "feet", "ft": "feet", "ft.": "feet"}
INCHES = {"inches": "inches", "inch": "inches", "in": "inches"}
YARDS = {"yards": "yards", "yard": "yards", "yd": "yards", "yds": "yards"}
MILES = {"miles": "miles", "mile": "miles", "mi": "miles"}
POUNDS = {"pounds": "pounds", "pound": "pounds", "lbs": "pounds", "lb": "pounds"}
OUNCES = {"ounces": "ounces", "ounce": "ounces", "oz": "ounces"}
TONS = {"tons": "tons", "ton": "tons"}
GALLONS = {"gallons": "gallons", "gallon": "gallons", "gal": "gallons"}
QUARTS = {"quarts": "quarts", "quart": "quarts", "qt": "quarts"}
PINTS = {"pints": "pints", "pint": "pints", "pt": "pints"}
FLUID_OUNCES = {
    "fluid ounces": "fluid ounces",
    "fluid ounce": "fluid ounces",
    "fl oz": "fluid ounces",
    "fl. oz": "fluid ounces",
    "fl.oz": "fluid ounces",
    "floz": "fluid ounces",
}
FAHRENHEIT = {
    "°f": "fahrenheit",
    "° f": "fahrenheit",
    "f": "fahrenheit",
    "fahrenheit": "fahrenheit",
    "degrees fahrenheit": "fahrenheit",
    "degree fahrenheit": "fahrenheit",
}
SQUARE_FEET = {
    "square feet": "square feet",
    "square foot": "square feet",
    "sq ft": "square feet",
    "sq. ft": "square feet",
    "sq.ft": "square feet",
    "sqft": "square feet",
    "ft²": "square feet",
    "ft2": "square feet",
}
ACRES = {"acres": "acres", "acre": "acres"}

NUM = rf"(?<![\w.,/-])(?P<value>{NUMBER_PATTERN})"
SIGNED_NUM = rf"(?<![\w.,/])(?P<value>-?{NUMBER_PATTERN})"
# a number word directly after another is part of a longer number
WRITTEN = rf"(?<!\b(?:{WRITTEN_ALTERNATION})[-\s]+)\b(?P<value>{WRITTEN_NUMBER_PATTERN})"
COMPOUND_VALUE = rf"\b(?P<value>\d+(?:\.\d+)?|{WRITTEN_ALTERNATION})"

# (name, unit type, regex, base confidence, aliases, compound, written)
UNIT_TEMPLATES = (
    # length
    ("feet", UnitType.LENGTH, rf"{NUM}\s*(?P<unit>feet|foot|ft)\b", 0.9, FEET, False, False),
    (
        "feet_inches",
        UnitType.LENGTH,
        # "5 ft. 6 in. tall"; a closing period is kept when it ends the sentence
        rf"{NUM}\s*(?P<unit>feet|foot|ft)\.?\s*(?P<inches>\d+(?:\.\d+)?)\s*(?:inches|inch|in)\b(?:\.(?=\s+(?-i:[a-z])))?",
        0.95,
        FEET,
        False,
        False,
    ),
    ("feet_compound", UnitType.LENGTH, rf"{COMPOUND_VALUE}-(?P<unit>feet|foot|ft)\b", 0.85, FEET, True, False),
    ("feet_written", UnitType.LENGTH, rf"{WRITTEN}\s+(?P<unit>feet|foot)\b", 0.8, FEET, False, True),
    ("inches", UnitType.LENGTH, rf"{NUM}\s*(?P<unit>inches|inch)\b", 0.9, INCHES, False, False),
    ("inches_abbrev", UnitType.LENGTH, rf"{NUM}(?P<unit>in)\b", 0.9, INCHES, False, False),
    ("inches_compound", UnitType.LENGTH, rf"{COMPOUND_VALUE}-(?P<unit>inch)\b", 0.85, INCHES, True, False),
    ("inches_written", UnitType.LENGTH, rf"{WRITTEN}\s+(?P<unit>inches|inch)\b", 0.8, INCHES, False, True),
    ("yards", UnitType.LENGTH, rf"{NUM}\s*(?P<unit>yards?|yds?)\b", 0.9, YARDS, False, False),
    ("miles", UnitType.LENGTH, rf"{NUM}\s*(?P<unit>miles?|mi)\b", 0.9, MILES, False, False),
    ("miles_compound", UnitType.LENGTH, rf"{COMPOUND_VALUE}-(?P<unit>mile)\b", 0.85, MILES, True, False),
    ("miles_written", UnitType.LENGTH, rf"{WRITTEN}\s+(?P<unit>miles?)\b", 0.8, MILES, False, True),
    # mass
    ("pounds", UnitType.MASS, rf"{NUM}\s*(?P<unit>pounds?|lbs?)\b", 0.9, POUNDS, False, False),
    ("pounds_compound", UnitType.MASS, rf"{COMPOUND_VALUE}-(?P<unit>pound)\b", 0.85, POUNDS, True, False),
    ("pounds_written", UnitType.MASS, rf"{WRITTEN}\s+(?P<unit>pounds?)\b", 0.75, POUNDS, False, True),
    ("ounces", UnitType.MASS, rf"{NUM}\s*(?P<unit>ounces?|oz)\b", 0.9, OUNCES, False, False),
    ("tons", UnitType.MASS, rf"{NUM}\s*(?P<unit>tons?)\b", 0.85, TONS, False, False),
    # volume
    ("gallons", UnitType.VOLUME, rf"{NUM}\s*(?P<unit>gallons?|gal)\b", 0.9, GALLONS, False, False),
    ("quarts", UnitType.VOLUME, rf"{NUM}\s*(?P<unit>quarts?|qt)\b", 0.9, QUARTS, False, False),
    ("pints", UnitType.VOLUME, rf"{NUM}\s*(?P<unit>pints?|pt)\b", 0.9, PINTS, False, False),
    (
        "fluid_ounces",
        UnitType.VOLUME,
        rf"{NUM}\s*(?P<unit>fluid\s+ounces?|fl\.?\s*oz)\b",
        0.9,
        FLUID_OUNCES,
        False,
        False,
    ),
    # temperature
    ("fahrenheit_symbol", UnitType.TEMPERATURE, rf"{SIGNED_NUM}\s*(?P<unit>°\s?F)\b", 0.95, FAHRENHEIT, False, False),
    (
        "fahrenheit_word",
        UnitType.TEMPERATURE,
        rf"{SIGNED_NUM}\s*(?P<unit>(?:degrees?\s+)?fahrenheit)\b",
        0.9,
        FAHRENHEIT,
        False,
        False,
    ),
    (
        "fahrenheit_letter",
        UnitType.TEMPERATURE,
        rf"(?<=\b(?i:temperature|temp|heat|cold|warm|hot)\s+(?i:of|is|was|reached|hit)\s+){SIGNED_NUM}\s*(?P<unit>F)\b",
        0.8,
        FAHRENHEIT,
        False,
        False,
    ),
    # area
    (
        "square_feet",
        UnitType.AREA,
        rf"{NUM}\s*(?P<unit>square\s+f(?:ee|oo)t|sq\.?\s*ft|sqft|ft²|ft2)(?=\s|$|[.,;:!?)])",
        0.95,
        SQUARE_FEET,
        False,
        False,
    ),
    ("acres", UnitType.AREA, rf"{NUM}\s*(?P<unit>acres?)\b", 0.9, ACRES, False, False),
)

# phrases that lower confidence when they appear near a candidate
IDIOM_PHRASES: Dict[UnitType, Tuple[str, ...]] = {
    UnitType.LENGTH: (
        "miles away from home",
        "go the extra mile",
        "inch by inch",
        "every inch",
        "cold feet",
        "foot the bill",
        "foot in the door",
    ),
    UnitType.MASS: ("pound the pavement", "pounds of pressure", "tons of fun", "tons of work"),
    UnitType.VOLUME: ("pint-sized",),
    UnitType.TEMPERATURE: ("fahrenheit scale",),
    UnitType.AREA: (),
}

MEASUREMENT_WORDS = re.compile(
    r"(?i)\b(?:tall|high|long|wide|deep|thick|heavy|weighs?|weight|distance|length|width|"
    r"height|depth|size|area|volume|temperature|temp|degrees|capacity|holds|contains)\b"
)
NO_SPACE_RE = re.compile(r"\d[a-zA-Z°]")

PLAUSIBLE_RANGES: Dict[UnitType, Tuple[float, float]] = {
    UnitType.LENGTH: (1, 1000),
    UnitType.MASS: (1, 500),
    UnitType.VOLUME: (1, 100),
    UnitType.TEMPERATURE: (-20, 120),
    UnitType.AREA: (1, 10000),
}


def compile_unit_rules(config: UnitConfig) -> UnitRuleSet:
    """Build the immutable rule set for the enabled unit families in `config`."""
    rules = []
    detection = config.detection
    for order, (name, unit_type, pattern, conf, aliases, compound, written) in enumerate(UNIT_TEMPLATES):
        if not config.is_enabled(unit_type):
            continue
        if compound and not detection.detect_compound_units:
            continue
        if written and not detection.detect_written_numbers:
            continue
        flags = re.IGNORECASE if name != "fahrenheit_letter" else 0
        rules.append(
            UnitRule(
                name=name,
                pattern=re.compile(pattern, flags),
                unit_type=unit_type,
                conf=conf,
                aliases=aliases,
                order=order,
                compound=compound,
                written=written,
            )
        )

    exclusions = tuple(re.compile(p) for p in config.exclude_patterns)
    logger.debug("Compiled %d unit rules, %d exclusions", len(rules), len(exclusions))
    return UnitRuleSet(
        rules=tuple(rules),
        exclusions=exclusions,
        min_confidence=detection.min_confidence,
    )
