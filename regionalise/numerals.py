# regionalise/numerals.py

from __future__ import annotations

import regex as re
from typing import Dict

from regionalise.errors import ParseError


WRITTEN_NUMBERS: Dict[str, int] = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
    "hundred": 100,
}

# longest first so "seventeen" is not cut to "seven"
WRITTEN_ALTERNATION = "|".join(sorted(WRITTEN_NUMBERS, key=len, reverse=True))
TENS_ALTERNATION = "twenty|thirty|forty|fifty|sixty|seventy|eighty|ninety"
ONES_ALTERNATION = "one|two|three|four|five|six|seven|eight|nine"

# "twenty-five", "twenty five", "three hundred", then single words
WRITTEN_NUMBER_PATTERN = (
    rf"(?:(?:{TENS_ALTERNATION})[-\s](?:{ONES_ALTERNATION})\b"
    rf"|(?:{ONES_ALTERNATION})\s+hundred\b"
    rf"|(?:{WRITTEN_ALTERNATION})\b)"
)

# decimal, thousands-grouped, mixed fraction, simple fraction
NUMBER_PATTERN = (
    r"(?:\d{1,3}(?:,\d{3})+(?:\.\d+)?"
    r"|\d+\s+\d+/\d+"
    r"|\d+/\d+"
    r"|\d*\.\d+"
    r"|\d+)"
)

MIXED_FRACTION_RE = re.compile(r"^(-?\d+)\s+(\d+)/(\d+)$")
FRACTION_RE = re.compile(r"^(-?\d+)/(\d+)$")
DECIMAL_RE = re.compile(r"^-?(?:\d{1,3}(?:,\d{3})+|\d+)?(?:\.\d+)?$")
WRITTEN_COMPOUND_RE = re.compile(
    rf"^(?P<tens>{TENS_ALTERNATION})[-\s]+(?P<ones>{ONES_ALTERNATION})$"
    rf"|^(?P<hundreds>{ONES_ALTERNATION})\s+hundred$"
)


def _fraction(numerator: str, denominator: str, raw: str) -> float:
    den = int(denominator)
    if den == 0:
        raise ParseError(f"Zero denominator in {raw!r}")
    return int(numerator) / den


def parse_numeral(raw: str) -> float:
    """
    Parse a numeral as written in prose.

    Accepts decimals ("5.5"), thousands separators ("1,500"), simple
    fractions ("1/2"), mixed fractions ("2 1/2") and the written numbers
    in WRITTEN_NUMBERS, alone or combined
    ("six", "twenty-five", "three hundred"). Raises ParseError otherwise.
    """
    text = (raw or "").strip()
    if not text:
        raise ParseError("Empty numeral")

    word = text.lower()
    if word in WRITTEN_NUMBERS:
        return float(WRITTEN_NUMBERS[word])

    m = WRITTEN_COMPOUND_RE.match(word)
    if m and m.group("hundreds"):
        return float(WRITTEN_NUMBERS[m.group("hundreds")] * 100)
    if m:
        return float(WRITTEN_NUMBERS[m.group("tens")] + WRITTEN_NUMBERS[m.group("ones")])

    m = MIXED_FRACTION_RE.match(text)
    if m:
        whole = int(m.group(1))
        frac = _fraction(m.group(2), m.group(3), text)
        return whole - frac if whole < 0 else whole + frac

    m = FRACTION_RE.match(text)
    if m:
        return _fraction(m.group(1), m.group(2), text)

    if DECIMAL_RE.match(text) and any(c.isdigit() for c in text):
        try:
            return float(text.replace(",", ""))
        except ValueError as e:
            raise ParseError(f"Invalid number {raw!r}") from e

    raise ParseError(f"Invalid number {raw!r}")
