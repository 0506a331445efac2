# regionalise/unit_convert.py

from __future__ import annotations

import math
from typing import Dict, Tuple

from regionalise.config import UnitConfig
from regionalise.errors import UnsupportedUnitError
from regionalise.models import ConversionResult, UnitMatch, UnitType


# canonical unit -> (family, factor to metres / kilograms / litres / square metres)
CONVERSION_FACTORS: Dict[str, Tuple[UnitType, float]] = {
    "feet": (UnitType.LENGTH, 0.3048),
    "inches": (UnitType.LENGTH, 0.0254),
    "yards": (UnitType.LENGTH, 0.9144),
    "miles": (UnitType.LENGTH, 1609.344),
    "pounds": (UnitType.MASS, 0.45359237),
    "ounces": (UnitType.MASS, 0.028349523125),
    "tons": (UnitType.MASS, 907.18474),
    "gallons": (UnitType.VOLUME, 3.785411784),
    "quarts": (UnitType.VOLUME, 0.946352946),
    "pints": (UnitType.VOLUME, 0.473176473),
    "fluid ounces": (UnitType.VOLUME, 0.0295735295625),
    "square feet": (UnitType.AREA, 0.09290304),
    "acres": (UnitType.AREA, 4046.8564224),
}

# compound forms read as adjectives: "a 1.8-metre fence"
COMPOUND_NAMES = {
    "mm": "millimetre",
    "cm": "centimetre",
    "metres": "metre",
    "km": "kilometre",
    "mg": "milligram",
    "g": "gram",
    "kg": "kilogram",
    "tonnes": "tonne",
    "ml": "millilitre",
    "litres": "litre",
    "m²": "square-metre",
    "hectares": "hectare",
}

SINGULAR_NAMES = {
    "metres": "metre",
    "litres": "litre",
    "tonnes": "tonne",
    "hectares": "hectare",
}


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32) * 5 / 9


def round_half_away(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.copysign(math.floor(abs(value) * scale + 0.5) / scale, value)


def _length_unit(metres: float, source_unit: str) -> Tuple[float, str]:
    if source_unit == "inches" and metres < 10:
        if metres < 0.01:
            return metres * 1000, "mm"
        return metres * 100, "cm"
    if metres < 0.01:
        return metres * 1000, "mm"
    if metres < 1:
        return metres * 100, "cm"
    if metres < 1000:
        return metres, "metres"
    return metres / 1000, "km"


def _mass_unit(kilograms: float) -> Tuple[float, str]:
    if kilograms < 0.001:
        return kilograms * 1_000_000, "mg"
    if kilograms < 1:
        return kilograms * 1000, "g"
    if kilograms < 1000:
        return kilograms, "kg"
    return kilograms / 1000, "tonnes"


def _volume_unit(litres: float) -> Tuple[float, str]:
    if litres < 1:
        return litres * 1000, "ml"
    return litres, "litres"


def _area_unit(square_metres: float) -> Tuple[float, str]:
    if square_metres < 10000:
        return square_metres, "m²"
    return square_metres / 10000, "hectares"


class UnitConverter:
    """Converts detected imperial measurements into formatted metric text."""

    def __init__(self, config: UnitConfig | None = None):
        self.config = config or UnitConfig()

    def convert(self, match: UnitMatch) -> ConversionResult:
        if match.unit == "fahrenheit":
            celsius = fahrenheit_to_celsius(match.value)
            number = self.format_number(celsius, UnitType.TEMPERATURE)
            return ConversionResult(
                value=celsius,
                unit="°C",
                formatted=self._temperature_text(number),
                conf=match.conf,
            )

        if match.unit not in CONVERSION_FACTORS:
            raise UnsupportedUnitError(match.unit)

        unit_type, factor = CONVERSION_FACTORS[match.unit]
        base = match.value * factor

        if unit_type == UnitType.LENGTH:
            value, unit = _length_unit(base, match.unit)
        elif unit_type == UnitType.MASS:
            value, unit = _mass_unit(base)
        elif unit_type == UnitType.VOLUME:
            value, unit = _volume_unit(base)
        else:
            value, unit = _area_unit(base)

        number = self.format_number(value, unit_type)

        if match.is_compound:
            name = COMPOUND_NAMES.get(unit, unit)
            return ConversionResult(value=value, unit=name, formatted=f"{number}-{name}", conf=match.conf)

        if number == "1":
            unit = SINGULAR_NAMES.get(unit, unit)

        sep = " " if self.config.preferences.use_space_between_value_and_unit else ""
        return ConversionResult(value=value, unit=unit, formatted=f"{number}{sep}{unit}", conf=match.conf)

    def format_number(self, value: float, unit_type: UnitType) -> str:
        """
        Render `value` with the configured precision.

        Values within rounding_threshold of a whole number collapse to it when
        prefer_whole_numbers is set; otherwise the fewest decimals that stay
        within a tenth of the threshold are used.
        """
        prefs = self.config.preferences
        precision = min(self.config.precision_for(unit_type), prefs.max_decimal_places)
        threshold = prefs.rounding_threshold

        whole = round_half_away(value)
        if prefs.prefer_whole_numbers and abs(value - whole) < threshold:
            return _whole(whole)
        if precision == 0:
            return _whole(whole)

        for digits in range(precision):
            rounded = round_half_away(value, digits)
            if abs(value - rounded) < threshold / 10:
                if digits == 0:
                    return _whole(rounded)
                return f"{rounded:.{digits}f}"

        return f"{round_half_away(value, precision):.{precision}f}"

    def _temperature_text(self, number: str) -> str:
        fmt = self.config.preferences.temperature_format
        if fmt in ("°C", "C"):
            return f"{number}{fmt}"
        return f"{number} {fmt}"


def _whole(value: float) -> str:
    # int() also turns -0.0 into 0
    return str(int(value))
