# tests/test_unit_convert.py

import pytest

from regionalise.config import UnitConfig, unit_config_from_dict
from regionalise.errors import UnsupportedUnitError
from regionalise.models import UnitMatch, UnitType
from regionalise.unit_convert import UnitConverter, round_half_away


def _match(value, unit, unit_type, compound=False):
    return UnitMatch(
        start=0,
        end=1,
        conf=0.9,
        source="units",
        value=value,
        unit=unit,
        unit_type=unit_type,
        is_compound=compound,
    )


@pytest.mark.parametrize(
    "value,unit,unit_type,expected",
    [
        (12, "feet", UnitType.LENGTH, "3.7 metres"),
        (1, "feet", UnitType.LENGTH, "30.5 cm"),
        (10, "inches", UnitType.LENGTH, "25.4 cm"),
        (5, "miles", UnitType.LENGTH, "8 km"),
        (5, "pounds", UnitType.MASS, "2.3 kg"),
        (2, "gallons", UnitType.VOLUME, "7.6 litres"),
        (350, "fahrenheit", UnitType.TEMPERATURE, "177°C"),
        (75, "fahrenheit", UnitType.TEMPERATURE, "24°C"),
        (32, "fahrenheit", UnitType.TEMPERATURE, "0°C"),
    ],
)
def test_default_conversions(value, unit, unit_type, expected):
    result = UnitConverter().convert(_match(value, unit, unit_type))
    assert result.formatted == expected


def test_compound_uses_singular_hyphenated_unit():
    result = UnitConverter().convert(_match(6, "feet", UnitType.LENGTH, compound=True))
    assert result.formatted == "1.8-metre"


def test_temperature_format_words():
    config = unit_config_from_dict({"preferences": {"temperature_format": "degrees Celsius"}})
    result = UnitConverter(config).convert(_match(212, "fahrenheit", UnitType.TEMPERATURE))
    assert result.formatted == "100 degrees Celsius"
    assert result.unit == "°C"


def test_no_space_preference():
    config = unit_config_from_dict({"preferences": {"use_space_between_value_and_unit": False}})
    result = UnitConverter(config).convert(_match(5, "pounds", UnitType.MASS))
    assert result.formatted == "2.3kg"


def test_large_and_small_units():
    converter = UnitConverter()
    assert converter.convert(_match(3, "tons", UnitType.MASS)).formatted == "2.7 tonnes"
    assert converter.convert(_match(8, "fluid ounces", UnitType.VOLUME)).formatted == "236.6 ml"
    assert converter.convert(_match(10, "acres", UnitType.AREA)).formatted == "4 hectares"
    assert converter.convert(_match(100, "square feet", UnitType.AREA)).formatted == "9.3 m²"


def test_whole_numbers_and_precision():
    converter = UnitConverter(UnitConfig())
    assert converter.format_number(2.04, UnitType.LENGTH) == "2"
    assert converter.format_number(2.26, UnitType.LENGTH) == "2.3"
    assert converter.format_number(176.67, UnitType.TEMPERATURE) == "177"


def test_unknown_unit_raises():
    with pytest.raises(UnsupportedUnitError):
        UnitConverter().convert(_match(3, "furlongs", UnitType.LENGTH))


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(0.25, 1) == 0.3
