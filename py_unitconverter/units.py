"""Built-in unit catalog.

Static data only: every unit is a `UnitOfMeasure` record with its ratio to the base unit
of its category (`units_per_base`: how many of the unit make one base unit).

Base units:
    * acceleration: metre per second squared (m/s2)
    * angle: radian (rad)
    * area: square metre (m2)
    * data_storage: byte (B)
    * energy: joule (J)
    * frequency: hertz (Hz)
    * length: metre (m)
    * mass: kilogram (kg)
    * power: watt (W)
    * pressure: pascal (Pa)
    * speed: metre per second (m/s)
    * temperature: kelvin (K), converted with formulas instead of ratios
    * time: second (s)
    * volume: cubic metre (m3)

The symbol 'a' is shared by the are (area) and the annum (time), so looking it up
without a category is ambiguous.
"""
from __future__ import annotations

from math import pi
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Optional, Tuple, Union

from py_unitconverter.formula import TEMPERATURE_SCALES
from py_unitconverter.unit import Measurement, SIClass, UnitOfMeasure

__all__ = (
    'DEFAULT_UNITS',
    'UNITS_TABLE',
    'units_of',
    'temperature_formulae',
)

SI = SIClass.SI
MULTIPLE = SIClass.SI | SIClass.MULTIPLE
SUBMULTIPLE = SIClass.SI | SIClass.SUBMULTIPLE
NON_SI = SIClass.NONE


class _Row(NamedTuple):
    name: str
    symbol: str
    per_base: Union[float, int]
    si: SIClass = NON_SI
    scientific_symbol: Optional[str] = None


def _category(unit_of: str, base: str, rows: Iterable[_Row]) -> Tuple[UnitOfMeasure, ...]:
    return tuple(
        UnitOfMeasure(row.name, row.symbol, unit_of, row.per_base,
                      scientific_symbol=row.scientific_symbol, base=base, si=row.si)
        for row in rows
    )


def temperature_formulae() -> Mapping[str, str]:
    """Formula table of a temperature unit: target symbol -> formula producing that scale.

    Examples:
        >>> temperature_formulae()['F']
        'to_fahrenheit'
    """
    return {symbol: f'to_{scale.name}' for symbol, scale in TEMPERATURE_SCALES.items()}


_LENGTH = _category(Measurement.LENGTH, 'm', (
    _Row('metre', 'm', 1, SI),
    _Row('kilometre', 'km', 1e-3, MULTIPLE),
    _Row('hectometre', 'hm', 1e-2, MULTIPLE),
    _Row('decametre', 'dam', 1e-1, MULTIPLE),
    _Row('decimetre', 'dm', 10, SUBMULTIPLE),
    _Row('centimetre', 'cm', 100, SUBMULTIPLE),
    _Row('millimetre', 'mm', 1_000, SUBMULTIPLE),
    _Row('micrometre', 'um', 1e6, SUBMULTIPLE, 'µm'),
    _Row('nanometre', 'nm', 1e9, SUBMULTIPLE),
    _Row('picometre', 'pm', 1e12, SUBMULTIPLE),
    _Row('inch', 'in', 1 / 0.0254),
    _Row('foot', 'ft', 1 / 0.3048),
    _Row('yard', 'yd', 1 / 0.9144),
    _Row('mile', 'mi', 1 / 1_609.344),
    _Row('nautical mile', 'nmi', 1 / 1_852),
    _Row('astronomical unit', 'au', 1 / 149_597_870_700),
    _Row('light year', 'ly', 1 / 9_460_730_472_580_800),
))

_MASS = _category(Measurement.MASS, 'kg', (
    _Row('kilogram', 'kg', 1, MULTIPLE),
    _Row('gram', 'g', 1_000, SI),
    _Row('milligram', 'mg', 1e6, SUBMULTIPLE),
    _Row('microgram', 'ug', 1e9, SUBMULTIPLE, 'µg'),
    _Row('tonne', 't', 1e-3),
    _Row('pound', 'lb', 1 / 0.45359237),
    _Row('ounce', 'oz', 16 / 0.45359237),
    _Row('stone', 'st', 1 / 6.35029318),
    _Row('grain', 'gr', 1 / 0.00006479891),
    _Row('carat', 'ct', 5_000),
    _Row('US short ton', 'ust', 1 / 907.18474),
    _Row('UK long ton', 'ukt', 1 / 1_016.0469088),
))

_TIME = _category(Measurement.TIME, 's', (
    _Row('second', 's', 1, SI),
    _Row('millisecond', 'ms', 1e3, SUBMULTIPLE),
    _Row('microsecond', 'us', 1e6, SUBMULTIPLE, 'µs'),
    _Row('nanosecond', 'ns', 1e9, SUBMULTIPLE),
    _Row('minute', 'min', 1 / 60),
    _Row('hour', 'h', 1 / 3_600),
    _Row('day', 'd', 1 / 86_400),
    _Row('week', 'wk', 1 / 604_800),
    _Row('year', 'a', 1 / 31_557_600),
))

_AREA = _category(Measurement.AREA, 'm2', (
    _Row('square metre', 'm2', 1, SI, 'm²'),
    _Row('square kilometre', 'km2', 1e-6, MULTIPLE, 'km²'),
    _Row('square centimetre', 'cm2', 1e4, SUBMULTIPLE, 'cm²'),
    _Row('square millimetre', 'mm2', 1e6, SUBMULTIPLE, 'mm²'),
    _Row('are', 'a', 1e-2),
    _Row('hectare', 'ha', 1e-4),
    _Row('square inch', 'in2', 1 / 0.00064516, NON_SI, 'in²'),
    _Row('square foot', 'ft2', 1 / 0.09290304, NON_SI, 'ft²'),
    _Row('square yard', 'yd2', 1 / 0.83612736, NON_SI, 'yd²'),
    _Row('acre', 'ac', 1 / 4_046.8564224),
    _Row('square mile', 'mi2', 1 / 2_589_988.110336, NON_SI, 'mi²'),
))

_VOLUME = _category(Measurement.VOLUME, 'm3', (
    _Row('cubic metre', 'm3', 1, SI, 'm³'),
    _Row('cubic centimetre', 'cm3', 1e6, SUBMULTIPLE, 'cm³'),
    _Row('cubic millimetre', 'mm3', 1e9, SUBMULTIPLE, 'mm³'),
    _Row('litre', 'l', 1e3, NON_SI, 'L'),
    _Row('decilitre', 'dl', 1e4, NON_SI, 'dL'),
    _Row('centilitre', 'cl', 1e5, NON_SI, 'cL'),
    _Row('millilitre', 'ml', 1e6, NON_SI, 'mL'),
    _Row('US gallon', 'gal', 1 / 0.003785411784),
    _Row('US quart', 'qt', 1 / 0.000946352946),
    _Row('US pint', 'pt', 1 / 0.000473176473),
    _Row('US fluid ounce', 'floz', 1 / 0.0000295735295625, NON_SI, 'fl oz'),
    _Row('cubic inch', 'in3', 1 / 0.000016387064, NON_SI, 'in³'),
    _Row('cubic foot', 'ft3', 1 / 0.028316846592, NON_SI, 'ft³'),
))

_SPEED = _category(Measurement.SPEED, 'm/s', (
    _Row('metre per second', 'm/s', 1, SI),
    _Row('kilometre per hour', 'km/h', 3.6),
    _Row('mile per hour', 'mph', 1 / 0.44704),
    _Row('foot per second', 'ft/s', 1 / 0.3048),
    _Row('knot', 'kn', 3_600 / 1_852),
))

_ACCELERATION = _category(Measurement.ACCELERATION, 'm/s2', (
    _Row('metre per second squared', 'm/s2', 1, SI, 'm/s²'),
    _Row('standard gravity', 'gn', 1 / 9.80665, NON_SI, 'ɡₙ'),
    _Row('foot per second squared', 'ft/s2', 1 / 0.3048, NON_SI, 'ft/s²'),
    _Row('gal', 'Gal', 100),
))

_ANGLE = _category(Measurement.ANGLE, 'rad', (
    _Row('radian', 'rad', 1, SI),
    _Row('milliradian', 'mrad', 1e3, SUBMULTIPLE),
    _Row('degree', 'deg', 180 / pi, NON_SI, '°'),
    _Row('arcminute', 'arcmin', 10_800 / pi, NON_SI, '′'),
    _Row('arcsecond', 'arcsec', 648_000 / pi, NON_SI, '″'),
    _Row('gradian', 'grad', 200 / pi, NON_SI, 'gon'),
    _Row('revolution', 'rev', 1 / (2 * pi)),
))

_ENERGY = _category(Measurement.ENERGY, 'J', (
    _Row('joule', 'J', 1, SI),
    _Row('millijoule', 'mJ', 1e3, SUBMULTIPLE),
    _Row('kilojoule', 'kJ', 1e-3, MULTIPLE),
    _Row('megajoule', 'MJ', 1e-6, MULTIPLE),
    _Row('watt hour', 'Wh', 1 / 3_600),
    _Row('kilowatt hour', 'kWh', 1 / 3_600_000),
    _Row('calorie', 'cal', 1 / 4.184),
    _Row('kilocalorie', 'kcal', 1 / 4_184),
    _Row('electronvolt', 'eV', 1 / 1.602176634e-19),
    _Row('british thermal unit', 'BTU', 1 / 1_055.05585262),
    _Row('foot-pound', 'ftlb', 1 / 1.3558179483314004, NON_SI, 'ft·lb'),
    _Row('erg', 'erg', 1e7),
))

_POWER = _category(Measurement.POWER, 'W', (
    _Row('watt', 'W', 1, SI),
    _Row('milliwatt', 'mW', 1e3, SUBMULTIPLE),
    _Row('kilowatt', 'kW', 1e-3, MULTIPLE),
    _Row('megawatt', 'MW', 1e-6, MULTIPLE),
    _Row('horsepower', 'hp', 1 / 745.69987158227022),
    _Row('BTU per hour', 'BTU/h', 3_600 / 1_055.05585262),
))

_PRESSURE = _category(Measurement.PRESSURE, 'Pa', (
    _Row('pascal', 'Pa', 1, SI),
    _Row('hectopascal', 'hPa', 1e-2, MULTIPLE),
    _Row('kilopascal', 'kPa', 1e-3, MULTIPLE),
    _Row('megapascal', 'MPa', 1e-6, MULTIPLE),
    _Row('bar', 'bar', 1e-5),
    _Row('millibar', 'mbar', 1e-2),
    _Row('standard atmosphere', 'atm', 1 / 101_325),
    _Row('torr', 'Torr', 760 / 101_325),
    _Row('millimetre of mercury', 'mmHg', 1 / 133.322387415),
    _Row('inch of mercury', 'inHg', 1 / 3_386.389),
    _Row('pound per square inch', 'psi', 1 / 6_894.757293168),
))

_FREQUENCY = _category(Measurement.FREQUENCY, 'Hz', (
    _Row('hertz', 'Hz', 1, SI),
    _Row('kilohertz', 'kHz', 1e-3, MULTIPLE),
    _Row('megahertz', 'MHz', 1e-6, MULTIPLE),
    _Row('gigahertz', 'GHz', 1e-9, MULTIPLE),
    _Row('revolution per minute', 'rpm', 60),
))

_DATA_STORAGE = _category(Measurement.DATA_STORAGE, 'B', (
    _Row('byte', 'B', 1),
    _Row('bit', 'b', 8),
    _Row('kilobyte', 'kB', 1e-3),
    _Row('megabyte', 'MB', 1e-6),
    _Row('gigabyte', 'GB', 1e-9),
    _Row('terabyte', 'TB', 1e-12),
    _Row('kibibyte', 'KiB', 1 / 1_024),
    _Row('mebibyte', 'MiB', 1 / 1_048_576),
    _Row('gibibyte', 'GiB', 1 / 1_073_741_824),
))

# Ratios of the temperature scales are degree sizes relative to one kelvin;
# conversions always go through the formula tables.
_TEMPERATURE = tuple(
    UnitOfMeasure(name, symbol, Measurement.TEMPERATURE, per_base, scientific_symbol=scientific,
                  base='K', formulae=temperature_formulae(), si=si)
    for name, symbol, per_base, scientific, si in (
        ('kelvin', 'K', 1, 'K', SI),
        ('celsius', 'C', 1, '°C', SI),
        ('fahrenheit', 'F', 1.8, '°F', NON_SI),
        ('rankine', 'R', 1.8, '°R', NON_SI),
        ('réaumur', 'Re', 0.8, '°Ré', NON_SI),
        ('rømer', 'Ro', 0.525, '°Rø', NON_SI),
        ('newton', 'N', 0.33, '°N', NON_SI),
        ('delisle', 'De', 1.5, '°De', NON_SI),
    )
)

#: Every built-in unit, grouped by category
DEFAULT_UNITS: Tuple[UnitOfMeasure, ...] = (
    _ACCELERATION + _ANGLE + _AREA + _DATA_STORAGE + _ENERGY + _FREQUENCY + _LENGTH
    + _MASS + _POWER + _PRESSURE + _SPEED + _TEMPERATURE + _TIME + _VOLUME
)

#: Registry key -> built-in unit
UNITS_TABLE: Mapping[str, UnitOfMeasure] = MappingProxyType({u.registry_key: u for u in DEFAULT_UNITS})


def units_of(unit_of: str) -> Tuple[UnitOfMeasure, ...]:
    """Built-in units of a single category, in catalog order."""
    return tuple(u for u in DEFAULT_UNITS if u.unit_of == unit_of)
