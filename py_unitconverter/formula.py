"""Conversion formulas between two units.

A formula is bound to a source unit, a target unit and a `Calculator`, and converts a
quantity with `convert()`. Formulas are pure: the same input always gives the same output
and nothing is mutated.

    * `UnitConversionFormula` is the default, ratio based formula used by linear units:
      `result = quantity * (target.units_per_base / source.units_per_base)`.
    * Non-linear units (temperature scales) declare a formula table on the unit that maps
      target symbols to formula identifiers registered here with `@register_formula`.

Formula identifiers are resolved through the `FORMULAS` table:

    >>> sorted(FORMULAS)[:3]
    ['ratio', 'temperature', 'to_celsius']
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Dict, Mapping, NamedTuple, Optional, Type, TYPE_CHECKING, TypeVar

from typing_extensions import override

from py_unitconverter.exceptions import BadUnitError
from py_unitconverter.logger import logger

if TYPE_CHECKING:
    from py_unitconverter.calculator import Calculator, Number
    from py_unitconverter.unit import UnitOfMeasure

__all__ = (
    'Formula',
    'UnitConversionFormula',
    'TemperatureScale',
    'TEMPERATURE_SCALES',
    'TemperatureFormula',
    'ToKelvin',
    'ToCelsius',
    'ToFahrenheit',
    'ToRankine',
    'ToReaumur',
    'ToRomer',
    'ToNewton',
    'ToDelisle',
    'FORMULAS',
    'register_formula',
    'create_formula',
)

_FormulaT = TypeVar('_FormulaT', bound='Formula')

#: Formula identifier -> formula class
FORMULAS: Dict[str, Type[Formula]] = {}


def register_formula(identifier: str) -> Callable[[Type[_FormulaT]], Type[_FormulaT]]:
    """Class decorator registering a formula under `identifier`.

    Re-registering an identifier replaces the previous formula and logs a warning.
    """

    def wrapper(cls: Type[_FormulaT]) -> Type[_FormulaT]:
        previous = FORMULAS.get(identifier)
        if previous is not None and previous is not cls:
            logger.warning(f"Formula {identifier!r}: {previous.__name__} replaced by {cls.__name__}")
        FORMULAS[identifier] = cls
        cls.identifier = identifier
        return cls

    return wrapper


def create_formula(identifier: str, source: UnitOfMeasure, target: UnitOfMeasure,
                   calculator: Calculator) -> Formula:
    """Instantiate the formula registered under `identifier`.

    Raises:
        BadUnitError: If no formula is registered under `identifier`.
    """
    try:
        formula_class = FORMULAS[identifier]
    except KeyError:
        raise BadUnitError(f"{source.registry_key}: unknown formula {identifier!r} "
                           f"for target {target.symbol!r}") from None
    logger.debug(f"Using {formula_class.__name__} for {source.registry_key} -> {target.registry_key}")
    return formula_class(source, target, calculator)


class Formula(ABC):
    """Conversion rule from a specific source unit to a specific target unit."""

    identifier: ClassVar[str] = ''
    __slots__ = ('source', 'target', 'calculator')

    def __init__(self, source: UnitOfMeasure, target: UnitOfMeasure, calculator: Calculator):
        self.source: UnitOfMeasure = source
        self.target: UnitOfMeasure = target
        self.calculator: Calculator = calculator

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {self.source.registry_key} -> {self.target.registry_key}>'

    def __call__(self, quantity: Number) -> Number:
        return self.convert(quantity)

    @property
    def is_identity(self) -> bool:
        return self.source.symbol == self.target.symbol and self.source.unit_of == self.target.unit_of

    @abstractmethod
    def convert(self, quantity: Number) -> Number:
        """Convert `quantity` from the source unit into the target unit."""


@register_formula('ratio')
class UnitConversionFormula(Formula):
    """Base-relative ratio conversion.

    The quantity is moved into base units by dividing by the source ratio, then into the
    target unit by multiplying by the target ratio. Both steps are folded into a single
    ratio. Converting a unit to itself only coerces the quantity
    into the calculator representation, its value is unchanged.
    """

    __slots__ = ()

    @override
    def convert(self, quantity: Number) -> Number:
        if self.is_identity:
            return self.calculator.number(quantity)
        calc = self.calculator
        ratio = calc.div(self.target.units_per_base, self.source.units_per_base)
        return calc.mul(quantity, ratio)


class TemperatureScale(NamedTuple):
    """Affine relation of a temperature scale to kelvin.

    `kelvin = (value + offset) * numerator / denominator`

    Attributes:
        name: Scale name.
        offset: Decimal string, so arbitrary precision calculators keep it exact.
        numerator: Scale factor numerator.
        denominator: Scale factor denominator.
    """

    name: str
    offset: str
    numerator: int
    denominator: int


#: Temperature unit symbol -> scale definition
TEMPERATURE_SCALES: Mapping[str, TemperatureScale] = {
    'K': TemperatureScale('kelvin', '0', 1, 1),
    'C': TemperatureScale('celsius', '273.15', 1, 1),
    'F': TemperatureScale('fahrenheit', '459.67', 5, 9),
    'R': TemperatureScale('rankine', '0', 5, 9),
    'Re': TemperatureScale('reaumur', '218.52', 5, 4),
    'Ro': TemperatureScale('romer', '135.90375', 40, 21),
    'N': TemperatureScale('newton', '90.1395', 100, 33),
    'De': TemperatureScale('delisle', '-559.725', -2, 3),
}


@register_formula('temperature')
class TemperatureFormula(Formula):
    """Affine conversion between two temperature scales through kelvin.

    Subclasses pin `target_symbol`; using them for another target is a catalog defect.
    """

    target_symbol: ClassVar[Optional[str]] = None
    __slots__ = ()

    @staticmethod
    def _scale(unit: UnitOfMeasure) -> TemperatureScale:
        try:
            return TEMPERATURE_SCALES[unit.symbol]
        except KeyError:
            raise BadUnitError(f"{unit.registry_key} is not a known temperature scale") from None

    @override
    def convert(self, quantity: Number) -> Number:
        if self.target_symbol is not None and self.target.symbol != self.target_symbol:
            raise BadUnitError(f"{self.__class__.__name__} converts to {self.target_symbol!r}, "
                               f"not {self.target.registry_key!r}")
        source, target = self._scale(self.source), self._scale(self.target)
        if self.is_identity:
            return self.calculator.number(quantity)
        calc = self.calculator
        kelvin = calc.div(calc.mul(calc.add(quantity, source.offset), source.numerator), source.denominator)
        return calc.sub(calc.div(calc.mul(kelvin, target.denominator), target.numerator), target.offset)


@register_formula('to_kelvin')
class ToKelvin(TemperatureFormula):
    target_symbol = 'K'
    __slots__ = ()


@register_formula('to_celsius')
class ToCelsius(TemperatureFormula):
    target_symbol = 'C'
    __slots__ = ()


@register_formula('to_fahrenheit')
class ToFahrenheit(TemperatureFormula):
    target_symbol = 'F'
    __slots__ = ()


@register_formula('to_rankine')
class ToRankine(TemperatureFormula):
    target_symbol = 'R'
    __slots__ = ()


@register_formula('to_reaumur')
class ToReaumur(TemperatureFormula):
    target_symbol = 'Re'
    __slots__ = ()


@register_formula('to_romer')
class ToRomer(TemperatureFormula):
    target_symbol = 'Ro'
    __slots__ = ()


@register_formula('to_newton')
class ToNewton(TemperatureFormula):
    target_symbol = 'N'
    __slots__ = ()


@register_formula('to_delisle')
class ToDelisle(TemperatureFormula):
    target_symbol = 'De'
    __slots__ = ()
