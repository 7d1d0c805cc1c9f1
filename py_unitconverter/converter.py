"""Unit converter façade.

`UnitConverter` combines a `UnitRegistry` with a `Calculator` and exposes a fluent API:

    >>> from py_unitconverter import UnitConverter
    >>> converter = UnitConverter.default()
    >>> converter.convert(5).from_("km").to("m")
    5000.0
    >>> converter.convert(100, precision=1).from_("C").to("F")
    212.0

Each conversion walks through `ConverterState`:

    IDLE --convert()--> QUANTITY_SET --from_()--> SOURCE_SET --to()/all()--> IDLE

Calling the steps out of order raises `InvalidStateError`. The pending conversion is
kept on the converter instance, so an instance must not be shared between threads
while a conversion is in flight.
"""
from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from numbers import Real
from typing import Any, Dict, Iterable, Optional, Union

from typing_extensions import Self

from py_unitconverter.calculator import (Calculator, DecimalCalculator, Number, RoundingMode,
                                        SimpleCalculator)
from py_unitconverter.exceptions import InvalidArgumentError, InvalidStateError
from py_unitconverter.formula import Formula, UnitConversionFormula
from py_unitconverter.logger import logger
from py_unitconverter.registry import UnitRegistry
from py_unitconverter.settings import Settings
from py_unitconverter.unit import KEY_SEPARATOR, UnitOfMeasure
from py_unitconverter.units import DEFAULT_UNITS

__all__ = (
    'ConverterState',
    'UnitConverter',
    'ConverterBuilder',
)


class ConverterState(Enum):
    """Steps of a fluent conversion."""

    IDLE = 'idle'
    QUANTITY_SET = 'quantity set'
    SOURCE_SET = 'source set'
    CONVERTED = 'converted'


def _validate_quantity(quantity: Any) -> Number:
    if isinstance(quantity, bool) or not isinstance(quantity, (Real, Decimal)):
        raise InvalidArgumentError(f"Quantity must be a real number, got {type(quantity).__name__}")
    finite = quantity.is_finite() if isinstance(quantity, Decimal) else math.isfinite(quantity)
    if not finite:
        raise InvalidArgumentError(f"Quantity must be finite, got {quantity!r}")
    return quantity  # type: ignore[return-value]


def _validate_precision(precision: Any) -> Optional[int]:
    if precision is None:
        return None
    if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
        raise InvalidArgumentError(f"precision must be a non-negative int, got {precision!r}")
    return precision


class UnitConverter:
    """Convert quantities between units of a registry.

    Args:
        registry: Units available for conversion.
        calculator: Arithmetic backend used by every formula.
    """

    __slots__ = ('_registry', '_calculator', '_state', '_quantity', '_precision', '_source')

    def __init__(self, registry: UnitRegistry, calculator: Calculator):
        if not isinstance(registry, UnitRegistry):
            raise TypeError(f"UnitRegistry expected, got {type(registry).__name__}")
        if not isinstance(calculator, Calculator):
            raise TypeError(f"Calculator expected, got {type(calculator).__name__}")
        self._registry: UnitRegistry = registry
        self._calculator: Calculator = calculator
        self._reset()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {self._registry!r}, {self._calculator!r}, {self._state.value}>'

    @classmethod
    def default(cls) -> UnitConverter:
        """Converter over the built-in units with the calculator configured in `Settings`."""
        return cls(UnitRegistry(DEFAULT_UNITS), Settings.create_calculator())

    @staticmethod
    def create_builder() -> ConverterBuilder:
        return ConverterBuilder()

    @property
    def registry(self) -> UnitRegistry:
        return self._registry

    @property
    def calculator(self) -> Calculator:
        return self._calculator

    @property
    def state(self) -> ConverterState:
        return self._state

    def _reset(self) -> None:
        self._state: ConverterState = ConverterState.IDLE
        self._quantity: Optional[Number] = None
        self._precision: Optional[int] = None
        self._source: Optional[UnitOfMeasure] = None

    def convert(self, quantity: Number, precision: Optional[int] = None) -> Self:
        """Start a conversion of `quantity`.

        Args:
            quantity: Finite real number (int, float, Decimal or Fraction).
            precision: Decimal places of the result. Defaults to the calculator precision.

        Raises:
            InvalidArgumentError: If the quantity is not a finite number or the precision is invalid.
        """
        quantity = _validate_quantity(quantity)
        precision = _validate_precision(precision)
        self._reset()
        self._quantity = quantity
        self._precision = precision
        self._state = ConverterState.QUANTITY_SET
        return self

    def from_(self, symbol: str, unit_of: Optional[str] = None) -> Self:
        """Set the unit the pending quantity is expressed in.

        Raises:
            InvalidStateError: If `convert()` was not called first.
            UnitNotFoundError, AmbiguousUnitError: If the symbol does not resolve to a single unit.
        """
        if self._state is not ConverterState.QUANTITY_SET:
            raise InvalidStateError("Call convert() before from_()", self._state)
        self._source = self._registry.get_unit_of_measure_for(symbol, unit_of)
        self._state = ConverterState.SOURCE_SET
        return self

    def _resolve_target(self, symbol: str, unit_of: Optional[str]) -> UnitOfMeasure:
        assert self._source is not None
        if unit_of is None:
            # symbols are looked up in the source category first
            target = self._registry.get(f'{self._source.unit_of}{KEY_SEPARATOR}{symbol}')
            if target is not None:
                return target
        target = self._registry.get_unit_of_measure_for(symbol, unit_of)
        if target.unit_of != self._source.unit_of:
            raise InvalidArgumentError(f"Can't convert {self._source.registry_key} "
                                       f"to {target.registry_key}: measurements differ")
        return target

    def get_formula(self, source: UnitOfMeasure, target: UnitOfMeasure) -> Formula:
        """Custom formula of `source` for `target`, or the ratio formula when it has none."""
        formula = source.get_formula_for(target, self._calculator)
        if formula is None:
            formula = UnitConversionFormula(source, target, self._calculator)
        return formula

    def _apply(self, target: UnitOfMeasure) -> Number:
        assert self._source is not None and self._quantity is not None
        formula = self.get_formula(self._source, target)
        result = formula.convert(self._quantity)
        places = self._precision if self._precision is not None else self._calculator.precision
        if places is not None:
            result = self._calculator.round(result, places)
        return result

    def to(self, symbol: str, unit_of: Optional[str] = None) -> Number:
        """Finish the conversion into the unit `symbol` and reset the converter.

        Raises:
            InvalidStateError: If `from_()` was not called first.
            UnitNotFoundError, AmbiguousUnitError: If the symbol does not resolve to a single unit.
            InvalidArgumentError: If the units belong to different measurements.
            BadUnitError: If the source unit has a formula table without an entry for the target.
        """
        if self._state is not ConverterState.SOURCE_SET:
            raise InvalidStateError("Call convert() and from_() before to()", self._state)
        try:
            target = self._resolve_target(symbol, unit_of)
            result = self._apply(target)
            self._state = ConverterState.CONVERTED
            logger.debug(f"Converted {self._quantity} {self._source.registry_key} "  # type: ignore[union-attr]
                         f"to {result} {target.registry_key}")
            return result
        finally:
            self._reset()

    def all(self) -> Dict[str, Number]:
        """Finish the conversion into every unit of the source measurement.

        Returns:
            Target symbol -> converted value, in registration order.
        """
        if self._state is not ConverterState.SOURCE_SET:
            raise InvalidStateError("Call convert() and from_() before all()", self._state)
        try:
            assert self._source is not None
            results = {target.symbol: self._apply(target)
                       for target in self._registry.list_units(self._source.unit_of)}
            self._state = ConverterState.CONVERTED
            return results
        finally:
            self._reset()


class ConverterBuilder:
    """Step-by-step construction of a `UnitConverter`.

    Examples:
        >>> converter = (UnitConverter.create_builder()
        ...              .add_decimal_calculator(precision=3)
        ...              .add_default_registry()
        ...              .build())
        >>> converter.convert(1).from_("mi").to("km")
        Decimal('1.609')
    """

    __slots__ = ('_calculator', '_registry')

    def __init__(self):
        self._calculator: Optional[Calculator] = None
        self._registry: Optional[UnitRegistry] = None

    def add_calculator(self, calculator: Calculator) -> Self:
        if not isinstance(calculator, Calculator):
            raise TypeError(f"Calculator expected, got {type(calculator).__name__}")
        self._calculator = calculator
        return self

    def add_simple_calculator(self, precision: Optional[int] = None,
                              rounding: Union[RoundingMode, str] = RoundingMode.HALF_UP) -> Self:
        return self.add_calculator(SimpleCalculator(precision, rounding))

    def add_decimal_calculator(self, precision: Optional[int] = None,
                               rounding: Union[RoundingMode, str] = RoundingMode.HALF_UP,
                               digits: int = 28) -> Self:
        return self.add_calculator(DecimalCalculator(precision, rounding, digits))

    def add_registry(self, registry: UnitRegistry) -> Self:
        if not isinstance(registry, UnitRegistry):
            raise TypeError(f"UnitRegistry expected, got {type(registry).__name__}")
        self._registry = registry
        return self

    def add_default_registry(self) -> Self:
        return self.add_registry(UnitRegistry(DEFAULT_UNITS))

    def add_registry_with(self, units: Iterable[UnitOfMeasure]) -> Self:
        return self.add_registry(UnitRegistry(units))

    def build(self) -> UnitConverter:
        if self._calculator is None:
            raise InvalidStateError("No calculator added to the builder")
        if self._registry is None:
            raise InvalidStateError("No registry added to the builder")
        return UnitConverter(self._registry, self._calculator)
