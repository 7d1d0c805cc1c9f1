"""Pluggable arithmetic backends used by conversion formulas.

Formulas never do arithmetic on their own; they call a `Calculator`, so the numeric
representation is chosen once, when a converter is built:

    * `SimpleCalculator` works on Python floats.
    * `DecimalCalculator` works on `decimal.Decimal` values with a private context,
      for arbitrary precision results.

Both share the same operation set (`add`, `sub`, `mul`, `div`, `pow`, `mod`, `round`)
and raise `DivisionByZeroError` on division by zero.

Examples:
    >>> SimpleCalculator().div(1, 8)
    0.125
    >>> DecimalCalculator(digits=40).div(1, 3)
    Decimal('0.3333333333333333333333333333333333333333')
    >>> DecimalCalculator(precision=2).round(DecimalCalculator().div(2, 3))
    Decimal('0.67')
"""
from __future__ import annotations

import decimal
import math
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from importlib.metadata import entry_points, EntryPoint
from numbers import Real
from typing import Dict, Generator, Optional, Type, Union

from typing_extensions import TypeAlias, override

from py_unitconverter.exceptions import DivisionByZeroError, InvalidArgumentError
from py_unitconverter.logger import logger

__all__ = (
    'Number',
    'RoundingMode',
    'Calculator',
    'SimpleCalculator',
    'DecimalCalculator',
    'CALCULATORS',
)

Number: TypeAlias = Union[float, int, Decimal, Fraction]

DEFAULT_ENTRY_SUFFIX = '_calculator'
DEFAULT_ENTRY_GROUP = 'py_unitconverter'


class RoundingMode(Enum):
    """Rounding modes accepted by `Calculator.round`.

    Values are the matching `decimal` module constants.
    """

    HALF_UP = decimal.ROUND_HALF_UP
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    UP = decimal.ROUND_UP
    DOWN = decimal.ROUND_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR

    @classmethod
    def parse(cls, value: Union[RoundingMode, str]) -> RoundingMode:
        """Resolve a rounding mode from a member, its name ('half_up') or a `decimal` constant."""
        if isinstance(value, RoundingMode):
            return value
        if not isinstance(value, str):
            raise TypeError(f"RoundingMode or str expected, got {type(value).__name__}")
        normalized = value.strip().upper().replace('-', '_')
        if normalized.startswith('ROUND_'):
            normalized = normalized[len('ROUND_'):]
        try:
            return cls[normalized]
        except KeyError:
            raise InvalidArgumentError(f"Unsupported rounding mode {value!r}") from None


def _quantize(value: Decimal, places: int, rounding: RoundingMode) -> Decimal:
    # quantize() fails when the result needs more digits than the context allows
    context = decimal.Context(prec=max(28, value.adjusted() + places + 2))
    return value.quantize(Decimal(1).scaleb(-places), rounding=rounding.value, context=context)


class Calculator(ABC):
    """Arithmetic strategy shared by all formulas.

    Attributes:
        precision: Default number of decimal places used by `round`; `None` disables rounding.
        rounding: Rounding mode used by `round`.

    The configuration is fixed for the lifetime of the calculator.
    """

    __slots__ = ('_precision', '_rounding')

    def __init__(self, precision: Optional[int] = None,
                 rounding: Union[RoundingMode, str] = RoundingMode.HALF_UP):
        if precision is not None and (isinstance(precision, bool) or not isinstance(precision, int)
                                      or precision < 0):
            raise InvalidArgumentError(f"precision must be a non-negative int, got {precision!r}")
        self._precision: Optional[int] = precision
        self._rounding: RoundingMode = RoundingMode.parse(rounding)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(precision={self._precision}, rounding={self._rounding.name})'

    @property
    def precision(self) -> Optional[int]:
        return self._precision

    @property
    def rounding(self) -> RoundingMode:
        return self._rounding

    @abstractmethod
    def number(self, value: Union[Number, str]) -> Number:
        """Coerce an operand into this calculator's numeric representation.

        Raises:
            InvalidArgumentError: If the value is not a real number.
        """

    @abstractmethod
    def add(self, left: Number, right: Number) -> Number: ...

    @abstractmethod
    def sub(self, left: Number, right: Number) -> Number: ...

    @abstractmethod
    def mul(self, left: Number, right: Number) -> Number: ...

    @abstractmethod
    def div(self, dividend: Number, divisor: Number) -> Number:
        """Divide `dividend` by `divisor`.

        Raises:
            DivisionByZeroError: If `divisor` is zero.
        """

    @abstractmethod
    def pow(self, base: Number, exponent: Number) -> Number: ...

    @abstractmethod
    def mod(self, dividend: Number, divisor: Number) -> Number:
        """Remainder of `dividend / divisor`, with the sign of the dividend.

        Raises:
            DivisionByZeroError: If `divisor` is zero.
        """

    @abstractmethod
    def round(self, value: Number, precision: Optional[int] = None) -> Number:
        """Round `value` to `precision` decimal places (defaults to the calculator precision).

        Returns the value unchanged when neither precision is set.
        """

    # Long-form names
    def subtract(self, left: Number, right: Number) -> Number:
        return self.sub(left, right)

    def multiply(self, left: Number, right: Number) -> Number:
        return self.mul(left, right)

    def divide(self, dividend: Number, divisor: Number) -> Number:
        return self.div(dividend, divisor)

    def exponent(self, base: Number, exponent: Number) -> Number:
        return self.pow(base, exponent)

    def _resolve_precision(self, precision: Optional[int]) -> Optional[int]:
        return self._precision if precision is None else precision


class SimpleCalculator(Calculator):
    """Calculator working on standard floating point numbers."""

    __slots__ = ()

    @override
    def number(self, value: Union[Number, str]) -> float:
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Number expected, got {value!r}")
        if isinstance(value, (Real, Decimal, str)):
            try:
                return float(value)
            except (ValueError, OverflowError) as e:
                raise InvalidArgumentError(f"Can't convert {value!r} to float") from e
        raise InvalidArgumentError(f"Number expected, got {type(value).__name__}")

    @override
    def add(self, left: Number, right: Number) -> float:
        return self.number(left) + self.number(right)

    @override
    def sub(self, left: Number, right: Number) -> float:
        return self.number(left) - self.number(right)

    @override
    def mul(self, left: Number, right: Number) -> float:
        return self.number(left) * self.number(right)

    @override
    def div(self, dividend: Number, divisor: Number) -> float:
        divisor = self.number(divisor)
        if divisor == 0:
            raise DivisionByZeroError("division by zero")
        return self.number(dividend) / divisor

    @override
    def pow(self, base: Number, exponent: Number) -> float:
        base, exponent = self.number(base), self.number(exponent)
        if base == 0 and exponent < 0:
            raise DivisionByZeroError("zero raised to a negative power")
        return math.pow(base, exponent)

    @override
    def mod(self, dividend: Number, divisor: Number) -> float:
        divisor = self.number(divisor)
        if divisor == 0:
            raise DivisionByZeroError("modulo by zero")
        return math.fmod(self.number(dividend), divisor)

    @override
    def round(self, value: Number, precision: Optional[int] = None) -> float:
        places = self._resolve_precision(precision)
        value = self.number(value)
        if places is None or not math.isfinite(value):
            return value
        # repr() keeps the shortest decimal form, so 2.675 rounds HALF_UP to 2.68
        return float(_quantize(Decimal(repr(value)), places, self._rounding))


class DecimalCalculator(Calculator):
    """Arbitrary precision calculator backed by `decimal.Decimal`.

    Floats are converted through their shortest decimal representation, so
    `0.001` is treated as `Decimal('0.001')` rather than its binary expansion.

    Args:
        precision: Default decimal places for `round`.
        rounding: Rounding mode for `round` and for the arithmetic context.
        digits: Significant digits kept by every operation.
    """

    __slots__ = ('_context',)

    def __init__(self, precision: Optional[int] = None,
                 rounding: Union[RoundingMode, str] = RoundingMode.HALF_UP,
                 digits: int = 28):
        super().__init__(precision, rounding)
        if isinstance(digits, bool) or not isinstance(digits, int) or digits < 1:
            raise InvalidArgumentError(f"digits must be a positive int, got {digits!r}")
        self._context = decimal.Context(prec=digits, rounding=self._rounding.value)

    def __repr__(self) -> str:
        return (f'{self.__class__.__name__}(precision={self._precision}, '
                f'rounding={self._rounding.name}, digits={self.digits})')

    @property
    def digits(self) -> int:
        return self._context.prec

    @override
    def number(self, value: Union[Number, str]) -> Decimal:
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Number expected, got {value!r}")
        if isinstance(value, Decimal):
            return value
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, float):
            return Decimal(repr(value))
        if isinstance(value, Fraction):
            return self._context.divide(Decimal(value.numerator), Decimal(value.denominator))
        if isinstance(value, str):
            try:
                return Decimal(value.strip())
            except decimal.InvalidOperation as e:
                raise InvalidArgumentError(f"Can't convert {value!r} to Decimal") from e
        if isinstance(value, Real):
            return Decimal(repr(float(value)))
        raise InvalidArgumentError(f"Number expected, got {type(value).__name__}")

    @override
    def add(self, left: Number, right: Number) -> Decimal:
        return self._context.add(self.number(left), self.number(right))

    @override
    def sub(self, left: Number, right: Number) -> Decimal:
        return self._context.subtract(self.number(left), self.number(right))

    @override
    def mul(self, left: Number, right: Number) -> Decimal:
        return self._context.multiply(self.number(left), self.number(right))

    @override
    def div(self, dividend: Number, divisor: Number) -> Decimal:
        divisor = self.number(divisor)
        if divisor.is_zero():
            raise DivisionByZeroError("division by zero")
        return self._context.divide(self.number(dividend), divisor)

    @override
    def pow(self, base: Number, exponent: Number) -> Decimal:
        base, exponent = self.number(base), self.number(exponent)
        if base.is_zero() and exponent < 0:
            raise DivisionByZeroError("zero raised to a negative power")
        return self._context.power(base, exponent)

    @override
    def mod(self, dividend: Number, divisor: Number) -> Decimal:
        divisor = self.number(divisor)
        if divisor.is_zero():
            raise DivisionByZeroError("modulo by zero")
        return self._context.remainder(self.number(dividend), divisor)

    @override
    def round(self, value: Number, precision: Optional[int] = None) -> Decimal:
        places = self._resolve_precision(precision)
        value = self.number(value)
        if places is None or not value.is_finite():
            return value
        return _quantize(value, places, self._rounding)


#: Builtin calculators by short name
CALCULATORS: Dict[str, Type[Calculator]] = {
    'simple': SimpleCalculator,
    'float': SimpleCalculator,
    'decimal': DecimalCalculator,
}

CalculatorEntry = Union[str, Type[Calculator], None]


class _CalculatorLoader:
    """Resolve calculator classes by name, class, or `py_unitconverter` entry point."""

    _entry_point_group = DEFAULT_ENTRY_GROUP
    _entry_point_suffix = DEFAULT_ENTRY_SUFFIX

    @classmethod
    def _get_entries_by_group(cls) -> set:
        all_entry_points = entry_points()
        if hasattr(all_entry_points, 'select'):  # for importlib >= 5
            calculator_entry_points = all_entry_points.select(group=cls._entry_point_group)
        elif hasattr(all_entry_points, 'get'):  # for importlib < 5
            calculator_entry_points = all_entry_points.get(cls._entry_point_group, [])  # type: ignore[arg-type]
        else:
            raise RuntimeError('Entry point not supported')
        return set(calculator_entry_points)

    @classmethod
    def iter_calculators(cls) -> Generator[EntryPoint, None, None]:
        """Iterate over all calculators advertised through entry points."""
        for ep in cls._get_entries_by_group():
            if ep.name.endswith(cls._entry_point_suffix):
                yield ep

    @classmethod
    def _load_from_entry(cls, ep: EntryPoint) -> Optional[Type[Calculator]]:
        try:
            handle = ep.load()
            if not (isinstance(handle, type) and issubclass(handle, Calculator)):
                raise TypeError(f"Unsupported calculator {ep.value} is not a Calculator subclass")
            logger.debug(f"Loaded calculator from: {ep.value} (Class: {handle})")
            return handle
        except ImportError as e:
            logger.error(f"Error loading calculator from {ep.value}: {e}")
        except AttributeError as e:
            logger.error(f"Error loading attribute from {ep.value}: {e}")
        return None

    @classmethod
    def load(cls, entry: CalculatorEntry = None) -> Type[Calculator]:
        if entry is None:
            return SimpleCalculator
        if isinstance(entry, type) and issubclass(entry, Calculator):
            return entry
        if isinstance(entry, str):
            name = entry.strip()
            if (handle := CALCULATORS.get(name.lower())) is not None:
                return handle
            for ep in cls.iter_calculators():
                if ep.name in (name, f'{name}{cls._entry_point_suffix}'):
                    if (loaded := cls._load_from_entry(ep)) is not None:
                        return loaded
            if ':' in name:
                ep = EntryPoint(name, name, cls._entry_point_group)
                if (loaded := cls._load_from_entry(ep)) is not None:
                    return loaded
            raise ValueError(f"No calculator found for {entry!r}")
        raise TypeError("Invalid calculator entry type, expected 'str' or 'Calculator' subclass")
