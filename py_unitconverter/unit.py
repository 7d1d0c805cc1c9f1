"""Data-driven unit of measure model.

A single `UnitOfMeasure` type describes every unit; the measurement category is a
plain string tag (`unit_of`) and SI membership is a set of `SIClass` capability flags.

Conventions:
    * `units_per_base` means "how many of this unit equal one base unit", e.g. the
      kilometre has `units_per_base=0.001` when the metre is the base of `length`.
    * A unit whose `base` equals its own `symbol` is the base unit of its category
      and must have `units_per_base == 1`.
    * `registry_key` is `f"{unit_of}.{symbol}"` and is unique inside a registry.

Examples:
    >>> metre = UnitOfMeasure("metre", "m", Measurement.LENGTH, 1, base="m", si=SIClass.SI)
    >>> km = UnitOfMeasure("kilometre", "km", Measurement.LENGTH, 0.001, base="m",
    ...                    si=SIClass.SI | SIClass.MULTIPLE)
    >>> km.registry_key
    'length.km'
    >>> km.is_multiple_si_unit(), km.is_submultiple_si_unit()
    (True, False)
"""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntFlag
from numbers import Real
from types import MappingProxyType
from typing import Any, Final, Mapping, Optional, Protocol, TYPE_CHECKING, Union, runtime_checkable

from typing_extensions import Self

from py_unitconverter.exceptions import BadUnitError, UnitNotFoundError
from py_unitconverter.formula import create_formula

if TYPE_CHECKING:
    from py_unitconverter.calculator import Calculator
    from py_unitconverter.formula import Formula

__all__ = (
    'SIClass',
    'SIClassifiable',
    'UnitLookup',
    'Measurement',
    'UnitOfMeasure',
)

KEY_SEPARATOR: Final[str] = '.'


class SIClass(IntFlag):
    """SI capability groups a unit can declare.

    - SI: Unit belongs to the International System of Units
    - MULTIPLE: Decimal multiple of an SI unit (kilo-, mega-, ...)
    - SUBMULTIPLE: Decimal submultiple of an SI unit (milli-, micro-, ...)
    """

    NONE = 0
    SI = 1
    MULTIPLE = 2
    SUBMULTIPLE = 4


@runtime_checkable
class SIClassifiable(Protocol):
    """Capability set used by presentation and filtering code."""

    def is_si_unit(self) -> bool: ...

    def is_multiple_si_unit(self) -> bool: ...

    def is_submultiple_si_unit(self) -> bool: ...


@runtime_checkable
class UnitLookup(Protocol):
    """Anything that resolves a registry key to a unit, e.g. `UnitRegistry` or a dict."""

    def get(self, key: str, default: Any = None) -> Any: ...


class Measurement:  # pylint: disable=too-few-public-methods
    """Category tags of the units shipped with the library."""

    ACCELERATION: Final[str] = 'acceleration'
    ANGLE: Final[str] = 'angle'
    AREA: Final[str] = 'area'
    DATA_STORAGE: Final[str] = 'data_storage'
    ENERGY: Final[str] = 'energy'
    FREQUENCY: Final[str] = 'frequency'
    LENGTH: Final[str] = 'length'
    MASS: Final[str] = 'mass'
    POWER: Final[str] = 'power'
    PRESSURE: Final[str] = 'pressure'
    SPEED: Final[str] = 'speed'
    TEMPERATURE: Final[str] = 'temperature'
    TIME: Final[str] = 'time'
    VOLUME: Final[str] = 'volume'


def _require_text(attribute: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise BadUnitError(f"Unit {attribute} must be a non-empty string, got {value!r}")
    return value


@dataclass(frozen=True)
class UnitOfMeasure:
    """Immutable descriptor of one unit of measure.

    Attributes:
        name: Human-readable name, e.g. 'kilometre'.
        symbol: Symbol unique inside the category, e.g. 'km'.
        unit_of: Measurement category tag, e.g. 'length'.
        units_per_base: How many of this unit equal one base unit. Strictly positive.
        scientific_symbol: Symbol for scientific notation. Defaults to `symbol`.
        base: Symbol of the base unit of the category; equal to `symbol` for the base itself.
        formulae: Target symbol -> formula identifier, for non-linear conversions.
        si: SI capability flags.
    """

    name: str
    symbol: str
    unit_of: str
    units_per_base: Union[float, int, Decimal] = 1
    scientific_symbol: Optional[str] = None
    base: Optional[str] = None
    formulae: Mapping[str, str] = field(default_factory=dict, repr=False, hash=False)
    si: SIClass = SIClass.NONE

    def __post_init__(self):
        _require_text('name', self.name)
        _require_text('symbol', self.symbol)
        _require_text('unit_of', self.unit_of)
        if KEY_SEPARATOR in self.unit_of:
            raise BadUnitError(f"Unit category {self.unit_of!r} must not contain {KEY_SEPARATOR!r}")

        ratio = self.units_per_base
        if isinstance(ratio, bool) or not isinstance(ratio, (Real, Decimal)):
            raise BadUnitError(f"{self.unit_of}.{self.symbol}: units_per_base must be a number, got {ratio!r}")
        if not math.isfinite(ratio) or ratio <= 0:
            raise BadUnitError(f"{self.unit_of}.{self.symbol}: units_per_base must be finite "
                               f"and strictly positive, got {ratio!r}")
        if self.base is not None:
            _require_text('base', self.base)
            if self.base == self.symbol and ratio != 1:
                raise BadUnitError(f"{self.unit_of}.{self.symbol}: base unit must have units_per_base == 1, "
                                   f"got {ratio!r}")

        if self.scientific_symbol is None:
            object.__setattr__(self, 'scientific_symbol', self.symbol)

        formulae = dict(self.formulae)
        for target, identifier in formulae.items():
            if not isinstance(target, str) or not isinstance(identifier, str):
                raise BadUnitError(f"{self.unit_of}.{self.symbol}: formula table must map symbols to "
                                   f"formula identifiers, got {target!r}: {identifier!r}")
        object.__setattr__(self, 'formulae', MappingProxyType(formulae))
        object.__setattr__(self, 'si', SIClass(self.si))

    def __str__(self) -> str:
        return f'{self.name} ({self.symbol})'

    @property
    def registry_key(self) -> str:
        """Composite identifier `unit_of.symbol`."""
        return f'{self.unit_of}{KEY_SEPARATOR}{self.symbol}'

    def get_registry_key(self) -> str:
        return self.registry_key

    @property
    def is_base(self) -> bool:
        """True when the unit references itself as the base of its category."""
        return self.base == self.symbol

    def get_base(self, lookup: Optional[UnitLookup] = None) -> Optional[UnitOfMeasure]:
        """Resolve the base unit of this unit's category.

        Args:
            lookup: Table used to resolve the base reference by registry key.
                    Defaults to the table of built-in units.

        Returns:
            The base unit, this unit itself when it is the base, or None when no base
            reference is configured.

        Raises:
            UnitNotFoundError: If the base reference cannot be resolved.
        """
        if self.base is None:
            return None
        if self.is_base:
            return self
        if lookup is None:
            from py_unitconverter.units import UNITS_TABLE
            lookup = UNITS_TABLE
        key = f'{self.unit_of}{KEY_SEPARATOR}{self.base}'
        base = lookup.get(key)
        if base is None:
            raise UnitNotFoundError(f"Base unit {key!r} of {self.registry_key!r} is not registered")
        return base

    def get_base_units(self, lookup: Optional[UnitLookup] = None) -> Optional[Union[float, int, Decimal]]:
        """`units_per_base` of the base unit, or None when no base is configured."""
        base = self.get_base(lookup)
        return base.units_per_base if base is not None else None

    def get_formula_for(self, target: UnitOfMeasure, calculator: Calculator) -> Optional[Formula]:
        """Custom formula converting this unit into `target`.

        Returns:
            None when the unit has no formula table, so the caller uses the ratio formula.

        Raises:
            BadUnitError: If the unit has a formula table without an entry for `target`.
        """
        if not self.formulae:
            return None
        identifier = self.formulae.get(target.symbol)
        if identifier is None:
            raise BadUnitError(f"No formula for converting {self.registry_key!r} to {target.registry_key!r}")
        return create_formula(identifier, self, target, calculator)

    def is_si_unit(self) -> bool:
        return bool(self.si & SIClass.SI)

    def is_multiple_si_unit(self) -> bool:
        return bool(self.si & SIClass.MULTIPLE)

    def is_submultiple_si_unit(self) -> bool:
        return bool(self.si & SIClass.SUBMULTIPLE)

    def replace(self, **changes: Any) -> Self:
        """Return a validated copy with `changes` applied.

        A scientific symbol or base reference that followed the old symbol follows the new one.
        """
        if 'symbol' in changes:
            if 'scientific_symbol' not in changes and self.scientific_symbol == self.symbol:
                changes['scientific_symbol'] = None
            if 'base' not in changes and self.is_base:
                changes['base'] = changes['symbol']
        return dataclasses.replace(self, **changes)
