"""Catalog of known units keyed by registry key (`unit_of.symbol`).

Lookup policy for bare symbols: a symbol registered in exactly one category resolves
to that unit; a symbol registered in several categories raises `AmbiguousUnitError`
unless the category is given. The registry never picks one of several candidates.

Removal policy: removing a unit that is not registered raises `UnitNotFoundError`.

Thread model: the catalog is copy-on-write. Mutations build a new dictionary under a
lock and swap it in, so lookups always read a consistent snapshot.

Examples:
    >>> from py_unitconverter.units import DEFAULT_UNITS
    >>> registry = UnitRegistry(DEFAULT_UNITS)
    >>> registry.get_unit_of_measure_for('km').name
    'kilometre'
    >>> registry.get_unit_of_measure_for('a', 'area').name
    'are'
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from deprecated import deprecated

from py_unitconverter.exceptions import AmbiguousUnitError, BadUnitError, UnitNotFoundError
from py_unitconverter.logger import logger
from py_unitconverter.unit import KEY_SEPARATOR, UnitOfMeasure

__all__ = ('UnitRegistry',)

UnitPredicate = Callable[[UnitOfMeasure], bool]


class UnitRegistry:
    """Mutable catalog of `UnitOfMeasure` records.

    Args:
        units: Initial units, registered in iteration order.
    """

    __slots__ = ('_units', '_lock')

    def __init__(self, units: Optional[Iterable[UnitOfMeasure]] = None):
        self._lock = threading.RLock()
        self._units: Dict[str, UnitOfMeasure] = {}
        if units is not None:
            self.load_units(units)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}: {len(self._units)} units, {len(self.list_measurements())} measurements>'

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[UnitOfMeasure]:
        return iter(tuple(self._units.values()))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, UnitOfMeasure):
            return self._units.get(item.registry_key) == item
        if isinstance(item, str):
            return item in self._units
        return False

    @staticmethod
    def _validate(unit: Any) -> UnitOfMeasure:
        if not isinstance(unit, UnitOfMeasure):
            raise BadUnitError(f"UnitOfMeasure expected, got {type(unit).__name__}")
        return unit

    def _commit(self, units: Dict[str, UnitOfMeasure]) -> None:
        self._units = units

    #region Mutation
    def add_unit(self, unit: UnitOfMeasure) -> None:
        """Insert `unit`, replacing any unit registered under the same key."""
        unit = self._validate(unit)
        with self._lock:
            units = dict(self._units)
            if unit.registry_key in units:
                logger.warning(f"Overwriting registered unit {unit.registry_key}")
            units[unit.registry_key] = unit
            self._commit(units)
        logger.debug(f"Registered unit {unit.registry_key}")

    def add_units(self, units: Iterable[UnitOfMeasure]) -> None:
        """Insert several units in iteration order. Nothing is registered if any unit is invalid."""
        new_units = [self._validate(u) for u in units]
        with self._lock:
            current = dict(self._units)
            for unit in new_units:
                current[unit.registry_key] = unit
            self._commit(current)
        logger.debug(f"Registered {len(new_units)} units")

    def load_units(self, units: Iterable[UnitOfMeasure]) -> None:
        """Replace the whole catalog with `units`."""
        new_units = {}
        for unit in units:
            unit = self._validate(unit)
            new_units[unit.registry_key] = unit
        with self._lock:
            self._commit(new_units)
        logger.debug(f"Loaded {len(new_units)} units")

    def remove_unit(self, symbol_or_key: str) -> UnitOfMeasure:
        """Remove a unit by registry key or bare symbol and return it.

        Raises:
            UnitNotFoundError: If nothing matches.
            AmbiguousUnitError: If a bare symbol matches several categories.
        """
        with self._lock:
            unit = self._resolve(symbol_or_key)
            units = dict(self._units)
            del units[unit.registry_key]
            self._commit(units)
        logger.debug(f"Removed unit {unit.registry_key}")
        return unit

    def replace_unit(self, symbol_or_key: str, **changes: Any) -> UnitOfMeasure:
        """Override a registered unit with a modified copy and return the copy.

        If the symbol or category changes, the old registry key is dropped.
        """
        with self._lock:
            old = self._resolve(symbol_or_key)
            new = old.replace(**changes)
            units = dict(self._units)
            del units[old.registry_key]
            units[new.registry_key] = new
            self._commit(units)
        logger.debug(f"Replaced unit {old.registry_key} with {new.registry_key}")
        return new

    @deprecated(reason="Use `UnitRegistry.add_unit`")
    def register_unit(self, unit: UnitOfMeasure) -> None:
        self.add_unit(unit)

    @deprecated(reason="Use `UnitRegistry.add_units`")
    def register_units(self, units: Iterable[UnitOfMeasure]) -> None:
        self.add_units(units)

    @deprecated(reason="Use `UnitRegistry.remove_unit`")
    def unregister_unit(self, symbol_or_key: str) -> UnitOfMeasure:
        return self.remove_unit(symbol_or_key)
    #endregion Mutation

    #region Lookup
    def _resolve(self, symbol_or_key: str) -> UnitOfMeasure:
        units = self._units
        if symbol_or_key in units:
            return units[symbol_or_key]
        return self.get_unit_of_measure_for(symbol_or_key)

    def get(self, key: str, default: Any = None) -> Any:
        """Exact registry key lookup returning `default` when absent."""
        return self._units.get(key, default)

    def get_unit(self, key: str) -> UnitOfMeasure:
        """Exact registry key lookup.

        Raises:
            UnitNotFoundError: If no unit is registered under `key`.
        """
        try:
            return self._units[key]
        except (KeyError, TypeError):
            raise UnitNotFoundError(f"Unit {key!r} is not registered") from None

    def is_unit_registered(self, key: str) -> bool:
        return key in self._units

    def get_unit_of_measure_for(self, symbol: str, unit_of: Optional[str] = None) -> UnitOfMeasure:
        """Resolve a unit symbol, optionally inside a measurement category.

        Args:
            symbol: Bare unit symbol, e.g. 'km'.
            unit_of: Measurement category. Required when the symbol is registered in several categories.

        Raises:
            UnitNotFoundError: If the symbol is not registered (in the category).
            AmbiguousUnitError: If no category is given and several categories use the symbol.
        """
        if not isinstance(symbol, str):
            raise UnitNotFoundError(f"Unit symbol must be a string, got {type(symbol).__name__}")
        if unit_of is not None:
            return self.get_unit(f'{unit_of}{KEY_SEPARATOR}{symbol}')
        matches = [u for u in self._units.values() if u.symbol == symbol]
        if not matches:
            raise UnitNotFoundError(f"Unit symbol {symbol!r} is not registered")
        if len(matches) > 1:
            raise AmbiguousUnitError(symbol, [u.registry_key for u in matches])
        return matches[0]

    def get_base_unit(self, unit_of: str) -> UnitOfMeasure:
        """The unit that references itself as base in `unit_of`.

        Raises:
            UnitNotFoundError: If the category has no base unit registered.
        """
        for unit in self._units.values():
            if unit.unit_of == unit_of and unit.is_base:
                return unit
        raise UnitNotFoundError(f"No base unit registered for {unit_of!r}")

    def list_units(self, unit_of: Optional[str] = None,
                   predicate: Optional[UnitPredicate] = None) -> Tuple[UnitOfMeasure, ...]:
        """Registered units in registration order.

        Args:
            unit_of: Keep only units of this measurement category.
            predicate: Keep only units for which `predicate(unit)` is true,
                       e.g. `UnitOfMeasure.is_si_unit`.
        """
        units: Iterable[UnitOfMeasure] = self._units.values()
        if unit_of is not None:
            units = (u for u in units if u.unit_of == unit_of)
        if predicate is not None:
            units = (u for u in units if predicate(u))
        return tuple(units)

    def list_measurements(self) -> List[str]:
        """Measurement categories in order of first registration."""
        return list(dict.fromkeys(u.unit_of for u in self._units.values()))
    #endregion Lookup

    def copy(self) -> UnitRegistry:
        """Independent registry holding the same units."""
        return UnitRegistry(self._units.values())
