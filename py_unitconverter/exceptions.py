"""py_unitconverter exception types.

This module provides the exception hierarchy for error conditions that can occur while
resolving units and converting quantities.

Exception Hierarchy
-------------------

Every library error derives from `UnitConverterError` and from the built-in exception
that best describes it, so callers can catch either:

Exception (built-in Python)
└── UnitConverterError
    ├── UnitNotFoundError       (LookupError)
    ├── AmbiguousUnitError      (LookupError)
    ├── BadUnitError            (ValueError)
    ├── DivisionByZeroError     (ZeroDivisionError)
    ├── InvalidArgumentError    (ValueError)
    └── InvalidStateError       (RuntimeError)

Exception Types
---------------

Lookup Exceptions:

- UnitNotFoundError: Raised when a registry key or a bare symbol does not resolve to a
  registered unit.

- AmbiguousUnitError: Raised when a bare symbol is registered in more than one measurement
  category and no category was given to disambiguate. Contains:
  - symbol: The symbol that was looked up
  - candidates: Registry keys of all matching units

Definition Exceptions:

- BadUnitError: Raised for unit-catalog authoring defects: invalid ratios, a unit whose
  formula table has no entry for the requested target, or unknown formula identifiers.

Arithmetic Exceptions:

- DivisionByZeroError: Raised by calculators on division or modulo by zero.

Usage Exceptions:

- InvalidArgumentError: Raised for non-finite or non-numeric quantities, invalid precisions
  and conversions across measurement categories.

- InvalidStateError: Raised when the fluent converter API is used out of order. Contains:
  - state: The converter state at the time of the call
"""
from __future__ import annotations

from typing import Any, Sequence, Tuple

__all__ = (
    'UnitConverterError',
    'UnitNotFoundError',
    'AmbiguousUnitError',
    'BadUnitError',
    'DivisionByZeroError',
    'InvalidArgumentError',
    'InvalidStateError',
)


class UnitConverterError(Exception):
    """Base class of all py_unitconverter errors."""


class UnitNotFoundError(UnitConverterError, LookupError):
    """Unit lookup error."""


class AmbiguousUnitError(UnitConverterError, LookupError):
    """Exception for bare symbols registered in several measurement categories.

    Contains:
    - The symbol that was looked up
    - Registry keys of all matching units
    """

    def __init__(self, symbol: str, candidates: Sequence[str]):
        """
        Parameters:
        - symbol: The ambiguous unit symbol
        - candidates: Registry keys matching the symbol
        """
        self.symbol: str = symbol
        self.candidates: Tuple[str, ...] = tuple(candidates)
        super().__init__(f'Unit symbol {symbol!r} is ambiguous, '
                         f'matches: {", ".join(self.candidates)}. '
                         f'Specify the measurement category.')


class BadUnitError(UnitConverterError, ValueError):
    """Unit definition error."""


class DivisionByZeroError(UnitConverterError, ZeroDivisionError):
    """Calculator division by zero."""


class InvalidArgumentError(UnitConverterError, ValueError):
    """Invalid quantity error."""


class InvalidStateError(UnitConverterError, RuntimeError):
    """Exception for converter API misuse.

    Contains:
    - The converter state when the invalid call happened
    """

    def __init__(self, message: str, state: Any = None):
        self.state = state
        if state is not None:
            message = f'{message} (state: {state})'
        super().__init__(message)
