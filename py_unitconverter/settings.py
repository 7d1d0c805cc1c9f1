"""Global settings of the py_unitconverter library."""
from __future__ import annotations

from dataclasses import dataclass, fields, MISSING
from typing import Any, Optional, Type, Union

from py_unitconverter.calculator import (Calculator, DecimalCalculator, RoundingMode,
                                        _CalculatorLoader)
from py_unitconverter.exceptions import InvalidArgumentError
from py_unitconverter.logger import logger

__all__ = ('Settings',)


class SettingsMeta(type):
    """Provide representation method for static dataclasses."""

    def __repr__(cls):
        return '\n'.join(f'{field} = {getattr(cls, field)!r}'
                         for field in getattr(cls, '__dataclass_fields__'))


@dataclass
class Settings(metaclass=SettingsMeta):
    """Defaults used by `UnitConverter.default()` and `basicConfig`.

    Default Configuration:
        * calculator: 'simple' (float arithmetic); 'decimal' for arbitrary precision,
          or any name registered under the `py_unitconverter` entry point group
        * precision: None (results are not rounded)
        * rounding: RoundingMode.HALF_UP
        * digits: 28 (significant digits of the decimal calculator)

    Examples:
        >>> Settings.set(calculator='decimal', precision=4)
        >>> Settings.create_calculator()
        DecimalCalculator(precision=4, rounding=HALF_UP, digits=28)
        >>> Settings.restore_defaults()
    """

    calculator: Union[str, Type[Calculator]] = 'simple'
    precision: Optional[int] = None
    rounding: RoundingMode = RoundingMode.HALF_UP
    digits: int = 28

    @classmethod
    def restore_defaults(cls):
        """Reset all settings to their default values."""
        for f in fields(cls):
            if f.default is not MISSING:
                setattr(cls, f.name, f.default)

    @classmethod
    def set(cls, **kwargs: Any):
        """Set several options at once.

        Unknown options and invalid values are logged as warnings and ignored.
        """
        for attribute, value in kwargs.items():
            if attribute == 'calculator':
                if isinstance(value, str) or (isinstance(value, type) and issubclass(value, Calculator)):
                    cls.calculator = value
                else:
                    logger.warning(f"{value=} is not a calculator name or class")
            elif attribute == 'precision':
                if value is None or (isinstance(value, int) and not isinstance(value, bool) and value >= 0):
                    cls.precision = value
                else:
                    logger.warning(f"{value=} is not a valid precision")
            elif attribute == 'rounding':
                try:
                    cls.rounding = RoundingMode.parse(value)
                except (TypeError, InvalidArgumentError):
                    logger.warning(f"{value=} is not a member of RoundingMode")
            elif attribute == 'digits':
                if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                    cls.digits = value
                else:
                    logger.warning(f"{value=} is not a valid number of digits")
            else:
                logger.warning(f"{attribute=} not found in settings")

    @classmethod
    def create_calculator(cls) -> Calculator:
        """Instantiate the configured calculator."""
        calculator_class = _CalculatorLoader.load(cls.calculator)
        if issubclass(calculator_class, DecimalCalculator):
            return calculator_class(cls.precision, cls.rounding, digits=cls.digits)
        return calculator_class(cls.precision, cls.rounding)
