"""LGPL library for converting quantities between units of measure."""

import importlib.metadata

__version__ = importlib.metadata.version("py_unitconverter")
__author__ = "o-murphy"
__copyright__ = (
    "Copyright 2023 Dmytro Yaroshenko (https://github.com/o-murphy)",
)

__credits__ = ["o-murphy"]

# Standard library imports
import importlib.resources
import os
import sys

# Third-party imports
from typing_extensions import Any, Dict, Optional

# Local imports
from .logger import logger as log
from .helpers import dot_get
from .settings import Settings

if sys.version_info[:2] < (3, 11):
    import tomli as tomllib
else:
    import tomllib


def _load_config(filepath: Optional[str] = None, suppress_warnings: bool = False) -> None:
    """Load settings from a .pyuc.toml file.

    Args:
        filepath: Path to configuration file. If None, searches for .pyuc.toml or pyuc.toml
        suppress_warnings: If True, suppress warning messages
    """
    def find_pyuc_toml(start_dir: Optional[str] = None) -> Optional[str]:
        """Search for a pyuc.toml file starting from the specified directory and moving up.

        Args:
            start_dir: The directory to start searching from. Default is the current working directory.

        Returns:
            The absolute path to the config file if found, otherwise None.
        """
        current_dir = os.path.abspath(start_dir or os.getcwd())
        while True:
            pyuc_paths = [
                os.path.join(current_dir, '.pyuc.toml'),
                os.path.join(current_dir, 'pyuc.toml'),
            ]
            for pyuc_path in pyuc_paths:
                if os.path.exists(pyuc_path):
                    return os.path.abspath(pyuc_path)

            parent_dir = os.path.dirname(current_dir)
            # If we have reached the root directory, stop searching
            if parent_dir == current_dir:
                return None
            current_dir = parent_dir

    if filepath is None:
        filepath = find_pyuc_toml()

    if filepath is None:
        log.debug("No pyuc.toml found, keeping current settings")
        return

    log.debug(f"Found {os.path.basename(filepath)} at {os.path.dirname(filepath)}")

    with open(filepath, "rb") as fp:
        _config = tomllib.load(fp)

    _pyuc = dot_get(_config, 'pyuc')
    if isinstance(_pyuc, dict) and _pyuc:
        Settings.set(**_pyuc)
    elif not suppress_warnings:
        log.warning("Config has no `pyuc` section")

    log.debug("Settings load success")


def _basic_config(filename: Optional[str] = None,
                  settings: Optional[Dict[str, Any]] = None,
                  suppress_warnings: bool = False) -> None:
    """Load settings from file or Mapping.

    Args:
        filename: Configuration file path
        settings: Dictionary of settings
        suppress_warnings: If True, suppress warning messages

    Raises:
        ValueError: If both filename and settings are provided
    """
    if filename and settings:
        raise ValueError("Can't use settings and config file at same time")
    if not filename and settings:
        Settings.set(**settings)
    else:
        _load_config(filename, suppress_warnings)


def _resolve_resource_path(path: str) -> str:
    """Resolve a resource path relative to the package."""
    return str(importlib.resources.files('py_unitconverter').joinpath(path))


def _load_simple_config() -> None:
    """Load float calculator settings."""
    _basic_config(_resolve_resource_path('assets/.pyuc-simple.toml'), suppress_warnings=True)


def _load_precise_config() -> None:
    """Load arbitrary precision calculator settings."""
    _basic_config(_resolve_resource_path('assets/.pyuc-precise.toml'), suppress_warnings=True)


loadSimpleConfig = _load_simple_config
loadPreciseConfig = _load_precise_config

basicConfig = _basic_config


from .calculator import (Number, RoundingMode, Calculator, SimpleCalculator, DecimalCalculator,
                         CALCULATORS)
from .converter import ConverterState, UnitConverter, ConverterBuilder
from .exceptions import (UnitConverterError, UnitNotFoundError, AmbiguousUnitError, BadUnitError,
                         DivisionByZeroError, InvalidArgumentError, InvalidStateError)
from .formula import (Formula, UnitConversionFormula, TemperatureScale, TEMPERATURE_SCALES,
                      TemperatureFormula, ToKelvin, ToCelsius, ToFahrenheit, ToRankine,
                      ToReaumur, ToRomer, ToNewton, ToDelisle, FORMULAS, register_formula,
                      create_formula)
from .helpers import dot_has
from .logger import logger, enable_file_logging, disable_file_logging
from .registry import UnitRegistry
from .unit import SIClass, SIClassifiable, UnitLookup, Measurement, UnitOfMeasure
from .units import DEFAULT_UNITS, UNITS_TABLE, units_of, temperature_formulae

# DRY: build __all__ from global symbols
_SKIP_GLOBALS = {
    # Skip Python builtins
    "__name__", "__doc__", "__package__", "__loader__", "__spec__",
    "__file__", "__cached__", "__builtins__",
    # Skip imported modules
    "tomllib", "sys", "os", "importlib",
    # Skip typing helpers
    "Any", "Dict", "Optional", "log",
    # Skip private/internal symbols
    "_load_config", "_basic_config", "_resolve_resource_path",
    "_load_simple_config", "_load_precise_config",
    # Skip submodules
    "calculator", "converter", "exceptions", "formula", "helpers", "registry",
    "settings", "unit", "units",
}
# Build __all__ from the module's global namespace
__all__ = [
    name for name in globals()
    if not name.startswith("_") and name not in _SKIP_GLOBALS
]
