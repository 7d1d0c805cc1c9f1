import logging

import pytest

from py_unitconverter import Settings
from py_unitconverter.calculator import DecimalCalculator, SimpleCalculator
from py_unitconverter.converter import UnitConverter
from py_unitconverter.logger import logger
from py_unitconverter.registry import UnitRegistry
from py_unitconverter.unit import Measurement, SIClass, UnitOfMeasure
from py_unitconverter.units import DEFAULT_UNITS

logger.setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def restore_settings():
    Settings.restore_defaults()
    yield
    Settings.restore_defaults()


@pytest.fixture
def metre():
    return UnitOfMeasure("metre", "m", Measurement.LENGTH, 1, base="m", si=SIClass.SI)


@pytest.fixture
def kilometre():
    return UnitOfMeasure("kilometre", "km", Measurement.LENGTH, 0.001, base="m",
                         si=SIClass.SI | SIClass.MULTIPLE)


@pytest.fixture
def millimetre():
    return UnitOfMeasure("millimetre", "mm", Measurement.LENGTH, 1000, base="m",
                         si=SIClass.SI | SIClass.SUBMULTIPLE)


@pytest.fixture
def registry():
    return UnitRegistry(DEFAULT_UNITS)


@pytest.fixture
def converter(registry):
    return UnitConverter(registry, SimpleCalculator())


@pytest.fixture
def decimal_converter():
    return UnitConverter(UnitRegistry(DEFAULT_UNITS), DecimalCalculator())
