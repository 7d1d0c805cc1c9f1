import pytest

from py_unitconverter.converter import ConverterState
from py_unitconverter.exceptions import (AmbiguousUnitError, BadUnitError, DivisionByZeroError, InvalidArgumentError,
                                         InvalidStateError, UnitConverterError, UnitNotFoundError)

pytestmark = pytest.mark.extended


@pytest.mark.parametrize(
    "error, builtin",
    [
        (UnitNotFoundError, LookupError),
        (AmbiguousUnitError, LookupError),
        (BadUnitError, ValueError),
        (DivisionByZeroError, ZeroDivisionError),
        (InvalidArgumentError, ValueError),
        (InvalidStateError, RuntimeError),
    ],
)
def test_hierarchy(error, builtin):
    assert issubclass(error, UnitConverterError)
    assert issubclass(error, builtin)


def test_ambiguous_unit_error_message_and_attrs():
    err = AmbiguousUnitError('a', ['area.a', 'time.a'])
    assert err.symbol == 'a'
    assert err.candidates == ('area.a', 'time.a')
    assert "'a' is ambiguous" in str(err)
    assert "area.a, time.a" in str(err)


def test_invalid_state_error_message_variants():
    err = InvalidStateError("Call convert() first", ConverterState.IDLE)
    assert err.state is ConverterState.IDLE
    assert str(err).startswith("Call convert() first")
    assert "ConverterState.IDLE" in str(err)

    bare = InvalidStateError("No registry added")
    assert bare.state is None
    assert str(bare) == "No registry added"


def test_catch_all_base(converter):
    with pytest.raises(UnitConverterError):
        converter.convert(1).from_('a')
