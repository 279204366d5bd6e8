"""Tests for the schematic domain exceptions."""

from schematic_core.exceptions import (
    SchematicError,
    UnsupportedDialectError,
    UnsupportedReferentialActionError,
    UnsupportedTriggerEventError,
    UnsupportedTriggerTimingError,
    UnsupportedValueError,
)
from schematic_core.identifier import Identifier


def test_unsupported_value_error_message():
    """UnsupportedValueError names the table and the offending value."""
    exc = UnsupportedTriggerEventError(table_name=Identifier(schema="dbo", local_name="orders"), value="TRUNCATE")
    assert "[dbo.orders] unsupported trigger event: 'TRUNCATE'" in str(exc)
    assert exc.value == "TRUNCATE"


def test_unsupported_value_error_without_table():
    exc = UnsupportedValueError(table_name=None, value="x")
    assert str(exc) == "unsupported value: 'x'"


def test_unsupported_value_error_with_cause():
    cause = ValueError("original")
    exc = UnsupportedReferentialActionError(table_name=None, value="x", cause=cause)
    assert exc.__cause__ is cause


def test_subclasses_are_schematic_errors():
    for cls in (UnsupportedTriggerEventError, UnsupportedTriggerTimingError, UnsupportedReferentialActionError):
        exc = cls(table_name=None, value="x")
        assert isinstance(exc, UnsupportedValueError)
        assert isinstance(exc, SchematicError)


def test_unsupported_dialect_error_is_value_error():
    """UnsupportedDialectError can be caught as a plain ValueError."""
    assert isinstance(UnsupportedDialectError("nope"), ValueError)
    assert isinstance(UnsupportedDialectError("nope"), SchematicError)
