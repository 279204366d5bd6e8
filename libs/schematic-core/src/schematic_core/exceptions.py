"""Domain exceptions for schema introspection.

Connection and query failures from the database driver are not wrapped here;
they propagate unmodified. These exceptions cover catalog data the assembler
cannot interpret safely.
"""

from __future__ import annotations

from schematic_core.identifier import Identifier


class SchematicError(Exception):
    """Base exception for all schematic errors."""


class UnsupportedValueError(SchematicError):
    """Raised when a catalog reports an enumerated value outside the known vocabulary.

    Attributes:
        table_name: The object whose assembly failed.
        value: The offending catalog value.
        kind: What the value was supposed to describe (e.g. ``"trigger event"``).
    """

    kind = "value"

    def __init__(self, *, table_name: Identifier | None, value: str, cause: Exception | None = None) -> None:
        self.table_name = table_name
        self.value = value
        target = f"[{table_name}] " if table_name is not None else ""
        super().__init__(f"{target}unsupported {self.kind}: {value!r}")
        if cause is not None:
            self.__cause__ = cause


class UnsupportedTriggerEventError(UnsupportedValueError):
    """Raised for a trigger event other than INSERT, UPDATE or DELETE."""

    kind = "trigger event"


class UnsupportedTriggerTimingError(UnsupportedValueError):
    """Raised for a trigger timing other than BEFORE, AFTER or INSTEAD OF."""

    kind = "trigger timing"


class UnsupportedReferentialActionError(UnsupportedValueError):
    """Raised for an ON UPDATE / ON DELETE action the model cannot represent."""

    kind = "referential action"


class UnsupportedDialectError(SchematicError, ValueError):
    """Raised when no catalog implementation exists for a connection URL."""
