"""Built-in lint rules."""

from schematic_lint.rules.columns import ColumnWithNullDefaultValueRule, ColumnWithNumericSuffixRule
from schematic_lint.rules.disabled import DisabledObjectsRule
from schematic_lint.rules.indexes import ForeignKeyIndexRule, UniqueIndexWithNullableColumnsRule
from schematic_lint.rules.keys import NoSurrogatePrimaryKeyRule, PrimaryKeyColumnNotFirstColumnRule
from schematic_lint.rules.names import WhitespaceNameRule
from schematic_lint.rules.tables import (
    NoIndexesPresentOnTableRule,
    NoNonNullableColumnsPresentRule,
    OrphanedTableRule,
    TooFewColumnsRule,
)

__all__ = [
    "ColumnWithNullDefaultValueRule",
    "ColumnWithNumericSuffixRule",
    "DisabledObjectsRule",
    "ForeignKeyIndexRule",
    "NoIndexesPresentOnTableRule",
    "NoNonNullableColumnsPresentRule",
    "NoSurrogatePrimaryKeyRule",
    "OrphanedTableRule",
    "PrimaryKeyColumnNotFirstColumnRule",
    "TooFewColumnsRule",
    "UniqueIndexWithNullableColumnsRule",
    "WhitespaceNameRule",
]
