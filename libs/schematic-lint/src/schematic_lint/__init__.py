"""schematic-lint — Rule-based linting of introspected database schemas."""

from schematic_lint.engine import RULES, LintEngine, default_rules
from schematic_lint.rule import Rule, RuleLevel, RuleMessage, TableRule
from schematic_lint.rules import (
    ColumnWithNullDefaultValueRule,
    ColumnWithNumericSuffixRule,
    DisabledObjectsRule,
    ForeignKeyIndexRule,
    NoIndexesPresentOnTableRule,
    NoNonNullableColumnsPresentRule,
    NoSurrogatePrimaryKeyRule,
    OrphanedTableRule,
    PrimaryKeyColumnNotFirstColumnRule,
    TooFewColumnsRule,
    UniqueIndexWithNullableColumnsRule,
    WhitespaceNameRule,
)

__all__ = [
    "RULES",
    "ColumnWithNullDefaultValueRule",
    "ColumnWithNumericSuffixRule",
    "DisabledObjectsRule",
    "ForeignKeyIndexRule",
    "LintEngine",
    "NoIndexesPresentOnTableRule",
    "NoNonNullableColumnsPresentRule",
    "NoSurrogatePrimaryKeyRule",
    "OrphanedTableRule",
    "PrimaryKeyColumnNotFirstColumnRule",
    "Rule",
    "RuleLevel",
    "RuleMessage",
    "TableRule",
    "TooFewColumnsRule",
    "UniqueIndexWithNullableColumnsRule",
    "WhitespaceNameRule",
    "default_rules",
]
