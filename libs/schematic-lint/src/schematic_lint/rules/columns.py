"""Column-level rules."""

from __future__ import annotations

import re

from schematic_core.schema import RelationalDatabaseTable

from schematic_lint.rule import RuleMessage, TableRule

_NULL_DEFAULTS = frozenset({"null", "(null)"})
_NUMERIC_SUFFIX_RE = re.compile(r"\d$")


class ColumnWithNullDefaultValueRule(TableRule):
    rule_id = "null-default-value"
    title = "Null default values assigned to column."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        return [
            self.build_message(
                f"The table '{table.name}' has a column '{column.name.local_name}' whose default value is null. "
                "Consider removing the default value on the column."
            )
            for column in table.columns
            if column.is_nullable
            and column.default_value is not None
            and column.default_value.strip().lower() in _NULL_DEFAULTS
        ]


class ColumnWithNumericSuffixRule(TableRule):
    rule_id = "numeric-suffix"
    title = "Column with a numeric suffix."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        return [
            self.build_message(
                f"The table '{table.name}' has a column '{column.name.local_name}' with a numeric suffix, "
                "indicating denormalization."
            )
            for column in table.columns
            if _NUMERIC_SUFFIX_RE.search(column.name.local_name)
        ]
