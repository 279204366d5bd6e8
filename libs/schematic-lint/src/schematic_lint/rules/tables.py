"""Table shape rules: indexing, relationships and column counts."""

from __future__ import annotations

from schematic_core.schema import RelationalDatabaseTable

from schematic_lint.rule import RuleMessage, TableRule


class NoIndexesPresentOnTableRule(TableRule):
    rule_id = "no-indexes"
    title = "No indexes present on table."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        if table.primary_key is not None or table.unique_keys or table.indexes:
            return []
        return [
            self.build_message(
                f"The table '{table.name}' does not have any indexes present, requiring table scans to access records. "
                "Consider introducing an index or a primary key or a unique key constraint."
            )
        ]


class OrphanedTableRule(TableRule):
    rule_id = "orphaned-table"
    title = "No relationships present on table."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        if table.parent_keys or table.child_keys:
            return []
        return [self.build_message(f"The table '{table.name}' is not related to any other table.")]


class TooFewColumnsRule(TableRule):
    """Reports tables holding a single column."""

    rule_id = "too-few-columns"
    title = "Only one column present on table."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        if len(table.columns) != 1:
            return []
        return [
            self.build_message(
                f"The table '{table.name}' has too few columns. Consider adding more columns or removing the table."
            )
        ]


class NoNonNullableColumnsPresentRule(TableRule):
    rule_id = "no-non-nullable-columns"
    title = "No not-nullable columns present on table."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        if any(not column.is_nullable for column in table.columns):
            return []
        return [
            self.build_message(
                f"The table '{table.name}' has no not-nullable columns present. "
                "Consider adding one to ensure that each record contains data."
            )
        ]
