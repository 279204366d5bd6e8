"""Primary key rules."""

from __future__ import annotations

from schematic_core.schema import RelationalDatabaseTable

from schematic_lint.rule import RuleMessage, TableRule


class NoSurrogatePrimaryKeyRule(TableRule):
    """Reports multi-column primary keys that are not simply a set of foreign keys.

    A composite key whose every column belongs to some foreign key is the
    natural key of a link table and is left alone.
    """

    rule_id = "no-surrogate-primary-key"
    title = "No surrogate primary key present on table."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        primary_key = table.primary_key
        if primary_key is None or len(primary_key.columns) < 2:
            return []

        foreign_key_columns = {
            name for relational_key in table.parent_keys for name in relational_key.child_key.column_names
        }
        if set(primary_key.column_names) <= foreign_key_columns:
            return []

        return [
            self.build_message(
                f"The table '{table.name}' has a multi-column primary key. Consider introducing a surrogate primary key."
            )
        ]


class PrimaryKeyColumnNotFirstColumnRule(TableRule):
    rule_id = "primary-key-not-first-column"
    title = "Primary key columns not positioned first in table."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        primary_key = table.primary_key
        if primary_key is None or len(primary_key.columns) != 1 or not table.columns:
            return []
        if table.columns[0].name.local_name == primary_key.column_names[0]:
            return []
        return [
            self.build_message(
                f"The table '{table.name}' has a primary key whose column is not the first column in the table."
            )
        ]
