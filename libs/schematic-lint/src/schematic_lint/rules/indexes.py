"""Index coverage rules."""

from __future__ import annotations

from collections.abc import Sequence

from schematic_core.identifier import Identifier
from schematic_core.schema import DatabaseIndex, RelationalDatabaseTable

from schematic_lint.rule import RuleMessage, TableRule


def _plural(names: Sequence[str], singular: str, plural: str) -> str:
    return plural if len(names) > 1 else singular


class ForeignKeyIndexRule(TableRule):
    """Reports foreign keys whose columns are not the leading columns of any index.

    Only plain column index entries count; an expression entry stops the
    prefix match since it may read several columns.
    """

    rule_id = "foreign-key-index"
    title = "Indexes missing on foreign key."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        messages = []
        for relational_key in table.parent_keys:
            foreign_key = relational_key.child_key
            column_names = list(foreign_key.column_names)
            if any(self._is_covered_by(column_names, index) for index in table.indexes):
                continue
            messages.append(self._message(table.name, foreign_key.name, column_names))
        return messages

    @staticmethod
    def _is_covered_by(column_names: list[str], index: DatabaseIndex) -> bool:
        if len(index.columns) < len(column_names):
            return False
        for column_name, index_column in zip(column_names, index.columns):
            if len(index_column.dependent_columns) != 1:
                return False
            if index_column.dependent_columns[0].name.local_name != column_name:
                return False
        return True

    def _message(self, table_name: Identifier, key_name: Identifier | None, column_names: list[str]) -> RuleMessage:
        label = f"'{key_name.local_name}' " if key_name is not None else ""
        noun = _plural(column_names, "column", "columns")
        return self.build_message(
            f"The table '{table_name}' has a foreign key {label}which is missing an index on the {noun} "
            f"{', '.join(column_names)}"
        )


class UniqueIndexWithNullableColumnsRule(TableRule):
    rule_id = "unique-index-nullable-columns"
    title = "Unique index contains nullable columns."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        messages = []
        for index in table.indexes:
            if not index.is_unique:
                continue
            nullable = [
                column.name.local_name
                for index_column in index.columns
                for column in index_column.dependent_columns
                if column.is_nullable
            ]
            if not nullable:
                continue
            noun = _plural(nullable, "a nullable column", "nullable columns")
            messages.append(
                self.build_message(
                    f"The table '{table.name}' has a unique index '{index.name.local_name}' which contains "
                    f"{noun}: {', '.join(nullable)}"
                )
            )
        return messages
