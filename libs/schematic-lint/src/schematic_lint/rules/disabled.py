"""Disabled keys, indexes, checks and triggers."""

from __future__ import annotations

from schematic_core.identifier import Identifier
from schematic_core.schema import RelationalDatabaseTable

from schematic_lint.rule import RuleMessage, TableRule


class DisabledObjectsRule(TableRule):
    """Reports constraints, indexes and triggers that exist but are not enforced."""

    rule_id = "disabled-objects"
    title = "Disabled constraints, indexes or triggers present."

    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]:
        messages = []

        if table.primary_key is not None and not table.primary_key.is_enabled:
            messages.append(self._message(table.name, "primary key", table.primary_key.name))
        for key in table.unique_keys:
            if not key.is_enabled:
                messages.append(self._message(table.name, "unique key", key.name))
        for relational_key in table.parent_keys:
            if not relational_key.child_key.is_enabled:
                messages.append(self._message(table.name, "foreign key", relational_key.child_key.name))
        for index in table.indexes:
            if not index.is_enabled:
                messages.append(self._message(table.name, "index", index.name))
        for check in table.checks:
            if not check.is_enabled:
                messages.append(self._message(table.name, "check constraint", check.name))
        for trigger in table.triggers:
            if not trigger.is_enabled:
                messages.append(self._message(table.name, "trigger", trigger.name))

        return messages

    def _message(self, table_name: Identifier, kind: str, name: Identifier | None) -> RuleMessage:
        label = f" '{name.local_name}'" if name is not None else ""
        return self.build_message(f"The table '{table_name}' contains a disabled {kind}{label}.")
