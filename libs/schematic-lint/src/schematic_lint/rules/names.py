"""Naming rules."""

from __future__ import annotations

from collections.abc import Iterable

from schematic_core.identifier import Identifier
from schematic_core.schema import DatabaseColumn, DatabaseSnapshot

from schematic_lint.rule import Rule, RuleMessage


def has_whitespace(name: str) -> bool:
    return any(character.isspace() for character in name)


class WhitespaceNameRule(Rule):
    """Reports object and column names that contain whitespace and so need quoting."""

    rule_id = "whitespace-name"
    title = "Whitespace present in object name."

    def analyse_database(self, snapshot: DatabaseSnapshot) -> list[RuleMessage]:
        if snapshot is None:
            raise ValueError("snapshot is required")

        messages: list[RuleMessage] = []
        for table in snapshot.tables:
            messages.extend(self._analyse_object("table", table.name, table.columns))
        for view in snapshot.views:
            messages.extend(self._analyse_object("view", view.name, view.columns))
        for sequence in snapshot.sequences:
            messages.extend(self._analyse_object("sequence", sequence.name))
        for synonym in snapshot.synonyms:
            messages.extend(self._analyse_object("synonym", synonym.name))
        for routine in snapshot.routines:
            messages.extend(self._analyse_object("routine", routine.name))
        return messages

    def _analyse_object(
        self, kind: str, name: Identifier, columns: Iterable[DatabaseColumn] = ()
    ) -> list[RuleMessage]:
        messages = []
        if has_whitespace(name.local_name):
            messages.append(
                self.build_message(
                    f"The {kind} '{name}' contains whitespace and requires quoting to be used. "
                    "Consider renaming to remove any whitespace."
                )
            )
        for column in columns:
            if has_whitespace(column.name.local_name):
                messages.append(
                    self.build_message(
                        f"The {kind} '{name}' has a column '{column.name.local_name}' which contains whitespace "
                        "and requires quoting to be used. Consider renaming to remove any whitespace."
                    )
                )
        return messages
