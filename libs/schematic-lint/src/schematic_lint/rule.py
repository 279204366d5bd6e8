"""Rule base classes, levels and messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from schematic_core.schema import DatabaseSnapshot, RelationalDatabaseTable


class RuleLevel(str, Enum):
    """Severity attached to every message a rule emits."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


@dataclass(frozen=True)
class RuleMessage:
    """A single lint finding."""

    rule_id: str
    title: str
    level: RuleLevel
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "title": self.title,
            "level": self.level.value,
            "message": self.message,
        }


class Rule(ABC):
    """A read-only check over an introspected database.

    Subclasses set ``rule_id`` and ``title``; the severity is chosen per
    instance so the same rule can be an error in one profile and a warning
    in another.
    """

    rule_id: ClassVar[str]
    title: ClassVar[str]

    def __init__(self, level: RuleLevel) -> None:
        if not isinstance(level, RuleLevel):
            raise ValueError(f"Invalid rule level: {level!r}")
        self.level = level

    @abstractmethod
    def analyse_database(self, snapshot: DatabaseSnapshot) -> list[RuleMessage]:
        """Return every finding for *snapshot*."""

    def build_message(self, text: str) -> RuleMessage:
        return RuleMessage(rule_id=self.rule_id, title=self.title, level=self.level, message=text)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level.value})"


class TableRule(Rule):
    """A rule that only looks at tables, one at a time."""

    def analyse_database(self, snapshot: DatabaseSnapshot) -> list[RuleMessage]:
        if snapshot is None:
            raise ValueError("snapshot is required")
        return self.analyse_tables(snapshot.tables)

    def analyse_tables(self, tables: Iterable[RelationalDatabaseTable]) -> list[RuleMessage]:
        if tables is None:
            raise ValueError("tables is required")
        messages: list[RuleMessage] = []
        for table in tables:
            messages.extend(self.analyse_table(table))
        return messages

    @abstractmethod
    def analyse_table(self, table: RelationalDatabaseTable) -> list[RuleMessage]: ...
