"""Lint engine — runs a rule set over a database snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from schematic_core.schema import DatabaseSnapshot

from schematic_lint.rule import Rule, RuleLevel, RuleMessage
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

logger = logging.getLogger(__name__)

# Every built-in rule, keyed by rule id
RULES: dict[str, type[Rule]] = {
    rule.rule_id: rule
    for rule in (
        DisabledObjectsRule,
        NoIndexesPresentOnTableRule,
        NoSurrogatePrimaryKeyRule,
        OrphanedTableRule,
        WhitespaceNameRule,
        NoNonNullableColumnsPresentRule,
        TooFewColumnsRule,
        ForeignKeyIndexRule,
        ColumnWithNullDefaultValueRule,
        PrimaryKeyColumnNotFirstColumnRule,
        ColumnWithNumericSuffixRule,
        UniqueIndexWithNullableColumnsRule,
    )
}


def default_rules(level: RuleLevel = RuleLevel.WARNING, *, disabled: Iterable[str] = ()) -> list[Rule]:
    """Instantiate every built-in rule at *level*, minus the *disabled* rule ids.

    Raises:
        ValueError: If a disabled id names no built-in rule.
    """
    disabled = set(disabled)
    unknown = disabled - RULES.keys()
    if unknown:
        raise ValueError(f"Unknown lint rule(s): {', '.join(sorted(unknown))}")
    return [rule(level) for rule_id, rule in RULES.items() if rule_id not in disabled]


class LintEngine:
    """Runs rules in order and collects their messages.

    Usage::

        engine = LintEngine(default_rules(RuleLevel.ERROR))
        messages = engine.analyse(await database.snapshot())
    """

    def __init__(self, rules: Iterable[Rule] | None = None) -> None:
        self.rules = list(rules) if rules is not None else default_rules()

    def analyse(self, snapshot: DatabaseSnapshot) -> list[RuleMessage]:
        if snapshot is None:
            raise ValueError("snapshot is required")

        messages: list[RuleMessage] = []
        for rule in self.rules:
            rule_messages = rule.analyse_database(snapshot)
            logger.debug("Rule %s produced %d message(s)", rule.rule_id, len(rule_messages))
            messages.extend(rule_messages)

        logger.info("Lint finished: %d rule(s), %d message(s)", len(self.rules), len(messages))
        return messages

    @staticmethod
    def has_errors(messages: Iterable[RuleMessage]) -> bool:
        return any(message.level == RuleLevel.ERROR for message in messages)
