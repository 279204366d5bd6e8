"""Tests for identifier resolution strategies."""

import pytest
from schematic_core.identifier import Identifier
from schematic_core.resolution import (
    DefaultIdentifierResolutionStrategy,
    OracleIdentifierResolutionStrategy,
    PostgreSqlIdentifierResolutionStrategy,
)


def test_default_strategy_is_identity():
    ident = Identifier("srv", "db", "dbo", "Orders")
    assert DefaultIdentifierResolutionStrategy().get_resolution_order(ident) == [ident]


def test_oracle_strategy_orders_exact_first_then_upper_variants():
    ident = Identifier("srv", "db", "hr", "employees")
    order = OracleIdentifierResolutionStrategy().get_resolution_order(ident)
    assert order == [
        Identifier("srv", "db", "hr", "employees"),
        Identifier("srv", "db", "hr", "EMPLOYEES"),
        Identifier("srv", "db", "HR", "employees"),
        Identifier("srv", "db", "HR", "EMPLOYEES"),
    ]


def test_oracle_strategy_deduplicates_already_upper_names():
    ident = Identifier("srv", "db", "HR", "EMPLOYEES")
    assert OracleIdentifierResolutionStrategy().get_resolution_order(ident) == [ident]


def test_oracle_strategy_without_schema():
    ident = Identifier(local_name="employees")
    order = OracleIdentifierResolutionStrategy().get_resolution_order(ident)
    assert order == [ident, Identifier(local_name="EMPLOYEES")]


def test_postgres_strategy_folds_to_lower_case():
    ident = Identifier("srv", "db", "Public", "Orders")
    order = PostgreSqlIdentifierResolutionStrategy().get_resolution_order(ident)
    assert order[0] == ident
    assert order[-1] == Identifier("srv", "db", "public", "orders")
    assert len(order) == 4


@pytest.mark.parametrize(
    "strategy",
    [
        DefaultIdentifierResolutionStrategy(),
        OracleIdentifierResolutionStrategy(),
        PostgreSqlIdentifierResolutionStrategy(),
    ],
)
def test_strategies_are_deterministic(strategy):
    ident = Identifier(schema="Sales", local_name="Orders")
    assert strategy.get_resolution_order(ident) == strategy.get_resolution_order(ident)


@pytest.mark.parametrize(
    "strategy",
    [
        DefaultIdentifierResolutionStrategy(),
        OracleIdentifierResolutionStrategy(),
        PostgreSqlIdentifierResolutionStrategy(),
    ],
)
def test_strategies_reject_none(strategy):
    with pytest.raises(ValueError):
        strategy.get_resolution_order(None)
