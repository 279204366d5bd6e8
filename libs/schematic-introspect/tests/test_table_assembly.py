"""Assembler edge cases driven by an in-memory catalog."""

import asyncio
import logging
from collections import Counter

import pytest
from schematic_core.exceptions import UnsupportedReferentialActionError, UnsupportedTriggerEventError
from schematic_core.identifier import ORDINAL, ORDINAL_IGNORE_CASE, Identifier, IdentifierDefaults
from schematic_core.resolution import PostgreSqlIdentifierResolutionStrategy
from schematic_core.schema import IndexColumnOrder, KeyType, TriggerEvent, TriggerTiming
from schematic_introspect.catalog.base import CatalogQueries
from schematic_introspect.catalog.rows import (
    CheckRow,
    ChildKeyRow,
    ColumnRow,
    ConstraintColumnRow,
    ForeignKeyRow,
    IndexColumnRow,
    QualifiedNameRow,
    TriggerRow,
)
from schematic_introspect.tables import RelationalTableProvider

DEFAULTS = IdentifierDefaults(schema="dbo")


class FakeCatalog(CatalogQueries):
    """Serves catalog rows from dictionaries and counts every query."""

    dialect = "fake"
    comparer = ORDINAL_IGNORE_CASE

    def __init__(self, tables):
        super().__init__(connection=None)
        self.tables = tables
        self.calls = Counter()

    def _table(self, name):
        for table_name, table in self.tables.items():
            if self.comparer.name_key(table_name) == self.comparer.name_key(name.local_name):
                return table
        return {}

    def _count(self, query, name):
        self.calls[(query, name.local_name.lower())] += 1

    async def get_identifier_defaults(self):
        return DEFAULTS

    async def all_table_names(self):
        return [QualifiedNameRow("dbo", name) for name in self.tables]

    async def resolve_table_name(self, candidate):
        self._count("resolve", candidate)
        for name in self.tables:
            if candidate.schema == "dbo" and self.comparer.name_key(name) == self.comparer.name_key(candidate.local_name):
                return QualifiedNameRow("dbo", name)
        return None

    async def table_columns(self, table):
        self._count("columns", table)
        return [ColumnRow(column_name=name, type_schema=None, type_name="int") for name in self._table(table)["columns"]]

    async def primary_key_columns(self, table):
        self._count("primary_key", table)
        return [
            ConstraintColumnRow("pk", f"pk_{table.local_name}", column, position)
            for position, column in enumerate(self._table(table).get("pk", []), start=1)
        ]

    async def unique_key_columns(self, table):
        self._count("unique_keys", table)
        return [
            ConstraintColumnRow(key_name, key_name, column, position)
            for key_name, columns in self._table(table).get("uks", {}).items()
            for position, column in enumerate(columns, start=1)
        ]

    async def index_columns(self, table):
        return self._table(table).get("indexes", [])

    async def check_constraints(self, table):
        return self._table(table).get("checks", [])

    async def triggers(self, table):
        return self._table(table).get("triggers", [])

    async def parent_key_columns(self, table):
        self._count("parent_keys", table)
        return self._table(table).get("fks", [])

    async def child_key_columns(self, table):
        self._count("child_keys", table)
        rows = []
        for child_name, child in self.tables.items():
            for fk in child.get("fks", []):
                if self.comparer.name_key(fk.parent_table) == self.comparer.name_key(table.local_name):
                    rows.append(
                        ChildKeyRow("dbo", child_name, fk.constraint_id, fk.constraint_name, fk.column_name, fk.column_position)
                    )
        return rows

    async def all_view_names(self):
        return []

    async def resolve_view_name(self, candidate):
        return None

    async def view_definition(self, view):
        return None

    async def view_columns(self, view):
        return []


def fk(name, column, parent_table, parent_column=None, *, position=1, key_type=KeyType.PRIMARY, key_name=None, **kwargs):
    return ForeignKeyRow(
        constraint_id=name,
        constraint_name=name,
        column_name=column,
        column_position=position,
        parent_schema="dbo",
        parent_table=parent_table,
        parent_key_name=key_name,
        parent_key_type=key_type,
        parent_column_name=parent_column,
        **kwargs,
    )


def shop_catalog(**overrides):
    tables = {
        "customers": {"columns": ["id", "code", "name"], "pk": ["id"], "uks": {"uq_customers_code": ["code"]}},
        "orders": {
            "columns": ["id", "customer_id", "customer_code"],
            "pk": ["id"],
            "fks": [fk("fk_orders_customers", "customer_id", "customers", "id")],
        },
    }
    tables.update(overrides)
    return FakeCatalog(tables)


def provider_for(catalog):
    return RelationalTableProvider(catalog, DEFAULTS)


def name(local_name):
    return Identifier.create_qualified("dbo", local_name)


async def test_table_is_assembled():
    provider = provider_for(shop_catalog())
    orders = await provider.get_table(Identifier.create_qualified("orders"))

    assert orders.name == name("orders")
    assert orders.primary_key.column_names == ("id",)
    assert orders.parent_keys[0].parent_table == name("customers")
    assert orders.parent_keys[0].parent_key.name.local_name == "pk_customers"


async def test_unknown_table_returns_none():
    provider = provider_for(shop_catalog())

    assert await provider.get_table(Identifier.create_qualified("missing")) is None


async def test_get_table_rejects_none():
    with pytest.raises(ValueError):
        await provider_for(shop_catalog()).get_table(None)


async def test_unique_key_matched_by_name():
    catalog = shop_catalog(
        orders={
            "columns": ["id", "customer_code"],
            "fks": [fk("fk_code", "customer_code", "customers", "code", key_type=KeyType.UNIQUE, key_name="UQ_CUSTOMERS_CODE")],
        }
    )
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    parent_key = orders.parent_keys[0].parent_key
    assert parent_key.key_type == KeyType.UNIQUE
    assert parent_key.name.local_name == "uq_customers_code"


async def test_unique_key_matched_by_columns_when_type_unknown():
    catalog = shop_catalog(
        orders={"columns": ["id", "customer_code"], "fks": [fk("fk_code", "customer_code", "customers", "code", key_type=None)]}
    )
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert orders.parent_keys[0].parent_key.column_names == ("code",)


async def test_missing_parent_table_drops_key(caplog):
    catalog = shop_catalog(orders={"columns": ["id", "customer_id"], "fks": [fk("fk_gone", "customer_id", "gone", "id")]})

    with caplog.at_level(logging.DEBUG, logger="schematic_introspect.tables"):
        orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert orders is not None
    assert orders.parent_keys == ()
    assert "Dropping foreign key fk_gone" in caplog.text


async def test_missing_named_unique_key_drops_key():
    catalog = shop_catalog(
        orders={
            "columns": ["id", "customer_code"],
            "fks": [fk("fk_code", "customer_code", "customers", "code", key_type=KeyType.UNIQUE, key_name="uq_other")],
        }
    )
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert orders.parent_keys == ()


async def test_missing_child_column_drops_key():
    catalog = shop_catalog(orders={"columns": ["id"], "fks": [fk("fk_orders_customers", "customer_id", "customers", "id")]})
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert orders.parent_keys == ()


async def test_arity_mismatch_drops_key():
    catalog = shop_catalog(
        customers={"columns": ["region", "id"], "pk": ["region", "id"]},
        orders={"columns": ["id", "customer_id"], "fks": [fk("fk_orders_customers", "customer_id", "customers", "id")]},
    )
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert orders.parent_keys == ()


async def test_dropped_parent_key_is_also_missing_from_child_keys():
    catalog = shop_catalog(orders={"columns": ["id"], "fks": [fk("fk_orders_customers", "customer_id", "customers", "id")]})
    customers = await provider_for(catalog).get_table(Identifier.create_qualified("customers"))

    assert customers.child_keys == ()


async def test_child_keys_reuse_the_child_tables_foreign_keys():
    provider = provider_for(shop_catalog())
    customers = await provider.get_table(Identifier.create_qualified("customers"))
    orders = await provider.get_table(Identifier.create_qualified("orders"))

    assert customers.child_keys == orders.parent_keys


async def test_referential_actions_are_parsed():
    catalog = shop_catalog(
        orders={
            "columns": ["id", "customer_id"],
            "fks": [fk("fk_x", "customer_id", "customers", "id", update_action="SET_NULL", delete_action="cascade")],
        }
    )
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert orders.parent_keys[0].update_action.value == "SET NULL"
    assert orders.parent_keys[0].delete_action.value == "CASCADE"


async def test_unknown_referential_action_raises():
    catalog = shop_catalog(
        orders={"columns": ["id", "customer_id"], "fks": [fk("fk_x", "customer_id", "customers", "id", delete_action="EXPLODE")]}
    )

    with pytest.raises(UnsupportedReferentialActionError) as exc_info:
        await provider_for(catalog).get_table(Identifier.create_qualified("orders"))
    assert exc_info.value.value == "EXPLODE"


async def test_trigger_events_are_combined():
    catalog = shop_catalog(
        customers={
            "columns": ["id"],
            "triggers": [TriggerRow("trg_audit", "AFTER", "INSERT OR UPDATE, DELETE")],
        }
    )
    customers = await provider_for(catalog).get_table(Identifier.create_qualified("customers"))

    trigger = customers.triggers[0]
    assert trigger.name == name("trg_audit")
    assert trigger.timing == TriggerTiming.AFTER
    assert trigger.events == TriggerEvent.INSERT | TriggerEvent.UPDATE | TriggerEvent.DELETE


async def test_unknown_trigger_event_raises():
    catalog = shop_catalog(customers={"columns": ["id"], "triggers": [TriggerRow("trg_cleanup", "BEFORE", "TRUNCATE")]})

    with pytest.raises(UnsupportedTriggerEventError) as exc_info:
        await provider_for(catalog).get_table(Identifier.create_qualified("customers"))
    assert exc_info.value.table_name == name("customers")
    assert exc_info.value.value == "TRUNCATE"


async def test_indexes_group_rows_and_keep_included_columns():
    catalog = shop_catalog(
        customers={
            "columns": ["id", "code", "name"],
            "indexes": [
                IndexColumnRow("ix_name", 2, "code", is_descending=True),
                IndexColumnRow("ix_name", 1, "name"),
                IndexColumnRow("ix_name", 3, "id", is_included=True),
                IndexColumnRow("ix_upper", 1, None, expression="upper(name)"),
            ],
        }
    )
    customers = await provider_for(catalog).get_table(Identifier.create_qualified("customers"))
    by_name = {index.name.local_name: index for index in customers.indexes}

    ix_name = by_name["ix_name"]
    assert [column.expression for column in ix_name.columns] == ["name", "code"]
    assert ix_name.columns[1].order == IndexColumnOrder.DESCENDING
    assert [column.name.local_name for column in ix_name.included_columns] == ["id"]
    assert by_name["ix_upper"].columns[0].expression == "upper(name)"
    assert by_name["ix_upper"].columns[0].dependent_columns == ()


async def test_system_checks_are_filtered():
    class NotNullCheckCatalog(FakeCatalog):
        def is_system_check(self, row, column_names):
            return row.definition.endswith("IS NOT NULL")

    catalog = NotNullCheckCatalog(
        {
            "customers": {
                "columns": ["id"],
                "checks": [CheckRow("sys_c001", '"ID" IS NOT NULL'), CheckRow("ck_positive", "id > 0")],
            }
        }
    )
    customers = await provider_for(catalog).get_table(Identifier.create_qualified("customers"))

    assert [check.name.local_name for check in customers.checks] == ["ck_positive"]


async def test_each_table_part_is_loaded_once_per_enumeration():
    catalog = shop_catalog(
        customers={
            "columns": ["id", "code", "name", "last_order_id"],
            "pk": ["id"],
            "fks": [fk("fk_customers_orders", "last_order_id", "orders", "id")],
        }
    )
    provider = provider_for(catalog)

    tables = [table async for table in provider.get_all_tables()]

    assert [table.name.local_name for table in tables] == ["customers", "orders"]
    for table_name in ("customers", "orders"):
        assert catalog.calls[("columns", table_name)] == 1
        assert catalog.calls[("primary_key", table_name)] == 1
        assert catalog.calls[("parent_keys", table_name)] == 1
        assert catalog.calls[("child_keys", table_name)] == 1


async def test_concurrent_loads_share_a_cache():
    catalog = shop_catalog()
    provider = provider_for(catalog)
    cache = provider.create_query_cache()

    first, second = await asyncio.gather(
        provider.load_table(Identifier.create_qualified("orders"), cache),
        provider.load_table(Identifier.create_qualified("ORDERS"), cache),
    )

    assert first == second
    assert catalog.calls[("columns", "orders")] == 1
    assert cache.computations["foreign keys"] >= 1


async def test_separate_calls_use_separate_caches():
    catalog = shop_catalog()
    provider = provider_for(catalog)

    first = await provider.get_table(Identifier.create_qualified("orders"))
    second = await provider.get_table(Identifier.create_qualified("orders"))

    assert first == second
    assert catalog.calls[("columns", "orders")] == 2


async def test_case_folding_resolution():
    class FoldingCatalog(FakeCatalog):
        comparer = ORDINAL
        resolver = PostgreSqlIdentifierResolutionStrategy()

    catalog = FoldingCatalog({"orders": {"columns": ["id"], "pk": ["id"]}})
    orders = await provider_for(catalog).get_table(Identifier.create_qualified("Orders"))

    assert orders is not None
    assert orders.name == name("orders")


async def test_resolved_name_keeps_requested_database():
    provider = provider_for(shop_catalog())
    orders = await provider.get_table(Identifier.create_qualified("sales", "dbo", "orders"))

    assert orders is not None
    assert orders.name == Identifier(database="sales", schema="dbo", local_name="orders")
    assert orders.parent_keys[0].parent_table == name("customers")


async def test_unknown_key_column_is_omitted_from_key(caplog):
    catalog = shop_catalog(
        customers={"columns": ["id", "code"], "pk": ["id", "legacy_id"], "uks": {"uq_customers_code": ["missing"]}},
    )

    with caplog.at_level(logging.DEBUG, logger="schematic_introspect.tables"):
        customers = await provider_for(catalog).get_table(Identifier.create_qualified("customers"))
        orders = await provider_for(catalog).get_table(Identifier.create_qualified("orders"))

    assert customers.primary_key.column_names == ("id",)
    assert customers.unique_keys == ()
    assert "Omitting unknown column legacy_id" in caplog.text
    assert orders.parent_keys[0].parent_key.column_names == ("id",)


async def test_cancelling_get_table_cancels_blocked_catalog_query():
    started = asyncio.Event()
    query_cancelled = asyncio.Event()

    class BlockingCatalog(FakeCatalog):
        async def table_columns(self, table):
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                query_cancelled.set()
                raise
            return []

    provider = provider_for(BlockingCatalog(shop_catalog().tables))
    task = asyncio.ensure_future(provider.get_table(Identifier.create_qualified("orders")))
    await started.wait()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.wait_for(query_cancelled.wait(), timeout=1)

    assert query_cancelled.is_set()
