"""Assembles relational tables from catalog rows."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence

from schematic_core.identifier import Identifier, IdentifierDefaults, NameLookup
from schematic_core.schema import (
    DatabaseCheckConstraint,
    DatabaseColumn,
    DatabaseIndex,
    DatabaseKey,
    DatabaseRelationalKey,
    DatabaseTrigger,
    IndexColumn,
    IndexColumnOrder,
    KeyType,
    ReferentialAction,
    RelationalDatabaseTable,
    TriggerEvent,
    TriggerTiming,
)

from schematic_introspect.cache import TableQueryCache
from schematic_introspect.catalog.base import CatalogQueries
from schematic_introspect.catalog.rows import ConstraintColumnRow, ForeignKeyRow, IndexColumnRow
from schematic_introspect.mapping import (
    build_column,
    column_name,
    group_rows,
    qualified_name,
    resolve_first,
    resolved_name,
)

logger = logging.getLogger(__name__)


def _key_name(name: str | None) -> Identifier | None:
    return Identifier(local_name=name) if name else None


class RelationalTableProvider:
    """Reads tables through a dialect catalog.

    Each public call owns a fresh :class:`TableQueryCache`, so a table and
    everything it references are read once per call and the result reflects
    the catalog at that moment. Foreign keys whose parent table, parent key
    or columns cannot be matched are left out of the result and logged at
    DEBUG level.
    """

    def __init__(self, catalog: CatalogQueries, defaults: IdentifierDefaults) -> None:
        self.catalog = catalog
        self.defaults = defaults
        self.comparer = catalog.comparer

    def qualify(self, name: Identifier) -> Identifier:
        return self.defaults.qualify(name)

    def create_query_cache(self) -> TableQueryCache:
        return TableQueryCache(self)

    async def get_table(self, table_name: Identifier) -> RelationalDatabaseTable | None:
        """Resolve *table_name* and assemble the table, or return None if it does not exist."""
        if table_name is None:
            raise ValueError("table_name is required")
        return await self.load_table(table_name, self.create_query_cache())

    async def get_all_tables(self) -> AsyncIterator[RelationalDatabaseTable]:
        """Yield every table in catalog order, sharing one cache across the enumeration."""
        cache = self.create_query_cache()
        rows = await self.catalog.all_table_names()
        logger.info("Reading %d table(s) from %s", len(rows), self.catalog.dialect)
        for row in rows:
            table = await self.load_table(qualified_name(self.defaults, row.schema_name, row.object_name), cache)
            if table is not None:
                yield table

    async def load_table(self, table_name: Identifier, cache: TableQueryCache) -> RelationalDatabaseTable | None:
        resolved = await cache.get_resolved_name(self.qualify(table_name))
        if resolved is None:
            logger.debug("Table %s not found", table_name)
            return None

        columns, primary_key, unique_keys, triggers = await asyncio.gather(
            cache.get_columns(resolved),
            cache.get_primary_key(resolved),
            cache.get_unique_keys(resolved),
            self.load_triggers(resolved),
        )
        lookup = NameLookup(columns, column_name, self.comparer)
        indexes, checks, parent_keys, child_keys = await asyncio.gather(
            self.load_indexes(resolved, lookup),
            self.load_checks(resolved, columns),
            cache.get_foreign_keys(resolved),
            self.load_child_keys(resolved, cache),
        )
        return RelationalDatabaseTable(
            name=resolved,
            columns=columns,
            primary_key=primary_key,
            unique_keys=unique_keys,
            indexes=indexes,
            checks=checks,
            triggers=triggers,
            parent_keys=parent_keys,
            child_keys=child_keys,
        )

    # -- cached loaders ------------------------------------------------------

    async def resolve_table_name(self, table_name: Identifier, cache: TableQueryCache) -> Identifier | None:
        """Try each resolution candidate in order; the first catalog hit wins."""
        found = await resolve_first(self.catalog.resolver, self.defaults, table_name, self.catalog.resolve_table_name)
        if found is None:
            return None
        candidate, row = found
        return resolved_name(candidate, row.schema_name, row.object_name)

    async def load_columns(self, table_name: Identifier, cache: TableQueryCache) -> tuple[DatabaseColumn, ...]:
        rows = await self.catalog.table_columns(table_name)
        return tuple(build_column(row) for row in rows)

    async def load_primary_key(self, table_name: Identifier, cache: TableQueryCache) -> DatabaseKey | None:
        rows = await self.catalog.primary_key_columns(table_name)
        if not rows:
            return None
        lookup = NameLookup(await cache.get_columns(table_name), column_name, self.comparer)
        groups = group_rows(rows, lambda row: row.constraint_id)
        return self._build_key(table_name, next(iter(groups.values())), KeyType.PRIMARY, lookup)

    async def load_unique_keys(self, table_name: Identifier, cache: TableQueryCache) -> tuple[DatabaseKey, ...]:
        rows = await self.catalog.unique_key_columns(table_name)
        if not rows:
            return ()
        lookup = NameLookup(await cache.get_columns(table_name), column_name, self.comparer)
        keys = []
        for group in group_rows(rows, lambda row: row.constraint_id or row.constraint_name).values():
            key = self._build_key(table_name, group, KeyType.UNIQUE, lookup)
            if key is not None:
                keys.append(key)
        return tuple(keys)

    async def load_parent_keys(
        self, table_name: Identifier, cache: TableQueryCache
    ) -> tuple[DatabaseRelationalKey, ...]:
        """Build the foreign keys declared on *table_name*."""
        rows = await self.catalog.parent_key_columns(table_name)
        if not rows:
            return ()
        lookup = NameLookup(await cache.get_columns(table_name), column_name, self.comparer)
        result = []
        for group in group_rows(rows, lambda row: row.constraint_id).values():
            group.sort(key=lambda row: row.column_position)
            relational_key = await self._build_parent_key(table_name, group, lookup, cache)
            if relational_key is not None:
                result.append(relational_key)
        return tuple(result)

    # -- uncached parts ------------------------------------------------------

    async def load_child_keys(
        self, table_name: Identifier, cache: TableQueryCache
    ) -> tuple[DatabaseRelationalKey, ...]:
        """Find the foreign keys on other tables that reference *table_name*.

        Each one is taken from the referencing table's own foreign keys, so
        both sides of a relationship describe it identically.
        """
        rows = await self.catalog.child_key_columns(table_name)
        result = []
        groups = group_rows(rows, lambda row: (row.child_schema, row.child_table, row.constraint_id))
        for group in groups.values():
            group.sort(key=lambda row: row.column_position)
            first = group[0]
            child_name = await cache.get_resolved_name(qualified_name(self.defaults, first.child_schema, first.child_table))
            if child_name is None:
                self._log_dropped(first.child_key_name, first.child_table, "referencing table was not found")
                continue

            candidates = [
                fk for fk in await cache.get_foreign_keys(child_name) if self.comparer.equals(fk.parent_table, table_name)
            ]
            match = self._match_child_key(candidates, first.child_key_name, [row.child_column_name for row in group])
            if match is None:
                self._log_dropped(first.child_key_name, child_name, f"no matching foreign key references {table_name}")
                continue

            result.append(
                DatabaseRelationalKey(
                    child_table=match.child_table,
                    child_key=match.child_key,
                    parent_table=table_name,
                    parent_key=match.parent_key,
                    update_action=match.update_action,
                    delete_action=match.delete_action,
                )
            )
        return tuple(result)

    async def load_indexes(
        self, table_name: Identifier, lookup: NameLookup[DatabaseColumn]
    ) -> tuple[DatabaseIndex, ...]:
        rows = await self.catalog.index_columns(table_name)
        indexes = []
        for index_name, group in group_rows(rows, lambda row: row.index_name).items():
            index = self._build_index(index_name, group, lookup)
            if index is None:
                logger.debug("Skipping index %s on %s: no key columns", index_name, table_name)
                continue
            indexes.append(index)
        return tuple(indexes)

    async def load_checks(
        self, table_name: Identifier, columns: Sequence[DatabaseColumn]
    ) -> tuple[DatabaseCheckConstraint, ...]:
        rows = await self.catalog.check_constraints(table_name)
        column_names = [column_name(column) for column in columns]
        return tuple(
            DatabaseCheckConstraint(
                name=_key_name(row.constraint_name),
                definition=row.definition,
                is_enabled=row.is_enabled,
            )
            for row in rows
            if not self.catalog.is_system_check(row, column_names)
        )

    async def load_triggers(self, table_name: Identifier) -> tuple[DatabaseTrigger, ...]:
        rows = await self.catalog.triggers(table_name)
        return tuple(
            DatabaseTrigger(
                name=table_name.with_local_name(row.trigger_name),
                definition=row.definition,
                timing=TriggerTiming.parse(row.timing, table_name=table_name),
                events=TriggerEvent.parse(row.events, table_name=table_name),
                is_enabled=row.is_enabled,
            )
            for row in rows
        )

    # -- helpers -------------------------------------------------------------

    def _build_key(
        self,
        table_name: Identifier,
        rows: list[ConstraintColumnRow],
        key_type: KeyType,
        lookup: NameLookup[DatabaseColumn],
    ) -> DatabaseKey | None:
        rows = sorted(rows, key=lambda row: row.column_position)
        columns = []
        for row in rows:
            column = lookup.get(row.column_name)
            if column is None:
                logger.debug(
                    "Omitting unknown column %s from %s key %s on %s",
                    row.column_name,
                    key_type.value,
                    rows[0].constraint_name,
                    table_name,
                )
                continue
            columns.append(column)
        if not columns:
            logger.debug("Skipping %s key %s on %s: no known columns", key_type.value, rows[0].constraint_name, table_name)
            return None
        return DatabaseKey(
            name=_key_name(rows[0].constraint_name),
            key_type=key_type,
            columns=tuple(columns),
            is_enabled=rows[0].is_enabled,
        )

    def _build_index(
        self, index_name: str, rows: list[IndexColumnRow], lookup: NameLookup[DatabaseColumn]
    ) -> DatabaseIndex | None:
        rows = sorted(rows, key=lambda row: row.column_position)
        key_columns = []
        included_columns = []
        for row in rows:
            column = lookup.get(row.column_name)
            if row.is_included:
                if column is not None:
                    included_columns.append(column)
                continue
            expression = row.expression or row.column_name
            if not expression:
                continue
            key_columns.append(
                IndexColumn(
                    expression=expression,
                    dependent_columns=(column,) if column is not None else (),
                    order=IndexColumnOrder.DESCENDING if row.is_descending else IndexColumnOrder.ASCENDING,
                )
            )
        if not key_columns:
            return None
        return DatabaseIndex(
            name=Identifier(local_name=index_name),
            is_unique=rows[0].is_unique,
            columns=tuple(key_columns),
            included_columns=tuple(included_columns),
            is_enabled=rows[0].is_enabled,
        )

    async def _build_parent_key(
        self,
        table_name: Identifier,
        rows: list[ForeignKeyRow],
        lookup: NameLookup[DatabaseColumn],
        cache: TableQueryCache,
    ) -> DatabaseRelationalKey | None:
        first = rows[0]
        child_columns = self._lookup_columns(lookup, [row.column_name for row in rows])
        if child_columns is None:
            self._log_dropped(first.constraint_name, table_name, "foreign key column not found")
            return None

        parent_name = await cache.get_resolved_name(qualified_name(self.defaults, first.parent_schema, first.parent_table))
        if parent_name is None:
            self._log_dropped(first.constraint_name, table_name, f"parent table {first.parent_table} not found")
            return None

        parent_columns = [row.parent_column_name for row in rows]
        parent_key = await self._find_parent_key(parent_name, first, parent_columns, cache)
        if parent_key is None:
            self._log_dropped(first.constraint_name, table_name, f"referenced key on {parent_name} not found")
            return None
        if len(parent_key.columns) != len(child_columns):
            self._log_dropped(
                first.constraint_name,
                table_name,
                f"{len(child_columns)} column(s) but the referenced key has {len(parent_key.columns)}",
            )
            return None

        return DatabaseRelationalKey(
            child_table=table_name,
            child_key=DatabaseKey(
                name=_key_name(first.constraint_name),
                key_type=KeyType.FOREIGN,
                columns=child_columns,
                is_enabled=first.is_enabled,
            ),
            parent_table=parent_name,
            parent_key=parent_key,
            update_action=ReferentialAction.parse(first.update_action, table_name=table_name),
            delete_action=ReferentialAction.parse(first.delete_action, table_name=table_name),
        )

    async def _find_parent_key(
        self,
        parent_name: Identifier,
        row: ForeignKeyRow,
        parent_columns: list[str | None],
        cache: TableQueryCache,
    ) -> DatabaseKey | None:
        """Pick the referenced key by type, then by name, then by column list."""
        if row.parent_key_type == KeyType.PRIMARY:
            return await cache.get_primary_key(parent_name)

        unique_keys = await cache.get_unique_keys(parent_name)
        if row.parent_key_type == KeyType.UNIQUE and row.parent_key_name:
            return self._match_by_name(unique_keys, row.parent_key_name)

        primary_key = await cache.get_primary_key(parent_name)
        candidates = ([primary_key] if primary_key is not None else []) + list(unique_keys)
        if row.parent_key_name:
            named = self._match_by_name(candidates, row.parent_key_name)
            if named is not None:
                return named
        if all(parent_columns):
            return self._match_by_columns(candidates, parent_columns)  # type: ignore[arg-type]
        return None

    def _match_child_key(
        self, candidates: list[DatabaseRelationalKey], key_name: str | None, column_names: list[str]
    ) -> DatabaseRelationalKey | None:
        if key_name:
            wanted = self.comparer.name_key(key_name)
            for candidate in candidates:
                name = candidate.child_key.name
                if name is not None and self.comparer.name_key(name.local_name) == wanted:
                    return candidate
        wanted_columns = [self.comparer.name_key(name) for name in column_names]
        for candidate in candidates:
            if [self.comparer.name_key(name) for name in candidate.child_key.column_names] == wanted_columns:
                return candidate
        return None

    def _match_by_name(self, keys: Sequence[DatabaseKey], name: str) -> DatabaseKey | None:
        wanted = self.comparer.name_key(name)
        for key in keys:
            if key.name is not None and self.comparer.name_key(key.name.local_name) == wanted:
                return key
        return None

    def _match_by_columns(self, keys: Sequence[DatabaseKey], column_names: list[str]) -> DatabaseKey | None:
        wanted = [self.comparer.name_key(name) for name in column_names]
        for key in keys:
            if [self.comparer.name_key(name) for name in key.column_names] == wanted:
                return key
        return None

    @staticmethod
    def _lookup_columns(
        lookup: NameLookup[DatabaseColumn], names: list[str]
    ) -> tuple[DatabaseColumn, ...] | None:
        columns = []
        for name in names:
            column = lookup.get(name)
            if column is None:
                return None
            columns.append(column)
        return tuple(columns) if columns else None

    @staticmethod
    def _log_dropped(key_name: str | None, table_name: Identifier | str, reason: str) -> None:
        logger.debug("Dropping foreign key %s on %s: %s", key_name or "<unnamed>", table_name, reason)
