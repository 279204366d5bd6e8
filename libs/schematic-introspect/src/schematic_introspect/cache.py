"""Per-operation cache of table sub-results."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from schematic_core.caching import AsyncCache
from schematic_core.identifier import Identifier
from schematic_core.schema import DatabaseColumn, DatabaseKey, DatabaseRelationalKey

if TYPE_CHECKING:
    from schematic_introspect.tables import RelationalTableProvider


class TableQueryCache:
    """Memoizes name resolution and the table parts other tables depend on.

    One instance lives for one top-level operation (a single ``get_table``
    or one ``get_all_tables`` enumeration) and is then discarded, since the
    catalog may change between operations. Every entry is keyed by the
    dialect comparer, so ``orders`` and ``ORDERS`` share an entry on
    case-insensitive engines.

    Resolving a foreign key needs the parent table's keys and resolving a
    child key needs the child table's foreign keys. Routing both through
    this cache means tables that reference each other are each assembled
    once, with in-flight results shared instead of recomputed.
    """

    def __init__(self, provider: RelationalTableProvider) -> None:
        key_func = provider.catalog.comparer.key

        def cache(loader: Callable[..., Awaitable], name: str) -> AsyncCache:
            return AsyncCache(loader, key_func=key_func, name=name)

        self._resolved_names: AsyncCache[Identifier, Identifier | None, TableQueryCache] = cache(
            provider.resolve_table_name, "resolved table names"
        )
        self._columns: AsyncCache[Identifier, tuple[DatabaseColumn, ...], TableQueryCache] = cache(
            provider.load_columns, "columns"
        )
        self._primary_keys: AsyncCache[Identifier, DatabaseKey | None, TableQueryCache] = cache(
            provider.load_primary_key, "primary keys"
        )
        self._unique_keys: AsyncCache[Identifier, tuple[DatabaseKey, ...], TableQueryCache] = cache(
            provider.load_unique_keys, "unique keys"
        )
        self._foreign_keys: AsyncCache[Identifier, tuple[DatabaseRelationalKey, ...], TableQueryCache] = cache(
            provider.load_parent_keys, "foreign keys"
        )

    async def get_resolved_name(self, table_name: Identifier) -> Identifier | None:
        return await self._resolved_names.get(table_name, self)

    async def get_columns(self, table_name: Identifier) -> tuple[DatabaseColumn, ...]:
        return await self._columns.get(table_name, self)

    async def get_primary_key(self, table_name: Identifier) -> DatabaseKey | None:
        return await self._primary_keys.get(table_name, self)

    async def get_unique_keys(self, table_name: Identifier) -> tuple[DatabaseKey, ...]:
        return await self._unique_keys.get(table_name, self)

    async def get_foreign_keys(self, table_name: Identifier) -> tuple[DatabaseRelationalKey, ...]:
        """The relational keys where *table_name* is the child."""
        return await self._foreign_keys.get(table_name, self)

    @property
    def computations(self) -> dict[str, int]:
        """Number of underlying computations per cache, for diagnostics."""
        caches = (self._resolved_names, self._columns, self._primary_keys, self._unique_keys, self._foreign_keys)
        return {cache.name: cache.computations for cache in caches}
