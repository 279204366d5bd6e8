"""View reading."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from schematic_core.identifier import Identifier, IdentifierDefaults
from schematic_core.schema import DatabaseView

from schematic_introspect.catalog.base import CatalogQueries
from schematic_introspect.mapping import build_column, qualified_name, resolve_first, resolved_name

logger = logging.getLogger(__name__)


class RelationalViewProvider:
    """Reads views through a dialect catalog, resolving names like tables."""

    def __init__(self, catalog: CatalogQueries, defaults: IdentifierDefaults) -> None:
        self.catalog = catalog
        self.defaults = defaults

    async def get_view(self, view_name: Identifier) -> DatabaseView | None:
        if view_name is None:
            raise ValueError("view_name is required")
        resolved = await self.resolve_view_name(view_name)
        if resolved is None:
            logger.debug("View %s not found", view_name)
            return None
        return await self.load_view(resolved)

    async def get_all_views(self) -> AsyncIterator[DatabaseView]:
        rows = await self.catalog.all_view_names()
        logger.info("Reading %d view(s) from %s", len(rows), self.catalog.dialect)
        for row in rows:
            view = await self.load_view(qualified_name(self.defaults, row.schema_name, row.object_name))
            if view is not None:
                yield view

    async def resolve_view_name(self, view_name: Identifier) -> Identifier | None:
        found = await resolve_first(self.catalog.resolver, self.defaults, view_name, self.catalog.resolve_view_name)
        if found is None:
            return None
        candidate, row = found
        return resolved_name(candidate, row.schema_name, row.object_name)

    async def load_view(self, view_name: Identifier) -> DatabaseView | None:
        definition, column_rows = await asyncio.gather(
            self.catalog.view_definition(view_name),
            self.catalog.view_columns(view_name),
        )
        if definition is None:
            return None
        return DatabaseView(
            name=view_name,
            definition=definition.definition,
            columns=tuple(build_column(row) for row in column_rows),
            is_materialized=definition.is_materialized,
        )
