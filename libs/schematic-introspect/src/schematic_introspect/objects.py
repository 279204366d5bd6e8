"""Sequence, synonym and routine reading.

Engines without a given object kind report nothing: ``get_*`` returns None
and ``get_all_*`` yields nothing.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

from schematic_core.identifier import Identifier, IdentifierDefaults
from schematic_core.schema import DatabaseRoutine, DatabaseSequence, DatabaseSynonym

from schematic_introspect.catalog.base import CatalogQueries
from schematic_introspect.catalog.rows import RoutineRow, SequenceRow, SynonymRow
from schematic_introspect.mapping import qualified_name, resolve_first, resolved_name

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")
ModelT = TypeVar("ModelT")


class CatalogObjectProvider(ABC, Generic[RowT, ModelT]):
    """Name resolution and enumeration shared by the schema-object providers."""

    kind: str = "object"

    def __init__(self, catalog: CatalogQueries, defaults: IdentifierDefaults) -> None:
        self.catalog = catalog
        self.defaults = defaults

    @property
    @abstractmethod
    def is_supported(self) -> bool: ...

    @abstractmethod
    async def _fetch_one(self, candidate: Identifier) -> RowT | None: ...

    @abstractmethod
    async def _fetch_all(self) -> list[RowT]: ...

    @abstractmethod
    def _name_parts(self, row: RowT) -> tuple[str | None, str]: ...

    @abstractmethod
    def _build(self, row: RowT, name: Identifier) -> ModelT: ...

    async def get(self, name: Identifier) -> ModelT | None:
        if name is None:
            raise ValueError(f"{self.kind} name is required")
        if not self.is_supported:
            return None
        found = await resolve_first(self.catalog.resolver, self.defaults, name, self._fetch_one)
        if found is None:
            logger.debug("%s %s not found", self.kind.capitalize(), name)
            return None
        candidate, row = found
        return self._build(row, resolved_name(candidate, *self._name_parts(row)))

    async def get_all(self) -> AsyncIterator[ModelT]:
        if not self.is_supported:
            return
        rows = await self._fetch_all()
        logger.info("Reading %d %s(s) from %s", len(rows), self.kind, self.catalog.dialect)
        for row in rows:
            yield self._build(row, qualified_name(self.defaults, *self._name_parts(row)))


class SequenceProvider(CatalogObjectProvider[SequenceRow, DatabaseSequence]):
    kind = "sequence"

    @property
    def is_supported(self) -> bool:
        return self.catalog.supports_sequences

    async def _fetch_one(self, candidate: Identifier) -> SequenceRow | None:
        return await self.catalog.sequence(candidate)

    async def _fetch_all(self) -> list[SequenceRow]:
        return await self.catalog.all_sequences()

    def _name_parts(self, row: SequenceRow) -> tuple[str | None, str]:
        return row.schema_name, row.sequence_name

    def _build(self, row: SequenceRow, name: Identifier) -> DatabaseSequence:
        return DatabaseSequence(
            name=name,
            start=row.start_value if row.start_value is not None else 1,
            increment=row.increment if row.increment is not None else 1,
            min_value=row.min_value,
            max_value=row.max_value,
            cycle=row.is_cycling,
            cache=row.cache_size,
        )


class SynonymProvider(CatalogObjectProvider[SynonymRow, DatabaseSynonym]):
    kind = "synonym"

    @property
    def is_supported(self) -> bool:
        return self.catalog.supports_synonyms

    async def _fetch_one(self, candidate: Identifier) -> SynonymRow | None:
        return await self.catalog.synonym(candidate)

    async def _fetch_all(self) -> list[SynonymRow]:
        return await self.catalog.all_synonyms()

    def _name_parts(self, row: SynonymRow) -> tuple[str | None, str]:
        return row.schema_name, row.synonym_name

    def _build(self, row: SynonymRow, name: Identifier) -> DatabaseSynonym:
        # Targets may live on another server or database; components left of a gap are dropped.
        server, database = row.target_server, row.target_database
        if row.target_schema is None:
            server = database = None
        elif database is None:
            server = None
        target = Identifier.create_qualified(server, database, row.target_schema, row.target_name)
        return DatabaseSynonym(
            name=name,
            target=target,
        )


class RoutineProvider(CatalogObjectProvider[RoutineRow, DatabaseRoutine]):
    kind = "routine"

    @property
    def is_supported(self) -> bool:
        return self.catalog.supports_routines

    async def _fetch_one(self, candidate: Identifier) -> RoutineRow | None:
        return await self.catalog.routine(candidate)

    async def _fetch_all(self) -> list[RoutineRow]:
        return await self.catalog.all_routines()

    def _name_parts(self, row: RoutineRow) -> tuple[str | None, str]:
        return row.schema_name, row.routine_name

    def _build(self, row: RoutineRow, name: Identifier) -> DatabaseRoutine:
        return DatabaseRoutine(
            name=name,
            definition=row.definition,
        )
