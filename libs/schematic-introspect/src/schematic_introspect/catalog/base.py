"""The dialect strategy: catalog queries, row mapping, name comparison and resolution.

A :class:`CatalogQueries` implementation is a pure I/O adapter. It runs one
query per entity kind, maps the raw rows into the fixed row types in
:mod:`schematic_introspect.catalog.rows` and never joins rows across
queries; that is the assembler's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar

from schematic_core.identifier import ORDINAL, Identifier, IdentifierComparer, IdentifierDefaults
from schematic_core.resolution import DefaultIdentifierResolutionStrategy, IdentifierResolutionStrategy

from schematic_introspect.catalog.rows import (
    CheckRow,
    ChildKeyRow,
    ColumnRow,
    ConstraintColumnRow,
    ForeignKeyRow,
    IndexColumnRow,
    QualifiedNameRow,
    RoutineRow,
    SequenceRow,
    SynonymRow,
    TriggerRow,
    ViewRow,
    as_str,
)
from schematic_introspect.connection import SchematicConnection

R = TypeVar("R")


def object_params(name: Identifier) -> dict[str, Any]:
    """Bind parameters addressing one schema-scoped object."""
    return {"schema_name": name.schema, "object_name": name.local_name}


class CatalogQueries(ABC):
    """Catalog access for one database engine.

    Table-scoped methods receive an already resolved identifier; only its
    schema and local name are used.
    """

    dialect: ClassVar[str]
    comparer: ClassVar[IdentifierComparer] = ORDINAL
    resolver: ClassVar[IdentifierResolutionStrategy] = DefaultIdentifierResolutionStrategy()

    supports_sequences: ClassVar[bool] = False
    supports_synonyms: ClassVar[bool] = False
    supports_routines: ClassVar[bool] = False

    def __init__(self, connection: SchematicConnection) -> None:
        self.connection = connection

    # -- defaults ----------------------------------------------------------

    @abstractmethod
    async def get_identifier_defaults(self) -> IdentifierDefaults:
        """Discover the engine's implicit server, database and schema."""

    # -- tables ------------------------------------------------------------

    @abstractmethod
    async def all_table_names(self) -> list[QualifiedNameRow]: ...

    @abstractmethod
    async def resolve_table_name(self, candidate: Identifier) -> QualifiedNameRow | None:
        """Return the catalog's name for *candidate* if that exact table exists."""

    @abstractmethod
    async def table_columns(self, table: Identifier) -> list[ColumnRow]: ...

    @abstractmethod
    async def primary_key_columns(self, table: Identifier) -> list[ConstraintColumnRow]: ...

    @abstractmethod
    async def unique_key_columns(self, table: Identifier) -> list[ConstraintColumnRow]: ...

    @abstractmethod
    async def index_columns(self, table: Identifier) -> list[IndexColumnRow]: ...

    @abstractmethod
    async def check_constraints(self, table: Identifier) -> list[CheckRow]: ...

    @abstractmethod
    async def triggers(self, table: Identifier) -> list[TriggerRow]: ...

    @abstractmethod
    async def parent_key_columns(self, table: Identifier) -> list[ForeignKeyRow]:
        """Foreign key columns declared on *table*, one row per column."""

    @abstractmethod
    async def child_key_columns(self, table: Identifier) -> list[ChildKeyRow]:
        """Foreign key columns on other tables that reference *table*."""

    def is_system_check(self, row: CheckRow, column_names: Sequence[str]) -> bool:
        """Whether a check constraint is engine bookkeeping rather than user-defined."""
        return False

    # -- views -------------------------------------------------------------

    @abstractmethod
    async def all_view_names(self) -> list[QualifiedNameRow]: ...

    @abstractmethod
    async def resolve_view_name(self, candidate: Identifier) -> QualifiedNameRow | None: ...

    @abstractmethod
    async def view_definition(self, view: Identifier) -> ViewRow | None: ...

    @abstractmethod
    async def view_columns(self, view: Identifier) -> list[ColumnRow]: ...

    # -- other objects -----------------------------------------------------

    async def all_sequences(self) -> list[SequenceRow]:
        return []

    async def sequence(self, candidate: Identifier) -> SequenceRow | None:
        return None

    async def all_synonyms(self) -> list[SynonymRow]:
        return []

    async def synonym(self, candidate: Identifier) -> SynonymRow | None:
        return None

    async def all_routines(self) -> list[RoutineRow]:
        return []

    async def routine(self, candidate: Identifier) -> RoutineRow | None:
        return None

    # -- helpers -----------------------------------------------------------

    async def fetch(
        self,
        sql: str,
        params: dict[str, Any] | None,
        mapper: Callable[[Mapping[str, Any]], R],
    ) -> list[R]:
        return [mapper(row) for row in await self.connection.query(sql, params)]

    async def fetch_one(
        self,
        sql: str,
        params: dict[str, Any] | None,
        mapper: Callable[[Mapping[str, Any]], R],
    ) -> R | None:
        row = await self.connection.query_first_or_none(sql, params)
        return mapper(row) if row is not None else None


@dataclass(frozen=True)
class CatalogStatements:
    """The SQL text one engine uses for every catalog query.

    Object-scoped statements bind ``:schema_name`` and ``:object_name``.
    Statements left as ``None`` are unsupported by the engine. The
    ``*_filter`` statements are templates with a ``{filter}`` slot so the
    same text serves both "all" and "by name" lookups.
    """

    identifier_defaults: str
    table_names: str
    table_name: str
    columns: str
    primary_key: str
    unique_keys: str
    indexes: str
    checks: str
    triggers: str
    parent_keys: str
    child_keys: str
    view_names: str
    view_name: str
    view_definition: str
    view_columns: str
    sequences: str | None = None
    synonyms: str | None = None
    routines: str | None = None
    sequence_filter: str = ""
    synonym_filter: str = ""
    routine_filter: str = ""


class StatementCatalog(CatalogQueries):
    """A catalog whose every query is a fixed SQL statement.

    Subclasses supply ``statements`` plus their comparer and resolver.
    """

    statements: ClassVar[CatalogStatements]

    @property
    def supports_sequences(self) -> bool:  # type: ignore[override]
        return self.statements.sequences is not None

    @property
    def supports_synonyms(self) -> bool:  # type: ignore[override]
        return self.statements.synonyms is not None

    @property
    def supports_routines(self) -> bool:  # type: ignore[override]
        return self.statements.routines is not None

    async def get_identifier_defaults(self) -> IdentifierDefaults:
        row = await self.connection.query_first_or_none(self.statements.identifier_defaults)
        if row is None:
            return IdentifierDefaults()
        return IdentifierDefaults(
            server=as_str(row.get("server_name")) or None,
            database=as_str(row.get("database_name")) or None,
            schema=as_str(row.get("schema_name")) or None,
        )

    async def all_table_names(self) -> list[QualifiedNameRow]:
        return await self.fetch(self.statements.table_names, None, QualifiedNameRow.from_mapping)

    async def resolve_table_name(self, candidate: Identifier) -> QualifiedNameRow | None:
        return await self.fetch_one(self.statements.table_name, object_params(candidate), QualifiedNameRow.from_mapping)

    async def table_columns(self, table: Identifier) -> list[ColumnRow]:
        return await self.fetch(self.statements.columns, object_params(table), ColumnRow.from_mapping)

    async def primary_key_columns(self, table: Identifier) -> list[ConstraintColumnRow]:
        return await self.fetch(self.statements.primary_key, object_params(table), ConstraintColumnRow.from_mapping)

    async def unique_key_columns(self, table: Identifier) -> list[ConstraintColumnRow]:
        return await self.fetch(self.statements.unique_keys, object_params(table), ConstraintColumnRow.from_mapping)

    async def index_columns(self, table: Identifier) -> list[IndexColumnRow]:
        return await self.fetch(self.statements.indexes, object_params(table), IndexColumnRow.from_mapping)

    async def check_constraints(self, table: Identifier) -> list[CheckRow]:
        return await self.fetch(self.statements.checks, object_params(table), CheckRow.from_mapping)

    async def triggers(self, table: Identifier) -> list[TriggerRow]:
        return await self.fetch(self.statements.triggers, object_params(table), TriggerRow.from_mapping)

    async def parent_key_columns(self, table: Identifier) -> list[ForeignKeyRow]:
        return await self.fetch(self.statements.parent_keys, object_params(table), ForeignKeyRow.from_mapping)

    async def child_key_columns(self, table: Identifier) -> list[ChildKeyRow]:
        return await self.fetch(self.statements.child_keys, object_params(table), ChildKeyRow.from_mapping)

    async def all_view_names(self) -> list[QualifiedNameRow]:
        return await self.fetch(self.statements.view_names, None, QualifiedNameRow.from_mapping)

    async def resolve_view_name(self, candidate: Identifier) -> QualifiedNameRow | None:
        return await self.fetch_one(self.statements.view_name, object_params(candidate), QualifiedNameRow.from_mapping)

    async def view_definition(self, view: Identifier) -> ViewRow | None:
        return await self.fetch_one(self.statements.view_definition, object_params(view), ViewRow.from_mapping)

    async def view_columns(self, view: Identifier) -> list[ColumnRow]:
        return await self.fetch(self.statements.view_columns, object_params(view), ColumnRow.from_mapping)

    async def all_sequences(self) -> list[SequenceRow]:
        if self.statements.sequences is None:
            return []
        sql = self.statements.sequences.format(filter="")
        return await self.fetch(sql, None, SequenceRow.from_mapping)

    async def sequence(self, candidate: Identifier) -> SequenceRow | None:
        if self.statements.sequences is None:
            return None
        sql = self.statements.sequences.format(filter=self.statements.sequence_filter)
        return await self.fetch_one(sql, object_params(candidate), SequenceRow.from_mapping)

    async def all_synonyms(self) -> list[SynonymRow]:
        if self.statements.synonyms is None:
            return []
        sql = self.statements.synonyms.format(filter="")
        return await self.fetch(sql, None, SynonymRow.from_mapping)

    async def synonym(self, candidate: Identifier) -> SynonymRow | None:
        if self.statements.synonyms is None:
            return None
        sql = self.statements.synonyms.format(filter=self.statements.synonym_filter)
        return await self.fetch_one(sql, object_params(candidate), SynonymRow.from_mapping)

    async def all_routines(self) -> list[RoutineRow]:
        if self.statements.routines is None:
            return []
        sql = self.statements.routines.format(filter="")
        return await self.fetch(sql, None, RoutineRow.from_mapping)

    async def routine(self, candidate: Identifier) -> RoutineRow | None:
        if self.statements.routines is None:
            return None
        sql = self.statements.routines.format(filter=self.statements.routine_filter)
        return await self.fetch_one(sql, object_params(candidate), RoutineRow.from_mapping)
