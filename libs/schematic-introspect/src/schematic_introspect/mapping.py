"""Row-to-model mapping and name resolution shared by the providers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable, Iterable
from typing import TypeVar

from schematic_core.identifier import Identifier, IdentifierDefaults
from schematic_core.resolution import IdentifierResolutionStrategy
from schematic_core.schema import AutoIncrement, ColumnType, DatabaseColumn, DatabaseComputedColumn

from schematic_introspect.catalog.rows import ColumnRow

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def qualified_name(defaults: IdentifierDefaults, schema: str | None, local_name: str) -> Identifier:
    """Build the canonical identifier for an object the catalog reported by schema and name."""
    return defaults.qualify(Identifier.create_qualified(schema, local_name))


async def resolve_first(
    resolver: IdentifierResolutionStrategy,
    defaults: IdentifierDefaults,
    name: Identifier,
    fetch: Callable[[Identifier], Awaitable[T | None]],
) -> tuple[Identifier, T] | None:
    """Try each resolution candidate for *name* in order.

    Returns the first qualified candidate the catalog knows together with the
    row it reported, or None when no candidate matches.
    """
    for candidate in resolver.get_resolution_order(defaults.qualify(name)):
        qualified = defaults.qualify(candidate)
        row = await fetch(qualified)
        if row is not None:
            return qualified, row
    return None


def resolved_name(candidate: Identifier, schema: str | None, local_name: str) -> Identifier:
    """Name reported by the catalog for *candidate*, keeping the candidate's server and database."""
    if schema is None:
        return candidate.with_local_name(local_name)
    return Identifier(candidate.server, candidate.database, schema, local_name)


def group_rows(rows: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group rows by *key*, keeping first-seen group order and row order within groups."""
    groups: dict[K, list[T]] = {}
    for row in rows:
        groups.setdefault(key(row), []).append(row)
    return groups


def column_name(column: DatabaseColumn) -> str:
    return column.name.local_name


def build_column(row: ColumnRow) -> DatabaseColumn:
    column_type = ColumnType(
        type_name=Identifier.create_qualified(row.type_schema, row.type_name),
        max_length=row.max_length,
        precision=row.numeric_precision,
        scale=row.numeric_scale,
        collation=row.collation_name,
    )
    auto_increment = None
    if row.identity_seed is not None or row.identity_increment is not None:
        auto_increment = AutoIncrement(
            seed=row.identity_seed if row.identity_seed is not None else 1,
            increment=row.identity_increment if row.identity_increment is not None else 1,
        )

    name = Identifier(local_name=row.column_name)
    if row.is_computed:
        return DatabaseComputedColumn(
            name=name,
            type=column_type,
            is_nullable=row.is_nullable,
            default_value=row.default_value,
            auto_increment=auto_increment,
            definition=row.computed_definition,
        )
    return DatabaseColumn(
        name=name,
        type=column_type,
        is_nullable=row.is_nullable,
        default_value=row.default_value,
        auto_increment=auto_increment,
    )
