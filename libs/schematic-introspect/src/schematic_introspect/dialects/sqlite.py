"""SQLite catalog queries over ``sqlite_master`` and the table-valued pragmas.

SQLite records constraint names only in the original DDL text, which is not
parsed here, so primary, unique and foreign keys come back unnamed and check
constraints are not reported.
"""

from __future__ import annotations

import re
from typing import Any

from schematic_core.identifier import ORDINAL_IGNORE_CASE, Identifier, IdentifierDefaults
from schematic_core.schema import KeyType

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
    ViewRow,
    as_bool,
    as_int,
    as_str,
)

_USER_OBJECT = "name not like 'sqlite\\_%' escape '\\'"

# VARCHAR(50), DECIMAL(10, 2), UNSIGNED BIG INT
_DECLARED_TYPE_RE = re.compile(
    r"^\s*(?P<name>[^(]*?)\s*(?:\(\s*(?P<first>[+-]?\d+)\s*(?:,\s*(?P<second>[+-]?\d+)\s*)?\))?\s*$"
)

# Matches the trigger header up to the table name: [BEFORE|AFTER|INSTEAD OF] event [OF cols] ON
_TRIGGER_HEADER_RE = re.compile(
    r"\bTRIGGER\b.*?(?P<timing>\bBEFORE\b|\bAFTER\b|\bINSTEAD\s+OF\b)?\s*"
    r"\b(?P<event>INSERT|UPDATE|DELETE)\b(?:\s+OF\b.*?)?\s+ON\b",
    re.IGNORECASE | re.DOTALL,
)

_AUTOINCREMENT_RE = re.compile(r"\bAUTOINCREMENT\b", re.IGNORECASE)

# pragma_table_xinfo.hidden: 2 = generated virtual, 3 = generated stored
_GENERATED_HIDDEN = (2, 3)


def quote_schema(schema: str | None) -> str:
    value = schema or "main"
    return '"' + value.replace('"', '""') + '"'


def parse_declared_type(declared: str | None) -> tuple[str, int | None, int | None, int | None]:
    """Split a declared column type into (name, max_length, precision, scale).

    Columns declared without a type have BLOB affinity.
    """
    match = _DECLARED_TYPE_RE.match(declared or "")
    if match is None or not match.group("name"):
        return ("BLOB", None, None, None)
    name = " ".join(match.group("name").split())
    first = as_int(match.group("first"))
    second = as_int(match.group("second"))
    if second is not None:
        return (name, None, first, second)
    return (name, first, None, None)


def parse_trigger_header(definition: str) -> tuple[str, str] | None:
    """Return (timing, event) from ``CREATE TRIGGER`` text; timing defaults to BEFORE."""
    match = _TRIGGER_HEADER_RE.search(definition)
    if match is None:
        return None
    timing = " ".join((match.group("timing") or "BEFORE").split()).upper()
    return (timing, match.group("event").upper())


class SqliteCatalog(CatalogQueries):
    """SQLite. Identifiers compare case-insensitively; attached databases act as schemas."""

    dialect = "sqlite"
    comparer = ORDINAL_IGNORE_CASE

    async def get_identifier_defaults(self) -> IdentifierDefaults:
        return IdentifierDefaults(schema="main")

    async def _schemas(self) -> list[str]:
        rows = await self.connection.query("select name from pragma_database_list order by seq")
        return [str(row["name"]) for row in rows]

    async def _resolve_schema(self, schema: str | None) -> str | None:
        if schema is None:
            return None
        for name in await self._schemas():
            if self.comparer.name_key(name) == self.comparer.name_key(schema):
                return name
        return None

    async def _object_names(self, object_type: str) -> list[QualifiedNameRow]:
        result: list[QualifiedNameRow] = []
        for schema in await self._schemas():
            rows = await self.connection.query(
                f"select name from {quote_schema(schema)}.sqlite_master "
                f"where type = :object_type and {_USER_OBJECT} order by name",
                {"object_type": object_type},
            )
            result.extend(QualifiedNameRow(schema_name=schema, object_name=str(row["name"])) for row in rows)
        return result

    async def _resolve_object(self, candidate: Identifier, object_type: str) -> QualifiedNameRow | None:
        schema = await self._resolve_schema(candidate.schema)
        if schema is None:
            return None
        row = await self.connection.query_first_or_none(
            f"select name from {quote_schema(schema)}.sqlite_master "
            f"where type = :object_type and name = :object_name collate nocase and {_USER_OBJECT}",
            {"object_type": object_type, "object_name": candidate.local_name},
        )
        if row is None:
            return None
        return QualifiedNameRow(schema_name=schema, object_name=str(row["name"]))

    async def _definition(self, name: Identifier, object_type: str) -> str | None:
        sql = await self.connection.query_scalar(
            f"select sql from {quote_schema(name.schema)}.sqlite_master where type = :object_type and name = :object_name",
            {"object_type": object_type, "object_name": name.local_name},
        )
        return as_str(sql)

    async def _columns(self, name: Identifier, object_type: str) -> list[ColumnRow]:
        rows = await self.connection.query(
            "select cid, name, type, \"notnull\", dflt_value, pk, hidden "
            "from pragma_table_xinfo(:object_name, :schema_name) order by cid",
            {"object_name": name.local_name, "schema_name": name.schema or "main"},
        )
        pk_count = sum(1 for row in rows if as_int(row["pk"]))
        has_autoincrement = False
        if object_type == "table" and pk_count == 1:
            has_autoincrement = bool(_AUTOINCREMENT_RE.search(await self._definition(name, "table") or ""))

        columns: list[ColumnRow] = []
        for row in rows:
            type_name, max_length, precision, scale = parse_declared_type(as_str(row["type"]))
            is_rowid_alias = bool(as_int(row["pk"])) and pk_count == 1 and type_name.upper() == "INTEGER"
            identity = 1 if has_autoincrement and is_rowid_alias else None
            columns.append(
                ColumnRow(
                    column_name=str(row["name"]),
                    type_schema=None,
                    type_name=type_name,
                    max_length=max_length,
                    numeric_precision=precision,
                    numeric_scale=scale,
                    is_nullable=not as_bool(row["notnull"]),
                    default_value=as_str(row["dflt_value"]),
                    is_computed=as_int(row["hidden"]) in _GENERATED_HIDDEN,
                    identity_seed=identity,
                    identity_increment=identity,
                )
            )
        return columns

    # -- tables ------------------------------------------------------------

    async def all_table_names(self) -> list[QualifiedNameRow]:
        return await self._object_names("table")

    async def resolve_table_name(self, candidate: Identifier) -> QualifiedNameRow | None:
        return await self._resolve_object(candidate, "table")

    async def table_columns(self, table: Identifier) -> list[ColumnRow]:
        return await self._columns(table, "table")

    async def primary_key_columns(self, table: Identifier) -> list[ConstraintColumnRow]:
        rows = await self.connection.query(
            "select name, pk from pragma_table_xinfo(:object_name, :schema_name) where pk > 0 order by pk",
            {"object_name": table.local_name, "schema_name": table.schema or "main"},
        )
        return [
            ConstraintColumnRow(
                constraint_id=None,
                constraint_name=None,
                column_name=str(row["name"]),
                column_position=int(row["pk"]),
            )
            for row in rows
        ]

    async def unique_key_columns(self, table: Identifier) -> list[ConstraintColumnRow]:
        rows = await self.connection.query(
            "select il.name as index_name, ii.name as column_name, ii.seqno as seqno "
            "from pragma_index_list(:object_name, :schema_name) il "
            "cross join pragma_index_info(il.name, :schema_name) ii "
            "where il.origin = 'u' "
            "order by il.seq, ii.seqno",
            {"object_name": table.local_name, "schema_name": table.schema or "main"},
        )
        return [
            ConstraintColumnRow(
                constraint_id=str(row["index_name"]),
                constraint_name=None,
                column_name=str(row["column_name"]),
                column_position=int(row["seqno"]) + 1,
            )
            for row in rows
        ]

    async def index_columns(self, table: Identifier) -> list[IndexColumnRow]:
        rows = await self.connection.query(
            'select il.name as index_name, il."unique" as is_unique, ix.name as column_name, '
            'ix.cid as cid, ix.seqno as seqno, ix."desc" as is_descending '
            "from pragma_index_list(:object_name, :schema_name) il "
            "cross join pragma_index_xinfo(il.name, :schema_name) ix "
            "where il.origin = 'c' and ix.\"key\" = 1 "
            "order by il.name, ix.seqno",
            {"object_name": table.local_name, "schema_name": table.schema or "main"},
        )
        return [
            IndexColumnRow(
                index_name=str(row["index_name"]),
                column_position=int(row["seqno"]) + 1,
                column_name=as_str(row["column_name"]),
                expression="<expression>" if as_int(row["cid"]) == -2 else None,
                is_unique=as_bool(row["is_unique"]),
                is_descending=as_bool(row["is_descending"]),
            )
            for row in rows
        ]

    async def check_constraints(self, table: Identifier) -> list[CheckRow]:
        return []

    async def triggers(self, table: Identifier) -> list[TriggerRow]:
        rows = await self.connection.query(
            f"select name, sql from {quote_schema(table.schema)}.sqlite_master "
            "where type = 'trigger' and tbl_name = :object_name collate nocase order by name",
            {"object_name": table.local_name},
        )
        result: list[TriggerRow] = []
        for row in rows:
            definition = as_str(row["sql"]) or ""
            header = parse_trigger_header(definition)
            timing, events = header if header is not None else ("", "")
            result.append(
                TriggerRow(trigger_name=str(row["name"]), timing=timing, events=events, definition=definition)
            )
        return result

    async def parent_key_columns(self, table: Identifier) -> list[ForeignKeyRow]:
        rows = await self.connection.query(
            'select fk.id as id, fk.seq as seq, fk."table" as parent_table, fk."from" as column_name, '
            'fk."to" as parent_column_name, fk.on_update as on_update, fk.on_delete as on_delete '
            "from pragma_foreign_key_list(:object_name, :schema_name) fk "
            "order by fk.id, fk.seq",
            {"object_name": table.local_name, "schema_name": table.schema or "main"},
        )
        return [self._foreign_key_row(table, row) for row in rows]

    @staticmethod
    def _foreign_key_row(table: Identifier, row: dict[str, Any]) -> ForeignKeyRow:
        parent_column = as_str(row["parent_column_name"])
        return ForeignKeyRow(
            constraint_id=str(row["id"]),
            constraint_name=None,
            column_name=str(row["column_name"]),
            column_position=int(row["seq"]) + 1,
            parent_schema=table.schema,
            parent_table=str(row["parent_table"]),
            parent_key_type=KeyType.PRIMARY if parent_column is None else None,
            parent_column_name=parent_column,
            update_action=as_str(row["on_update"]),
            delete_action=as_str(row["on_delete"]),
        )

    async def child_key_columns(self, table: Identifier) -> list[ChildKeyRow]:
        rows = await self.connection.query(
            'select m.name as child_table, fk.id as id, fk.seq as seq, fk."from" as child_column_name '
            f"from {quote_schema(table.schema)}.sqlite_master m "
            "cross join pragma_foreign_key_list(m.name, :schema_name) fk "
            f"where m.type = 'table' and m.{_USER_OBJECT} "
            'and fk."table" = :object_name collate nocase '
            "order by m.name, fk.id, fk.seq",
            {"object_name": table.local_name, "schema_name": table.schema or "main"},
        )
        return [
            ChildKeyRow(
                child_schema=table.schema,
                child_table=str(row["child_table"]),
                constraint_id=str(row["id"]),
                child_key_name=None,
                child_column_name=str(row["child_column_name"]),
                column_position=int(row["seq"]) + 1,
            )
            for row in rows
        ]

    # -- views -------------------------------------------------------------

    async def all_view_names(self) -> list[QualifiedNameRow]:
        return await self._object_names("view")

    async def resolve_view_name(self, candidate: Identifier) -> QualifiedNameRow | None:
        return await self._resolve_object(candidate, "view")

    async def view_definition(self, view: Identifier) -> ViewRow | None:
        definition = await self._definition(view, "view")
        if definition is None:
            return None
        return ViewRow(schema_name=view.schema, view_name=view.local_name, definition=definition)

    async def view_columns(self, view: Identifier) -> list[ColumnRow]:
        return await self._columns(view, "view")
