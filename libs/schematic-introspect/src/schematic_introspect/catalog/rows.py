"""Fixed row types returned by catalog queries.

Each dialect aliases its catalog columns to the field names below; the
``from_mapping`` constructors then copy values across field by field,
normalizing the handful of representations engines use for booleans and
key types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from schematic_core.schema import KeyType

_TRUE_STRINGS = frozenset({"1", "y", "yes", "t", "true", "enabled", "always"})


def as_bool(value: Any, *, default: bool = False) -> bool:
    """Coerce catalog truthiness: ``1``, ``'Y'``, ``'YES'``, ``'ENABLED'`` and friends."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def as_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def as_key_type(value: Any) -> KeyType | None:
    """Map ``'P'``/``'PK'``/``'PRIMARY'`` and ``'U'``/``'UQ'``/``'UNIQUE'`` onto key types."""
    if value is None:
        return None
    normalized = str(value).strip().upper()
    if normalized.startswith("P"):
        return KeyType.PRIMARY
    if normalized.startswith("U"):
        return KeyType.UNIQUE
    return None


@dataclass(frozen=True)
class QualifiedNameRow:
    schema_name: str | None
    object_name: str

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> QualifiedNameRow:
        return cls(schema_name=as_str(row["schema_name"]), object_name=str(row["object_name"]))


@dataclass(frozen=True)
class ColumnRow:
    column_name: str
    type_schema: str | None
    type_name: str
    max_length: int | None = None
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    collation_name: str | None = None
    is_nullable: bool = True
    default_value: str | None = None
    is_computed: bool = False
    computed_definition: str | None = None
    identity_seed: int | None = None
    identity_increment: int | None = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ColumnRow:
        return cls(
            column_name=str(row["column_name"]),
            type_schema=as_str(row.get("type_schema")),
            type_name=str(row["type_name"]),
            max_length=as_int(row.get("max_length")),
            numeric_precision=as_int(row.get("numeric_precision")),
            numeric_scale=as_int(row.get("numeric_scale")),
            collation_name=as_str(row.get("collation_name")),
            is_nullable=as_bool(row.get("is_nullable"), default=True),
            default_value=as_str(row.get("default_value")),
            is_computed=as_bool(row.get("is_computed")),
            computed_definition=as_str(row.get("computed_definition")),
            identity_seed=as_int(row.get("identity_seed")),
            identity_increment=as_int(row.get("identity_increment")),
        )


@dataclass(frozen=True)
class ConstraintColumnRow:
    """One column of a primary or unique key.

    ``constraint_id`` groups rows into keys; it equals the constraint name
    except on engines that only expose generated names.
    """

    constraint_id: str | None
    constraint_name: str | None
    column_name: str
    column_position: int
    is_enabled: bool = True

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ConstraintColumnRow:
        name = as_str(row.get("constraint_name"))
        return cls(
            constraint_id=as_str(row.get("constraint_id")) or name,
            constraint_name=name,
            column_name=str(row["column_name"]),
            column_position=int(row["column_position"]),
            is_enabled=as_bool(row.get("is_enabled"), default=True),
        )


@dataclass(frozen=True)
class IndexColumnRow:
    index_name: str
    column_position: int
    column_name: str | None = None
    expression: str | None = None
    is_unique: bool = False
    is_descending: bool = False
    is_included: bool = False
    is_enabled: bool = True

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> IndexColumnRow:
        return cls(
            index_name=str(row["index_name"]),
            column_position=int(row["column_position"]),
            column_name=as_str(row.get("column_name")),
            expression=as_str(row.get("expression")),
            is_unique=as_bool(row.get("is_unique")),
            is_descending=as_bool(row.get("is_descending")),
            is_included=as_bool(row.get("is_included")),
            is_enabled=as_bool(row.get("is_enabled"), default=True),
        )


@dataclass(frozen=True)
class CheckRow:
    constraint_name: str | None
    definition: str
    is_enabled: bool = True

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> CheckRow:
        return cls(
            constraint_name=as_str(row.get("constraint_name")),
            definition=str(row["definition"]),
            is_enabled=as_bool(row.get("is_enabled"), default=True),
        )


@dataclass(frozen=True)
class TriggerRow:
    """A trigger with its timing and events still in catalog text form."""

    trigger_name: str
    timing: str
    events: str
    definition: str = ""
    is_enabled: bool = True

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> TriggerRow:
        return cls(
            trigger_name=str(row["trigger_name"]),
            timing=str(row["timing"] or ""),
            events=str(row["events"] or ""),
            definition=as_str(row.get("definition")) or "",
            is_enabled=as_bool(row.get("is_enabled"), default=True),
        )


@dataclass(frozen=True)
class ForeignKeyRow:
    """One column of a foreign key declared on the table being assembled.

    ``parent_key_name`` and ``parent_key_type`` identify the referenced key
    when the engine records it; otherwise the referenced key is found by
    ``parent_column_name``.
    """

    constraint_id: str
    constraint_name: str | None
    column_name: str
    column_position: int
    parent_schema: str | None
    parent_table: str
    parent_key_name: str | None = None
    parent_key_type: KeyType | None = None
    parent_column_name: str | None = None
    update_action: str | None = None
    delete_action: str | None = None
    is_enabled: bool = True

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ForeignKeyRow:
        name = as_str(row.get("constraint_name"))
        return cls(
            constraint_id=str(as_str(row.get("constraint_id")) or name),
            constraint_name=name,
            column_name=str(row["column_name"]),
            column_position=int(row["column_position"]),
            parent_schema=as_str(row.get("parent_schema")),
            parent_table=str(row["parent_table"]),
            parent_key_name=as_str(row.get("parent_key_name")),
            parent_key_type=as_key_type(row.get("parent_key_type")),
            parent_column_name=as_str(row.get("parent_column_name")),
            update_action=as_str(row.get("update_action")),
            delete_action=as_str(row.get("delete_action")),
            is_enabled=as_bool(row.get("is_enabled"), default=True),
        )


@dataclass(frozen=True)
class ChildKeyRow:
    """One column of another table's foreign key that references this table."""

    child_schema: str | None
    child_table: str
    constraint_id: str
    child_key_name: str | None
    child_column_name: str
    column_position: int

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ChildKeyRow:
        name = as_str(row.get("child_key_name"))
        return cls(
            child_schema=as_str(row.get("child_schema")),
            child_table=str(row["child_table"]),
            constraint_id=str(as_str(row.get("constraint_id")) or name),
            child_key_name=name,
            child_column_name=str(row["child_column_name"]),
            column_position=int(row["column_position"]),
        )


@dataclass(frozen=True)
class ViewRow:
    schema_name: str | None
    view_name: str
    definition: str = ""
    is_materialized: bool = False

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> ViewRow:
        return cls(
            schema_name=as_str(row.get("schema_name")),
            view_name=str(row["view_name"]),
            definition=as_str(row.get("definition")) or "",
            is_materialized=as_bool(row.get("is_materialized")),
        )


@dataclass(frozen=True)
class SequenceRow:
    schema_name: str | None
    sequence_name: str
    start_value: int | None = None
    increment: int | None = None
    min_value: int | None = None
    max_value: int | None = None
    is_cycling: bool = False
    cache_size: int | None = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> SequenceRow:
        return cls(
            schema_name=as_str(row.get("schema_name")),
            sequence_name=str(row["sequence_name"]),
            start_value=as_int(row.get("start_value")),
            increment=as_int(row.get("increment")),
            min_value=as_int(row.get("min_value")),
            max_value=as_int(row.get("max_value")),
            is_cycling=as_bool(row.get("is_cycling")),
            cache_size=as_int(row.get("cache_size")),
        )


@dataclass(frozen=True)
class SynonymRow:
    schema_name: str | None
    synonym_name: str
    target_server: str | None
    target_database: str | None
    target_schema: str | None
    target_name: str

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> SynonymRow:
        return cls(
            schema_name=as_str(row.get("schema_name")),
            synonym_name=str(row["synonym_name"]),
            target_server=as_str(row.get("target_server")),
            target_database=as_str(row.get("target_database")),
            target_schema=as_str(row.get("target_schema")),
            target_name=str(row["target_name"]),
        )


@dataclass(frozen=True)
class RoutineRow:
    schema_name: str | None
    routine_name: str
    definition: str = ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> RoutineRow:
        return cls(
            schema_name=as_str(row.get("schema_name")),
            routine_name=str(row["routine_name"]),
            definition=as_str(row.get("definition")) or "",
        )
