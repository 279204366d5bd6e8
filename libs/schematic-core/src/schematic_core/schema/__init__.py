"""Immutable object model produced by introspection and consumed by lint rules."""

from schematic_core.schema.column import AutoIncrement, ColumnType, DatabaseColumn, DatabaseComputedColumn
from schematic_core.schema.database import DatabaseSnapshot
from schematic_core.schema.index import DatabaseIndex, IndexColumn, IndexColumnOrder
from schematic_core.schema.key import DatabaseKey, DatabaseRelationalKey, KeyType, ReferentialAction
from schematic_core.schema.objects import DatabaseRoutine, DatabaseSequence, DatabaseSynonym, DatabaseView
from schematic_core.schema.table import RelationalDatabaseTable
from schematic_core.schema.trigger import DatabaseCheckConstraint, DatabaseTrigger, TriggerEvent, TriggerTiming

__all__ = [
    "AutoIncrement",
    "ColumnType",
    "DatabaseCheckConstraint",
    "DatabaseColumn",
    "DatabaseComputedColumn",
    "DatabaseIndex",
    "DatabaseKey",
    "DatabaseRelationalKey",
    "DatabaseRoutine",
    "DatabaseSequence",
    "DatabaseSnapshot",
    "DatabaseSynonym",
    "DatabaseTrigger",
    "DatabaseView",
    "IndexColumn",
    "IndexColumnOrder",
    "KeyType",
    "ReferentialAction",
    "RelationalDatabaseTable",
    "TriggerEvent",
    "TriggerTiming",
]
