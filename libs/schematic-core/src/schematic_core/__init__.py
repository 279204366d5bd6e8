"""Schematic Core — identifiers, resolution, caching and the schema object model."""

from schematic_core.caching import AsyncCache
from schematic_core.exceptions import (
    SchematicError,
    UnsupportedDialectError,
    UnsupportedReferentialActionError,
    UnsupportedTriggerEventError,
    UnsupportedTriggerTimingError,
    UnsupportedValueError,
)
from schematic_core.identifier import (
    ORDINAL,
    ORDINAL_IGNORE_CASE,
    Identifier,
    IdentifierComparer,
    IdentifierDefaults,
    NameLookup,
)
from schematic_core.resolution import (
    DefaultIdentifierResolutionStrategy,
    IdentifierResolutionStrategy,
    OracleIdentifierResolutionStrategy,
    PostgreSqlIdentifierResolutionStrategy,
)
from schematic_core.schema import (
    AutoIncrement,
    ColumnType,
    DatabaseCheckConstraint,
    DatabaseColumn,
    DatabaseComputedColumn,
    DatabaseIndex,
    DatabaseKey,
    DatabaseRelationalKey,
    DatabaseRoutine,
    DatabaseSequence,
    DatabaseSnapshot,
    DatabaseSynonym,
    DatabaseTrigger,
    DatabaseView,
    IndexColumn,
    IndexColumnOrder,
    KeyType,
    ReferentialAction,
    RelationalDatabaseTable,
    TriggerEvent,
    TriggerTiming,
)
from schematic_core.security import redact_url

__all__ = [
    "ORDINAL",
    "ORDINAL_IGNORE_CASE",
    "AsyncCache",
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
    "DefaultIdentifierResolutionStrategy",
    "Identifier",
    "IdentifierComparer",
    "IdentifierDefaults",
    "IdentifierResolutionStrategy",
    "IndexColumn",
    "IndexColumnOrder",
    "KeyType",
    "NameLookup",
    "OracleIdentifierResolutionStrategy",
    "PostgreSqlIdentifierResolutionStrategy",
    "ReferentialAction",
    "RelationalDatabaseTable",
    "SchematicError",
    "TriggerEvent",
    "TriggerTiming",
    "UnsupportedDialectError",
    "UnsupportedReferentialActionError",
    "UnsupportedTriggerEventError",
    "UnsupportedTriggerTimingError",
    "UnsupportedValueError",
    "redact_url",
]
