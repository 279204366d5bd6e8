"""A whole-database snapshot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from schematic_core.identifier import IdentifierDefaults
from schematic_core.schema.objects import DatabaseRoutine, DatabaseSequence, DatabaseSynonym, DatabaseView
from schematic_core.schema.table import RelationalDatabaseTable


class DatabaseSnapshot(BaseModel):
    """Every object introspected from one database, as lint rules consume it."""

    identifier_defaults: IdentifierDefaults = Field(default_factory=IdentifierDefaults)
    tables: tuple[RelationalDatabaseTable, ...] = Field(default=())
    views: tuple[DatabaseView, ...] = Field(default=())
    sequences: tuple[DatabaseSequence, ...] = Field(default=())
    synonyms: tuple[DatabaseSynonym, ...] = Field(default=())
    routines: tuple[DatabaseRoutine, ...] = Field(default=())

    model_config = ConfigDict(frozen=True, extra="forbid")
