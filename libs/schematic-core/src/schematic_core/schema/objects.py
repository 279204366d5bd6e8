"""Views, sequences, synonyms and routines."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from schematic_core.identifier import Identifier
from schematic_core.schema.column import DatabaseColumn


class DatabaseView(BaseModel):
    name: Identifier = Field(description="Fully resolved view name.")
    definition: str = Field(default="", description="The view's query text.")
    columns: tuple[DatabaseColumn, ...] = Field(default=(), description="Columns in ordinal order.")
    is_materialized: bool = Field(default=False)

    model_config = ConfigDict(frozen=True, extra="forbid")


class DatabaseSequence(BaseModel):
    name: Identifier
    start: int = Field(default=1)
    increment: int = Field(default=1)
    min_value: int | None = Field(default=None)
    max_value: int | None = Field(default=None)
    cycle: bool = Field(default=False)
    cache: int | None = Field(default=None, description="Number of preallocated values, if caching.")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def is_cached(self) -> bool:
        return self.cache is not None and self.cache > 1


class DatabaseSynonym(BaseModel):
    """An alias for another object, possibly on another server or database."""

    name: Identifier
    target: Identifier

    model_config = ConfigDict(frozen=True, extra="forbid")


class DatabaseRoutine(BaseModel):
    """A stored procedure or function."""

    name: Identifier
    definition: str = Field(default="")

    model_config = ConfigDict(frozen=True, extra="forbid")
