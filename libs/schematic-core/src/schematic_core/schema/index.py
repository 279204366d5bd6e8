"""Index definitions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from schematic_core.identifier import Identifier
from schematic_core.schema.column import DatabaseColumn


class IndexColumnOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class IndexColumn(BaseModel):
    """One indexed expression, usually a plain column reference."""

    expression: str = Field(min_length=1, description="Indexed expression text.")
    dependent_columns: tuple[DatabaseColumn, ...] = Field(
        default=(), description="Table columns the expression reads; empty for unresolvable expressions."
    )
    order: IndexColumnOrder = Field(default=IndexColumnOrder.ASCENDING)

    model_config = ConfigDict(frozen=True, extra="forbid")


class DatabaseIndex(BaseModel):
    name: Identifier = Field(description="Index name.")
    is_unique: bool = Field(default=False)
    columns: tuple[IndexColumn, ...] = Field(min_length=1, description="Key columns in index order.")
    included_columns: tuple[DatabaseColumn, ...] = Field(default=(), description="Non-key covering columns.")
    is_enabled: bool = Field(default=True)

    model_config = ConfigDict(frozen=True, extra="forbid")
