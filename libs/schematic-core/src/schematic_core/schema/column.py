"""Column definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from schematic_core.identifier import Identifier


class ColumnType(BaseModel):
    """A column's declared data type as reported by the catalog."""

    type_name: Identifier = Field(description="Data type name, schema-qualified for user-defined types.")
    max_length: int | None = Field(default=None, description="Maximum length for character or binary types.")
    precision: int | None = Field(default=None, description="Numeric precision.")
    scale: int | None = Field(default=None, description="Numeric scale.")
    collation: str | None = Field(default=None, description="Collation for character types.")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def definition(self) -> str:
        """Render the type roughly as it would appear in DDL, e.g. ``varchar(50)``."""
        name = self.type_name.local_name
        if self.precision is not None and self.scale is not None:
            return f"{name}({self.precision},{self.scale})"
        if self.precision is not None:
            return f"{name}({self.precision})"
        if self.max_length is not None:
            return f"{name}({'max' if self.max_length < 0 else self.max_length})"
        return name


class AutoIncrement(BaseModel):
    """Identity / auto-increment trait: the first value and the step."""

    seed: int = Field(default=1, description="Initial value.")
    increment: int = Field(default=1, description="Step between generated values.")

    model_config = ConfigDict(frozen=True, extra="forbid")


class DatabaseColumn(BaseModel):
    """A table or view column."""

    name: Identifier = Field(description="Column name (local name only).")
    type: ColumnType = Field(description="Declared data type.")
    is_nullable: bool = Field(default=True, description="Whether NULL values are allowed.")
    default_value: str | None = Field(default=None, description="Default expression text, if any.")
    auto_increment: AutoIncrement | None = Field(default=None, description="Identity trait, if any.")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def is_computed(self) -> bool:
        return False


class DatabaseComputedColumn(DatabaseColumn):
    """A column whose value is derived from an expression."""

    definition: str | None = Field(default=None, description="The computing expression.")

    @property
    def is_computed(self) -> bool:
        return True
