"""The assembled relational table."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schematic_core.identifier import Identifier
from schematic_core.schema.column import DatabaseColumn
from schematic_core.schema.index import DatabaseIndex
from schematic_core.schema.key import DatabaseKey, DatabaseRelationalKey, KeyType
from schematic_core.schema.trigger import DatabaseCheckConstraint, DatabaseTrigger


class RelationalDatabaseTable(BaseModel):
    """A fully assembled table: a frozen snapshot of catalog state at query time.

    ``parent_keys`` are the relationships where this table is the child (its
    own foreign keys); ``child_keys`` are the relationships where other
    tables reference this one.
    """

    name: Identifier = Field(description="Fully resolved table name.")
    columns: tuple[DatabaseColumn, ...] = Field(default=(), description="Columns in ordinal order.")
    primary_key: DatabaseKey | None = Field(default=None)
    unique_keys: tuple[DatabaseKey, ...] = Field(default=())
    indexes: tuple[DatabaseIndex, ...] = Field(default=())
    checks: tuple[DatabaseCheckConstraint, ...] = Field(default=())
    triggers: tuple[DatabaseTrigger, ...] = Field(default=())
    parent_keys: tuple[DatabaseRelationalKey, ...] = Field(default=())
    child_keys: tuple[DatabaseRelationalKey, ...] = Field(default=())

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def validate_ownership(self) -> RelationalDatabaseTable:
        if self.primary_key is not None and self.primary_key.key_type != KeyType.PRIMARY:
            raise ValueError(f"Primary key of {self.name} must have key type primary")
        for key in self.unique_keys:
            if key.key_type != KeyType.UNIQUE:
                raise ValueError(f"Unique keys of {self.name} must have key type unique")
        for relational_key in self.parent_keys:
            if relational_key.child_table != self.name:
                raise ValueError(
                    f"Parent key {relational_key.child_key.name} belongs to {relational_key.child_table}, not {self.name}"
                )
        for relational_key in self.child_keys:
            if relational_key.parent_table != self.name:
                raise ValueError(
                    f"Child key {relational_key.child_key.name} references {relational_key.parent_table}, "
                    f"not {self.name}"
                )
        return self

    @property
    def foreign_keys(self) -> tuple[DatabaseKey, ...]:
        return tuple(relational_key.child_key for relational_key in self.parent_keys)

    def get_column(self, name: str) -> DatabaseColumn | None:
        for column in self.columns:
            if column.name.local_name == name:
                return column
        return None
