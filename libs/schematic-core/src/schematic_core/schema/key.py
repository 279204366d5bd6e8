"""Keys and the relationships between them."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schematic_core.exceptions import UnsupportedReferentialActionError
from schematic_core.identifier import Identifier
from schematic_core.schema.column import DatabaseColumn


class KeyType(str, Enum):
    """The kind of a key constraint."""

    PRIMARY = "primary"
    UNIQUE = "unique"
    FOREIGN = "foreign"


class ReferentialAction(str, Enum):
    """What a foreign key does when the referenced row changes."""

    NO_ACTION = "NO ACTION"
    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"

    @classmethod
    def parse(cls, value: str | None, *, table_name: Identifier | None = None) -> ReferentialAction:
        """Parse a catalog action string such as ``"SET_NULL"`` or ``"set null"``.

        A missing value means the engine applies its default, ``NO ACTION``.

        Raises:
            UnsupportedReferentialActionError: For any other action text.
        """
        if value is None or not value.strip():
            return cls.NO_ACTION
        normalized = " ".join(value.replace("_", " ").split()).upper()
        try:
            return cls(normalized)
        except ValueError as exc:
            raise UnsupportedReferentialActionError(table_name=table_name, value=value, cause=exc) from exc


class DatabaseKey(BaseModel):
    """A primary, unique or foreign key.

    Column order is significant: composite foreign keys match their parent
    key position by position.
    """

    name: Identifier | None = Field(default=None, description="Constraint name; None for system-generated keys.")
    key_type: KeyType = Field(description="Primary, unique or foreign.")
    columns: tuple[DatabaseColumn, ...] = Field(min_length=1, description="Key columns in key order.")
    is_enabled: bool = Field(default=True, description="Whether the constraint is enforced.")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name.local_name for column in self.columns)


class DatabaseRelationalKey(BaseModel):
    """A foreign key on a child table referencing a parent table's primary or unique key."""

    child_table: Identifier = Field(description="The table owning the foreign key.")
    child_key: DatabaseKey = Field(description="The foreign key.")
    parent_table: Identifier = Field(description="The referenced table.")
    parent_key: DatabaseKey = Field(description="The referenced primary or unique key.")
    update_action: ReferentialAction = Field(default=ReferentialAction.NO_ACTION)
    delete_action: ReferentialAction = Field(default=ReferentialAction.NO_ACTION)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def validate_keys(self) -> DatabaseRelationalKey:
        if self.child_key.key_type != KeyType.FOREIGN:
            raise ValueError(f"Child key of a relational key must be a foreign key, got {self.child_key.key_type.value}")
        if self.parent_key.key_type not in (KeyType.PRIMARY, KeyType.UNIQUE):
            raise ValueError(
                f"Parent key of a relational key must be a primary or unique key, got {self.parent_key.key_type.value}"
            )
        if len(self.child_key.columns) != len(self.parent_key.columns):
            raise ValueError(
                f"Foreign key on {self.child_table} has {len(self.child_key.columns)} column(s) but the "
                f"referenced key on {self.parent_table} has {len(self.parent_key.columns)}"
            )
        return self
