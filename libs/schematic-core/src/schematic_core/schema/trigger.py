"""Check constraints and triggers."""

from __future__ import annotations

import re
from enum import Enum, Flag

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator

from schematic_core.exceptions import UnsupportedTriggerEventError, UnsupportedTriggerTimingError
from schematic_core.identifier import Identifier

# Catalogs list events as "INSERT OR UPDATE", "INSERT,UPDATE" or "INSERT, UPDATE".
_EVENT_SEPARATOR_RE = re.compile(r"\s+OR\s+|,", re.IGNORECASE)


class DatabaseCheckConstraint(BaseModel):
    name: Identifier | None = Field(default=None, description="Constraint name; None when unnamed.")
    definition: str = Field(description="The check expression.")
    is_enabled: bool = Field(default=True)

    model_config = ConfigDict(frozen=True, extra="forbid")


class TriggerTiming(str, Enum):
    BEFORE = "BEFORE"
    AFTER = "AFTER"
    INSTEAD_OF = "INSTEAD OF"

    @classmethod
    def parse(cls, value: str | None, *, table_name: Identifier | None = None) -> TriggerTiming:
        """Map a catalog timing string onto a timing.

        Row and statement level variants (``BEFORE EACH ROW``, ``AFTER
        STATEMENT``) collapse onto their timing. Compound triggers fire
        around the statement and are reported as ``INSTEAD OF``.
        """
        normalized = " ".join((value or "").split()).upper()
        if normalized.startswith("BEFORE"):
            return cls.BEFORE
        if normalized.startswith("AFTER"):
            return cls.AFTER
        if normalized.startswith("INSTEAD OF") or normalized == "COMPOUND":
            return cls.INSTEAD_OF
        raise UnsupportedTriggerTimingError(table_name=table_name, value=value or "")


class TriggerEvent(Flag):
    NONE = 0
    INSERT = 1
    UPDATE = 2
    DELETE = 4

    @classmethod
    def parse(cls, value: str | None, *, table_name: Identifier | None = None) -> TriggerEvent:
        """Parse a delimited event list into a combined flag.

        Every token must be ``INSERT``, ``UPDATE`` or ``DELETE``; anything else
        raises, since a partially understood trigger is not safe to report.

        >>> TriggerEvent.parse("INSERT OR UPDATE") == TriggerEvent.INSERT | TriggerEvent.UPDATE
        True
        """
        tokens = [token.strip().upper() for token in _EVENT_SEPARATOR_RE.split(value or "")]
        tokens = [token for token in tokens if token]
        if not tokens:
            raise UnsupportedTriggerEventError(table_name=table_name, value=value or "")

        events = cls.NONE
        for token in tokens:
            if token not in ("INSERT", "UPDATE", "DELETE"):
                raise UnsupportedTriggerEventError(table_name=table_name, value=token)
            events |= cls[token]
        return events


class DatabaseTrigger(BaseModel):
    name: Identifier = Field(description="Trigger name.")
    definition: str = Field(default="", description="Trigger body or full DDL.")
    timing: TriggerTiming = Field(description="When the trigger fires relative to the statement.")
    events: InstanceOf[TriggerEvent] = Field(description="Data modification events the trigger fires on.")
    is_enabled: bool = Field(default=True)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("events")
    @classmethod
    def validate_events(cls, value: TriggerEvent) -> TriggerEvent:
        if value == TriggerEvent.NONE:
            raise ValueError("A trigger must fire on at least one event")
        return value
