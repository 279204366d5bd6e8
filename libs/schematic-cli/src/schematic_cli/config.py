"""Project-level configuration model for the schematic CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from schematic_lint import RULES, RuleLevel


class ConnectionProfile(BaseModel):
    """A named database connection."""

    name: str = Field(min_length=1, description="Profile name (e.g. 'warehouse').")
    url: str = Field(min_length=1, description="SQLAlchemy connection URL.")
    default: bool = Field(default=False, description="Whether this is the default connection.")

    model_config = {"extra": "forbid"}


class LintConfig(BaseModel):
    """Lint defaults applied when the command line does not override them."""

    level: RuleLevel = Field(default=RuleLevel.WARNING, description="Level reported by every rule.")
    disabled_rules: list[str] = Field(default_factory=list, description="Rule ids to skip.")

    model_config = {"extra": "forbid"}

    @field_validator("disabled_rules")
    @classmethod
    def validate_rule_ids(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - RULES.keys())
        if unknown:
            raise ValueError(f"Unknown lint rule(s): {', '.join(unknown)}")
        return value


class SchematicConfig(BaseModel):
    """Top-level schematic project configuration.

    Aggregates all .schematic/ config files into a single model.
    """

    connections: list[ConnectionProfile] = Field(default_factory=list, description="Database connection profiles.")
    lint: LintConfig = Field(default_factory=LintConfig, description="Lint defaults.")

    model_config = {"extra": "forbid"}

    def get_connection(self, name: str | None = None) -> ConnectionProfile | None:
        """Return the profile called *name*, or the default profile when *name* is None.

        A single configured profile counts as the default.
        """
        if name is not None:
            return next((c for c in self.connections if c.name == name), None)
        defaults = [c for c in self.connections if c.default]
        if defaults:
            return defaults[0]
        if len(self.connections) == 1:
            return self.connections[0]
        return None
