"""schematic-cli — Typer-based CLI for schema introspection and linting."""

from schematic_cli.config import ConnectionProfile, LintConfig, SchematicConfig
from schematic_cli.state import init_state, is_initialized, load_config

__all__ = [
    "ConnectionProfile",
    "LintConfig",
    "SchematicConfig",
    "init_state",
    "is_initialized",
    "load_config",
]
