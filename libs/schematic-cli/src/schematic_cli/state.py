""".schematic/ directory state management — read/write config files."""

from __future__ import annotations

import json
import os
from pathlib import Path

from schematic_cli.config import ConnectionProfile, LintConfig, SchematicConfig

SCHEMATIC_DIR = ".schematic"
CONNECTIONS_FILE = "connections.json"
LINT_FILE = "lint.json"

# Files that may contain credentials and must be owner-only readable.
_SENSITIVE_FILES = frozenset({CONNECTIONS_FILE})

# Directory permission: rwx------ (owner only)
_DIR_MODE = 0o700
# Sensitive file permission: rw------- (owner only)
_SENSITIVE_FILE_MODE = 0o600


def _state_dir(root: Path) -> Path:
    return root / SCHEMATIC_DIR


def _write_json(path: Path, data: object) -> None:
    """Write JSON data to *path*, creating parent directories as needed.

    Files whose name is in ``_SENSITIVE_FILES`` are written with restrictive
    permissions (``0o600``) so that credentials are not world-readable.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    state_dir = path.parent
    if state_dir.name == SCHEMATIC_DIR:
        os.chmod(state_dir, _DIR_MODE)

    content = json.dumps(data, indent=2) + "\n"
    if path.name in _SENSITIVE_FILES:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _SENSITIVE_FILE_MODE)
        try:
            os.write(fd, content.encode("utf-8"))
        finally:
            os.close(fd)
    else:
        path.write_text(content, encoding="utf-8")


def _read_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def is_initialized(root: Path = Path(".")) -> bool:
    """Check whether .schematic/ exists."""
    return _state_dir(root).is_dir()


def init_state(root: Path = Path(".")) -> SchematicConfig:
    """Create .schematic/ with default config files.

    Returns the SchematicConfig that was written.
    """
    state = _state_dir(root)
    state.mkdir(parents=True, exist_ok=True)
    os.chmod(state, _DIR_MODE)

    config = SchematicConfig()
    _write_json(state / CONNECTIONS_FILE, [c.model_dump() for c in config.connections])
    _write_json(state / LINT_FILE, config.lint.model_dump(mode="json"))
    return config


def load_config(root: Path = Path(".")) -> SchematicConfig:
    """Load the SchematicConfig from .schematic/ files.

    A missing directory or file yields the defaults for that part, so the CLI
    works without ``schematic init`` when a URL is passed explicitly.
    """
    state = _state_dir(root)

    connections_path = state / CONNECTIONS_FILE
    connections: list[ConnectionProfile] = []
    if connections_path.is_file():
        connections = [ConnectionProfile.model_validate(c) for c in _read_json(connections_path)]  # type: ignore[union-attr]

    lint_path = state / LINT_FILE
    lint = LintConfig()
    if lint_path.is_file():
        lint = LintConfig.model_validate(_read_json(lint_path))

    return SchematicConfig(connections=connections, lint=lint)


def save_connections(connections: list[ConnectionProfile], root: Path = Path(".")) -> None:
    """Persist connection profiles to .schematic/connections.json."""
    _write_json(_state_dir(root) / CONNECTIONS_FILE, [c.model_dump() for c in connections])


def save_lint(lint: LintConfig, root: Path = Path(".")) -> None:
    """Persist lint defaults to .schematic/lint.json."""
    _write_json(_state_dir(root) / LINT_FILE, lint.model_dump(mode="json"))
