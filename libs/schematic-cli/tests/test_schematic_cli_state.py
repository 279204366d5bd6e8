"""Tests for .schematic/ state management."""

import json
import stat

from schematic_cli.config import ConnectionProfile, LintConfig
from schematic_cli.state import init_state, is_initialized, load_config, save_connections, save_lint
from schematic_lint import RuleLevel


class TestIsInitialized:
    def test_not_initialized(self, tmp_path):
        assert is_initialized(tmp_path) is False

    def test_initialized(self, tmp_path):
        (tmp_path / ".schematic").mkdir()
        assert is_initialized(tmp_path) is True


class TestInitState:
    def test_creates_directory_and_files(self, tmp_path):
        config = init_state(tmp_path)
        state = tmp_path / ".schematic"

        assert state.is_dir()
        assert json.loads((state / "connections.json").read_text()) == []
        assert json.loads((state / "lint.json").read_text()) == {"level": "warning", "disabled_rules": []}
        assert config.connections == []

    def test_restrictive_permissions(self, tmp_path):
        init_state(tmp_path)
        state = tmp_path / ".schematic"
        assert stat.S_IMODE(state.stat().st_mode) == 0o700
        assert stat.S_IMODE((state / "connections.json").stat().st_mode) == 0o600


class TestLoadConfig:
    def test_missing_directory_gives_defaults(self, tmp_path):
        config = load_config(tmp_path)
        assert config.connections == []
        assert config.lint.level is RuleLevel.WARNING

    def test_round_trip(self, tmp_path):
        save_connections([ConnectionProfile(name="shop", url="sqlite:///shop.db", default=True)], tmp_path)
        save_lint(LintConfig(level=RuleLevel.ERROR, disabled_rules=["numeric-suffix"]), tmp_path)

        config = load_config(tmp_path)
        assert config.connections[0].name == "shop"
        assert config.connections[0].default is True
        assert config.lint.level is RuleLevel.ERROR
        assert config.lint.disabled_rules == ["numeric-suffix"]
