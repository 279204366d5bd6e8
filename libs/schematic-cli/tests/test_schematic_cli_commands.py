"""Tests for the schematic CLI commands."""

import json
import sqlite3

import pytest
from schematic_cli.cli import app
from schematic_cli.config import ConnectionProfile
from schematic_cli.state import save_connections
from schematic_introspect.tables import RelationalTableProvider
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def sqlite_url(tmp_path):
    """A SQLite database with one unindexed foreign key."""
    db_path = tmp_path / "shop.db"
    with sqlite3.connect(db_path) as conn:
        conn.executescript(
            """
            create table parents (id integer primary key, name text not null);
            create table children (
                id integer primary key,
                parent_id integer not null references parents (id) on delete cascade,
                note text
            );
            """
        )
    conn.close()
    return f"sqlite:///{db_path}"


class TestInitCommand:
    def test_init_creates_schematic_dir(self, tmp_path):
        result = runner.invoke(app, ["init", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "Initialized" in result.output
        assert (tmp_path / ".schematic" / "connections.json").is_file()
        assert (tmp_path / ".schematic" / "lint.json").is_file()

    def test_init_idempotent(self, tmp_path):
        runner.invoke(app, ["init", "--root", str(tmp_path)])
        result = runner.invoke(app, ["init", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "already exists" in result.output


class TestConnectionCommands:
    def test_add_and_list_redacts_credentials(self, tmp_path):
        result = runner.invoke(
            app,
            ["connection", "add", "warehouse", "postgresql://admin:s3cret@db/app", "--default", "--root", str(tmp_path)],
        )
        assert result.exit_code == 0
        assert "s3cret" not in result.output

        result = runner.invoke(app, ["connection", "list", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "warehouse (default): postgresql://***:***@db/app" in result.output

    def test_new_default_replaces_old_default(self, tmp_path):
        runner.invoke(app, ["connection", "add", "a", "sqlite:///a.db", "--default", "--root", str(tmp_path)])
        runner.invoke(app, ["connection", "add", "b", "sqlite:///b.db", "--default", "--root", str(tmp_path)])
        result = runner.invoke(app, ["connection", "list", "--root", str(tmp_path)])
        assert "a: sqlite:///a.db" in result.output
        assert "b (default): sqlite:///b.db" in result.output

    def test_list_empty(self, tmp_path):
        result = runner.invoke(app, ["connection", "list", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "No connections configured." in result.output


class TestTablesCommand:
    def test_lists_tables(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["tables", "--url", sqlite_url, "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "main.children" in result.output
        assert "main.parents" in result.output
        assert "2 table(s)." in result.output

    def test_lists_names_without_assembling_tables(self, sqlite_url, tmp_path, monkeypatch):
        async def fail(*args, **kwargs):
            raise AssertionError("tables must not be assembled to list names")

        monkeypatch.setattr(RelationalTableProvider, "load_table", fail)
        result = runner.invoke(app, ["tables", "--url", sqlite_url, "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output.splitlines()[-1] == "2 table(s)."

    def test_uses_default_profile(self, sqlite_url, tmp_path):
        save_connections([ConnectionProfile(name="shop", url=sqlite_url)], tmp_path)
        result = runner.invoke(app, ["tables", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "2 table(s)." in result.output

    def test_named_profile(self, sqlite_url, tmp_path):
        save_connections(
            [ConnectionProfile(name="other", url="sqlite:///missing.db"), ConnectionProfile(name="shop", url=sqlite_url)],
            tmp_path,
        )
        result = runner.invoke(app, ["tables", "-c", "shop", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "main.parents" in result.output

    def test_no_connection(self, tmp_path):
        result = runner.invoke(app, ["tables", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "No connection given" in result.output

    def test_unknown_profile(self, tmp_path):
        result = runner.invoke(app, ["tables", "-c", "nope", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "Unknown connection 'nope'" in result.output

    def test_unsupported_dialect(self, tmp_path):
        result = runner.invoke(app, ["tables", "--url", "mongodb://localhost/db", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "Introspection failed" in result.output


class TestDescribeCommand:
    def test_describes_table(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["describe", "main.children", "--url", sqlite_url, "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "Table main.children" in result.output
        assert "parent_id" in result.output
        assert "Primary key: (id)" in result.output
        assert "main.parents (id)" in result.output
        assert "ON DELETE CASCADE" in result.output

    def test_unqualified_name(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["describe", "parents", "--url", sqlite_url, "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "Referenced by:" in result.output

    def test_missing_table(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["describe", "nope", "--url", sqlite_url, "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestLintCommand:
    def test_reports_unindexed_foreign_key(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["lint", "--url", sqlite_url, "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "[warning] foreign-key-index:" in result.output
        assert "missing an index on the column parent_id" in result.output

    def test_fail_on_error(self, sqlite_url, tmp_path):
        result = runner.invoke(
            app, ["lint", "--url", sqlite_url, "--level", "error", "--fail-on-error", "--root", str(tmp_path)]
        )
        assert result.exit_code == 1
        assert "[error] foreign-key-index:" in result.output

    def test_warnings_do_not_fail(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["lint", "--url", sqlite_url, "--fail-on-error", "--root", str(tmp_path)])
        assert result.exit_code == 0

    def test_disable_rule(self, sqlite_url, tmp_path):
        result = runner.invoke(
            app,
            ["lint", "--url", sqlite_url, "--disable", "foreign-key-index", "--level", "error", "--fail-on-error",
             "--root", str(tmp_path)],
        )
        assert result.exit_code == 0
        assert "foreign-key-index" not in result.output
        assert "from 11 rule(s)" in result.output

    def test_unknown_rule(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["lint", "--url", sqlite_url, "--disable", "nope", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "Unknown lint rule(s): nope" in result.output

    def test_json_output(self, sqlite_url, tmp_path):
        result = runner.invoke(app, ["lint", "--url", sqlite_url, "--json", "--root", str(tmp_path)])
        assert result.exit_code == 0
        messages = json.loads(result.stdout)
        assert [message["rule_id"] for message in messages] == ["foreign-key-index"]
        assert messages[0]["level"] == "warning"

    def test_lint_json_config_defaults(self, sqlite_url, tmp_path):
        runner.invoke(app, ["init", "--root", str(tmp_path)])
        (tmp_path / ".schematic" / "lint.json").write_text(
            json.dumps({"level": "error", "disabled_rules": []}), encoding="utf-8"
        )
        result = runner.invoke(app, ["lint", "--url", sqlite_url, "--fail-on-error", "--root", str(tmp_path)])
        assert result.exit_code == 1


class TestRulesCommand:
    def test_lists_rules(self):
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "orphaned-table: No relationships present on table." in result.output
        assert len(result.output.strip().splitlines()) == 12
