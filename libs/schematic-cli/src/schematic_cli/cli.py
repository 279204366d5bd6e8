"""Schematic CLI — Typer-based CLI for database introspection and linting."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from schematic_core.exceptions import SchematicError
from schematic_core.identifier import Identifier
from schematic_core.schema import DatabaseRelationalKey, RelationalDatabaseTable, TriggerEvent
from schematic_core.security import redact_url
from schematic_introspect import RelationalDatabase
from schematic_introspect.mapping import qualified_name
from schematic_lint import RULES, LintEngine, RuleLevel, RuleMessage, default_rules

from schematic_cli.config import ConnectionProfile
from schematic_cli.state import init_state, is_initialized, load_config, save_connections

app = typer.Typer(name="schematic", help="Schematic CLI — relational schema introspection and linting.")
connection_app = typer.Typer(help="Manage saved database connections.")
app.add_typer(connection_app, name="connection")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log introspection progress to stderr."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


def _resolve_url(url: str | None, connection: str | None, root: Path) -> str:
    """Pick the connection URL from --url, a named profile or the default profile."""
    if url:
        return url
    try:
        config = load_config(root)
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    profile = config.get_connection(connection)
    if profile is None:
        if connection is not None:
            typer.echo(f"Unknown connection '{connection}'.", err=True)
        else:
            typer.echo("No connection given. Pass --url or add a default connection profile.", err=True)
        raise typer.Exit(code=1)
    return profile.url


def _parse_name(name: str) -> Identifier:
    try:
        return Identifier.create_qualified(*name.split("."))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid object name '{name}': {exc}") from exc


def _run(coro, action: str):
    """Run an async command body, turning failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except (SchematicError, ValueError) as exc:
        typer.echo(f"{action} failed: {redact_url(str(exc))}", err=True)
        raise typer.Exit(code=1) from exc
    except Exception as exc:
        typer.echo(f"{action} error: {redact_url(str(exc))}", err=True)
        raise typer.Exit(code=1) from exc


# ---------------------------------------------------------------------------
# Project state
# ---------------------------------------------------------------------------


@app.command()
def init(
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root directory."),
) -> None:
    """Create a .schematic/ directory holding connections and lint defaults."""
    if is_initialized(root):
        typer.echo(f".schematic/ already exists in {root.resolve()}. Skipping init.")
        raise typer.Exit(code=0)
    init_state(root)
    typer.echo(f"Initialized schematic project in {root.resolve() / '.schematic'}")


@connection_app.command("add")
def connection_add(
    name: str = typer.Argument(help="Profile name."),
    url: str = typer.Argument(help="SQLAlchemy connection URL."),
    default: bool = typer.Option(False, "--default", "-d", help="Make this the default connection."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root directory."),
) -> None:
    """Save a named connection profile."""
    config = load_config(root)
    connections = [c for c in config.connections if c.name != name]
    if default:
        connections = [c.model_copy(update={"default": False}) for c in connections]
    connections.append(ConnectionProfile(name=name, url=url, default=default))
    save_connections(connections, root)
    typer.echo(f"Saved connection '{name}' ({redact_url(url)})")


@connection_app.command("list")
def connection_list(
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root directory."),
) -> None:
    """List saved connection profiles with credentials redacted."""
    config = load_config(root)
    if not config.connections:
        typer.echo("No connections configured.")
        return
    for profile in config.connections:
        marker = " (default)" if profile.default else ""
        typer.echo(f"{profile.name}{marker}: {redact_url(profile.url)}")


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------


async def _read_table_names(url: str) -> list[Identifier]:
    async with await RelationalDatabase.connect(url) as database:
        rows = await database.catalog.all_table_names()
        return [qualified_name(database.identifier_defaults, row.schema_name, row.object_name) for row in rows]


async def _read_table(url: str, name: Identifier) -> RelationalDatabaseTable | None:
    async with await RelationalDatabase.connect(url) as database:
        return await database.get_table(name)


@app.command()
def tables(
    url: str = typer.Option(None, "--url", "-u", help="Connection URL; overrides saved profiles."),
    connection: str = typer.Option(None, "--connection", "-c", help="Saved connection profile name."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root directory."),
) -> None:
    """List every table in the database.

    Examples:

        schematic tables -u "sqlite:///app.db"

        schematic tables -c warehouse
    """
    resolved = _resolve_url(url, connection, root)
    names = _run(_read_table_names(resolved), "Introspection")
    for name in names:
        typer.echo(str(name))
    typer.echo(f"{len(names)} table(s).")


def _format_relation(relation: DatabaseRelationalKey) -> str:
    label = relation.child_key.name.local_name if relation.child_key.name is not None else "<unnamed>"
    return (
        f"{label} {relation.child_table} ({', '.join(relation.child_key.column_names)}) -> "
        f"{relation.parent_table} ({', '.join(relation.parent_key.column_names)}) "
        f"ON UPDATE {relation.update_action.value} ON DELETE {relation.delete_action.value}"
    )


def _format_events(events: TriggerEvent) -> str:
    members = (TriggerEvent.INSERT, TriggerEvent.UPDATE, TriggerEvent.DELETE)
    return " OR ".join(member.name for member in members if member in events)


def _describe_lines(table: RelationalDatabaseTable) -> list[str]:
    lines = [f"Table {table.name}", "Columns:"]
    for column in table.columns:
        parts = [f"  {column.name.local_name}", column.type.definition]
        if not column.is_nullable:
            parts.append("NOT NULL")
        if column.default_value is not None:
            parts.append(f"DEFAULT {column.default_value}")
        if column.auto_increment is not None:
            parts.append(f"IDENTITY({column.auto_increment.seed}, {column.auto_increment.increment})")
        if column.is_computed:
            parts.append("COMPUTED")
        lines.append(" ".join(parts))

    if table.primary_key is not None:
        lines.append(f"Primary key: ({', '.join(table.primary_key.column_names)})")
    for key in table.unique_keys:
        lines.append(f"Unique key: ({', '.join(key.column_names)})")
    if table.parent_keys:
        lines.append("Foreign keys:")
        lines.extend(f"  {_format_relation(relation)}" for relation in table.parent_keys)
    if table.child_keys:
        lines.append("Referenced by:")
        lines.extend(f"  {_format_relation(relation)}" for relation in table.child_keys)
    if table.indexes:
        lines.append("Indexes:")
        for index in table.indexes:
            unique = "UNIQUE " if index.is_unique else ""
            expressions = ", ".join(
                f"{column.expression} {column.order.value.upper()}" for column in index.columns
            )
            lines.append(f"  {unique}{index.name.local_name} ({expressions})")
    if table.checks:
        lines.append("Checks:")
        lines.extend(f"  {check.definition}" for check in table.checks)
    if table.triggers:
        lines.append("Triggers:")
        lines.extend(
            f"  {trigger.name.local_name} {trigger.timing.value} {_format_events(trigger.events)}"
            for trigger in table.triggers
        )
    return lines


@app.command()
def describe(
    table: str = typer.Argument(help="Table name, optionally schema-qualified (e.g. dbo.orders)."),
    url: str = typer.Option(None, "--url", "-u", help="Connection URL; overrides saved profiles."),
    connection: str = typer.Option(None, "--connection", "-c", help="Saved connection profile name."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root directory."),
) -> None:
    """Show a table's columns, keys, indexes, checks and triggers."""
    name = _parse_name(table)
    resolved = _resolve_url(url, connection, root)
    result = _run(_read_table(resolved, name), "Introspection")
    if result is None:
        typer.echo(f"Table '{table}' not found.", err=True)
        raise typer.Exit(code=1)
    for line in _describe_lines(result):
        typer.echo(line)


# ---------------------------------------------------------------------------
# Linting
# ---------------------------------------------------------------------------


async def _lint(url: str, engine: LintEngine) -> list[RuleMessage]:
    async with await RelationalDatabase.connect(url) as database:
        snapshot = await database.snapshot()
    return engine.analyse(snapshot)


@app.command()
def rules() -> None:
    """List the built-in lint rules."""
    for rule_id, rule in RULES.items():
        typer.echo(f"{rule_id}: {rule.title}")


@app.command()
def lint(
    url: str = typer.Option(None, "--url", "-u", help="Connection URL; overrides saved profiles."),
    connection: str = typer.Option(None, "--connection", "-c", help="Saved connection profile name."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Project root directory."),
    level: RuleLevel = typer.Option(None, "--level", "-l", help="Level for every rule; defaults to lint.json."),
    disable: list[str] = typer.Option([], "--disable", help="Rule id to skip (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Print messages as JSON."),
    fail_on_error: bool = typer.Option(
        False, "--fail-on-error", help="Exit with 1 when an error-level message is reported."
    ),
) -> None:
    """Run the lint rules over every object in the database.

    Examples:

        schematic lint -u "postgresql://localhost/app"

        schematic lint -c warehouse --level error --fail-on-error

        schematic lint -u "sqlite:///app.db" --disable orphaned-table --json
    """
    resolved = _resolve_url(url, connection, root)
    try:
        lint_config = load_config(root).lint
        rule_set = default_rules(
            level or lint_config.level,
            disabled=set(lint_config.disabled_rules) | set(disable),
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    engine = LintEngine(rule_set)
    messages = _run(_lint(resolved, engine), "Lint")

    if as_json:
        typer.echo(json.dumps([message.to_dict() for message in messages], indent=2))
    else:
        for message in messages:
            typer.echo(f"[{message.level.value}] {message.rule_id}: {message.message}")
        typer.echo(f"{len(messages)} message(s) from {len(rule_set)} rule(s).")

    if fail_on_error and LintEngine.has_errors(messages):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
