"""Tests for dialect detection and the database facade."""

import pytest
from schematic_core.exceptions import UnsupportedDialectError
from schematic_core.identifier import IdentifierDefaults
from schematic_introspect.dialects import (
    MySqlCatalog,
    OracleCatalog,
    PostgreSqlCatalog,
    SqliteCatalog,
    SqlServerCatalog,
)
from schematic_introspect.engine import RelationalDatabase, detect_dialect, to_async_url


class TestDetectDialect:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("sqlite+aiosqlite:///test.db", SqliteCatalog),
            ("sqlite:///test.db", SqliteCatalog),
            ("postgresql+asyncpg://localhost/db", PostgreSqlCatalog),
            ("postgres://localhost/db", PostgreSqlCatalog),
            ("mysql+aiomysql://localhost/db", MySqlCatalog),
            ("mariadb+aiomysql://localhost/db", MySqlCatalog),
            ("mssql+aioodbc://localhost/db", SqlServerCatalog),
            ("oracle+oracledb://localhost:1521/?service_name=XE", OracleCatalog),
            ("POSTGRESQL+ASYNCPG://localhost/db", PostgreSqlCatalog),
        ],
    )
    def test_known_schemes(self, url, expected):
        assert detect_dialect(url) is expected

    def test_unknown_scheme(self):
        with pytest.raises(UnsupportedDialectError, match="mongodb"):
            detect_dialect("mongodb://localhost:27017/db")

    def test_missing_scheme_is_a_value_error(self):
        with pytest.raises(ValueError):
            detect_dialect("not a url")


class TestToAsyncUrl:
    def test_adds_default_driver(self):
        assert to_async_url("postgresql://u:p@localhost/db") == "postgresql+asyncpg://u:p@localhost/db"
        assert to_async_url("sqlite:///app.db") == "sqlite+aiosqlite:///app.db"

    def test_keeps_explicit_driver(self):
        assert to_async_url("postgresql+psycopg://localhost/db") == "postgresql+psycopg://localhost/db"


async def test_connect_rejects_unknown_dialect():
    with pytest.raises(UnsupportedDialectError):
        await RelationalDatabase.connect("mongodb://localhost/db")


async def test_dispose_without_engine_is_a_no_op():
    database = RelationalDatabase(SqliteCatalog(connection=None), IdentifierDefaults(schema="main"))

    async with database as db:
        assert db.dialect == "sqlite"
        assert db.tables.defaults.schema == "main"
