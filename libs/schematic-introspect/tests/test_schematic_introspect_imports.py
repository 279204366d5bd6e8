"""Smoke tests for schematic-introspect public API imports."""


def test_schematic_introspect_imports():
    import schematic_introspect

    assert schematic_introspect is not None


def test_public_api_exports():
    from schematic_introspect import (
        CatalogQueries,
        MySqlCatalog,
        OracleCatalog,
        PostgreSqlCatalog,
        RelationalDatabase,
        RelationalTableProvider,
        RelationalViewProvider,
        SqliteCatalog,
        SqlServerCatalog,
        TableQueryCache,
        detect_dialect,
    )

    assert RelationalDatabase is not None
    assert RelationalTableProvider is not None
    assert RelationalViewProvider is not None
    assert TableQueryCache is not None
    assert CatalogQueries is not None
    assert detect_dialect is not None
    for catalog in (MySqlCatalog, OracleCatalog, PostgreSqlCatalog, SqliteCatalog, SqlServerCatalog):
        assert catalog.dialect
