"""Per-engine catalog implementations."""

from schematic_introspect.dialects.mysql import MySqlCatalog
from schematic_introspect.dialects.oracle import OracleCatalog
from schematic_introspect.dialects.postgresql import PostgreSqlCatalog
from schematic_introspect.dialects.sqlite import SqliteCatalog
from schematic_introspect.dialects.sqlserver import SqlServerCatalog

__all__ = [
    "MySqlCatalog",
    "OracleCatalog",
    "PostgreSqlCatalog",
    "SqlServerCatalog",
    "SqliteCatalog",
]
