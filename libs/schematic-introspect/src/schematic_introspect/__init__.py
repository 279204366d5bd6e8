"""schematic-introspect — Multi-dialect relational catalog introspection."""

from schematic_introspect.cache import TableQueryCache
from schematic_introspect.catalog.base import CatalogQueries, StatementCatalog
from schematic_introspect.connection import SchematicConnection
from schematic_introspect.dialects import (
    MySqlCatalog,
    OracleCatalog,
    PostgreSqlCatalog,
    SqliteCatalog,
    SqlServerCatalog,
)
from schematic_introspect.engine import RelationalDatabase, detect_dialect
from schematic_introspect.objects import RoutineProvider, SequenceProvider, SynonymProvider
from schematic_introspect.tables import RelationalTableProvider
from schematic_introspect.views import RelationalViewProvider

__all__ = [
    "CatalogQueries",
    "MySqlCatalog",
    "OracleCatalog",
    "PostgreSqlCatalog",
    "RelationalDatabase",
    "RelationalTableProvider",
    "RelationalViewProvider",
    "RoutineProvider",
    "SchematicConnection",
    "SequenceProvider",
    "SqlServerCatalog",
    "SqliteCatalog",
    "StatementCatalog",
    "SynonymProvider",
    "TableQueryCache",
    "detect_dialect",
]
