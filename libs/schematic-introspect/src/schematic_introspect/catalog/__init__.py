"""Catalog query layer: row types and the per-dialect query strategy."""

from schematic_introspect.catalog.base import CatalogQueries, CatalogStatements, StatementCatalog
from schematic_introspect.catalog.rows import (
    CheckRow,
    ChildKeyRow,
    ColumnRow,
    ConstraintColumnRow,
    ForeignKeyRow,
    IndexColumnRow,
    QualifiedNameRow,
    RoutineRow,
    SequenceRow,
    SynonymRow,
    TriggerRow,
    ViewRow,
)

__all__ = [
    "CatalogQueries",
    "CatalogStatements",
    "CheckRow",
    "ChildKeyRow",
    "ColumnRow",
    "ConstraintColumnRow",
    "ForeignKeyRow",
    "IndexColumnRow",
    "QualifiedNameRow",
    "RoutineRow",
    "SequenceRow",
    "StatementCatalog",
    "SynonymRow",
    "TriggerRow",
    "ViewRow",
]
