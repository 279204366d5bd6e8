"""Relational database facade — dialect detection, connection and providers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from schematic_core.exceptions import UnsupportedDialectError
from schematic_core.identifier import Identifier, IdentifierDefaults
from schematic_core.schema import (
    DatabaseRoutine,
    DatabaseSequence,
    DatabaseSnapshot,
    DatabaseSynonym,
    DatabaseView,
    RelationalDatabaseTable,
)
from schematic_core.security import redact_url
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from schematic_introspect.catalog.base import CatalogQueries
from schematic_introspect.connection import SchematicConnection
from schematic_introspect.dialects import (
    MySqlCatalog,
    OracleCatalog,
    PostgreSqlCatalog,
    SqliteCatalog,
    SqlServerCatalog,
)
from schematic_introspect.objects import RoutineProvider, SequenceProvider, SynonymProvider
from schematic_introspect.tables import RelationalTableProvider
from schematic_introspect.views import RelationalViewProvider

logger = logging.getLogger(__name__)

# Default connection timeout in seconds to prevent indefinite hangs on
# unreachable hosts.
_CONNECT_TIMEOUT_SECONDS = 30

# Map URL backends (the scheme without its driver suffix) to catalog classes
_SCHEME_CATALOG_MAP: dict[str, type[CatalogQueries]] = {
    "mssql": SqlServerCatalog,
    "mysql": MySqlCatalog,
    "mariadb": MySqlCatalog,
    "postgresql": PostgreSqlCatalog,
    "postgres": PostgreSqlCatalog,
    "oracle": OracleCatalog,
    "sqlite": SqliteCatalog,
}

# Async driver used when a URL names only the backend
_DEFAULT_ASYNC_DRIVERS: dict[str, str] = {
    "mssql": "mssql+aioodbc",
    "mysql": "mysql+aiomysql",
    "mariadb": "mariadb+aiomysql",
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "oracle": "oracle+oracledb",
    "sqlite": "sqlite+aiosqlite",
}


def _scheme(url: str) -> str:
    return url.split("://")[0].lower() if "://" in url else ""


def detect_dialect(url: str) -> type[CatalogQueries]:
    """Return the catalog class for a connection URL.

    The driver suffix is ignored, so ``postgresql+asyncpg://`` and
    ``postgresql://`` both map to :class:`PostgreSqlCatalog`.

    Raises:
        UnsupportedDialectError: If the URL scheme names no supported engine.
    """
    backend = _scheme(url).split("+")[0]
    catalog_class = _SCHEME_CATALOG_MAP.get(backend)
    if catalog_class is None:
        raise UnsupportedDialectError(f"Cannot detect dialect for connection URL scheme: {_scheme(url)!r}")
    return catalog_class


def to_async_url(url: str) -> str:
    """Add the default async driver to a URL that names only its backend."""
    scheme = _scheme(url)
    if "+" in scheme or scheme not in _DEFAULT_ASYNC_DRIVERS:
        return url
    return _DEFAULT_ASYNC_DRIVERS[scheme] + url[len(scheme) :]


class RelationalDatabase:
    """One database's tables, views, sequences, synonyms and routines.

    Usage::

        async with await RelationalDatabase.connect("sqlite+aiosqlite:///app.db") as db:
            table = await db.get_table(Identifier.create_qualified("orders"))
            async for table in db.get_all_tables():
                ...
    """

    def __init__(
        self,
        catalog: CatalogQueries,
        identifier_defaults: IdentifierDefaults,
        *,
        engine: AsyncEngine | None = None,
    ) -> None:
        self.catalog = catalog
        self.identifier_defaults = identifier_defaults
        self.engine = engine
        self.tables = RelationalTableProvider(catalog, identifier_defaults)
        self.views = RelationalViewProvider(catalog, identifier_defaults)
        self.sequences = SequenceProvider(catalog, identifier_defaults)
        self.synonyms = SynonymProvider(catalog, identifier_defaults)
        self.routines = RoutineProvider(catalog, identifier_defaults)

    @property
    def dialect(self) -> str:
        return self.catalog.dialect

    @classmethod
    async def connect(cls, url: str, *, timeout: float = _CONNECT_TIMEOUT_SECONDS) -> RelationalDatabase:
        """Create an engine for *url*, pick its catalog and discover identifier defaults.

        Raises:
            UnsupportedDialectError: If the URL scheme names no supported engine.
            TimeoutError: If defaults discovery exceeds *timeout* seconds.
        """
        catalog_class = detect_dialect(url)
        safe_url = redact_url(url)
        engine = create_async_engine(make_url(to_async_url(url)), pool_pre_ping=True)
        catalog = catalog_class(SchematicConnection(engine))
        try:
            defaults = await asyncio.wait_for(catalog.get_identifier_defaults(), timeout=timeout)
        except asyncio.TimeoutError:
            await engine.dispose()
            raise TimeoutError(
                f"Connecting to {safe_url} timed out after {timeout}s. The host may be unreachable."
            ) from None
        except Exception as exc:
            await engine.dispose()
            # Re-raise with credentials redacted from the message.
            sanitized_msg = redact_url(str(exc))
            if sanitized_msg != str(exc):
                raise type(exc)(sanitized_msg) from None
            raise
        logger.info("Connected to %s (%s), defaults %s", safe_url, catalog.dialect, defaults)
        return cls(catalog, defaults, engine=engine)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    async def __aenter__(self) -> RelationalDatabase:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()

    # -- tables --------------------------------------------------------------

    async def get_table(self, table_name: Identifier) -> RelationalDatabaseTable | None:
        return await self.tables.get_table(table_name)

    def get_all_tables(self) -> AsyncIterator[RelationalDatabaseTable]:
        return self.tables.get_all_tables()

    # -- views ---------------------------------------------------------------

    async def get_view(self, view_name: Identifier) -> DatabaseView | None:
        return await self.views.get_view(view_name)

    def get_all_views(self) -> AsyncIterator[DatabaseView]:
        return self.views.get_all_views()

    # -- other objects -------------------------------------------------------

    async def get_sequence(self, sequence_name: Identifier) -> DatabaseSequence | None:
        return await self.sequences.get(sequence_name)

    def get_all_sequences(self) -> AsyncIterator[DatabaseSequence]:
        return self.sequences.get_all()

    async def get_synonym(self, synonym_name: Identifier) -> DatabaseSynonym | None:
        return await self.synonyms.get(synonym_name)

    def get_all_synonyms(self) -> AsyncIterator[DatabaseSynonym]:
        return self.synonyms.get_all()

    async def get_routine(self, routine_name: Identifier) -> DatabaseRoutine | None:
        return await self.routines.get(routine_name)

    def get_all_routines(self) -> AsyncIterator[DatabaseRoutine]:
        return self.routines.get_all()

    async def snapshot(self) -> DatabaseSnapshot:
        """Read every object into one immutable snapshot for linting."""
        return DatabaseSnapshot(
            identifier_defaults=self.identifier_defaults,
            tables=tuple([table async for table in self.get_all_tables()]),
            views=tuple([view async for view in self.get_all_views()]),
            sequences=tuple([sequence async for sequence in self.get_all_sequences()]),
            synonyms=tuple([synonym async for synonym in self.get_all_synonyms()]),
            routines=tuple([routine async for routine in self.get_all_routines()]),
        )
