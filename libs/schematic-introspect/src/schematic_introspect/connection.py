"""Thin async query wrapper over a SQLAlchemy engine."""

from __future__ import annotations

import logging
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


class SchematicConnection:
    """Runs parameterized read-only catalog queries.

    Every call checks out its own pooled connection, so independent queries
    can be awaited concurrently. Row keys are lower-cased because some
    engines (Oracle) report unquoted column labels in upper case. Driver and
    SQL errors propagate unmodified.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    async def query(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        async with self.engine.connect() as conn:
            result = await conn.execute(sa.text(sql), params or {})
            rows = [{str(key).lower(): value for key, value in row.items()} for row in result.mappings()]
        logger.debug("Catalog query returned %d row(s)", len(rows))
        return rows

    async def query_first_or_none(self, sql: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        rows = await self.query(sql, params)
        return rows[0] if rows else None

    async def query_scalar(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        row = await self.query_first_or_none(sql, params)
        if row is None:
            return None
        return next(iter(row.values()), None)
