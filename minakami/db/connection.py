"""
Connection manager: owns the one async engine for the process.

Every statement runs in its own short transaction (`engine.begin()`), so a
statement either commits as a whole or raises. SQLite serialises writers
internally; the only lock here guards engine creation in initialize().

Public API
----------
initialize()                  -> None          (idempotent)
execute(sql, params)          -> ExecuteResult
query_all(sql, params)        -> list[dict]
query_one(sql, params)        -> dict | None   (query_first is an alias)
run_sync(fn)                  -> Any           (sync callable on a raw connection)
dispose()                     -> None          (shutdown / tests)
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.sql import Executable

from minakami.core.errors import DatabaseConnectionError, QueryError

logger = logging.getLogger(__name__)

Statement = Union[str, Executable]
Params = Optional[Union[Mapping[str, Any], Sequence[Any]]]


@dataclass
class ExecuteResult:
    """Outcome of a mutating statement."""
    insert_id: Optional[int]
    rows_affected: int


def _describe(statement: Statement) -> str:
    return " ".join(str(statement).split())


class DatabaseConnection:
    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._init_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def initialize(self) -> None:
        if self._engine is not None:
            return

        async with self._init_lock:
            if self._engine is not None:
                return

            engine = None
            try:
                engine = create_async_engine(self.url, echo=self.echo)
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            except (SQLAlchemyError, OSError) as exc:
                if engine is not None:
                    await engine.dispose()
                raise DatabaseConnectionError(
                    message=f"Could not open database at {self.url}.",
                    original=exc,
                ) from exc

            self._engine = engine
        logger.info("Database connection initialized (%s)", self.url)

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseConnectionError()
        return self._engine

    @staticmethod
    async def _run(conn: AsyncConnection, statement: Statement, params: Params):
        if isinstance(statement, str):
            if params is None or isinstance(params, Mapping):
                return await conn.execute(text(statement), dict(params or {}))
            # qmark-style raw SQL with positional parameters
            return await conn.exec_driver_sql(statement, tuple(params))
        if params:
            return await conn.execute(statement, params)
        return await conn.execute(statement)

    async def execute(self, statement: Statement, params: Params = None) -> ExecuteResult:
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await self._run(conn, statement, params)
                return ExecuteResult(
                    insert_id=result.lastrowid,
                    rows_affected=result.rowcount,
                )
        except SQLAlchemyError as exc:
            raise QueryError(_describe(statement), exc) from exc

    async def query_all(self, statement: Statement, params: Params = None) -> list[dict]:
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await self._run(conn, statement, params)
                return [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as exc:
            raise QueryError(_describe(statement), exc) from exc

    async def query_one(self, statement: Statement, params: Params = None) -> Optional[dict]:
        rows = await self.query_all(statement, params)
        return rows[0] if rows else None

    query_first = query_one

    async def run_sync(self, fn: Callable[..., Any]) -> Any:
        """Run `fn(sync_connection)` inside a transaction (used for DDL)."""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                return await conn.run_sync(fn)
        except SQLAlchemyError as exc:
            raise QueryError(getattr(fn, "__name__", "run_sync"), exc) from exc

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
