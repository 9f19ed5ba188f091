"""
Async database access helpers (raw SQL) using asyncpg.

`Database` is the storage handle. One instance is created per process, stored
on `app.state.db`, connected on startup and closed on shutdown
(see `api/main.py`). Repositories receive it as their first argument.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from contextlib import asynccontextmanager, contextmanager
import asyncio
from typing import Annotated, Any, AsyncIterator, Iterator

import asyncpg
from fastapi import Path, Request

from . import settings


# Storage failures are explicit and separable from validation/not-found errors.
class DatabaseError(RuntimeError):
    pass


# Ids are `serial` / `integer` columns.
MAX_INT4 = 2**31 - 1

# Path parameter for a row id that fits the integer column.
RowId = Annotated[int, Path(ge=1, le=MAX_INT4)]

# asyncio.TimeoutError is not an OSError before Python 3.11.
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except _DRIVER_ERRORS as exc:
        raise DatabaseError(f"{type(exc).__name__}: {exc}") from exc


async def _init_connection(conn: asyncpg.Connection) -> None:
    # NUMERIC decodes to float so JSON responses carry numbers, not strings.
    await conn.set_type_codec(
        "numeric",
        encoder=str,
        decoder=float,
        schema="pg_catalog",
        format="text",
    )


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def _affected_rows(status: str) -> int:
    """
    Parse the row count out of a command status tag ("UPDATE 3", "INSERT 0 1").
    """
    tail = (status or "").rsplit(" ", 1)[-1]
    return int(tail) if tail.isdigit() else 0


class Session:
    """
    Statement runner bound to one connection (used inside a transaction).
    """

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        with _translate_errors():
            row = await self._conn.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        with _translate_errors():
            rows = await self._conn.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> int:
        with _translate_errors():
            status = await self._conn.execute(sql, *args)
        return _affected_rows(status)


class Database:
    def __init__(
        self,
        dsn: str | None = None,
        *,
        min_size: int | None = None,
        max_size: int | None = None,
        command_timeout: int | None = None,
    ) -> None:
        # DSN is resolved lazily so building the app never needs DATABASE_URL.
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        with _translate_errors():
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn or settings.database_url(),
                min_size=self._min_size or settings.db_pool_min_size(),
                max_size=self._max_size or settings.db_pool_max_size(),
                command_timeout=self._command_timeout or settings.db_command_timeout(),
                init=_init_connection,
            )

    async def close(self) -> None:
        if self._pool is None:
            return None
        pool, self._pool = self._pool, None
        await pool.close()

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        pool = self.pool()
        with _translate_errors():
            row = await pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        pool = self.pool()
        with _translate_errors():
            rows = await pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE). Returns the affected row count.
        """
        pool = self.pool()
        with _translate_errors():
            status = await pool.execute(sql, *args)
        return _affected_rows(status)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Session]:
        """
        Yield a connection-bound session; commit on success, roll back on error.
        """
        pool = self.pool()
        with _translate_errors():
            async with pool.acquire() as conn:  # type: asyncpg.Connection
                async with conn.transaction():
                    yield Session(conn)

    async def ping(self) -> bool:
        try:
            row = await self.fetch_one("SELECT 1 AS ok")
        except DatabaseError:
            return False
        return row is not None


def get_db(request: Request) -> Database:
    """
    FastAPI dependency: the handle owned by the running app.
    """
    return request.app.state.db
