"""
Ephemeral connection pool for SQL connections.

A pool lives for exactly one executor call: created from a resolved
connection string, used for one or more queries, then closed. Nothing is
shared between requests.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError

from beakdash.core.config import settings
from beakdash.core.errors import ConfigError, UpstreamError

_log = logging.getLogger(__name__)

# Bare postgres URLs would select psycopg2; psycopg (v3) is the installed driver.
_POSTGRES_DRIVERS = {"postgres": "postgresql+psycopg", "postgresql": "postgresql+psycopg"}


class Pool(Protocol):
    def query(
        self, sql: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    def close(self) -> None: ...


PoolFactory = Callable[[str], Pool]


def _to_engine_url(connection_string: str) -> URL:
    try:
        url = make_url(connection_string)
    except ArgumentError as e:
        raise ConfigError("Invalid connection string", error=str(e)) from e
    driver = _POSTGRES_DRIVERS.get(url.drivername)
    if driver is not None:
        url = url.set(drivername=driver)
    return url


class EphemeralPool:
    """SQLAlchemy engine (QueuePool) scoped to a single call."""

    def __init__(self, connection_string: str) -> None:
        connect_args: dict[str, Any] = {}
        if settings.EXTERNAL_DB_CONNECT_TIMEOUT:
            connect_args["connect_timeout"] = settings.EXTERNAL_DB_CONNECT_TIMEOUT
        try:
            self._engine: Engine | None = create_engine(
                _to_engine_url(connection_string),
                pool_size=settings.EXTERNAL_DB_POOL_SIZE,
                max_overflow=0,
                connect_args=connect_args,
            )
        except (ArgumentError, NoSuchModuleError) as e:
            raise ConfigError("Invalid connection string", error=str(e)) from e

    def query(
        self, sql: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """
        Run one statement and return its rows as dicts ([] for statements
        without a result set).

        Without params the SQL is sent to the driver as-is, so literal ``%``
        and ``:name`` in user queries are left alone.
        """
        if self._engine is None:
            raise RuntimeError("Pool is closed")
        try:
            with self._engine.begin() as conn:
                if params is None:
                    result = conn.execution_options(
                        no_parameters=True
                    ).exec_driver_sql(sql)
                else:
                    result = conn.execute(text(sql), params)
                if not result.returns_rows:
                    return []
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            orig = getattr(e, "orig", None)
            raise UpstreamError(
                "SQL query execution failed", error=str(orig or e).strip()
            ) from e

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


@contextmanager
def ephemeral_pool(
    connection_string: str, pool_factory: PoolFactory = EphemeralPool
) -> Iterator[Pool]:
    """Open a pool for the duration of the block; always close it on exit."""
    pool = pool_factory(connection_string)
    try:
        yield pool
    finally:
        try:
            pool.close()
        except Exception:
            _log.warning("Failed to close ephemeral pool", exc_info=True)
