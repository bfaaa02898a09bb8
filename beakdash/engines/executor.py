"""
Connection executor: turns a stored connection (+ dataset) into rows.

Dispatches on the connection variant (csv / rest / sql). Every call opens
its own ephemeral resource (CSV parse, HTTP client, SQL pool) and releases
it before returning; no state is shared between calls.
"""

import logging
from typing import Any

import httpx

from beakdash.core.config import settings
from beakdash.core.errors import ConfigError, UpstreamError
from beakdash.core.pool import (
    EphemeralPool,
    PoolFactory,
    ephemeral_pool,
    resolve_connection_string,
)
from beakdash.engines.csv_reader import read_csv_rows
from beakdash.engines.rest import fetch_rest_rows
from beakdash.engines.sql import COLUMNS_QUERY, TABLES_QUERY, compose_query
from beakdash.models import Connection, Dataset
from beakdash.schemas import (
    CsvConnection,
    RestConnection,
    SqlConnection,
    to_connection_spec,
)

_log = logging.getLogger(__name__)

ConnectionVariant = CsvConnection | RestConnection | SqlConnection


def _spec(connection: Connection | ConnectionVariant) -> ConnectionVariant:
    if isinstance(connection, CsvConnection | RestConnection | SqlConnection):
        return connection
    return to_connection_spec(connection)


def _require_sql(connection: Connection | ConnectionVariant) -> SqlConnection:
    spec = _spec(connection)
    if not isinstance(spec, SqlConnection):
        raise ConfigError("Connection must be of type 'sql'")
    return spec


class ConnectionExecutor:
    """
    fetch_rows(connection, dataset, override_query=None) -> list[dict]

    Also: run_query, list_tables, table_columns for sql connections.
    Constructed once at startup and injected into routes; pool_factory and
    http_transport are the seams tests replace.
    """

    def __init__(
        self,
        *,
        pool_factory: PoolFactory = EphemeralPool,
        http_transport: httpx.BaseTransport | None = None,
        rest_timeout: float | None = None,
    ) -> None:
        self._pool_factory = pool_factory
        self._http_transport = http_transport
        self._rest_timeout = rest_timeout
        self._closed = False

    @classmethod
    def from_settings(cls) -> "ConnectionExecutor":
        return cls(rest_timeout=settings.REST_REQUEST_TIMEOUT)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop accepting calls (application shutdown)."""
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("ConnectionExecutor is closed")

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def fetch_rows(
        self,
        connection: Connection | ConnectionVariant,
        dataset: Dataset,
        override_query: str | None = None,
    ) -> list[dict[str, Any]]:
        self._check_open()
        spec = _spec(connection)

        if isinstance(spec, CsvConnection):
            return read_csv_rows(spec.config)

        if isinstance(spec, RestConnection):
            return fetch_rest_rows(
                spec.config,
                timeout=self._rest_timeout,
                transport=self._http_transport,
            )

        connection_string = resolve_connection_string(spec.config)
        sql = compose_query(dataset, override_query)
        _log.info(
            "Executing SQL query on connection %s for dataset %s: %s",
            spec.id,
            dataset.id,
            sql,
        )
        return self._query(connection_string, sql)

    def run_query(
        self, connection: Connection | ConnectionVariant, query: str
    ) -> list[dict[str, Any]]:
        """Run an ad-hoc query against a sql connection."""
        self._check_open()
        spec = _require_sql(connection)
        connection_string = resolve_connection_string(spec.config)
        _log.info("Executing SQL query on connection %s: %s", spec.id, query)
        return self._query(connection_string, query)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def list_tables(self, connection: Connection | ConnectionVariant) -> list[str]:
        """Base tables in the public schema, sorted by name."""
        self._check_open()
        spec = _require_sql(connection)
        connection_string = resolve_connection_string(spec.config)
        rows = self._query(
            connection_string,
            TABLES_QUERY,
            failure_message="Failed to retrieve database tables",
        )
        return [row["table_name"] for row in rows]

    def table_columns(
        self, connection: Connection | ConnectionVariant, table: str
    ) -> list[dict[str, Any]]:
        """Column name/type pairs for ``table`` in ordinal order."""
        self._check_open()
        spec = _require_sql(connection)
        connection_string = resolve_connection_string(spec.config)
        return self._query(
            connection_string,
            COLUMNS_QUERY,
            {"table": table},
            failure_message="Failed to retrieve table schema",
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _query(
        self,
        connection_string: str,
        sql: str,
        params: dict[str, Any] | None = None,
        *,
        failure_message: str | None = None,
    ) -> list[dict[str, Any]]:
        try:
            with ephemeral_pool(connection_string, self._pool_factory) as pool:
                return pool.query(sql, params)
        except UpstreamError as e:
            if failure_message is None:
                raise
            raise UpstreamError(failure_message, error=e.error) from e
