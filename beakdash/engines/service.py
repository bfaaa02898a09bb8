"""
Boundary between the HTTP routes and the connection executor.

Looks up datasets and connections in the registry, runs the executor and
converts every outcome into a FetchResult (200 + rows, or 400/404/500 +
message). Failures are logged here, once.
"""

import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlmodel import Session

from beakdash.core.errors import ConfigError, ExecutionError, NotFoundError
from beakdash.engines.executor import ConnectionExecutor
from beakdash.models import Connection, Dataset

logger = logging.getLogger(__name__)

# bytea as base64; numeric as its exact text (no float rounding)
ROW_ENCODERS: dict[Any, Callable[[Any], Any]] = {
    bytes: lambda value: base64.b64encode(value).decode("ascii"),
    Decimal: str,
}


def encode_rows(rows: Any) -> Any:
    """JSON-ready copy of the rows an operation returned."""
    return jsonable_encoder(rows, custom_encoder=ROW_ENCODERS)


@dataclass(frozen=True)
class FetchResult:
    status: int
    rows: Any = None
    message: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == 200

    def body(self) -> Any:
        if self.ok:
            return self.rows
        content: dict[str, Any] = {"message": self.message}
        if self.error is not None:
            content["error"] = self.error
        return content

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status, content=jsonable_encoder(self.body())
        )


def get_dataset(session: Session, dataset_id: int) -> Dataset:
    dataset = session.get(Dataset, dataset_id)
    if dataset is None:
        raise NotFoundError("Dataset not found")
    return dataset


def get_connection(session: Session, connection_id: int) -> Connection:
    connection = session.get(Connection, connection_id)
    if connection is None:
        raise NotFoundError("Connection not found")
    return connection


def _connection_for(session: Session, dataset: Dataset) -> Connection:
    if dataset.connection_id is None:
        raise ConfigError("Dataset has no associated connection")
    return get_connection(session, dataset.connection_id)


def run_boundary(operation: str, fn: Callable[[], Any]) -> FetchResult:
    """Run ``fn`` and classify its outcome; no retries, no partial results."""
    try:
        rows = encode_rows(fn())
    except ExecutionError as e:
        logger.warning("%s failed (%s): %s", operation, e.status_code, e)
        return FetchResult(status=e.status_code, message=e.message, error=e.error)
    except Exception:
        logger.exception("%s failed with an unexpected error", operation)
        return FetchResult(status=500, message="Internal server error")
    return FetchResult(status=200, rows=rows)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def fetch_dataset_data(
    session: Session,
    executor: ConnectionExecutor,
    dataset_id: int,
    custom_query: str | None = None,
) -> FetchResult:
    """Rows for a dataset; ``custom_query`` is the per-request override."""

    def _run() -> list[dict[str, Any]]:
        dataset = get_dataset(session, dataset_id)
        connection = _connection_for(session, dataset)
        return executor.fetch_rows(connection, dataset, custom_query)

    return run_boundary("Get dataset data", _run)


def query_dataset(
    session: Session,
    executor: ConnectionExecutor,
    dataset_id: int,
    query: str,
) -> FetchResult:
    """Run an ad-hoc query against a dataset (wrapped as ``dataset_<id>``)."""

    def _run() -> list[dict[str, Any]]:
        dataset = get_dataset(session, dataset_id)
        connection = _connection_for(session, dataset)
        if connection.type != "sql":
            raise ConfigError("Connection must be of type 'sql'")
        return executor.fetch_rows(connection, dataset, query)

    return run_boundary("Execute dataset query", _run)


def execute_connection_query(
    session: Session,
    executor: ConnectionExecutor,
    connection_id: int,
    query: str,
) -> FetchResult:
    def _run() -> list[dict[str, Any]]:
        connection = get_connection(session, connection_id)
        return executor.run_query(connection, query)

    return run_boundary("Execute SQL query", _run)


def list_connection_tables(
    session: Session,
    executor: ConnectionExecutor,
    connection_id: int,
) -> FetchResult:
    def _run() -> list[str]:
        connection = get_connection(session, connection_id)
        return executor.list_tables(connection)

    return run_boundary("Get tables", _run)


def get_table_schema(
    session: Session,
    executor: ConnectionExecutor,
    connection_id: int,
    table: str,
) -> FetchResult:
    def _run() -> list[dict[str, Any]]:
        connection = get_connection(session, connection_id)
        return executor.table_columns(connection, table)

    return run_boundary("Get table schema", _run)
