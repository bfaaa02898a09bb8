"""
Connection registry and connection-level query routes.

Endpoints: list, create, get, update, delete, tables, table-schema,
execute-query. The query endpoints go through engines.service so every
failure comes back as ``{message, error?}`` with 400/404/500.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from sqlmodel import col, select

from beakdash.api.deps import ExecutorDep, SessionDep
from beakdash.engines import service
from beakdash.models import Connection, ConnectionTypeEnum, Dataset, Message
from beakdash.schemas import (
    ColumnInfo,
    ConnectionCreate,
    ConnectionPublic,
    ConnectionQueryIn,
    ConnectionUpdate,
    TableSchemaIn,
)

router = APIRouter(prefix="/connections", tags=["connections"])


@router.get("", response_model=list[ConnectionPublic])
def list_connections(
    session: SessionDep,
    type: ConnectionTypeEnum | None = None,
) -> Any:
    """List connections, optionally filtered by type."""
    stmt = select(Connection)
    if type is not None:
        stmt = stmt.where(Connection.type == type)
    return session.exec(stmt.order_by(col(Connection.name))).all()


@router.post("", response_model=ConnectionPublic, status_code=201)
def create_connection(session: SessionDep, body: ConnectionCreate) -> Any:
    connection = Connection.model_validate(body)
    session.add(connection)
    session.commit()
    session.refresh(connection)
    return connection


@router.post(
    "/table-schema",
    response_model=list[ColumnInfo],
    responses={400: {"model": Message}, 404: {"model": Message}},
)
def get_table_schema(
    session: SessionDep, executor: ExecutorDep, body: TableSchemaIn
) -> JSONResponse:
    """Column name/type pairs for a table of a sql connection."""
    result = service.get_table_schema(session, executor, body.connection_id, body.table)
    return result.to_response()


@router.post(
    "/execute-query",
    responses={400: {"model": Message}, 404: {"model": Message}},
)
def execute_query(
    session: SessionDep, executor: ExecutorDep, body: ConnectionQueryIn
) -> JSONResponse:
    """Run an ad-hoc SQL query on a sql connection."""
    result = service.execute_connection_query(
        session, executor, body.connection_id, body.query
    )
    return result.to_response()


@router.get(
    "/{id}/tables",
    response_model=list[str],
    responses={400: {"model": Message}, 404: {"model": Message}},
)
def get_tables(session: SessionDep, executor: ExecutorDep, id: int) -> JSONResponse:
    """Base tables in the public schema of a sql connection."""
    return service.list_connection_tables(session, executor, id).to_response()


@router.get("/{id}", response_model=ConnectionPublic)
def get_connection(session: SessionDep, id: int) -> Any:
    connection = session.get(Connection, id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    return connection


@router.put("/{id}", response_model=ConnectionPublic)
def update_connection(session: SessionDep, id: int, body: ConnectionUpdate) -> Any:
    connection = session.get(Connection, id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    update = body.model_dump(exclude_unset=True)
    connection.sqlmodel_update(update)
    connection.updated_at = datetime.now(timezone.utc)
    session.add(connection)
    session.commit()
    session.refresh(connection)
    return connection


@router.delete("/{id}", response_model=Message)
def delete_connection(session: SessionDep, id: int) -> Any:
    """Delete a connection; datasets bound to it are detached, not deleted."""
    connection = session.get(Connection, id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    for dataset in session.exec(
        select(Dataset).where(Dataset.connection_id == id)
    ).all():
        dataset.connection_id = None
        session.add(dataset)
    session.delete(connection)
    session.commit()
    return Message(message="Connection deleted successfully")
