"""
Dataset registry and dataset data routes.

GET /datasets/{id}/data returns the dataset's rows (``customQuery`` overrides
the stored query). POST /datasets/{id}/query runs an ad-hoc query against
the dataset, exposed to it as ``dataset_<id>``.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException, Response
from fastapi.responses import JSONResponse
from sqlmodel import col, select

from beakdash.api.deps import ExecutorDep, SessionDep
from beakdash.engines import service
from beakdash.models import Connection, Dataset, Message
from beakdash.schemas import DatasetCreate, DatasetPublic, DatasetQueryIn, DatasetUpdate

router = APIRouter(prefix="/datasets", tags=["datasets"])


def _check_connection(session: SessionDep, connection_id: int | None) -> None:
    if connection_id is not None and session.get(Connection, connection_id) is None:
        raise HTTPException(status_code=404, detail="Connection not found")


@router.get("", response_model=list[DatasetPublic])
def list_datasets(session: SessionDep, connection_id: int | None = None) -> Any:
    """List datasets, optionally only those bound to one connection."""
    stmt = select(Dataset)
    if connection_id is not None:
        stmt = stmt.where(Dataset.connection_id == connection_id)
    return session.exec(stmt.order_by(col(Dataset.name))).all()


@router.post("", response_model=DatasetPublic, status_code=201)
def create_dataset(session: SessionDep, body: DatasetCreate) -> Any:
    _check_connection(session, body.connection_id)
    dataset = Dataset.model_validate(body)
    session.add(dataset)
    session.commit()
    session.refresh(dataset)
    return dataset


@router.get(
    "/{id}/data",
    responses={400: {"model": Message}, 404: {"model": Message}},
)
def get_dataset_data(
    session: SessionDep,
    executor: ExecutorDep,
    id: int,
    customQuery: str | None = None,  # noqa: N803
) -> JSONResponse:
    """Rows for the dataset, fetched through its connection."""
    return service.fetch_dataset_data(session, executor, id, customQuery).to_response()


@router.post(
    "/{id}/query",
    responses={400: {"model": Message}, 404: {"model": Message}},
)
def query_dataset(
    session: SessionDep, executor: ExecutorDep, id: int, body: DatasetQueryIn
) -> JSONResponse:
    """Run an ad-hoc SQL query against the dataset (as ``dataset_<id>``)."""
    return service.query_dataset(session, executor, id, body.query).to_response()


@router.get("/{id}", response_model=DatasetPublic)
def get_dataset(session: SessionDep, id: int) -> Any:
    dataset = session.get(Dataset, id)
    if not dataset:
        raise HTTPException(status_code=404, detail="Dataset not found")
    return dataset


@router.put("/{id}", response_model=DatasetPublic)
def update_dataset(session: SessionDep, id: int, body: DatasetUpdate) -> Any:
    dataset = session.get(Dataset, id)
    if not dataset:
        raise HTTPException(status_code=404, detail="Dataset not found")
    update = body.model_dump(exclude_unset=True)
    if "connection_id" in update:
        _check_connection(session, update["connection_id"])
    dataset.sqlmodel_update(update)
    dataset.updated_at = datetime.now(timezone.utc)
    session.add(dataset)
    session.commit()
    session.refresh(dataset)
    return dataset


@router.delete("/{id}", status_code=204)
def delete_dataset(session: SessionDep, id: int) -> Response:
    dataset = session.get(Dataset, id)
    if not dataset:
        raise HTTPException(status_code=404, detail="Dataset not found")
    session.delete(dataset)
    session.commit()
    return Response(status_code=204)
