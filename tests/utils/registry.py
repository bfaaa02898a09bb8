"""Test helpers for Connection and Dataset records."""

from typing import Any

from sqlmodel import Session

from beakdash.models import Connection, ConnectionTypeEnum, Dataset
from tests.utils.utils import random_lower_string

SQL_CONFIG = {"connectionString": "postgresql://u:p@db.example.com:5432/analytics"}


def create_connection(
    db: Session,
    *,
    type: ConnectionTypeEnum = ConnectionTypeEnum.SQL,
    config: dict[str, Any] | None = None,
    name: str | None = None,
) -> Connection:
    connection = Connection(
        name=name or f"conn-{random_lower_string()}",
        type=type,
        config=dict(SQL_CONFIG) if config is None else config,
    )
    db.add(connection)
    db.commit()
    db.refresh(connection)
    return connection


def create_dataset(
    db: Session,
    *,
    connection: Connection | None = None,
    connection_id: int | None = None,
    query: str | None = None,
    config: dict[str, Any] | None = None,
    name: str | None = None,
) -> Dataset:
    dataset = Dataset(
        name=name or f"ds-{random_lower_string()}",
        connection_id=connection.id if connection is not None else connection_id,
        query=query,
        config=config,
    )
    db.add(dataset)
    db.commit()
    db.refresh(dataset)
    return dataset
