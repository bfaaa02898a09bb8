"""
Registry models: Connection and Dataset.

Connection.config is a free-form JSON bag as written by the dashboard UI
(camelCase keys). It is validated into a typed variant only when the
executor uses it, see ``beakdash.schemas.to_connection_spec``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel
from sqlalchemy import JSON, Column, Enum as SQLEnum, Text
from sqlmodel import Field, Relationship, SQLModel


def _utc_now() -> datetime:
    """Timezone-aware UTC now (replaces deprecated datetime.utcnow())."""
    return datetime.now(timezone.utc)


class ConnectionTypeEnum(str, Enum):
    """Supported connection kinds."""

    CSV = "csv"
    REST = "rest"
    SQL = "sql"


class Message(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Connection - external or inline data source
# ---------------------------------------------------------------------------


class Connection(SQLModel, table=True):
    __tablename__ = "connection"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, index=True)
    type: ConnectionTypeEnum = Field(
        sa_column=Column(
            SQLEnum(
                ConnectionTypeEnum,
                name="connectiontypeenum",
                values_callable=lambda x: [e.value for e in x],
            ),
            nullable=False,
            index=True,
        )
    )
    config: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    description: str | None = Field(default=None, max_length=512)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    datasets: list["Dataset"] = Relationship(back_populates="connection")


# ---------------------------------------------------------------------------
# Dataset - reusable query or table reference bound to one connection
# ---------------------------------------------------------------------------


class Dataset(SQLModel, table=True):
    __tablename__ = "dataset"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255, index=True)
    connection_id: int | None = Field(
        default=None, foreign_key="connection.id", index=True
    )
    query: str | None = Field(default=None, sa_column=Column(Text))
    config: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    connection: Connection | None = Relationship(back_populates="datasets")
