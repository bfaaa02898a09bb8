"""
Pydantic schemas: registry CRUD bodies, connection config variants, and
request bodies for the query routes.

Stored connection configs use camelCase keys (``csvData``, ``connectionString``,
``resultPath``...). The config models accept both camelCase and snake_case.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

from beakdash.core.errors import ConfigError
from beakdash.models import Connection, ConnectionTypeEnum

# ---------------------------------------------------------------------------
# Connection config variants
# ---------------------------------------------------------------------------


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CsvConfig(_ConfigModel):
    csv_data: str | None = None
    file_content: str | None = None
    delimiter: str = ","
    has_headers: bool = True
    quote_char: str = '"'
    trim_fields: bool = True

    @property
    def content(self) -> str | None:
        """Inline CSV text; ``csvData`` wins over the legacy ``fileContent`` key."""
        return self.csv_data or self.file_content


class BasicAuth(_ConfigModel):
    type: Literal["basic"]
    username: str = ""
    password: str = ""


class BearerAuth(_ConfigModel):
    type: Literal["bearer"]
    token: str | None = None


RestAuth = Annotated[BasicAuth | BearerAuth, Field(discriminator="type")]


class RestConfig(_ConfigModel):
    url: str | None = None
    method: str = "GET"
    headers: dict[str, str] | None = None
    auth: RestAuth | None = None
    body: Any = None
    result_path: str | None = None


class SqlConfig(_ConfigModel):
    connection_string: str | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    user: str | None = None
    username: str | None = None
    password: str | None = None
    ssl: bool = False


class CsvConnection(BaseModel):
    type: Literal["csv"]
    id: int | None = None
    config: CsvConfig = Field(default_factory=CsvConfig)


class RestConnection(BaseModel):
    type: Literal["rest"]
    id: int | None = None
    config: RestConfig = Field(default_factory=RestConfig)


class SqlConnection(BaseModel):
    type: Literal["sql"]
    id: int | None = None
    config: SqlConfig = Field(default_factory=SqlConfig)


ConnectionSpec = Annotated[
    CsvConnection | RestConnection | SqlConnection, Field(discriminator="type")
]

_spec_adapter: TypeAdapter[CsvConnection | RestConnection | SqlConnection] = (
    TypeAdapter(ConnectionSpec)
)


def to_connection_spec(
    connection: Connection | dict[str, Any],
) -> CsvConnection | RestConnection | SqlConnection:
    """Validate a stored connection (model or dict) into its typed variant."""
    if isinstance(connection, dict):
        raw = dict(connection)
    else:
        raw = {
            "id": connection.id,
            "type": connection.type,
            "config": connection.config,
        }
    if isinstance(raw.get("type"), ConnectionTypeEnum):
        raw["type"] = raw["type"].value
    if raw.get("config") is None:
        raw["config"] = {}
    try:
        return _spec_adapter.validate_python(raw)
    except ValidationError as e:
        raise ConfigError("Invalid connection configuration", error=str(e)) from e


# ---------------------------------------------------------------------------
# Connection registry
# ---------------------------------------------------------------------------


class ConnectionCreate(SQLModel):
    """Body for POST /connections."""

    name: str = Field(..., min_length=1, max_length=255)
    type: ConnectionTypeEnum
    config: dict[str, Any] = Field(default_factory=dict)
    description: str | None = Field(default=None, max_length=512)


class ConnectionUpdate(SQLModel):
    """Body for PUT /connections/{id}; all fields optional."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: ConnectionTypeEnum | None = None
    config: dict[str, Any] | None = None
    description: str | None = None

    @field_validator("name", "type", "config")
    @classmethod
    def _not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ConnectionPublic(SQLModel):
    id: int
    name: str
    type: ConnectionTypeEnum
    config: dict[str, Any]
    description: str | None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Dataset registry
# ---------------------------------------------------------------------------


class DatasetCreate(SQLModel):
    """Body for POST /datasets. Accepts ``connectionId`` as sent by the UI."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    connection_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("connection_id", "connectionId"),
    )
    query: str | None = None
    config: dict[str, Any] | None = None


class DatasetUpdate(SQLModel):
    """Body for PUT /datasets/{id}; all fields optional."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    connection_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("connection_id", "connectionId"),
    )
    query: str | None = None
    config: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class DatasetPublic(SQLModel):
    id: int
    name: str
    connection_id: int | None
    query: str | None
    config: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Query routes
# ---------------------------------------------------------------------------


class DatasetQueryIn(BaseModel):
    """Body for POST /datasets/{id}/query."""

    query: str = Field(..., min_length=1)


class ConnectionQueryIn(BaseModel):
    """Body for POST /connections/execute-query."""

    model_config = ConfigDict(populate_by_name=True)

    connection_id: int = Field(
        ..., validation_alias=AliasChoices("connectionId", "connection_id")
    )
    query: str = Field(..., min_length=1)


class TableSchemaIn(BaseModel):
    """Body for POST /connections/table-schema."""

    model_config = ConfigDict(populate_by_name=True)

    connection_id: int = Field(
        ..., validation_alias=AliasChoices("connectionId", "connection_id")
    )
    table: str = Field(..., min_length=1)


class ColumnInfo(BaseModel):
    name: str
    type: str
