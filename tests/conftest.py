from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from beakdash.api.deps import get_db, get_executor
from beakdash.engines import ConnectionExecutor
from beakdash.main import app
from tests.utils.fakes import FakePoolFactory


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite registry, one per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def pools() -> FakePoolFactory:
    return FakePoolFactory()


@pytest.fixture
def executor(pools: FakePoolFactory) -> ConnectionExecutor:
    return ConnectionExecutor(pool_factory=pools)


@pytest.fixture
def client(
    engine: Engine, executor: ConnectionExecutor
) -> Generator[TestClient, None, None]:
    def _get_db() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_executor] = lambda: executor
    # No context manager: the lifespan (registry init on Postgres) is not run.
    yield TestClient(app)
    app.dependency_overrides.clear()
