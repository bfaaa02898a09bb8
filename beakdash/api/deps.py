from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from beakdash.core.db import engine
from beakdash.engines import ConnectionExecutor


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def get_executor(request: Request) -> ConnectionExecutor:
    """The ConnectionExecutor created by the application lifespan."""
    return request.app.state.executor


SessionDep = Annotated[Session, Depends(get_db)]
ExecutorDep = Annotated[ConnectionExecutor, Depends(get_executor)]
