from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine, select

from beakdash.core.config import settings

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, pool_pre_ping=True)


def init_db(bind: Engine | None = None) -> None:
    """Create registry tables if they do not exist."""
    # Tables must be registered on SQLModel.metadata before create_all
    from beakdash import models  # noqa: F401

    SQLModel.metadata.create_all(bind if bind is not None else engine)


def check_db() -> bool:
    """Run SELECT 1 against the registry database. Returns True if ok."""
    try:
        with Session(engine) as session:
            session.exec(select(1)).first()
        return True
    except Exception:
        return False
