from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they are registered with SQLModel metadata
from .models import Task, User  # noqa: F401


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Postgres and friends: disable pooling for serverless and enable pre-ping
    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


def create_tables(engine: Engine) -> None:
    """Create all database tables and indexes."""
    SQLModel.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Dependency to get a database session bound to the app's engine."""
    with Session(request.app.state.engine) as db:
        yield db
