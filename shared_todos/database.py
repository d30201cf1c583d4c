import logging
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

from shared_todos.config import get_settings
from shared_todos.errors import StorageError

settings = get_settings()
logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False, timeout: float | None = None):
    """Create a pooled engine; SQLite connections are shared across worker threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if timeout is not None:
            connect_args["timeout"] = timeout
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(
    settings.database_url,
    echo=settings.database_echo,
    timeout=settings.db_timeout_seconds,
)


def create_db_and_tables():
    SQLModel.metadata.create_all(engine)


@contextmanager
def storage_errors(session: Session, action: str):
    """Roll back and re-raise database failures as StorageError."""
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Database error while trying to {action}: {exc}", exc_info=True)
        raise StorageError() from exc


def get_session():
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]
