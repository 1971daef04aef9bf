"""Database setup for session storage."""
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from image_foundry.models import Session  # noqa: F401  registers the table


logger = logging.getLogger(__name__)


def create_session_engine(database_url: str = "sqlite://") -> Engine:
    """
    Create the SQLModel engine for session storage.

    An in-memory SQLite URL gets a static pool so every connection sees the
    same database for the lifetime of the engine.
    """
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, **options)
    return create_engine(database_url, echo=False)


def init_db(engine: Engine) -> None:
    """Initialize the database tables."""
    SQLModel.metadata.create_all(engine)
    logger.info("Session tables ready on %s", engine.url)
