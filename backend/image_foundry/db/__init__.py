"""Database package."""
from .database import create_session_engine, init_db

__all__ = [
    "create_session_engine",
    "init_db",
]
