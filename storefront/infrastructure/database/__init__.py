"""Database engine and session management."""

from .config import (
    DatabaseSettings,
    close_database,
    get_engine,
    get_session_factory,
    init_database,
)

__all__ = [
    "DatabaseSettings",
    "close_database",
    "get_engine",
    "get_session_factory",
    "init_database",
]
