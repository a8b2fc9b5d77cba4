"""Database package for Helix."""

from helix.db.base import Base
from helix.db.session import async_session_maker, engine, get_db

__all__ = [
    "Base",
    "async_session_maker",
    "engine",
    "get_db",
]
