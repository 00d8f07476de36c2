"""Persistence infrastructure: the asyncpg manager and the in-memory store."""

from .connection import DatabaseManager, wrap_database_error
from .memory import MemoryStore, utc_now

__all__ = [
    "DatabaseManager",
    "wrap_database_error",
    "MemoryStore",
    "utc_now",
]
