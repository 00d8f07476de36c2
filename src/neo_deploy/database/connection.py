"""
Database connection management using asyncpg for neo-deploy.
"""
import os
from typing import Optional, Any, List
from contextlib import asynccontextmanager
import asyncpg
from asyncpg import Pool, Record
import logging

from ..core.exceptions import DatabaseError, TransactionError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages the asyncpg connection pool and transactions."""

    def __init__(self, database_url: Optional[str] = None, **pool_config):
        """Initialize DatabaseManager.

        Args:
            database_url: Database URL (defaults to DATABASE_URL env var)
            **pool_config: Additional pool configuration options
        """
        self.pool: Optional[Pool] = None
        self.dsn = database_url or os.getenv("DATABASE_URL", "")
        if "+asyncpg" in self.dsn:
            self.dsn = self.dsn.replace("+asyncpg", "")

        self.pool_config = {
            "min_size": 5,
            "max_size": 20,
            "max_inactive_connection_lifetime": 300,
            "command_timeout": 60,
            **pool_config
        }

    @classmethod
    def from_settings(cls, settings) -> "DatabaseManager":
        """Build a manager from DeploySettings."""
        return cls(
            settings.dsn,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    async def create_pool(self) -> Pool:
        """Create and return a connection pool."""
        if self.pool is None:
            logger.info(f"Creating database pool with size {self.pool_config['max_size']}")
            self.pool = await asyncpg.create_pool(
                self.dsn,
                server_settings={"application_name": os.getenv("APP_NAME", "neo-deploy")},
                **self.pool_config
            )
            logger.info("Database pool created successfully")
        return self.pool

    async def close_pool(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Acquire a connection from the pool."""
        if not self.pool:
            await self.create_pool()

        async with self.pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self, isolation: str = "read_committed"):
        """Create a transaction context.

        Serialization failures surface as TransactionError; the caller decides
        whether to retry.
        """
        async with self.acquire() as connection:
            try:
                async with connection.transaction(isolation=isolation):
                    yield connection
            except asyncpg.SerializationError as e:
                logger.warning(f"Transaction aborted by serialization failure: {e}")
                raise TransactionError(f"Transaction could not be serialized: {e}") from e
            except asyncpg.DeadlockDetectedError as e:
                logger.warning(f"Transaction aborted by deadlock: {e}")
                raise TransactionError(f"Transaction deadlocked: {e}") from e

    async def execute(self, query: str, *args, timeout: float = None) -> str:
        """Execute a query without returning results."""
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: float = None) -> List[Record]:
        """Fetch multiple rows."""
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: float = None) -> Optional[Record]:
        """Fetch a single row."""
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=timeout)

    async def fetchval(self, query: str, *args, column: int = 0, timeout: float = None) -> Any:
        """Fetch a single value."""
        async with self.acquire() as connection:
            return await connection.fetchval(query, *args, column=column, timeout=timeout)


def wrap_database_error(operation: str, error: Exception) -> DatabaseError:
    """Convert a driver error into a DatabaseError."""
    logger.error(f"Database operation '{operation}' failed: {error}")
    return DatabaseError(f"Failed to {operation}: {error}", details={"operation": operation})
