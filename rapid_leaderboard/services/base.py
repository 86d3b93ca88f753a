"""
Base service class for the leaderboard bot.

Gives the registry and snapshot services one transactional session scope
and a small retry helper for SQLite lock contention.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable, TypeVar
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

class BaseService:
    """Base class for database-backed services."""

    def __init__(self, session_factory):
        """
        Args:
            session_factory: Async session factory from the Database class
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that commits on success and rolls back on any exception."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def execute_with_retry(
        self, func: Callable[[], Awaitable[T]], operation: str, max_retries: int = 3
    ) -> T:
        """Run ``func``, retrying with backoff while SQLite reports the database as locked."""
        for attempt in range(max_retries):
            try:
                return await func()
            except OperationalError as e:
                if attempt == max_retries - 1:
                    raise
                logger.warning(f"Retry attempt {attempt + 1} for {operation}: {e}")
                await asyncio.sleep(0.1 * (2 ** attempt))
