"""Database Session Managers — one async connection pool per tier with rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial state leaks)
    - Connection pools use pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py), tagged with the tier
    - The engine itself never reads module globals: handles are injected at construction

Design Decisions:
    - TierDatabases holder initialized on startup: FastAPI lifespan manages lifecycle
      and hands the managers to the FederationEngine (no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
    - from_engine(): tests and scripts reuse an existing engine (e.g. in-memory SQLite)
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from ledgerfed.core.domain_types import Tier
from ledgerfed.core.errors import DatabaseError, ErrorContext

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions for one tier with pooling, rollback and health checks."""

    def __init__(
        self,
        database_url: str,
        tier: Tier,
        pool_size: int = 20,
        max_overflow: int = 10,
    ):
        self.tier = tier
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_engine(cls, engine: AsyncEngine, tier: Tier) -> "DatabaseSessionManager":
        """Wrap an existing engine (pool settings already decided by the caller)."""
        manager = cls.__new__(cls)
        manager.tier = tier
        manager.engine = engine
        manager._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )
        return manager

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        ctx = ErrorContext(tier=self.tier.value)
        try:
            yield session
        except OperationalError as e:
            await session.rollback()
            logger.error(f"{self.tier.value} DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute", ctx)
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"{self.tier.value} DB driver error: {e}")
            raise DatabaseError("Database driver error", "query", ctx)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"{self.tier.value} SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown", ctx)
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"{self.tier.value} DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


@dataclass
class TierDatabases:
    """The two long-lived store handles, acquired once and reused."""
    hot: DatabaseSessionManager
    cold: DatabaseSessionManager

    async def dispose(self) -> None:
        await self.hot.dispose()
        await self.cold.dispose()


def init_databases(
    hot_url: str, cold_url: str, **kwargs,
) -> TierDatabases:
    """Create both tier managers; called once from the application lifespan."""
    return TierDatabases(
        hot=DatabaseSessionManager(hot_url, Tier.HOT, **kwargs),
        cold=DatabaseSessionManager(cold_url, Tier.COLD, **kwargs),
    )
