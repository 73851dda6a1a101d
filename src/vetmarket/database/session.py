"""
Session handling for vetmarket.

``SessionManager`` wraps the async session factory bound to one engine. The
API and the CLI open their sessions through it, and ``/health`` reports its
probe results.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import MetaData, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..exceptions import VetMarketException

logger = logging.getLogger(__name__)

HEALTH_CHECK_INTERVAL = 30.0  # seconds


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class SessionManager:
    """Owns the session factory for one engine."""

    def __init__(self, engine: AsyncEngine, **session_options: Any):
        """
        Args:
            engine: Async engine every session binds to
            **session_options: Overrides passed to ``async_sessionmaker``
        """
        self.engine = engine
        self._is_initialized = False
        self._last_health_check = 0.0

        # Handlers return ORM objects after commit, so they must stay loaded.
        options: Dict[str, Any] = {"expire_on_commit": False, "autoflush": True}
        options.update(session_options)
        self.session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, **options)

    async def create_session(self) -> AsyncSession:
        return self.session_factory()

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session, rolling back on error and closing it afterwards.

        Callers commit explicitly; services commit once per operation.
        """
        session = await self.create_session()
        try:
            yield session
        except VetMarketException as e:
            # Domain errors are answered with an error envelope upstream
            await session.rollback()
            logger.debug(f"Rolling back session after {type(e).__name__}: {e.message}")
            raise
        except Exception as e:
            await session.rollback()
            logger.error(f"Rolling back session after error: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session inside ``begin()``: commit on success, roll back on error."""
        async with self.get_session() as session:
            async with session.begin():
                yield session

    async def _probe(self, in_transaction: bool) -> Dict[str, Any]:
        started = time.perf_counter()
        scope = self.get_transaction() if in_transaction else self.get_session()
        async with scope as session:
            await session.execute(text("SELECT 1"))
        return {"status": "pass", "response_time": _elapsed_ms(started)}

    async def health_check(self, force: bool = False) -> Dict[str, Any]:
        """
        Probe the database with a plain query and a transactional query.

        Results are cached for ``HEALTH_CHECK_INTERVAL`` seconds after a
        healthy probe unless ``force`` is set.

        Returns:
            ``{"status": "healthy" | "unhealthy" | "skipped", ...}`` with a
            ``checks`` entry per probe and the engine's dialect name
        """
        now = time.time()
        if not force and now - self._last_health_check < HEALTH_CHECK_INTERVAL:
            return {"status": "skipped", "reason": "recently_checked"}

        report: Dict[str, Any] = {
            "status": "healthy",
            "timestamp": now,
            "database": self.engine.dialect.name,
            "checks": {},
        }
        try:
            report["checks"]["basic_query"] = await self._probe(in_transaction=False)
            report["checks"]["transaction"] = await self._probe(in_transaction=True)
            self._last_health_check = now
        except OperationalError as e:
            logger.error(f"Database unreachable during health check: {e}")
            report["status"] = "unhealthy"
            report["checks"]["connection"] = {
                "status": "fail",
                "error": str(e),
                "error_type": type(e).__name__,
            }
        except SQLAlchemyError as e:
            logger.error(f"Database error during health check: {e}")
            report["status"] = "unhealthy"
            report["checks"]["database"] = {
                "status": "fail",
                "error": str(e),
                "error_type": type(e).__name__,
            }
        return report

    async def initialize_database(self, metadata: Optional[MetaData] = None) -> bool:
        """
        Check the database is reachable and create missing tables.

        Args:
            metadata: Table definitions to create; skipped when None

        Returns:
            True once the database is usable, False otherwise
        """
        health = await self.health_check(force=True)
        if health["status"] != "healthy":
            logger.error(f"Database not reachable, skipping initialization: {health['checks']}")
            return False

        if metadata is not None:
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(metadata.create_all)
            except SQLAlchemyError as e:
                logger.error(f"Creating tables failed: {e}")
                return False
            logger.info(f"Ensured {len(metadata.tables)} tables exist")

        self._is_initialized = True
        return True

    async def close_all_sessions(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized
