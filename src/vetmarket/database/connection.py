"""
Database connection utilities for the vetmarket package.

This module provides async SQLAlchemy engine configuration and connection
management utilities. PostgreSQL (asyncpg) is the production backend; SQLite
(aiosqlite) is accepted for local development and the test suite.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

logger = logging.getLogger(__name__)

_ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


class DatabaseConfig:
    """Configuration class for database connections."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        """
        Initialize database configuration.

        Args:
            database_url: PostgreSQL or SQLite connection URL
            pool_size: Number of connections to maintain in the pool
            max_overflow: Maximum number of connections that can overflow the pool
            pool_timeout: Timeout for getting connection from pool
            pool_recycle: Time in seconds to recycle connections
            echo: Whether to echo SQL statements
        """
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo

        self._validate_database_url()

    @property
    def is_sqlite(self) -> bool:
        """Whether the URL points at a SQLite database."""
        return self.database_url.startswith("sqlite")

    def _validate_database_url(self) -> None:
        """Validate the database URL format."""
        parsed = urlparse(self.database_url)
        if parsed.scheme.startswith("sqlite"):
            return
        if not parsed.scheme.startswith("postgresql"):
            raise ValueError(
                "Invalid database URL: must use postgresql://, "
                "postgresql+asyncpg:// or sqlite+aiosqlite://"
            )
        if not parsed.hostname:
            raise ValueError("Invalid database URL: must include hostname")
        if not parsed.path or parsed.path == "/":
            raise ValueError("Invalid database URL: must include database name")

    def get_async_url(self) -> str:
        """Convert database URL to async driver format if needed."""
        scheme, sep, rest = self.database_url.partition("://")
        if scheme in _ASYNC_DRIVERS:
            return f"{_ASYNC_DRIVERS[scheme]}{sep}{rest}"
        return self.database_url


def create_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    echo: bool = False,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine with proper configuration.

    SQLite URLs always use ``NullPool`` since aiosqlite connections are cheap
    and must not be shared across event loops.

    Args:
        database_url: Database connection URL
        pool_size: Number of connections to maintain in the pool
        max_overflow: Maximum number of connections that can overflow the pool
        pool_timeout: Timeout for getting connection from pool
        pool_recycle: Time in seconds to recycle connections
        pool_pre_ping: Whether to validate connections before use
        echo: Whether to echo SQL statements
        use_null_pool: Whether to use NullPool (useful for testing)
        connect_args: Additional connection arguments

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ValueError: If database URL is invalid
    """
    config = DatabaseConfig(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        echo=echo,
    )

    async_url = config.get_async_url()

    engine_kwargs: Dict[str, Any] = {"echo": config.echo}

    if connect_args:
        engine_kwargs["connect_args"] = connect_args

    if use_null_pool or config.is_sqlite:
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs.update(
            {
                "poolclass": AsyncAdaptedQueuePool,
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
                "pool_pre_ping": pool_pre_ping,
            }
        )

    try:
        engine = create_async_engine(async_url, **engine_kwargs)
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise

    target = urlparse(async_url).hostname or "local sqlite"
    logger.info(f"Created async database engine for {target}")
    return engine
