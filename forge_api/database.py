"""
Forge API - Database Session Management
=========================================

What:  Async SQLAlchemy engine, session factory, and the FastAPI session dependency.
How:   create_app() builds one Database from the settings and stores it on
       app.state. get_db_session pulls it from there, yields a session per
       request, commits on success and rolls back on error.
Who:   Route handlers (via Depends), the health check and the test harness.

Connection Pooling (PostgreSQL):
    pool_size:       persistent connections for normal load
    max_overflow:    temporary connections for traffic spikes
    pool_pre_ping:   validates connections before use
    pool_recycle:    recycles connections every hour
    Each logical operation borrows one connection for the duration of its
    session and returns it when the session closes.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from forge_api.config import DatabaseConfig

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between the models and Alembic.
    """
    pass


def create_engine_from_config(config: DatabaseConfig, echo: bool = False) -> AsyncEngine:
    """Build an async engine; pool sizing is only passed to pooled server backends."""
    url = make_url(config.url)
    options = {"echo": echo}
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_pre_ping=config.pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(config.url, **options)


class Database:
    """
    Owns the engine and the session factory for one application instance.

    expire_on_commit=False keeps ORM attributes readable after the request
    transaction commits (responses are serialized after commit).
    """

    def __init__(self, config: DatabaseConfig, echo: bool = False):
        self.config = config
        self.engine = create_engine_from_config(config, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create all tables from model metadata (tests only; deployments use Alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections (called on application shutdown)."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    1. Creates a session from the app's Database
    2. Yields it to the route handler
    3. On success: commits the transaction
    4. On error: rolls back and re-raises for the global error handlers
    5. Always: closes the session (returns the connection to the pool)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
