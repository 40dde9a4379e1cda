"""Database connection and session management"""
import asyncio
from typing import AsyncGenerator, Optional

import structlog
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from config import settings

logger = structlog.get_logger()

# Lazy initialization - engine created on first use
_engine: Optional[AsyncEngine] = None
_async_session_maker: Optional[sessionmaker] = None


def _get_database_url() -> str:
    """Get and normalize the configured database URL"""
    url = settings.database_url

    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set. "
            "Please configure it in your .env file."
        )

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

    return url


def get_engine() -> AsyncEngine:
    """Get or create the async engine (lazy initialization)"""
    global _engine

    if _engine is None:
        url = _get_database_url()

        if url.startswith("sqlite"):
            _engine = create_async_engine(
                url,
                echo=settings.debug,
                connect_args={"check_same_thread": False},
            )
        else:
            # statement_cache_size=0 is required behind pgbouncer poolers
            connect_args = {
                "statement_cache_size": 0,
                "server_settings": {
                    "application_name": "portero-residencial"
                },
            }
            if settings.database_ssl:
                connect_args["ssl"] = "require"

            _engine = create_async_engine(
                url,
                echo=settings.debug,
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
                connect_args=connect_args,
            )

    return _engine


def get_session_maker() -> sessionmaker:
    """Get or create the session maker (lazy initialization)"""
    global _async_session_maker

    if _async_session_maker is None:
        _async_session_maker = sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )

    return _async_session_maker


async def init_db() -> None:
    """Initialize database - create tables if not exist"""
    import domain.models  # noqa: F401  registers tables on SQLModel.metadata

    # Retry logic for database connection
    max_retries = 5
    retry_delay = 2  # seconds

    for attempt in range(1, max_retries + 1):
        try:
            logger.info("database_connecting", attempt=attempt, max_retries=max_retries)
            async with get_engine().begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("database_initialized")
            return
        except Exception as e:
            if attempt < max_retries:
                logger.warning("database_connection_failed", attempt=attempt, error=str(e), retry_in=retry_delay)
                await asyncio.sleep(retry_delay)
                retry_delay *= 2  # Exponential backoff
            else:
                logger.error("database_unavailable", attempts=max_retries, error=str(e))
                raise


async def dispose_engine() -> None:
    """Close pooled connections on shutdown"""
    global _engine, _async_session_maker

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_maker = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session"""
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
