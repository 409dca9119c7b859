"""
Database connection management
"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from wellnest.config import settings
from wellnest.errors import DatabaseUnavailableError
from wellnest.utils.url_builder import build_async_url, normalize_database_url

logger = logging.getLogger(__name__)

# Global database objects
engine: Optional[AsyncEngine] = None
async_session: Optional[async_sessionmaker] = None


def init_database(database_url: Optional[str] = None) -> bool:
    """
    Initialize database connection

    Returns:
        True if initialization successful, False otherwise
    """
    global engine, async_session

    database_url = database_url or settings.DATABASE_URL
    if not database_url:
        logger.warning("DATABASE_URL not set, check-in history will be unavailable")
        return False

    try:
        # Normalize URL for connection pooling
        database_url = normalize_database_url(database_url)
        async_database_url = build_async_url(database_url)

        engine_kwargs = {"echo": False}
        if async_database_url.startswith("postgresql+asyncpg"):
            ssl_required = (
                "sslmode=require" in database_url.lower() or
                settings.SUPABASE_SSLMODE == "require"
            )
            connect_args = {
                "server_settings": {
                    "application_name": "wellnest_backend",
                    "tcp_keepalives_idle": "600",
                    "tcp_keepalives_interval": "30",
                    "tcp_keepalives_count": "3",
                },
                "command_timeout": 60,
                "timeout": 20,
            }
            if ssl_required:
                # Supabase pooler doesn't need cert verification
                connect_args["ssl"] = True

            engine_kwargs.update(
                pool_pre_ping=True,
                pool_size=10,
                max_overflow=20,
                pool_recycle=3600,
                pool_timeout=30,
                connect_args=connect_args,
                pool_reset_on_return="commit",
            )
        else:
            # Local SQLite: a fresh connection per session, usable from any event loop
            engine_kwargs["poolclass"] = NullPool

        engine = create_async_engine(async_database_url, **engine_kwargs)
        async_session = async_sessionmaker(
            bind=engine,
            expire_on_commit=False,
            class_=AsyncSession
        )

        logger.info("Database engine initialized successfully")
        return True

    except Exception as e:
        logger.exception("Failed to initialize database engine: %s", e)
        engine = None
        async_session = None
        return False


def get_session() -> Optional[async_sessionmaker]:
    """
    Get database session maker

    Returns:
        Session maker or None if not initialized
    """
    return async_session


def is_initialized() -> bool:
    """
    Check if database is initialized

    Returns:
        True if initialized, False otherwise
    """
    return engine is not None and async_session is not None


def require_session() -> async_sessionmaker:
    """
    Session maker for routes that cannot work without the database

    Raises:
        DatabaseUnavailableError: If the database is not configured
    """
    if not is_initialized():
        raise DatabaseUnavailableError()
    return async_session
