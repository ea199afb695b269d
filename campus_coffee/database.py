"""Database configuration and session management with resilience"""
import asyncio
import logging
import time
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from campus_coffee.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_engine: Optional[AsyncEngine] = None
_async_session: Optional[async_sessionmaker] = None

# Connection error types
CONNECTION_ERRORS = (
    ConnectionError,
    ConnectionRefusedError,
    ConnectionResetError,
    BrokenPipeError,
    TimeoutError,
    asyncio.TimeoutError,
    OSError,
)

# Base class for models
Base = declarative_base()


def is_connection_error(error: Exception) -> bool:
    """Check if an exception indicates a connection problem"""
    if isinstance(error, CONNECTION_ERRORS):
        return True

    if isinstance(error, (DBAPIError, OperationalError, InterfaceError)):
        error_str = str(error).lower()
        keywords = [
            'connection refused', 'connection reset', 'connection closed',
            'broken pipe', 'timeout', 'connect call failed',
            'server closed the connection', 'could not connect',
        ]
        return any(kw in error_str for kw in keywords)

    return False


def _create_engine(database_url: str) -> AsyncEngine:
    """Create a new SQLAlchemy async engine"""
    if database_url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive across sessions
        return create_async_engine(
            database_url,
            echo=settings.debug,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_timeout=30,
        connect_args={
            "server_settings": {"timezone": "UTC"},
            "command_timeout": 60,
        }
    )


def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Initialize the database engine and session factory"""
    global _engine, _async_session

    _engine = _create_engine(database_url or settings.database_url)
    _async_session = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    logger.info("Database engine initialized")
    return _engine


def get_session_factory() -> async_sessionmaker:
    """Session factory for code running outside a request"""
    if _async_session is None:
        init_engine()
    return _async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session with retry on connection errors"""
    max_retries = 3
    session_factory = get_session_factory()

    for attempt in range(max_retries + 1):
        session = session_factory()
        try:
            # Fail fast here, before the request handler runs
            await session.connection()
            break
        except Exception as e:
            await session.close()
            if is_connection_error(e) and attempt < max_retries:
                delay = 1.0 * (2 ** attempt)
                logger.warning(
                    f"Database connection error (attempt {attempt + 1}/{max_retries + 1}): {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)
                continue
            raise

    try:
        yield session
    finally:
        await session.close()


async def init_db():
    """Initialize database tables"""
    # Registers the POS table on Base.metadata
    import campus_coffee.models  # noqa: F401

    if _engine is None:
        init_engine()
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def health_check() -> dict:
    """Check database connection health"""
    if _engine is None:
        init_engine()
    start = time.time()
    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        latency = (time.time() - start) * 1000
        return {'healthy': True, 'latency_ms': latency, 'error': None}
    except Exception as e:
        latency = (time.time() - start) * 1000
        return {'healthy': False, 'latency_ms': latency, 'error': str(e)}


async def close_db():
    """Close database engine gracefully"""
    global _engine, _async_session
    if _engine:
        await _engine.dispose()
        _engine = None
        _async_session = None
        logger.info("Database engine closed")
