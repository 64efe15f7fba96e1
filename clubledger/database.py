"""Database connection and session management."""
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from clubledger.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

engine_kwargs = {
    "echo": False,
    "future": True,
    "pool_pre_ping": True,  # Verify connections before use
}

connect_args = {}
is_sqlite = make_url(settings.database_url).drivername.startswith("sqlite")

if is_sqlite:
    logger.debug("Using SQLite (no pool sizing)")
else:
    # Determine if we need SSL (for cloud databases)
    if settings.environment == "production":
        connect_args["ssl"] = "require"
        logger.debug("SSL connection enabled (ssl=require)")

    engine_kwargs["pool_recycle"] = 3600  # Recycle connections every hour
    engine_kwargs["pool_size"] = max(1, settings.db_pool_size)
    engine_kwargs["max_overflow"] = max(0, settings.db_max_overflow)

# Create async engine
try:
    engine = create_async_engine(
        settings.database_url,
        connect_args=connect_args,
        **engine_kwargs,
    )
    logger.debug("Database engine created successfully")
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    raise

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


# Dependency for FastAPI
async def get_db():
    """FastAPI dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
