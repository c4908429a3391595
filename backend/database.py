"""
Database configuration and session management
Async SQLAlchemy engine for PostgreSQL (asyncpg) with SQLite (aiosqlite) for local runs and tests
"""

from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shared.config import config
from shared.logging_utils import setup_logging

logger = setup_logging("database")


def build_database_url() -> str:
    """
    Build database URL from environment variables with fallback to DATABASE_URL
    Supports individual DB components for flexible configuration
    """
    # Priority 1: Use DATABASE_URL if provided
    database_url = config.get("database_url")
    if database_url:
        # Convert postgres:// to the asyncpg dialect for SQLAlchemy compatibility
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif database_url.startswith("postgresql://"):
            database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif database_url.startswith("sqlite://"):
            database_url = database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return database_url

    # Priority 2: Build from individual components
    db_host = config.get("db_host")
    db_port = config.get("db_port")
    db_user = config.get("db_user")
    db_password = config.get("db_password")
    db_name = config.get("db_name")

    logger.info(f"Built database URL from components: postgresql+asyncpg://{db_user}:***@{db_host}:{db_port}/{db_name}")
    return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async SQLAlchemy engine with appropriate configuration"""
    database_url = database_url or build_database_url()

    if database_url.startswith("sqlite"):
        # SQLite for local development and tests only
        logger.info("Using SQLite database engine")
        return create_async_engine(database_url, connect_args={"check_same_thread": False})

    logger.info("Using PostgreSQL database engine with connection pooling")
    return create_async_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,  # Recycle connections every hour
        pool_size=10,
        max_overflow=20,
        echo=config.get("db_echo", False),
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


# Create engine and session factory
engine = create_database_engine()
AsyncSessionLocal = create_session_factory(engine)
Base = declarative_base()


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to get an async database session"""
    async with AsyncSessionLocal() as session:
        yield session


async def init_database(bind: AsyncEngine | None = None) -> None:
    """Initialize database tables"""
    # Register every model on Base.metadata before creating tables
    import models.database  # noqa: F401

    target = bind or engine
    try:
        async with target.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized successfully")
    except SQLAlchemyError as e:
        logger.error(f"Failed to initialize database tables: {e}")
        raise
