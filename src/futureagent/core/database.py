"""
Async database engine and session factory.

Supports:
- Dev: SQLite with aiosqlite
- Prod: PostgreSQL with asyncpg (Supabase)
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    AsyncSession,
    create_async_engine,
)

from futureagent.core.init_settings import settings
from futureagent.data.repository import ToolRepository


def create_engine() -> AsyncEngine:
    """Create async engine based on environment."""
    if settings.is_dev:
        # SQLite needs check_same_thread=False for async
        return create_async_engine(
            settings.async_db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Production: PostgreSQL with connection pooling
    return create_async_engine(
        settings.async_db_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before use
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine()

AsyncSessionLocal = create_session_factory(engine)


def get_repository() -> ToolRepository:
    """Repository bound to the app's session factory, for dependency injection."""
    return ToolRepository(AsyncSessionLocal)
