"""
Database configuration and session management.
Uses SQLAlchemy 2.0 with async support.
"""
from typing import Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from app.config import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool options for the configured backend (SQLite manages its own pool)."""
    if database_url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 20, "max_overflow": 10}


# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_models() -> None:
    """Create the documents table if it does not exist (development / tests)."""
    from app.models.base import Base
    import app.models.document  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
