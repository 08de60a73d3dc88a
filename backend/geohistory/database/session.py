from typing import AsyncIterator, Optional
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ..config import get_settings

Base = declarative_base()

engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker] = None


async def init_db(database_url: Optional[str] = None) -> None:
    """Create the engine and make sure all tables exist."""
    global engine, SessionLocal
    
    # Models must be registered on Base before create_all
    from . import models  # noqa: F401
    
    engine = create_async_engine(database_url or get_settings().DATABASE_URL)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine's connection pool."""
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    SessionLocal = None


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield a database session for a single request."""
    if SessionLocal is None:
        raise RuntimeError("Database is not initialized")
    async with SessionLocal() as session:
        yield session
