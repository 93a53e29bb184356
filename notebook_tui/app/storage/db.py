from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from ..utils.config import get_config
from ..utils.logger import get_logger

logger = get_logger("storage.db")

_engine: Optional[AsyncEngine] = None
_async_session_maker: Optional[sessionmaker] = None


async def init_database() -> AsyncEngine:
    global _engine, _async_session_maker

    if _engine is not None:
        return _engine

    config = get_config().db

    logger.info("Initializing database connection...")

    engine_options = {"echo": config.echo}
    # SQLite engines pick their own pool and reject the sizing arguments
    if not config.is_sqlite:
        engine_options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
        )

    _engine = create_async_engine(config.dsn, **engine_options)

    _async_session_maker = sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    logger.info("Database connection initialized")
    return _engine


async def close_database() -> None:
    global _engine, _async_session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
        logger.info("Database connection closed")


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    if _async_session_maker is None:
        await init_database()

    async with _async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    from .models import Base

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables() -> None:
    from .models import Base

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Database tables dropped")
