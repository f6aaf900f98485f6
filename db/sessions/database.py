# db/sessions/database.py

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings
from core.logging_config import get_logger
from db.models.base import Base

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_async_session_local: Optional[async_sessionmaker[AsyncSession]] = None


def get_async_session_local() -> async_sessionmaker[AsyncSession]:
    if _async_session_local is None:
        raise RuntimeError("Database session is not initialized. Call init_db() first.")
    return _async_session_local


async def init_db(database_url: Optional[str] = None) -> None:
    global _engine, _async_session_local

    # Register every model on Base.metadata before create_all
    import db.models  # noqa: F401

    database_url = database_url or settings.DATABASE_URL
    logger.info(f"Initializing database engine for {database_url.split('://')[0]}")

    _engine = create_async_engine(
        database_url,
        echo=settings.DEBUG,
        future=True,
    )

    _async_session_local = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("All tables created")


async def shutdown_db() -> None:
    global _engine, _async_session_local
    if _engine:
        await _engine.dispose()
    _engine = None
    _async_session_local = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    session_factory = get_async_session_local()
    async with session_factory() as session:
        yield session
