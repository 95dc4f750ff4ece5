import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from catalog.config.settings import Settings
from catalog.exceptions.mapper import db_error_handler

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the AsyncEngine for the configured database URL."""
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,   # Set to False in production
        pool_pre_ping=True,              # Enables connection health checks
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps mapped attributes readable after the
    # commit, when the response is being serialized.
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. One session (and one transaction) per request.

    Never commits: a write endpoint calls `commit_session()` before it returns,
    so a failed commit still reaches the client as an error response. Any
    exception raised by the endpoint rolls the transaction back and is
    re-raised so the exception handlers can translate it.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_async_session)):
            await db.execute(...)
            await commit_session(db, "Category")
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.debug("db.session.rollback", extra={"path": request.url.path})
            raise


async def commit_session(db: AsyncSession, model_name: str | None = None) -> None:
    """
    Commit the request transaction. A failing commit is rolled back and
    raised as a `RepositoryError` (500), like any other database failure.
    """
    async with db_error_handler(db, model_name):
        await db.commit()
