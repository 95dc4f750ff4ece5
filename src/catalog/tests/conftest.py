"""
Core pytest configuration for the whole test suite.

Only the database setup and app/client plumbing live here. Domain fixtures
(repositories, services, sample payloads) are in `tests/test_fixtures/` and
imported at the bottom of this module so every test can use them.

Database selection:
  - TEST_DATABASE_URL (e.g. postgresql+psycopg://... in CI) when set;
  - otherwise a fresh SQLite file (aiosqlite) under the test's tmp_path.
"""

from __future__ import annotations

import os
import logging
from typing import AsyncGenerator, Generator
from urllib.parse import urlparse

# Silence chatty libraries before they are imported and configure themselves.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from catalog.config.settings import Settings
from catalog.core.logging.builder import setup_logging
from catalog.database.base import Base
from catalog.main import create_app
import catalog.models  # noqa: F401 - registers tables on Base.metadata

logger = logging.getLogger(__name__)


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    if parsed.hostname:
        return f"{parsed.scheme}://{parsed.hostname}:{parsed.port or ''}/{parsed.path.lstrip('/')}"
    return f"{parsed.scheme}://{parsed.path}"


def get_test_database_url(tmp_dir) -> str:
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url
    return f"sqlite+aiosqlite:///{tmp_dir / 'test_catalog.db'}"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for one test: its own database, plain-text logs on the console."""
    settings = Settings(
        ENV="testing",
        SQLALCHEMY_DATABASE_URL=get_test_database_url(tmp_path),
        LOG_LEVEL="WARNING",
        LOG_FORMAT="text",
        LOG_TO_STDOUT=True,
        LOG_USE_QUEUE=False,
    )
    logger.debug("Using test DB: %s", safe_log_db_url(settings.DATABASE_URL))
    return settings


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Install the application logging config once for the session."""
    setup_logging(
        Settings(ENV="testing", LOG_LEVEL="WARNING", LOG_FORMAT="text", LOG_TO_STDOUT=True)
    )
    yield


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture
async def async_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(test_settings.DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    A session on the per-test database. Repositories only flush, so nothing is
    committed unless a test does it explicitly; the tables are dropped afterwards.
    """
    maker = async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session
        await session.rollback()


# ------------------------------------------------------------------------------------------------
# HTTP FIXTURES
# ------------------------------------------------------------------------------------------------


async def _drop_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def api_client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """
    TestClient on a fully wired app. Entering the client runs the lifespan,
    which creates the engine and the tables.
    """
    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client
        client.portal.call(_drop_tables, app.state.engine)


# Domain fixtures, registered globally
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    category_repository,
    category_service,
    sample_category_data,
    create_category,
    created_category,
    multiple_categories,
)
