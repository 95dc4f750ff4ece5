"""
Application factory and server entry point.

    uvicorn catalog.main:create_app --factory
    catalog-api            # console script, same thing with settings from the environment
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from catalog.api.v1.categories import router as categories_router
from catalog.api.v1.error_handlers import register_exception_handlers
from catalog.config.settings import Settings, get_settings
from catalog.core.logging import RequestIDMiddleware, setup_logging, stop_queue_logging
from catalog.database.base import Base
from catalog.database.session import build_engine, build_session_maker
from catalog.utils.logging import get_project_version
import catalog.models  # noqa: F401 - registers the tables on Base.metadata

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings)
        # No migrations: the single table is created if missing.
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        app.state.engine = engine
        app.state.session_maker = build_session_maker(engine)
        logger.info("app.startup", extra={"env": settings.ENV})
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("app.shutdown")
            stop_queue_logging()

    app = FastAPI(title="Catalog API", version=get_project_version(), lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(categories_router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "catalog.main:create_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.RELOAD,
        # logging is configured by create_app(); keep uvicorn from overriding it
        log_config=None,
    )


if __name__ == "__main__":
    run()
