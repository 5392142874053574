"""
FastAPI application factory for the leave workflow engine.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from leaveflow.api.v1.router import router as api_v1_router
from leaveflow.config.database import init_db
from leaveflow.config.logging import get_logger, setup_logging
from leaveflow.config.settings import settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.is_production():
        # Schema management in production is external
        init_db()
    yield


def create_app(initialize_database: bool = True) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        initialize_database: Create tables and seed leave types on startup
            outside production
    """
    setup_logging()
    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan if initialize_database else None,
    )
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()
