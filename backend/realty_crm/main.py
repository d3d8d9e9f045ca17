"""
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from realty_crm.core.config import settings
from realty_crm.core.exceptions import CRMError
from realty_crm.core.logging import setup_logging
from realty_crm.database import Database
from realty_crm.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield
    # Shutdown
    if owns_database:
        await app.state.database.dispose()


async def crm_error_handler(request: Request, exc: CRMError) -> JSONResponse:
    """Render domain errors as {"detail": ...}"""
    content = {"detail": exc.message}
    if exc.field:
        content["field"] = exc.field
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def create_application(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        database: Use this database instead of the configured one
    """

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Real estate CRM: listings, leads, tasks, agents and notifications",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )
    if database is not None:
        app.state.database = database

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_exception_handler(CRMError, crm_error_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "version": settings.VERSION}

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "realty_crm.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
