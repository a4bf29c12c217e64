"""
Flippi FastAPI Application
Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database import init_db, close_db
from app.exceptions import AppError
from app.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from app.schemas.common import ErrorResponse
from app.services.rate_limit_service import RateLimitCounter, build_limiters

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and cleanup on shutdown.
    """
    from app.logging_config import setup_logging
    setup_logging(log_dir=settings.log_dir, log_level=settings.log_level)

    logger.info(f"Starting {settings.app_name} backend")

    # Create tables directly in debug mode; production uses Alembic migrations
    if settings.debug:
        await init_db()
        logger.info("Database initialized (debug mode)")

    yield

    logger.info(f"Shutting down {settings.app_name} backend")
    await close_db()


# =============================================================================
# Error Handlers
# =============================================================================

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    content = ErrorResponse(error=exc.message, details=exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content=content.model_dump(exclude_none=True),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(loc) for loc in error["loc"][1:]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="Validation failed", details=details).model_dump(),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error").model_dump(exclude_none=True),
    )


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        description="""
        ## Thrifting Assistant API

        Flippi stores AI price assessments of secondhand items.

        ### Features
        - **Accounts**: Registration, login, rotating refresh tokens with reuse detection
        - **Scan History**: Save, list, favorite and annotate item assessments
        - **Automation**: Admin view of batch job runs and errors
        """,
        version="0.1.0",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    # Configure rate limiting; one counter store shared by every limiter
    counter = RateLimitCounter(settings.rate_limit_storage_uri)
    application.state.rate_limit_counter = counter
    application.state.rate_limiters = build_limiters(counter, settings)

    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(SQLAlchemyError, database_error_handler)

    application.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    application.add_middleware(SecurityHeadersMiddleware)

    _include_routers(application)
    return application


def _include_routers(application: FastAPI) -> None:
    from app.api import auth, scans, users, automation, legal, health
    from app.api.dependencies import rate_limit

    api_limit = [Depends(rate_limit("general"))]
    prefix = settings.api_prefix

    application.include_router(legal.router, tags=["Legal"])
    application.include_router(health.router, prefix=f"{prefix}/health", tags=["Health"])
    application.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Auth"], dependencies=api_limit)
    application.include_router(users.router, prefix=f"{prefix}/users", tags=["Users"], dependencies=api_limit)
    application.include_router(scans.router, prefix=f"{prefix}/scans", tags=["Scans"], dependencies=api_limit)
    application.include_router(automation.router, prefix=f"{prefix}/automation", tags=["Automation"], dependencies=api_limit)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
