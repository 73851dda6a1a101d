"""
FastAPI application factory for the vetmarket API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..database.connection import create_engine
from ..database.session import SessionManager
from ..exceptions import (
    ValidationException,
    VetMarketException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)
from ..models import Base
from ..utils.config import AppSettings, LoggingConfigurator
from .routers import (
    admin,
    appointments,
    auth,
    availability,
    documents,
    profiles,
    reviews,
    services,
    verification,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions to the ``{success: false, message, error}`` envelope."""

    @app.exception_handler(VetMarketException)
    async def vetmarket_exception_handler(request: Request, exc: VetMarketException):
        level = logging.ERROR if exc.http_status >= 500 else logging.INFO
        exc.log_error(logger, level=level)
        return JSONResponse(status_code=exc.http_status, content=create_error_response(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Validation error for {request.url.path}: {exc.errors()}")
        error = ValidationException(
            "Validation failed",
            validation_errors=format_validation_errors(list(exc.errors())),
        )
        return JSONResponse(status_code=400, content=create_error_response(error))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log_exception_context(
            exc,
            {"path": request.url.path, "method": request.method},
            logger=logger,
        )
        return JSONResponse(status_code=500, content={"success": False, "message": "Server Error"})


def create_app(
    settings: Optional[AppSettings] = None,
    session_manager: Optional[SessionManager] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Runtime settings; read from the environment when omitted
        session_manager: Pre-built session manager (tests pass one bound to a
            throwaway database); when omitted the lifespan creates the engine

    Returns:
        Configured FastAPI application
    """
    settings = settings or AppSettings.from_environment()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        LoggingConfigurator.configure_structured_logging(level=settings.log_level)
        logger.info(f"Starting vetmarket API ({settings.environment})")

        owns_engine = app.state.session_manager is None
        if owns_engine:
            engine = create_engine(settings.database_url, echo=settings.db_echo)
            app.state.session_manager = SessionManager(engine)

        manager: SessionManager = app.state.session_manager
        if settings.auto_create_tables:
            await manager.initialize_database(Base.metadata)

        yield

        if owns_engine:
            await manager.close_all_sessions()
        logger.info("vetmarket API stopped")

    app = FastAPI(title="vetmarket API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.session_manager = session_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(profiles.router)
    app.include_router(services.router)
    app.include_router(availability.router)
    app.include_router(appointments.router)
    app.include_router(reviews.router)
    app.include_router(admin.router)
    app.include_router(verification.router)
    app.include_router(documents.router)

    @app.get("/health", tags=["Health"])
    async def health(request: Request):
        result = await request.app.state.session_manager.health_check(force=True)
        healthy = result["status"] == "healthy"
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={"success": healthy, "data": result},
        )

    return app
