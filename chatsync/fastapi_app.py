"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- session, profiles, conversations, assistant, sync (WebSocket), metrics
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from chatsync.config.logging_config import correlation_id_var, setup_logging
from chatsync.config.settings import Config
from chatsync.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    EntityNotFoundError,
    InvalidParticipantsError,
    UnsupportedConversationKindError,
)
from chatsync.presentation.api import (
    assistant_router,
    conversations_router,
    metrics_router,
    profiles_router,
    session_router,
    sync_router,
)
from chatsync.setup.ioc.container import create_container

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status
DOMAIN_ERROR_STATUS = {
    InvalidParticipantsError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DomainValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UnsupportedConversationKindError: status.HTTP_400_BAD_REQUEST,
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    AccessDeniedError: status.HTTP_403_FORBIDDEN,
}


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "NO Correlation ID")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: DI container to use; defaults to one built from Config

    Returns:
        FastAPI application instance
    """
    # Created before the app starts: Dishka adds middleware, which must happen before startup
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FastAPI application started. DI container initialized.")
        yield
        await container.close()
        logger.info("FastAPI application shutdown. DI container closed.")

    app = FastAPI(
        title="chatsync",
        description="Real-time chat coordinator with an embedded assistant",
        version="1.0.0",
        lifespan=lifespan,
    )

    setup_dishka(container, app)

    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def domain_error_handler(status_code: int):
        async def handler(request: Request, exc: Exception):
            logger.info(f"[{type(exc).__name__}] {request.method} {request.url.path}: {exc}")
            return JSONResponse(status_code=status_code, content={"error": str(exc)})

        return handler

    for exc_class, status_code in DOMAIN_ERROR_STATUS.items():
        app.add_exception_handler(exc_class, domain_error_handler(status_code))

    # Validation error handler - shows detailed Pydantic errors
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {errors}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "Validation error", "details": jsonable_errors(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info(f"[HTTP ERROR {exc.status_code}] {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.get("/", tags=["health"])
    async def root():
        return {"message": "FastAPI server is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(session_router)  # POST /session
    app.include_router(profiles_router)  # GET /profiles, PATCH /profiles/me
    app.include_router(conversations_router)
    app.include_router(assistant_router)  # summary, draft
    app.include_router(sync_router)  # WS /sync
    app.include_router(metrics_router)  # GET /metrics

    return app


def jsonable_errors(errors) -> list[dict]:
    # Pydantic may put exception objects into "ctx"; keep the rest as-is
    return [{k: v for k, v in e.items() if k != "ctx"} for e in errors]


# Create the app instance
app = create_fastapi_app()
