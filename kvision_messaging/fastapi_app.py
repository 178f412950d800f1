"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- conversations, contacts, messages, health
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import FromDishka, inject, setup_dishka
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from kvision_messaging import __version__
from kvision_messaging.application.services import ConversationSynchronizer
from kvision_messaging.config.logging_config import (
    NO_CORRELATION_ID,
    correlation_id_var,
    setup_logging,
)
from kvision_messaging.config.settings import Config
from kvision_messaging.domain.exceptions import ConversationStoreError
from kvision_messaging.presentation.api import (
    contacts_router,
    conversations_router,
    messages_router,
)
from kvision_messaging.presentation.api.rate_limit import limiter
from kvision_messaging.setup.ioc import create_container

# Setup logging
setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", NO_CORRELATION_ID)

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    - Startup: resolve the synchronizer (connects the store), warm the
      snapshot and start polling
    - Shutdown: stop polling, close DI container (closes Redis / HTTP clients)
    """
    container: AsyncContainer = app.state.dishka_container
    synchronizer = await container.get(ConversationSynchronizer)
    try:
        await synchronizer.refresh()
    except ConversationStoreError as e:
        # serve anyway; the poll loop and ensure_synced() retry
        logger.warning("Initial conversation sync failed: %s", e)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.error("Initial conversation sync failed: %s", e, exc_info=True)
    await synchronizer.start()
    logger.info("%s started (store backend: %s)", Config.APP_NAME, Config.STORE_BACKEND)
    try:
        yield
    finally:
        try:
            await synchronizer.stop()
        finally:
            await container.close()
        logger.info("%s shutdown. DI container closed.", Config.APP_NAME)


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: prebuilt DI container (tests pass one with overrides)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title=Config.APP_NAME,
        description="Messaging service for the KVISION dashboards",
        version=__version__,
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container or create_container(), app)

    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting (slowapi reads the limiter from app.state)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        logger.info("Validation error on %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "details": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("[HTTP ERROR %s] %s", exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": f"Internal server error: {type(exc).__name__}"},
        )

    # Health check routes
    @app.get("/", tags=["health"])
    async def root():
        return {"message": f"{Config.APP_NAME} is running."}

    @app.get("/health", tags=["health"])
    @inject
    async def health(synchronizer: FromDishka[ConversationSynchronizer]):
        last_synced_at = synchronizer.last_synced_at
        return {
            "status": "healthy",
            "sync_state": synchronizer.state.value,
            "polling": synchronizer.is_running,
            "last_synced_at": last_synced_at.isoformat() if last_synced_at else None,
        }

    # Register routers
    app.include_router(conversations_router)  # /conversations...
    app.include_router(contacts_router)  # GET /contacts
    app.include_router(messages_router)  # POST /messages, POST /messages/broadcast

    return app


# Create the app instance
app = create_fastapi_app()
