#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Configures the image transformation service: lifespan (optimizer and cache
construction), middleware, exception handlers and routes.
"""

import uuid
from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pixelcache.api.middleware.error_handler import ErrorHandlingMiddleware
from pixelcache.api.routes import create_image_router, health_router
from pixelcache.core.config.constants import HEADER_REQUEST_ID, CacheBackendType
from pixelcache.core.config.settings import Settings, get_settings
from pixelcache.core.exceptions import PixelCacheError
from pixelcache.core.logging import clear_request_id, get_logger, set_request_id, setup_logging
from pixelcache.optimizer.orchestrator import ImageOptimizer

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


def build_optimizer(settings: Settings) -> tuple[ImageOptimizer, redis.Redis | None]:
    """
    Construct the optimizer described by settings.

    Returns:
        (optimizer, redis_client) - the client is None unless the Redis
        backend is selected; the caller owns closing it.
    """
    config = settings.to_optimizer_config()

    client = None
    if config.cache is not None and config.cache.type == CacheBackendType.REDIS:
        client = redis.from_url(settings.REDIS_URL)

    return ImageOptimizer(config, cache_client=client), client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).

    An optimizer handed to create_app() is used as is; otherwise one is
    built from settings here.
    """
    settings = get_settings()
    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    logger.info(
        "Starting image transformation service",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
        cache_backend=settings.cache.CACHE_BACKEND,
    )

    redis_client = None
    if getattr(app.state, "optimizer", None) is None:
        app.state.optimizer, redis_client = build_optimizer(settings)

    try:
        logger.info("Application startup complete")
        yield
    finally:
        logger.info("Shutting down application")
        if redis_client is not None:
            await redis_client.aclose()
        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app(optimizer: ImageOptimizer | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        optimizer: Pre-built optimizer (tests, embedding); built from
            settings at startup when omitted
        settings: Settings to configure routes and middleware with

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="On-demand image transformation with result caching",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.optimizer = optimizer

    # Middleware runs in reverse order of registration: errors are caught
    # outermost so CORS headers are still added to error responses.
    app.add_middleware(
        ErrorHandlingMiddleware,
        include_traceback=(settings.app.ENVIRONMENT == "development"),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD"],
        allow_headers=["*"],
        expose_headers=[HEADER_REQUEST_ID, "ETag"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Inject a request ID into every request for log correlation."""
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_id()

    @app.exception_handler(PixelCacheError)
    async def pixelcache_exception_handler(request: Request, exc: PixelCacheError):
        """Errors raised outside the image handler (e.g. from dependencies)."""
        logger.error(
            f"Request failed: {exc.message}",
            error_type=type(exc).__name__,
            kind=exc.kind.value,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())

    app.include_router(health_router)
    app.include_router(create_image_router(settings.app.IMAGE_ROUTE_PATH))

    @app.get("/", tags=["Root"])
    async def root():
        """Service information."""
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "image": settings.app.IMAGE_ROUTE_PATH,
            "health": "/health",
        }

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pixelcache.app:create_app",
        factory=True,
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.app.ENVIRONMENT == "development",
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
