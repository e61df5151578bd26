"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from feedback_hub.api.dependencies import cleanup_dependencies
from feedback_hub.api.errors import install_error_handlers
from feedback_hub.api.middleware.timeout import TimeoutMiddleware
from feedback_hub.api.rate_limit import limiter
from feedback_hub.api.routes import feedback, health
from feedback_hub.api.routes.health import SERVICE_VERSION
from feedback_hub.config.settings import get_settings
from feedback_hub.observability.logging import bind_context, clear_context

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(
        "Feedback Hub API starting up",
        environment=settings.environment,
        admin_auth_configured=settings.admin_auth_configured,
    )
    if not settings.admin_auth_configured:
        logger.warning("ADMIN_SECRET is not set; admin endpoints will reject every request")

    yield

    logger.info("Feedback Hub API shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "feedbacks", "description": "Feedback collection creation and administration"},
    ]

    app = FastAPI(
        title="Feedback Hub API",
        description="""
API for registering feedback collections.

## Collections

A collection has a unique **name** and **key** and a scoring **scale**
(numeric range or enumerated values). Creating one returns its secret
API key (`fx_` followed by 64 hex characters) exactly once.

## Authentication

Creation is open. Listing, reading and updating collections require
`Authorization: Bearer <ADMIN_SECRET>`.
        """,
        version=SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # Add CORS middleware (origins from CORS_ORIGINS env var, comma-separated)
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request timeout middleware (must be added before logging middleware
    # so timeout wraps the entire request lifecycle)
    if settings.request_timeout_seconds > 0:
        app.add_middleware(
            TimeoutMiddleware,
            timeout_seconds=settings.request_timeout_seconds,
        )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Correlation ID: use incoming header or generate a new one
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )

        bind_context(request_id=request_id)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    # Rate limiting (opt-in via RATE_LIMIT_ENABLED=true). RateLimitExceeded
    # is an HTTPException, so the normalizing handler renders the 429.
    app.state.limiter = limiter

    install_error_handlers(app)

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(feedback.router, tags=["feedbacks"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "Feedback Hub API",
            "version": SERVICE_VERSION,
            "docs": "/docs",
        }

    return app
