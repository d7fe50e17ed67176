"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from teamhub import __version__
from teamhub.api.dependencies import Container, build_container
from teamhub.api.rate_limit import build_limiter
from teamhub.api.v1.billing import router as billing_router
from teamhub.api.v1.teams import router as teams_router
from teamhub.api.v1.todos import router as todos_router
from teamhub.api.v1.users import router as users_router
from teamhub.api.v1.webhooks import router as webhooks_router
from teamhub.errors import ApiError, ErrorCode
from teamhub.logging_config import (
    REQUEST_ID_HEADER,
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from teamhub.settings import Settings, check_production_settings, get_settings

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind the request id and the acting user to every log line of a request."""

    async def dispatch(self, request: Request, call_next):
        request_id = bind_request_context(
            request.headers.get(REQUEST_ID_HEADER),
            request.method,
            request.url.path,
            request.headers.get("X-User-Id"),
        )
        try:
            response = await call_next(request)
        finally:
            clear_request_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    container: Container = app.state.container
    logger.info("app_starting", env=container.settings.env)

    container.db.create_tables()

    yield

    logger.info("app_shutting_down")
    container.db.dispose()


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render service errors as their public error code.

    Internal faults keep their detail in the server log only.
    """
    if exc.is_internal:
        logger.error(
            "api_error",
            path=request.url.path,
            error_code=exc.error_code.value,
            error=exc.message,
            original_error=repr(exc.original_error) if exc.original_error else None,
        )
    else:
        logger.warning(
            "api_error",
            path=request.url.path,
            error_code=exc.error_code.value,
            error=exc.message,
        )

    return JSONResponse(status_code=exc.status_code, content={"errors": exc.error_code.value})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"param": ".".join(str(part) for part in error["loc"][1:]), "type": error["type"]}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"errors": ErrorCode.INTERNAL_SERVER_ERROR.value},
    )


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Settings to use, loaded from the environment by default
        container: Pre-built services (tests pass fakes through this)

    Returns:
        Configured FastAPI app
    """
    settings = settings or (container.settings if container else get_settings())
    check_production_settings(settings)
    setup_logging(settings)

    is_production = settings.env == "production"

    app = FastAPI(
        title="Teamhub API",
        description="Team collaboration and billing API",
        version=__version__,
        docs_url=None if is_production else "/api/docs",
        redoc_url=None if is_production else "/api/redoc",
        openapi_url=None if is_production else "/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.container = container or build_container(settings)

    # Security Headers middleware (must be added before CORS)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    allowed_origins = [
        origin.strip()
        for origin in settings.allowed_origins.split(",")
        if origin.strip()
    ]

    if is_production and "*" in allowed_origins:
        logger.error("cors_wildcard_blocked", message="Wildcard CORS not allowed in production")
        allowed_origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "X-User-Id", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=3600,
    )

    app.state.limiter = build_limiter(settings)
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please try again later."},
        )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(users_router, prefix="/api/v1")
    app.include_router(teams_router, prefix="/api/v1")
    app.include_router(billing_router, prefix="/api/v1")
    app.include_router(webhooks_router, prefix="/api/v1")
    app.include_router(todos_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "env": settings.env,
        }

    return app
