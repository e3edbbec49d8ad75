"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from lib.errors import StorageError
from .api import api_router
from .web import web_router
from .middleware.headers import SecurityHeadersMiddleware
from .middleware.logging import LoggingMiddleware
from .rate_limit import limiter, configure_rate_limit


def create_app(
    service_instance,
    config,
    lifespan=None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (or None when set up by the lifespan)
        config: Configuration instance
        lifespan: Optional lifespan context manager that opens and closes resources
        logger: Optional logger for error reporting

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Shortlink",
        description="URL shortening service with click counting",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger or logging.getLogger("shortlink.web")

    configure_rate_limit(config.rate_limit, enabled=config.rate_limit_enabled)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        request.app.state.logger.error(
            f"Storage failure on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)

    # API first so /api/... never falls through to the short code route
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
