"""API application factory."""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from swingdesk.core.config import settings
from swingdesk.core.exceptions import register_exception_handlers
from swingdesk.core.logging import get_logger, request_id_var
from swingdesk.schemas.common import ErrorResponse

from .routes import analysis, health, recommendations


logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check Valkey at startup when configured and close the client on shutdown."""
    from swingdesk.cache.client import close_valkey_client, valkey_healthcheck

    use_valkey = settings.cache_backend == "valkey"
    if use_valkey:
        if not await valkey_healthcheck():
            logger.warning("Valkey unreachable at startup; analyses will not be cached")

    logger.info(
        f"{settings.app_name} {settings.app_version} started",
        extra={
            "environment": settings.environment,
            "cache_backend": settings.cache_backend,
            "strategy": settings.analysis_strategy,
        },
    )

    yield

    if use_valkey:
        try:
            await close_valkey_client()
        except Exception as e:
            logger.warning(f"Resource cleanup failed: {e}")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to all requests for tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request_id_var.set(request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - start_time
        # Path only; query strings are not logged
        path = request.url.path

        logger.info(
            f"{request.method} {path} -> {response.status_code} ({duration:.3f}s)",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": int(duration * 1000),
            },
        )

        return response


def create_api_app() -> FastAPI:
    """Create and configure the API application."""
    show_docs = settings.debug or settings.is_development
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Swing-trading stock analysis and morning recommendations",
        root_path=settings.root_path,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        lifespan=lifespan,
        responses={
            400: {"model": ErrorResponse, "description": "Bad Request"},
            404: {"model": ErrorResponse, "description": "Not Found"},
            422: {"model": ErrorResponse, "description": "Validation Error"},
            500: {"model": ErrorResponse, "description": "Internal Server Error"},
            503: {"model": ErrorResponse, "description": "Analysis Unavailable"},
        },
    )

    # First added is outermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
    app.include_router(recommendations.router, prefix="/recommendations", tags=["Recommendations"])

    return app
