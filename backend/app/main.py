"""FastAPI application factory for Repo Insights.

``create_app`` wires settings, CORS, the Prometheus endpoint, request
tracing and the error envelope around the v1 insights routes.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from app.config import Settings, get_settings
from app.exceptions import InsightsBaseError, ValidationError
from app.logging_config import get_logger, setup_logging
from app.metrics import APP_INFO, HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(settings)
    APP_INFO.info({"version": settings.app_version, "environment": settings.environment.value})

    # A broken registry override file should stop startup, not the first request
    from services.tech_registry import get_registry

    registry = get_registry()
    logger.info(
        "application_starting",
        version=settings.app_version,
        environment=settings.environment.value,
        registry_categories=sorted(registry.categories),
    )

    yield

    logger.info("application_stopped")


def _route_label(request: Request) -> str:
    """Path template of the matched route, so metrics stay low-cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def _register_middleware(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    @app.middleware("http")
    async def trace_request(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.4f}"

        endpoint = _route_label(request)
        HTTP_REQUESTS_TOTAL.labels(
            method=request.method, endpoint=endpoint, status_code=response.status_code
        ).inc()
        HTTP_REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        return response


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InsightsBaseError)
    async def insights_error_handler(_request: Request, exc: InsightsBaseError) -> JSONResponse:
        logger.warning("request_rejected", code=exc.code, status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        error = ValidationError("Request body failed validation", details={"fields": fields})
        return await insights_error_handler(request, error)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", error_type=type(exc).__name__)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred.",
                }
            },
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Resume insights derived from source-control repository metadata",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    _register_middleware(app, settings)
    _register_exception_handlers(app)

    if settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app())

    from api.v1.router import api_v1_router

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check() -> dict:
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment.value,
        }

    return app


app = create_app()
