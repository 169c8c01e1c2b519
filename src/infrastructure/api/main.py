"""
FastAPI application entry point.

Implements the API layer of the Infrastructure following Clean Architecture.
This module sets up the FastAPI app, registers routes, middleware, and exception handlers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domain.exceptions import SliReportingError
from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.database.config import dispose_db, get_engine, init_db
from src.infrastructure.integrations.lieutenant_client import (
    LieutenantClusterFactProvider,
)
from src.infrastructure.integrations.prometheus_client import PrometheusMetricsClient
from src.infrastructure.observability import (
    configure_logging,
    get_logger,
    instrument_fastapi_app,
    setup_tracing,
)

from .middleware.auth import BasicAuthCredentials
from .middleware.error_handler import (
    ErrorHandlerMiddleware,
    exception_to_problem,
    get_correlation_id,
    problem,
    problem_response,
)
from .middleware.logging_middleware import LoggingMiddleware
from .middleware.metrics_middleware import MetricsMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Startup:
    - Configure observability (logging, tracing)
    - Initialize database engine
    - Create the Prometheus and Lieutenant clients

    Shutdown:
    - Close the HTTP clients
    - Dispose database engine
    """
    settings: Settings = app.state.settings

    configure_logging(settings.observability)

    await init_db(
        database_url=settings.database.url,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        echo=settings.database.echo,
    )
    setup_tracing(settings.observability, settings.environment, get_engine())

    if not settings.api.auth_pass.get_secret_value():
        logger.warning("API_AUTH_PASS is empty, basic auth accepts an empty password")

    metrics_service = PrometheusMetricsClient(
        prometheus_url=settings.prometheus.url,
        timeout=settings.prometheus.timeout_seconds,
        headers=settings.prometheus.headers,
    )
    fact_provider = LieutenantClusterFactProvider(
        api_url=settings.lieutenant.url,
        token=settings.lieutenant.token.get_secret_value(),
        namespace=settings.lieutenant.namespace,
        timeout=settings.lieutenant.timeout_seconds,
        verify_tls=settings.lieutenant.verify_tls,
    )
    app.state.metrics_service = metrics_service
    app.state.cluster_fact_provider = fact_provider

    logger.info(
        "SLI reporting API started",
        prometheus_url=settings.prometheus.url,
        lieutenant_url=settings.lieutenant.url,
        lieutenant_namespace=settings.lieutenant.namespace,
    )

    yield

    await metrics_service.close()
    await fact_provider.close()
    await dispose_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (defaults to get_settings())

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="SLI Reporting API",
        description=(
            "Reports SLO error budgets per cluster and service, excluding "
            "planned downtime windows from error-rate accounting."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.auth_credentials = BasicAuthCredentials(
        username=settings.api.auth_user,
        password=settings.api.auth_pass.get_secret_value(),
    )

    # Custom middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)  # Record metrics for all requests
    app.add_middleware(LoggingMiddleware)  # Log all requests
    app.add_middleware(ErrorHandlerMiddleware)  # Outermost: catches all errors

    # Register routes
    from .routes import downtime, health, query

    app.include_router(health.router)
    app.include_router(downtime.router, prefix="/downtime", tags=["Downtime"])
    app.include_router(query.router, prefix="/query", tags=["SLI Reports"])

    instrument_fastapi_app(app, settings.observability)

    # Register exception handlers for proper RFC 7807 format

    @app.exception_handler(SliReportingError)
    async def domain_exception_handler(request: Request, exc: SliReportingError):
        """Convert domain errors to RFC 7807 Problem Details."""
        correlation_id = get_correlation_id(request)
        problem_details = exception_to_problem(exc, request, correlation_id)
        if problem_details.status >= 500:
            logger.error(
                "Request failed",
                correlation_id=correlation_id,
                path=request.url.path,
                error=str(exc),
                exc_info=exc,
            )
        else:
            logger.info(
                "Request rejected",
                correlation_id=correlation_id,
                path=request.url.path,
                status_code=problem_details.status,
                error=str(exc),
            )
        return problem_response(problem_details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Convert HTTPException to RFC 7807 Problem Details."""
        correlation_id = get_correlation_id(request)
        return problem_response(
            exception_to_problem(exc, request, correlation_id),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Convert request validation errors to RFC 7807 Problem Details (400)."""
        correlation_id = get_correlation_id(request)
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return problem_response(
            problem(
                status.HTTP_400_BAD_REQUEST,
                f"Invalid request: {errors}",
                request,
                correlation_id,
            )
        )

    return app
