"""
Application builder.
Keeps middleware, routes, lifecycle and error mapping in separate steps.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from datamag.core.config import Settings, settings as default_settings
from datamag.core.logging import api_logger, app_logger, init_app_logging
from datamag.domain.errors import AggregationError, PeriodParseError
from datamag.repositories.protocols import SalesLedgerProtocol
from datamag.routers import charts, health, sales
from datamag.services.dependencies import build_analytics_service, build_repository


class ApplicationBuilder:
    """Builder for the FastAPI application."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.app = FastAPI(
            title=settings.APP_NAME,
            version="1.0.0",
            description="Period analytics and chart data for the data magazine",
            docs_url="/docs",
            redoc_url="/redoc",
        )
        self._middlewares_added = False
        self._routes_added = False
        self._services_added = False
        self._startup_handlers_added = False

    def add_cors_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.CORS_ORIGINS_LIST or ["http://localhost:3000"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        app_logger.info("CORS middleware added")
        return self

    def add_security_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        @self.app.middleware("http")
        async def add_security_headers(request: Request, call_next):
            response = await call_next(request)
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            return response

        app_logger.info("Security middleware added")
        return self

    def add_request_logging_middleware(self) -> ApplicationBuilder:
        if self._middlewares_added:
            raise RuntimeError("Middlewares already added")

        @self.app.middleware("http")
        async def log_requests(request: Request, call_next):
            api_logger.info(f"Request: {request.method} {request.url.path}")
            response = await call_next(request)
            api_logger.info(f"Response: {response.status_code}", path=request.url.path)
            return response

        app_logger.info("Request logging middleware added")
        return self

    def finalize_middlewares(self) -> ApplicationBuilder:
        self._middlewares_added = True
        return self

    def add_services(self, repository: Optional[SalesLedgerProtocol] = None) -> ApplicationBuilder:
        """Attach the settings, the ledger repository and the cached analytics service to app.state."""
        if self._services_added:
            raise RuntimeError("Services already added")

        repository = repository or build_repository(self.settings)
        self.app.state.settings = self.settings
        self.app.state.repository = repository
        self.app.state.analytics_service = build_analytics_service(repository, self.settings)
        self._services_added = True
        app_logger.info("Analytics services added", ledger=type(repository).__name__)
        return self

    def add_routes(self) -> ApplicationBuilder:
        if self._routes_added:
            raise RuntimeError("Routes already added")

        self.app.include_router(health.router)
        self.app.include_router(sales.router)
        self.app.include_router(charts.router)

        @self.app.get("/")
        def root():
            return {
                "name": self.settings.APP_NAME,
                "env": self.settings.ENV,
                "docs": "/docs",
                "healthz": "/healthz",
                "readyz": "/readyz",
            }

        app_logger.info("All routes added")
        self._routes_added = True
        return self

    def add_startup_handlers(self) -> ApplicationBuilder:
        if self._startup_handlers_added:
            raise RuntimeError("Startup handlers already added")

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            app_logger.info("Starting application...")
            try:
                app.state.repository.health_check()
                app_logger.info("Ledger connection validated")
            except Exception as exc:
                # requests will surface the failure; boot anyway
                app_logger.warning(f"Ledger not reachable at startup: {exc}")

            yield

            app_logger.info("Shutting down application...")
            app.state.analytics_service.cache.clear()

        self.app.router.lifespan_context = lifespan
        self._startup_handlers_added = True
        app_logger.info("Startup handlers added")
        return self

    def add_exception_handlers(self) -> ApplicationBuilder:
        """Map domain errors to HTTP responses."""

        @self.app.exception_handler(PeriodParseError)
        async def period_error_handler(request: Request, exc: PeriodParseError):
            api_logger.warning("Rejected period", period=exc.period, reason=exc.reason)
            return JSONResponse(status_code=400, content={"detail": str(exc)})

        @self.app.exception_handler(AggregationError)
        async def aggregation_error_handler(request: Request, exc: AggregationError):
            api_logger.error(f"Aggregation error: {exc}", exc=exc, path=request.url.path)
            return JSONResponse(
                status_code=500,
                content={"detail": "Failed to fetch sales data"},
            )

        app_logger.info("Exception handlers added")
        return self

    def build(self) -> FastAPI:
        if not self._middlewares_added:
            raise RuntimeError("Middlewares not finalized")
        if not self._services_added:
            raise RuntimeError("Services not added")
        if not self._routes_added:
            raise RuntimeError("Routes not added")
        if not self._startup_handlers_added:
            raise RuntimeError("Startup handlers not added")

        app_logger.info("FastAPI application built successfully")
        return self.app


def create_application(
    repository: Optional[SalesLedgerProtocol] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository: ledger to serve; built from settings when omitted
        settings: configuration; the module-level settings when omitted
    """
    settings = settings or default_settings
    init_app_logging(settings)

    builder = (
        ApplicationBuilder(settings)
        .add_cors_middleware()
        .add_security_middleware()
        .add_request_logging_middleware()
        .finalize_middlewares()
        .add_services(repository)
        .add_routes()
        .add_startup_handlers()
        .add_exception_handlers()
    )

    return builder.build()
