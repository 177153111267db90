"""FastAPI dependency providers for service layer."""

from fastapi import Request

from datamag.core.cache import ResultCache
from datamag.core.config import Settings
from datamag.infra.db import build_engine
from datamag.repositories.frame_repository import FrameSalesRepository
from datamag.repositories.protocols import SalesLedgerProtocol
from datamag.repositories.sales_repository import SalesRepository
from datamag.services.aggregator import SalesAggregator
from datamag.services.analytics_service import AnalyticsService


def build_repository(settings: Settings) -> SalesLedgerProtocol:
    """CSV ledger when SALES_CSV_PATH is set, SQL otherwise."""
    if settings.SALES_CSV_PATH:
        return FrameSalesRepository.from_csv(settings.SALES_CSV_PATH)
    return SalesRepository(build_engine(settings.DATABASE_URL), timeout_ms=settings.QUERY_TIMEOUT_MS)


def build_analytics_service(repository: SalesLedgerProtocol, settings: Settings) -> AnalyticsService:
    return AnalyticsService(
        SalesAggregator(repository),
        ResultCache(ttl_seconds=settings.ANALYTICS_CACHE_TTL_SECONDS),
    )


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


def get_repository(request: Request) -> SalesLedgerProtocol:
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
